"""
NutriTrack Backend — Consumption History Record
================================================

What:  One logged consumption of a product, stored at
       `usuarios/{uid}/historial_consumo/{entryId}`.
How:   `nutrientsIngested` maps nutrient names to the amount taken in with
       this consumption, e.g. {"calories": 150, "protein": 4.5}. The keys
       are open; units are a client convention.
"""

from typing import Any, ClassVar, Dict, List, Mapping, Tuple, Union

from pydantic import Field

from nutritrack.models.record import (
    StoredRecord,
    UtcDatetime,
    check_types,
    is_number,
    is_timestamp,
    utcnow,
)


def is_nutrient_map(value: Any) -> bool:
    return isinstance(value, Mapping) and all(
        isinstance(name, str) and is_number(amount) for name, amount in value.items()
    )


class ConsumptionHistoryRecord(StoredRecord):
    """A consumption history entry."""

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("productId",)

    product_id: str = ""
    consumed_at: UtcDatetime = Field(default_factory=utcnow)
    # int stays int: a quantity of 2 is stored as 2, not 2.0
    quantity_consumed: Union[int, float] = 0
    nutrients_ingested: Dict[str, Union[int, float]] = Field(default_factory=dict)
    active: bool = True

    @classmethod
    def _type_violations(cls, data: Mapping[str, Any]) -> List[str]:
        return check_types(
            data,
            (
                ("productId", lambda v: isinstance(v, str), "a string"),
                ("consumedAt", is_timestamp, "a timestamp"),
                ("quantityConsumed", is_number, "a number"),
                (
                    "nutrientsIngested",
                    is_nutrient_map,
                    "an object mapping nutrient names to numbers",
                ),
                ("active", lambda v: isinstance(v, bool), "a boolean"),
            ),
        )
