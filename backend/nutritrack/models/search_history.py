"""
NutriTrack Backend — Search History Record
===========================================

What:  One product search made by a user, stored at
       `usuarios/{uid}/historial_busqueda/{entryId}`.
Why:   Lets the app show "recently searched" products and measure how often
       a search ends with a redirect to a partner store.
"""

from typing import Any, ClassVar, List, Mapping, Tuple

from pydantic import Field

from nutritrack.models.record import (
    StoredRecord,
    UtcDatetime,
    check_types,
    is_timestamp,
    utcnow,
)


class SearchHistoryRecord(StoredRecord):
    """
    A search history entry.

    `active` is managed by the client; the access layer stores it as-is and
    never filters on it.
    """

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("productId",)

    searched_at: UtcDatetime = Field(default_factory=utcnow)
    product_id: str = ""
    redirected_to_store: bool = False
    store_id: str = ""
    active: bool = True

    @classmethod
    def _type_violations(cls, data: Mapping[str, Any]) -> List[str]:
        return check_types(
            data,
            (
                ("searchedAt", is_timestamp, "a timestamp"),
                ("productId", lambda v: isinstance(v, str), "a string"),
                ("redirectedToStore", lambda v: isinstance(v, bool), "a boolean"),
                ("storeId", lambda v: isinstance(v, str), "a string"),
                ("active", lambda v: isinstance(v, bool), "a boolean"),
            ),
        )
