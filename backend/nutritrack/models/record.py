"""
NutriTrack Backend — Stored Record Base
========================================

What:  Shared behavior for the three document shapes kept in Firestore.
Why:   Users, search entries and consumption entries follow the same life:
       fill defaults from a loose payload, collect violations before a
       write, and project to exactly the stored field set.
How:   Pydantic models with camelCase aliases (the stored and wire field
       names) and snake_case attributes. Validation is a separate pass over
       the raw payload that returns every violation in a fixed order:
       required-field presence, then types, then enumerations.

Why validation does not live in the pydantic validators:
    Construction must never reject a payload that is merely incomplete; a
    record built from `{}` is a valid in-memory object with empty required
    fields. Only `validate_payload` decides whether it may be written, and
    it reports all problems at once instead of stopping at the first.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    TypeAdapter,
    ValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel

RecordT = TypeVar("RecordT", bound="StoredRecord")

_timestamp_adapter = TypeAdapter(datetime)


def utcnow() -> datetime:
    """Timezone-aware current time; Firestore stores timestamps in UTC."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC, as Firestore does."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# Timestamp field type: always timezone-aware once on a record
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


# ── Payload checks ────────────────────────────────────────────────────────
# Each returns True when the value is acceptable for its field type.

def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_timestamp(value: Any) -> bool:
    if isinstance(value, datetime):
        return True
    if not isinstance(value, str):
        return False
    try:
        _timestamp_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


class StoredRecord(BaseModel):
    """
    Base class for Firestore-backed records.

    `id` is the document id. It is never part of the stored field set and
    stays None until the store assigns one.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=True,
    )

    # Required fields, checked for presence in this order
    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ()

    id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # null behaves like an omitted key, so the field default applies
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if v is not None}
        return data

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def from_payload(cls: Type[RecordT], data: Mapping[str, Any]) -> RecordT:
        """Build a record from a client payload, filling defaults for omitted fields."""
        return cls.model_validate(dict(data))

    @classmethod
    def from_document(cls: Type[RecordT], document: Mapping[str, Any]) -> RecordT:
        """Build a record from a stored document dict (as returned with its `id`)."""
        return cls.model_validate(dict(document))

    # ── Validation ───────────────────────────────────────────────────────

    @classmethod
    def validate_payload(cls, data: Any) -> List[str]:
        """
        Collect every violation in `data`, in check order.

        Returns:
            An empty list when the payload may be written; otherwise
            human-readable messages, presence problems first, then type
            problems, then enumeration problems.
        """
        if not isinstance(data, Mapping):
            return ["The record payload must be a JSON object."]

        violations = [
            f'The "{name}" field is required.'
            for name in cls.REQUIRED_FIELDS
            if is_blank(data.get(name))
        ]
        violations.extend(
            check_types(data, (("id", lambda v: isinstance(v, str), "a string"),))
        )
        violations.extend(cls._type_violations(data))
        violations.extend(cls._enum_violations(data))
        return violations

    @classmethod
    def _type_violations(cls, data: Mapping[str, Any]) -> List[str]:
        return []

    @classmethod
    def _enum_violations(cls, data: Mapping[str, Any]) -> List[str]:
        return []

    # ── Projection ───────────────────────────────────────────────────────

    def to_plain_object(self, partial: bool = False) -> Dict[str, Any]:
        """
        Project to exactly the stored field set (camelCase keys, no `id`).

        Args:
            partial: Keep only the fields the payload supplied. Used for
                merge updates so omitted fields keep their stored values.
        """
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_unset=partial)


def check_types(
    data: Mapping[str, Any],
    checks: Tuple[Tuple[str, Any, str], ...],
) -> List[str]:
    """
    Run (field, predicate, expected) checks over the keys present in `data`.

    Absent or null keys are skipped; their defaults are always valid.
    """
    violations = []
    for name, predicate, expected in checks:
        value = data.get(name)
        if value is not None and not predicate(value):
            violations.append(f'The "{name}" field must be {expected}.')
    return violations
