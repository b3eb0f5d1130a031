"""
NutriTrack Backend — User Record
=================================

What:  Shape of a user document stored at `usuarios/{uid}`.
Who:   Built and validated by UserService before create/update.

Stored fields:
    fullName       required, non-empty string
    email          required, non-empty string
    registeredAt   timestamp, defaults to creation time
    role           "standard" | "paid", defaults to "standard"
    settings       open key-value map, defaults to {}

The document id is the account uid; it is supplied by the caller and never
stored as a field.
"""

from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Tuple

from pydantic import Field

from nutritrack.models.record import (
    StoredRecord,
    UtcDatetime,
    check_types,
    is_timestamp,
    utcnow,
)


class Role(str, Enum):
    """Subscription tiers a user can hold."""

    STANDARD = "standard"
    PAID = "paid"


ROLE_VALUES = tuple(role.value for role in Role)


class UserRecord(StoredRecord):
    """A registered user of the nutrition tracker."""

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("fullName", "email")

    full_name: str = ""
    email: str = ""
    registered_at: UtcDatetime = Field(default_factory=utcnow)
    role: Role = Role.STANDARD
    settings: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def _type_violations(cls, data: Mapping[str, Any]) -> List[str]:
        return check_types(
            data,
            (
                ("fullName", lambda v: isinstance(v, str), "a string"),
                ("email", lambda v: isinstance(v, str), "a string"),
                ("registeredAt", is_timestamp, "a timestamp"),
                ("settings", lambda v: isinstance(v, Mapping), "an object"),
            ),
        )

    @classmethod
    def _enum_violations(cls, data: Mapping[str, Any]) -> List[str]:
        role = data.get("role")
        if role is not None and role not in ROLE_VALUES:
            return [f'The "role" field must be one of: {", ".join(ROLE_VALUES)}.']
        return []
