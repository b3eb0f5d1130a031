"""
NutriTrack Backend — Result Envelope
=====================================

What:  The discriminated result type returned by every core operation.
Why:   Expected outcomes (not found, empty collection, invalid payload,
       store error) are values, not exceptions. Services and routes branch
       on `result.success` with no try/except at each call site.
How:   Two pydantic models sharing a Literal `success` discriminator.
       `Success` carries data and/or a generated id; `Failure` carries a
       message and, for validation failures, every violation found.

Wire format (JSON, absent keys omitted):
    {"success": true,  "data": ..., "id": "...", "message": "..."}
    {"success": false, "message": "...", "errors": ["...", ...]}
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

# Messages shared between the access layer, the services and the tests
NOT_FOUND_MESSAGE = "Document not found"
NO_DOCUMENTS_MESSAGE = "No documents found"


class Success(BaseModel):
    """Successful outcome; `data` holds records, `id` a generated document id."""

    success: Literal[True] = True
    data: Optional[Any] = None
    id: Optional[str] = None
    message: Optional[str] = None


class Failure(BaseModel):
    """Failed outcome; `message` is always present."""

    success: Literal[False] = False
    message: str
    errors: Optional[List[str]] = Field(
        default=None,
        description="Every violation found, in check order (validation failures only)",
    )

    @classmethod
    def invalid(cls, violations: List[str]) -> "Failure":
        """Validation failure: the first violation becomes the message."""
        return cls(message=violations[0], errors=list(violations))


Result = Union[Success, Failure]


def to_envelope(result: Result) -> Dict[str, Any]:
    """
    Serialize a result for a JSON response.

    Records nested in `data` are dumped with their camelCase aliases and
    timestamps as ISO 8601 strings.
    """
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)
