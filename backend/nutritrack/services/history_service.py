"""
NutriTrack Backend — History Services
======================================

What:  Per-user history operations shared by search and consumption history.
Why:   Both histories are timestamped entries in a sub-collection of the
       user document; they differ only in collection name, timestamp field
       and record shape.
How:   HistoryService composes DocumentService with the record class; the
       two concrete services pin the three class attributes.

Operations:
    get_all(uid, direction)                        all entries by timestamp
    get_with_limit(uid, limit, direction, cursor)  one keyset page
    get_by_days(uid, days, direction)              entries in [now - days, now]
    add(uid, data)                                 validate + create
    delete(uid, record_id)                         existence-checked delete
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar, List, Mapping, Optional, Type

from pydantic import ValidationError

from nutritrack.models.consumption_history import ConsumptionHistoryRecord
from nutritrack.models.record import StoredRecord, ensure_utc, utcnow
from nutritrack.models.search_history import SearchHistoryRecord
from nutritrack.schemas.result import Failure, Result, Success
from nutritrack.services.document_service import DocumentService
from nutritrack.services.paths import (
    CONSUMPTION_HISTORY_COLLECTION,
    SEARCH_HISTORY_COLLECTION,
    id_problem,
    user_subcollection,
)

logger = logging.getLogger(__name__)

# Oldest instant a day window can reach back to
EARLIEST_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


class HistoryService:
    """
    Generic history operations over `usuarios/{uid}/<collection_name>`.

    Reads return Success(data=[record, ...]) ordered by `order_field`; an
    empty result is the access layer's "No documents found" failure.
    """

    collection_name: ClassVar[str]
    order_field: ClassVar[str]
    record_class: ClassVar[Type[StoredRecord]]

    def __init__(self, documents: DocumentService):
        self._documents = documents

    # ── Reads ────────────────────────────────────────────────────────────

    async def get_all(self, uid: str, direction: str = "asc") -> Result:
        problem = id_problem(uid, "uid")
        if problem:
            return Failure(message=problem)

        result = await self._documents.list_ordered_by(
            user_subcollection(uid, self.collection_name), self.order_field, direction
        )
        return self._as_records(result)

    async def get_with_limit(
        self,
        uid: str,
        limit: int,
        direction: str = "asc",
        start_after: Optional[datetime] = None,
    ) -> Result:
        """
        One page of at most `limit` entries.

        Pass the timestamp of the last entry of the previous page as
        `start_after` to continue from there.
        """
        problem = id_problem(uid, "uid")
        if problem:
            return Failure(message=problem)

        if start_after is not None:
            start_after = ensure_utc(start_after)
        result = await self._documents.list_with_cursor(
            user_subcollection(uid, self.collection_name),
            self.order_field,
            direction,
            start_after,
            limit,
        )
        return self._as_records(result)

    async def get_by_days(self, uid: str, days: int, direction: str = "asc") -> Result:
        """
        Entries from the last `days` days, counting back from now.

        `days` below 1 is treated as 1, so the window is never empty. Windows
        reaching past the earliest representable timestamp start there.
        """
        problem = id_problem(uid, "uid")
        if problem:
            return Failure(message=problem)

        end = utcnow()
        days = min(max(1, int(days)), (end - EARLIEST_TIMESTAMP).days)
        start = end - timedelta(days=days)
        logger.debug(
            "Fetching %s for %s between %s and %s",
            self.collection_name,
            uid,
            start.isoformat(),
            end.isoformat(),
        )
        result = await self._documents.list_by_date_range(
            user_subcollection(uid, self.collection_name),
            start,
            end,
            self.order_field,
            direction,
        )
        return self._as_records(result)

    # ── Writes ───────────────────────────────────────────────────────────

    async def add(self, uid: str, data: Mapping[str, Any]) -> Result:
        """
        Validate `data`, fill defaults, and store it under a generated id.

        Returns:
            Success(id=<new entry id>) or a Failure listing every violation.
        """
        problem = id_problem(uid, "uid")
        if problem:
            return Failure.invalid([problem])

        violations = self.record_class.validate_payload(data)
        if violations:
            logger.info(
                "Rejected %s entry for %s: %s",
                self.collection_name,
                uid,
                "; ".join(violations),
            )
            return Failure.invalid(violations)

        record = self.record_class.from_payload(data)
        result = await self._documents.create(
            user_subcollection(uid, self.collection_name), record.to_plain_object()
        )
        if not result.success:
            return result

        logger.info("Added %s/%s for user %s", self.collection_name, result.id, uid)
        return Success(id=result.id, message="Record added successfully")

    async def delete(self, uid: str, record_id: str) -> Result:
        problem = id_problem(uid, "uid") or id_problem(record_id, "recordId")
        if problem:
            return Failure(message=problem)

        result = await self._documents.delete_by_id(
            user_subcollection(uid, self.collection_name), record_id
        )
        if not result.success:
            return result

        logger.info("Deleted %s/%s for user %s", self.collection_name, record_id, uid)
        return Success(message="Record deleted successfully")

    # ── Helpers ──────────────────────────────────────────────────────────

    def _as_records(self, result: Result) -> Result:
        if not result.success:
            return result
        try:
            records: List[StoredRecord] = [
                self.record_class.from_document(document) for document in result.data
            ]
        except ValidationError as e:
            logger.error("Stored %s entry does not match its shape: %s", self.collection_name, e)
            return Failure(message=f"Stored {self.collection_name} entry is malformed: {e}")
        return Success(data=records)


class SearchHistoryService(HistoryService):
    """Product searches, newest or oldest first by `searchedAt`."""

    collection_name = SEARCH_HISTORY_COLLECTION
    order_field = "searchedAt"
    record_class = SearchHistoryRecord


class ConsumptionHistoryService(HistoryService):
    """Logged consumptions, ordered by `consumedAt`."""

    collection_name = CONSUMPTION_HISTORY_COLLECTION
    order_field = "consumedAt"
    record_class = ConsumptionHistoryRecord
