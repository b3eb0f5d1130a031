"""
NutriTrack Backend — Generic Document-Access Layer
===================================================

What:  A thin, uniform wrapper over the Firestore AsyncClient.
Why:   Every domain service needs the same handful of operations against a
       hierarchical document store. Centralizing them here means exactly one
       place translates SDK behavior (missing snapshots, empty queries,
       gRPC errors) into the result envelope.
How:   Each public coroutine takes a collection path such as
       "usuarios/u1/historial_consumo", talks to the client, and returns a
       `Success` or a `Failure`. Nothing here raises to the caller; SDK
       exceptions are logged and converted at this boundary.
Who:   Constructed once in the app lifespan with an explicit client and
       shared by UserService and the history services.

Operation Summary:
    get_by_id           → Success(data={id, ...fields}) | "Document not found"
    create              → Success(id=<store generated>)
    create_with_id      → Success(id=<caller id>)        (set: insert or overwrite)
    update              → Success                        | "Document not found"
    delete_by_id        → Success                        | "Document not found"
    list_ordered_by     → Success(data=[...])            | "No documents found"
    list_with_cursor    → Success(data=[...])            | "No documents found"
    list_by_date_range  → Success(data=[...])            | "No documents found"

Query Requirements:
    list_by_date_range filters and orders on the same field, which Firestore
    serves from the automatic single-field index. Combining it with another
    filter would need a composite index declared in the Firebase console.

Update Semantics:
    `update` uses Firestore's update(), which refuses to touch a missing
    document. That refusal surfaces as "Document not found"; an update never
    creates a document.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import NotFound
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from nutritrack.schemas.result import (
    NO_DOCUMENTS_MESSAGE,
    NOT_FOUND_MESSAGE,
    Failure,
    Result,
    Success,
)

logger = logging.getLogger(__name__)

# API direction names → Firestore direction constants
ORDER_DIRECTIONS = {
    "asc": firestore.Query.ASCENDING,
    "desc": firestore.Query.DESCENDING,
}


class DocumentService:
    """
    Uniform CRUD and query operations over a Firestore client.

    Stateless apart from the injected client; safe for unlimited concurrent
    use. No retries, caching, or transactions: one call, one round trip.
    """

    def __init__(self, client: firestore.AsyncClient):
        self._client = client

    # ── Single-document operations ───────────────────────────────────────

    async def get_by_id(self, collection_path: str, doc_id: str) -> Result:
        """
        Fetch one document.

        Returns:
            Success with `data` = {"id": doc_id, **fields}, or
            Failure("Document not found") when the document is absent.
        """
        if not doc_id:
            return Failure(message="A document id is required")
        try:
            snapshot = await self._client.collection(collection_path).document(doc_id).get()
            if not snapshot.exists:
                return Failure(message=NOT_FOUND_MESSAGE)
            return Success(data=self._snapshot_to_dict(snapshot))
        except Exception as e:
            return self._store_failure("get_by_id", collection_path, e, doc_id)

    async def create(self, collection_path: str, data: Dict[str, Any]) -> Result:
        """Insert a document under a store-generated id."""
        try:
            _, doc_ref = await self._client.collection(collection_path).add(data)
            logger.debug("Created %s/%s", collection_path, doc_ref.id)
            return Success(id=doc_ref.id, message="Document created successfully")
        except Exception as e:
            return self._store_failure("create", collection_path, e)

    async def create_with_id(
        self, collection_path: str, doc_id: str, data: Dict[str, Any]
    ) -> Result:
        """
        Insert a document at a caller-chosen id.

        Uses set(), so an existing document at the same id is overwritten.
        This is how user documents are keyed by their account uid.
        """
        if not doc_id:
            return Failure(message="A document id is required")
        try:
            await self._client.collection(collection_path).document(doc_id).set(data)
            logger.debug("Created %s/%s", collection_path, doc_id)
            return Success(id=doc_id, message="Document created successfully")
        except Exception as e:
            return self._store_failure("create_with_id", collection_path, e, doc_id)

    async def update(
        self, collection_path: str, doc_id: str, data: Dict[str, Any]
    ) -> Result:
        """
        Merge `data` into an existing document.

        The existence check is left to the store: Firestore rejects updates
        of missing documents with NotFound, reported as "Document not found".
        """
        if not doc_id:
            return Failure(message="A document id is required")
        try:
            await self._client.collection(collection_path).document(doc_id).update(data)
            return Success(id=doc_id, message="Document updated successfully")
        except NotFound:
            return Failure(message=NOT_FOUND_MESSAGE)
        except Exception as e:
            return self._store_failure("update", collection_path, e, doc_id)

    async def delete_by_id(self, collection_path: str, doc_id: str) -> Result:
        """
        Delete a document after confirming it exists.

        A missing document yields Failure("Document not found") and no write
        is issued.
        """
        if not doc_id:
            return Failure(message="A document id is required")
        try:
            doc_ref = self._client.collection(collection_path).document(doc_id)
            snapshot = await doc_ref.get()
            if not snapshot.exists:
                return Failure(message=NOT_FOUND_MESSAGE)
            await doc_ref.delete()
            logger.debug("Deleted %s/%s", collection_path, doc_id)
            return Success(message="Document deleted successfully")
        except Exception as e:
            return self._store_failure("delete_by_id", collection_path, e, doc_id)

    # ── Collection queries ───────────────────────────────────────────────

    async def list_ordered_by(
        self, collection_path: str, field: str, direction: str = "asc"
    ) -> Result:
        """
        Return every document in the collection ordered by `field`.

        An empty collection is a Failure("No documents found"), never an
        empty Success.
        """
        order = self._resolve_direction(direction)
        if order is None:
            return self._invalid_direction(direction)
        try:
            query = self._client.collection(collection_path).order_by(field, direction=order)
            return self._documents_result(await query.get())
        except Exception as e:
            return self._store_failure("list_ordered_by", collection_path, e)

    async def list_with_cursor(
        self,
        collection_path: str,
        field: str,
        direction: str = "asc",
        cursor: Optional[Any] = None,
        limit: int = 20,
    ) -> Result:
        """
        Keyset pagination: up to `limit` documents ordered by `field`.

        When `cursor` is given the page starts strictly after that value of
        `field`; the caller passes the last value it saw. Unlike an offset,
        the store seeks straight to the cursor, so deep pages cost the same
        as the first one.
        """
        order = self._resolve_direction(direction)
        if order is None:
            return self._invalid_direction(direction)
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            return Failure(message=f"Limit must be a positive integer, got {limit!r}")
        try:
            query = self._client.collection(collection_path).order_by(field, direction=order)
            if cursor is not None:
                query = query.start_after({field: cursor})
            query = query.limit(limit)
            return self._documents_result(await query.get())
        except Exception as e:
            return self._store_failure("list_with_cursor", collection_path, e)

    async def list_by_date_range(
        self,
        collection_path: str,
        start: datetime,
        end: datetime,
        field: str,
        direction: str = "asc",
    ) -> Result:
        """
        Return documents whose `field` lies in [start, end], both inclusive,
        ordered by the same field.
        """
        order = self._resolve_direction(direction)
        if order is None:
            return self._invalid_direction(direction)
        if start > end:
            return Failure(
                message=f"Range start {start.isoformat()} is after range end {end.isoformat()}"
            )
        try:
            query = (
                self._client.collection(collection_path)
                .where(filter=FieldFilter(field, ">=", start))
                .where(filter=FieldFilter(field, "<=", end))
                .order_by(field, direction=order)
            )
            return self._documents_result(await query.get())
        except Exception as e:
            return self._store_failure("list_by_date_range", collection_path, e)

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _resolve_direction(direction: str) -> Optional[str]:
        if not isinstance(direction, str):
            return None
        return ORDER_DIRECTIONS.get(direction.lower())

    @staticmethod
    def _invalid_direction(direction: Any) -> Failure:
        return Failure(
            message=f"Invalid order direction {direction!r}. Must be 'asc' or 'desc'"
        )

    @staticmethod
    def _snapshot_to_dict(snapshot) -> Dict[str, Any]:
        return {"id": snapshot.id, **(snapshot.to_dict() or {})}

    def _documents_result(self, snapshots: List[Any]) -> Result:
        if not snapshots:
            return Failure(message=NO_DOCUMENTS_MESSAGE)
        return Success(data=[self._snapshot_to_dict(s) for s in snapshots])

    @staticmethod
    def _store_failure(
        operation: str,
        collection_path: str,
        error: Exception,
        doc_id: Optional[str] = None,
    ) -> Failure:
        # The raw SDK message goes back to the caller; the traceback stays in the log.
        logger.error(
            "Document store %s failed on %s%s: %s",
            operation,
            collection_path,
            f"/{doc_id}" if doc_id else "",
            error,
            exc_info=True,
        )
        return Failure(message=str(error) or type(error).__name__)
