"""
NutriTrack Backend — Document Service Unit Tests
=================================================

What:  Tests for the generic document-access layer.
How:   Runs against the in-memory Firestore from conftest; store outages are
       simulated with mocks.

What we test:
    ✅ get/create/update/delete outcomes and their messages
    ✅ Empty collections are failures, never empty successes
    ✅ Ordering, keyset pagination and inclusive date ranges
    ✅ Invalid arguments and SDK errors come back as Failure
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from nutritrack.schemas.result import NO_DOCUMENTS_MESSAGE, NOT_FOUND_MESSAGE
from nutritrack.services.document_service import DocumentService

ENTRIES = "usuarios/u1/historial_consumo"
BASE = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def seed_entries(store, count=5):
    for i in range(count):
        store.seed(ENTRIES, f"e{i}", {"productId": f"p{i}", "consumedAt": BASE + timedelta(hours=i)})


class TestSingleDocumentOperations:

    @pytest.mark.asyncio
    async def test_get_missing_document(self, document_service):
        result = await document_service.get_by_id("usuarios", "ghost")

        assert result.success is False
        assert result.message == NOT_FOUND_MESSAGE

    @pytest.mark.asyncio
    async def test_get_includes_document_id(self, document_service, fake_store):
        fake_store.seed("usuarios", "u1", {"fullName": "Ana"})

        result = await document_service.get_by_id("usuarios", "u1")

        assert result.success is True
        assert result.data == {"id": "u1", "fullName": "Ana"}

    @pytest.mark.asyncio
    async def test_blank_id_is_rejected_without_store_access(self):
        client = MagicMock()
        service = DocumentService(client)

        result = await service.get_by_id("usuarios", "")

        assert result.success is False
        client.collection.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_returns_generated_id(self, document_service, fake_store):
        result = await document_service.create(ENTRIES, {"productId": "p1"})

        assert result.success is True
        assert result.id
        assert fake_store.documents[(ENTRIES, result.id)] == {"productId": "p1"}

    @pytest.mark.asyncio
    async def test_create_with_id_overwrites(self, document_service, fake_store):
        fake_store.seed("usuarios", "u1", {"fullName": "Old", "role": "paid"})

        result = await document_service.create_with_id("usuarios", "u1", {"fullName": "New"})

        assert result.success is True
        assert result.id == "u1"
        assert fake_store.documents[("usuarios", "u1")] == {"fullName": "New"}

    @pytest.mark.asyncio
    async def test_update_merges_fields(self, document_service, fake_store):
        fake_store.seed("usuarios", "u1", {"fullName": "Ana", "role": "standard"})

        result = await document_service.update("usuarios", "u1", {"role": "paid"})

        assert result.success is True
        assert result.message == "Document updated successfully"
        assert fake_store.documents[("usuarios", "u1")] == {"fullName": "Ana", "role": "paid"}

    @pytest.mark.asyncio
    async def test_update_missing_document_does_not_create_it(self, document_service, fake_store):
        result = await document_service.update("usuarios", "ghost", {"fullName": "X"})

        assert result.success is False
        assert result.message == NOT_FOUND_MESSAGE
        assert ("usuarios", "ghost") not in fake_store.documents

    @pytest.mark.asyncio
    async def test_delete_existing_document(self, document_service, fake_store):
        fake_store.seed("usuarios", "u1", {"fullName": "Ana"})

        result = await document_service.delete_by_id("usuarios", "u1")

        assert result.success is True
        assert result.message == "Document deleted successfully"
        assert ("usuarios", "u1") not in fake_store.documents

    @pytest.mark.asyncio
    async def test_delete_missing_document_issues_no_write(self, document_service, fake_store):
        fake_store.seed("usuarios", "u1", {"fullName": "Ana"})

        result = await document_service.delete_by_id("usuarios", "ghost")

        assert result.success is False
        assert result.message == NOT_FOUND_MESSAGE
        assert fake_store.writes == []
        assert ("usuarios", "u1") in fake_store.documents


class TestCollectionQueries:

    @pytest.mark.asyncio
    async def test_empty_collection_is_a_failure(self, document_service):
        result = await document_service.list_ordered_by(ENTRIES, "consumedAt")

        assert result.success is False
        assert result.message == NO_DOCUMENTS_MESSAGE

    @pytest.mark.asyncio
    async def test_list_ordered_descending(self, document_service, fake_store):
        seed_entries(fake_store, 3)

        result = await document_service.list_ordered_by(ENTRIES, "consumedAt", "desc")

        assert [doc["id"] for doc in result.data] == ["e2", "e1", "e0"]

    @pytest.mark.asyncio
    async def test_invalid_direction(self, document_service, fake_store):
        seed_entries(fake_store, 1)

        result = await document_service.list_ordered_by(ENTRIES, "consumedAt", "sideways")

        assert result.success is False
        assert "Must be 'asc' or 'desc'" in result.message

    @pytest.mark.asyncio
    async def test_cursor_pages_do_not_overlap(self, document_service, fake_store):
        seed_entries(fake_store, 5)

        first = await document_service.list_with_cursor(ENTRIES, "consumedAt", "asc", None, 2)
        cursor = first.data[-1]["consumedAt"]
        second = await document_service.list_with_cursor(ENTRIES, "consumedAt", "asc", cursor, 2)

        assert [doc["id"] for doc in first.data] == ["e0", "e1"]
        assert [doc["id"] for doc in second.data] == ["e2", "e3"]

    @pytest.mark.asyncio
    async def test_cursor_past_the_end(self, document_service, fake_store):
        seed_entries(fake_store, 2)

        result = await document_service.list_with_cursor(
            ENTRIES, "consumedAt", "asc", BASE + timedelta(days=1), 10
        )

        assert result.success is False
        assert result.message == NO_DOCUMENTS_MESSAGE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -3, True, "5"])
    async def test_invalid_limit(self, document_service, limit):
        result = await document_service.list_with_cursor(ENTRIES, "consumedAt", "asc", None, limit)

        assert result.success is False
        assert result.message.startswith("Limit must be a positive integer")

    @pytest.mark.asyncio
    async def test_date_range_bounds_are_inclusive(self, document_service, fake_store):
        seed_entries(fake_store, 5)

        result = await document_service.list_by_date_range(
            ENTRIES, BASE + timedelta(hours=1), BASE + timedelta(hours=3), "consumedAt"
        )

        assert [doc["id"] for doc in result.data] == ["e1", "e2", "e3"]

    @pytest.mark.asyncio
    async def test_date_range_start_after_end(self, document_service, fake_store):
        seed_entries(fake_store, 2)

        result = await document_service.list_by_date_range(
            ENTRIES, BASE + timedelta(days=1), BASE, "consumedAt"
        )

        assert result.success is False
        assert "is after range end" in result.message

    @pytest.mark.asyncio
    async def test_documents_without_order_field_are_left_out(self, document_service, fake_store):
        seed_entries(fake_store, 2)
        fake_store.seed(ENTRIES, "legacy", {"productId": "old"})

        result = await document_service.list_ordered_by(ENTRIES, "consumedAt")

        assert "legacy" not in [doc["id"] for doc in result.data]


class TestStoreErrors:
    """SDK exceptions are logged and converted, never raised."""

    @pytest.mark.asyncio
    async def test_query_error_becomes_failure(self, document_service, fake_store):
        fake_store.fail_with = RuntimeError("deadline exceeded")

        result = await document_service.list_ordered_by(ENTRIES, "consumedAt")

        assert result.success is False
        assert result.message == "deadline exceeded"

    @pytest.mark.asyncio
    async def test_write_error_becomes_failure(self):
        client = MagicMock()
        client.collection.return_value.add = AsyncMock(side_effect=PermissionError())
        service = DocumentService(client)

        result = await service.create(ENTRIES, {"productId": "p1"})

        assert result.success is False
        assert result.message == "PermissionError"
