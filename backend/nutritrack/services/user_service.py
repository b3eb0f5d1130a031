"""
NutriTrack Backend — User Service
==================================

What:  Create, read, update, delete and existence checks for user documents.
How:   Validates payloads with UserRecord, then delegates to DocumentService.
       Failures from the access layer pass through unchanged.
Who:   Called by the /users routes.

Decisions:
    - Users are keyed by their account uid (create_with_id), so creating an
      existing uid overwrites it.
    - Updates merge only the fields the caller sent; an omitted role or
      registeredAt keeps its stored value. Updating a missing user fails
      with "Document not found" instead of creating it.
    - Deleting a user leaves the history sub-collections in place. Firestore
      does not cascade deletes, and removing history is a product decision
      this service does not make.
"""

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from nutritrack.models.user import UserRecord
from nutritrack.schemas.result import Failure, Result, Success
from nutritrack.services.document_service import DocumentService
from nutritrack.services.paths import USERS_COLLECTION, id_problem

logger = logging.getLogger(__name__)


class UserService:
    """Business operations over `usuarios/{uid}` documents."""

    def __init__(self, documents: DocumentService):
        self._documents = documents

    async def create(self, uid: str, data: Mapping[str, Any]) -> Result:
        """
        Validate and store a new user under `uid`.

        Returns:
            Success(id=uid) or a Failure whose `errors` lists every violation.
        """
        problem = id_problem(uid)
        if problem:
            return Failure.invalid([problem])

        violations = UserRecord.validate_payload(data)
        if violations:
            logger.info("Rejected user %s: %s", uid, "; ".join(violations))
            return Failure.invalid(violations)

        user = UserRecord.from_payload(data)
        result = await self._documents.create_with_id(
            USERS_COLLECTION, uid, user.to_plain_object()
        )
        if not result.success:
            return result

        logger.info("User %s created (role=%s)", uid, user.role)
        return Success(id=uid, message="User created successfully")

    async def get(self, uid: str) -> Result:
        """Fetch a user; Success(data=UserRecord) or the access-layer failure."""
        problem = id_problem(uid)
        if problem:
            return Failure(message=problem)

        result = await self._documents.get_by_id(USERS_COLLECTION, uid)
        if not result.success:
            return result

        try:
            return Success(data=UserRecord.from_document(result.data))
        except ValidationError as e:
            logger.error("Stored user %s does not match the user shape: %s", uid, e)
            return Failure(message=f"Stored user document is malformed: {e}")

    async def update(self, uid: str, data: Mapping[str, Any]) -> Result:
        """
        Validate `data` and merge it into the existing user document.

        fullName and email must be present, as on create; every other field
        is written only when supplied.
        """
        problem = id_problem(uid)
        if problem:
            return Failure.invalid([problem])

        violations = UserRecord.validate_payload(data)
        if violations:
            logger.info("Rejected update of user %s: %s", uid, "; ".join(violations))
            return Failure.invalid(violations)

        changes = UserRecord.from_payload(data).to_plain_object(partial=True)
        result = await self._documents.update(USERS_COLLECTION, uid, changes)
        if not result.success:
            return result

        logger.info("User %s updated (%s)", uid, ", ".join(sorted(changes)))
        return Success(id=uid, message="User updated successfully")

    async def delete(self, uid: str) -> Result:
        """Delete a user document. History sub-collections are not touched."""
        problem = id_problem(uid)
        if problem:
            return Failure(message=problem)

        result = await self._documents.delete_by_id(USERS_COLLECTION, uid)
        if not result.success:
            return result

        logger.info("User %s deleted", uid)
        return Success(message="User deleted successfully")

    async def exists(self, uid: str) -> bool:
        """True iff the user can be fetched. Any failure counts as absent."""
        result = await self.get(uid)
        return bool(result.success and result.data is not None)
