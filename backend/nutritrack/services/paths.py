"""
NutriTrack Backend — Storage Paths
===================================

What:  Collection names and path building for the per-user layout.

Layout:
    usuarios/{uid}                              user documents
    usuarios/{uid}/historial_busqueda/{entryId} search history
    usuarios/{uid}/historial_consumo/{entryId}  consumption history

Ids arrive from URL path parameters. A "/" inside one would silently move
the operation into a different collection, so ids are checked before any
path is built.
"""

from typing import Any, Optional

USERS_COLLECTION = "usuarios"
SEARCH_HISTORY_COLLECTION = "historial_busqueda"
CONSUMPTION_HISTORY_COLLECTION = "historial_consumo"


def id_problem(value: Any, label: str = "id") -> Optional[str]:
    """Return why `value` cannot be used as a path segment, or None if it can."""
    if not isinstance(value, str) or not value.strip():
        return f'The "{label}" field is required.'
    if "/" in value:
        return f'The "{label}" field must not contain "/".'
    return None


def user_subcollection(uid: str, name: str) -> str:
    """Path of a history sub-collection owned by `uid`."""
    return f"{USERS_COLLECTION}/{uid}/{name}"
