"""
NutriTrack Backend — FastAPI Dependencies
==========================================

What:  `Depends()` providers handing route handlers their services.
How:   The lifespan (or create_app, when a client is injected) builds one
       DocumentService and the domain services on `app.state`; these
       functions read them back per request. No module-level singletons, so
       a test app wired to a fake store never shares state with another.
"""

from fastapi import Request

from nutritrack.services.document_service import DocumentService
from nutritrack.services.history_service import (
    ConsumptionHistoryService,
    SearchHistoryService,
)
from nutritrack.services.user_service import UserService


def install_services(app, store_client) -> None:
    """Build the service graph around `store_client` and attach it to app.state."""
    documents = DocumentService(store_client)
    app.state.store_client = store_client
    app.state.document_service = documents
    app.state.user_service = UserService(documents)
    app.state.search_history_service = SearchHistoryService(documents)
    app.state.consumption_history_service = ConsumptionHistoryService(documents)


def get_store_client(request: Request):
    return request.app.state.store_client


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_search_history_service(request: Request) -> SearchHistoryService:
    return request.app.state.search_history_service


def get_consumption_history_service(request: Request) -> ConsumptionHistoryService:
    return request.app.state.consumption_history_service
