"""
NutriTrack Backend — History Route Handlers
============================================

What:  The same five endpoints for both history kinds:

    GET    {prefix}/{uid}/all?orderDirection=                      200 | 404
    GET    {prefix}/{uid}/limit?limit=&orderDirection=&startAfter=  200 | 404
    GET    {prefix}/{uid}/{days}?orderDirection=                   200 | 404
    POST   {prefix}/{uid}                                          201 | 400
    DELETE {prefix}/{uid}/{recordId}                               200 | 404

    prefix is /search-history or /consumption-history.

Route order matters: /all and /limit are registered before /{days} so the
literal segments win over the integer path parameter.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Literal, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from nutritrack.config import settings
from nutritrack.dependencies import (
    get_consumption_history_service,
    get_search_history_service,
)
from nutritrack.routes.responses import respond
from nutritrack.services.history_service import HistoryService

logger = logging.getLogger(__name__)

OrderDirection = Literal["asc", "desc"]


def build_history_router(
    prefix: str,
    tag: str,
    get_service: Callable[..., HistoryService],
) -> APIRouter:
    """Create the router for one history kind, bound to its service provider."""
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get("/{uid}/all", summary=f"All {tag.lower()} entries of a user")
    async def get_all(
        uid: str,
        order_direction: OrderDirection = Query(default="asc", alias="orderDirection"),
        service: HistoryService = Depends(get_service),
    ) -> JSONResponse:
        result = await service.get_all(uid, order_direction)
        return respond(result, failure_status=404)

    @router.get(
        "/{uid}/limit",
        summary=f"One page of {tag.lower()} entries",
        description=(
            "Keyset pagination: send the timestamp of the last entry you received "
            "as `startAfter` to get the next page."
        ),
    )
    async def get_with_limit(
        uid: str,
        limit: Optional[int] = Query(default=None, ge=1, description="Page size"),
        order_direction: OrderDirection = Query(default="asc", alias="orderDirection"),
        start_after: Optional[datetime] = Query(
            default=None,
            alias="startAfter",
            description="Timestamp cursor (ISO 8601) from the previous page",
        ),
        service: HistoryService = Depends(get_service),
    ) -> JSONResponse:
        page_size = limit if limit is not None else settings.default_page_size
        result = await service.get_with_limit(uid, page_size, order_direction, start_after)
        return respond(result, failure_status=404)

    @router.get("/{uid}/{days}", summary=f"{tag} entries from the last N days")
    async def get_by_days(
        uid: str,
        days: int,
        order_direction: OrderDirection = Query(default="asc", alias="orderDirection"),
        service: HistoryService = Depends(get_service),
    ) -> JSONResponse:
        result = await service.get_by_days(uid, days, order_direction)
        return respond(result, failure_status=404)

    @router.post("/{uid}", status_code=201, summary=f"Add a {tag.lower()} entry")
    async def add_entry(
        uid: str,
        payload: Dict[str, Any] = Body(...),
        service: HistoryService = Depends(get_service),
    ) -> JSONResponse:
        result = await service.add(uid, payload)
        return respond(result, success_status=201, failure_status=400)

    @router.delete("/{uid}/{record_id}", summary=f"Delete a {tag.lower()} entry")
    async def delete_entry(
        uid: str,
        record_id: str,
        service: HistoryService = Depends(get_service),
    ) -> JSONResponse:
        result = await service.delete(uid, record_id)
        return respond(result, failure_status=404)

    return router


search_history_router = build_history_router(
    "/search-history", "Search history", get_search_history_service
)
consumption_history_router = build_history_router(
    "/consumption-history", "Consumption history", get_consumption_history_service
)
