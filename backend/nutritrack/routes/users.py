"""
NutriTrack Backend — User Route Handlers
=========================================

What:  CRUD and existence check for user accounts under /users.
How:   Thin handlers: pull the uid and JSON body out of the request, call
       UserService, map the result to a status code.

    POST   /users               create (body carries "id")   201 | 400
    GET    /users/{uid}         fetch                        200 | 404
    PUT    /users/{uid}         merge update                 200 | 400
    DELETE /users/{uid}         delete                       200 | 404
    GET    /users/{uid}/exists  {"data": {"exists": bool}}   200
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from nutritrack.dependencies import get_user_service
from nutritrack.routes.responses import respond
from nutritrack.schemas.result import Success
from nutritrack.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    status_code=201,
    summary="Create a user",
    description=(
        "Stores a user document keyed by the account uid given in `id`. "
        "Omitted `role`, `registeredAt` and `settings` take their defaults."
    ),
)
async def create_user(
    payload: Dict[str, Any] = Body(...),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    data = dict(payload)
    uid = data.pop("id", None)
    result = await service.create(uid, data)
    return respond(result, success_status=201, failure_status=400)


@router.get("/{uid}", summary="Get a user by uid")
async def get_user(
    uid: str,
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    result = await service.get(uid)
    return respond(result, failure_status=404)


@router.put(
    "/{uid}",
    summary="Update a user",
    description="Merges the supplied fields into an existing user. `fullName` and `email` are required.",
)
async def update_user(
    uid: str,
    payload: Dict[str, Any] = Body(...),
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    data = dict(payload)
    # The uid in the path is authoritative; ids are immutable after creation
    data.pop("id", None)
    result = await service.update(uid, data)
    return respond(result, failure_status=400)


@router.delete("/{uid}", summary="Delete a user")
async def delete_user(
    uid: str,
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    result = await service.delete(uid)
    return respond(result, failure_status=404)


@router.get("/{uid}/exists", summary="Check whether a user exists")
async def user_exists(
    uid: str,
    service: UserService = Depends(get_user_service),
) -> JSONResponse:
    exists = await service.exists(uid)
    return respond(Success(data={"exists": exists}))
