from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from userbase.models.envelope import ServiceResult
from userbase.models.user import UserCreate, UserUpdate
from userbase.services.user_service import UserService
from web.deps import get_user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _respond(result: ServiceResult) -> JSONResponse:
    return JSONResponse(result.body(), status_code=result.status_code)


@router.get("")
def user_list(service: UserService = Depends(get_user_service)):
    logger.info("GET /users — listing users")
    return _respond(service.list_users())


@router.post("")
def user_create(payload: UserCreate, service: UserService = Depends(get_user_service)):
    logger.info("POST /users — creating user username=%s", payload.username)
    return _respond(service.create_user(payload))


@router.get("/{user_id}")
def user_detail(user_id: str, service: UserService = Depends(get_user_service)):
    logger.info("GET /users/%s — loading detail", user_id)
    return _respond(service.get_user(user_id))


@router.api_route("/{user_id}", methods=["PUT", "PATCH"])
def user_update(user_id: str, payload: UserUpdate, service: UserService = Depends(get_user_service)):
    logger.info("PUT/PATCH /users/%s — updating user", user_id)
    return _respond(service.update_user(user_id, payload))


@router.delete("/{user_id}")
def user_delete(user_id: str, service: UserService = Depends(get_user_service)):
    logger.info("DELETE /users/%s — deleting user", user_id)
    return _respond(service.delete_user(user_id))
