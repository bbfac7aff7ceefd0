from __future__ import annotations

import logging

from fastapi import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from userbase.db import get_engine
from userbase.repositories.sqlalchemy import SQLAlchemyUserRepository
from userbase.services.user_service import UserService

logger = logging.getLogger(__name__)


class DBConnectionMiddleware:
    """Pure ASGI middleware; closes the per-request DB connection if one was opened."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request.state.db_conn = None
        try:
            await self.app(scope, receive, send)
        finally:
            conn = getattr(request.state, "db_conn", None)
            if conn is not None:
                conn.close()
                logger.debug("DB connection closed for %s %s", request.method, request.url.path)


def _get_conn(request: Request):
    """Lazy per-request connection, created on first use and closed by the middleware."""
    if getattr(request.state, "db_conn", None) is None:
        logger.debug("Creating DB connection for %s %s", request.method, request.url.path)
        request.state.db_conn = get_engine().connect()
    return request.state.db_conn


def get_user_service(request: Request) -> UserService:
    return UserService(SQLAlchemyUserRepository(_get_conn(request)))
