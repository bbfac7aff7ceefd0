from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from userbase.db import initialize_db
from userbase.logging import configure_logging, reconfigure
from userbase.models.envelope import ServiceResult
from web.deps import DBConnectionMiddleware
from web.routes.users import router as users_router

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    initialize_db()
    # Alembic's fileConfig replaces the root handlers.
    reconfigure()
    logger.info("Application started")
    yield


app = FastAPI(docs_url=None, redoc_url=None, lifespan=lifespan)

app.add_middleware(DBConnectionMiddleware)

app.include_router(users_router)


def _field_name(loc: tuple) -> str:
    parts = [str(p) for p in loc if p != "body"]
    return ".".join(parts) or "body"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors: dict[str, str] = {}
    for err in exc.errors():
        errors.setdefault(_field_name(tuple(err.get("loc", ()))), err.get("msg", "invalid"))
    logger.warning("Validation failed on %s %s: %s", request.method, request.url.path, sorted(errors))
    result = ServiceResult.fail(422, "Validation failed", errors)
    return JSONResponse(result.body(), status_code=result.status_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    result = ServiceResult.internal_error()
    return JSONResponse(result.body(), status_code=result.status_code)
