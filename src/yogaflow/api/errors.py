"""Map yogaflow exceptions onto ``{error, details}`` JSON responses."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from yogaflow.errors import (
    AuthorizationError,
    BackendError,
    CatalogEmptyError,
    InvalidEditError,
    MatchError,
    NotFoundError,
    ParseError,
    PersistenceError,
    YogaFlowError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: tuple[tuple[type[YogaFlowError], int], ...] = (
    (InvalidEditError, 400),
    (NotFoundError, 404),
    (CatalogEmptyError, 404),
    (ParseError, 502),
    (BackendError, 502),
    (MatchError, 502),
    (PersistenceError, 500),
)


def error_body(message: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return body


def status_for(exc: YogaFlowError) -> int:
    if isinstance(exc, AuthorizationError):
        return 403 if exc.authenticated else 401
    for cls, status in STATUS_BY_ERROR:
        if isinstance(exc, cls):
            return status
    return 500


async def _yogaflow_error(request: Request, exc: YogaFlowError) -> JSONResponse:
    status = status_for(exc)
    details = exc.raw_text if isinstance(exc, ParseError) and exc.raw_text else None
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s -> %d: %s", request.method, request.url.path, status, exc)
    return JSONResponse(error_body(str(exc), details), status_code=status)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        error_body("Invalid request parameters", jsonable_encoder(exc.errors())),
        status_code=400,
    )


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(error_body(str(exc.detail)), status_code=exc.status_code)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(YogaFlowError, _yogaflow_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
