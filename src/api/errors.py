from __future__ import annotations

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from src.api.headers import failure_alert
from src.domain.pagination import InvalidPageRequestError

logger = structlog.get_logger()

PAGINATION_PARAMS = frozenset({"page", "size", "sort"})


class BadRequestAlertError(Exception):
    """Client error on a write path, rendered with alert headers."""

    def __init__(self, message: str, entity_name: str, error_key: str) -> None:
        super().__init__(message)
        self.message = message
        self.entity_name = entity_name
        self.error_key = error_key


async def _bad_request_alert_handler(_: Request, exc: BadRequestAlertError) -> JSONResponse:
    logger.info("bad_request_alert", entity=exc.entity_name, error_key=exc.error_key)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "title": exc.message,
            "status": status.HTTP_400_BAD_REQUEST,
            "entity_name": exc.entity_name,
            "error_key": exc.error_key,
            "message": f"error.{exc.error_key}",
        },
        headers=failure_alert(exc.entity_name, exc.error_key),
    )


async def _invalid_page_request_handler(
    request: Request, exc: InvalidPageRequestError
) -> JSONResponse:
    logger.info("invalid_page_request", path=str(request.url.path), detail=str(exc))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "title": "Invalid page request",
            "status": status.HTTP_400_BAD_REQUEST,
            "detail": str(exc),
        },
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed pagination query values as an invalid page request."""
    errors = exc.errors()
    pagination_errors = [
        error
        for error in errors
        if tuple(error.get("loc", ()))[:1] == ("query",)
        and len(error["loc"]) > 1
        and error["loc"][1] in PAGINATION_PARAMS
    ]
    if errors and len(pagination_errors) == len(errors):
        detail = "; ".join(f"{error['loc'][1]}: {error['msg']}" for error in errors)
        return await _invalid_page_request_handler(request, InvalidPageRequestError(detail))
    return await request_validation_exception_handler(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BadRequestAlertError, _bad_request_alert_handler)
    app.add_exception_handler(InvalidPageRequestError, _invalid_page_request_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
