# backend/app/errors.py
"""
Error envelope handlers.

Every error leaves the API as a problem document:
``{type, title, status, detail, instance, code?, errors?}``.
``detail`` always carries the human-readable message, so clients (and
tests) can read ``response.json()["detail"]`` regardless of the error source.
"""

from http import HTTPStatus
import logging
from typing import Any, Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import DomainException

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


def _title(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def problem_response(
    request: Request,
    status_code: int,
    detail: str,
    code: Optional[str] = None,
    errors: Any = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    body = {
        "type": "about:blank",
        "title": _title(status_code),
        "status": status_code,
        "detail": detail,
        "instance": request.url.path,
    }
    if code:
        body["code"] = code
    if errors:
        body["errors"] = jsonable_encoder(errors)
    return JSONResponse(
        body, status_code=status_code, media_type=PROBLEM_MEDIA_TYPE, headers=headers
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        # Domain exceptions arrive here as {"message", "code", "details"}
        detail = exc.detail
        if isinstance(detail, dict):
            return problem_response(
                request,
                exc.status_code,
                str(detail.get("message", "")),
                code=detail.get("code"),
                errors=detail.get("details"),
                headers=exc.headers,
            )
        return problem_response(
            request,
            exc.status_code,
            "" if detail is None else str(detail),
            headers=exc.headers,
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        return await http_exception_handler(request, exc.to_http_exception())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return problem_response(
            request,
            422,
            "Request validation failed",
            code="validation_error",
            errors=exc.errors(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return problem_response(
            request, 500, "Internal Server Error", code="internal_server_error"
        )
