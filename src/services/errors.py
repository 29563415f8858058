# src/services/errors.py
"""
Преобразование исключений в JSON-ответы вида {"error": ...}.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.common.constants import TypeMsg
from src.common.logger import log_error, log_info
from src.core.errors import ErrorKind, TripApprovalError, ValidationError
from src.shared.models.common import ErrorResponse


async def handle_domain_error(request: Request, exc: TripApprovalError) -> JSONResponse:
    if exc.kind is ErrorKind.PERSISTENCE:
        await log_error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        await log_info(
            f"{request.method} {request.url.path} -> {exc.http_status}: {exc.message}",
            type_msg=TypeMsg.DEBUG,
        )

    body = ErrorResponse(error=str(exc))
    if isinstance(exc, ValidationError):
        body.errors = exc.errors
    return JSONResponse(status_code=exc.http_status, content=body.model_dump(exclude_none=True))


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))

    body = ErrorResponse(error="invalid request", errors=messages)
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TripApprovalError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
