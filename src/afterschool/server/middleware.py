"""Request logging, CORS and error handling for the lessons API."""

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Sequence

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from afterschool.exceptions import AfterschoolError

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("afterschool.server.access")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a request ID and log every request with its latency."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        request.state.request_id = request_id

        start = time.monotonic()
        response = await call_next(request)
        duration = time.monotonic() - start

        response.headers["X-Request-Id"] = request_id

        access_logger.info(
            "request",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "latency_ms": round(duration * 1000, 2),
            },
        )
        return response


# ── Error Handlers ─────────────────────────────────────────────────

_HTTP_ERROR_TAGS = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
    422: "validation_error",
}


def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


async def _afterschool_error(request: Request, exc: AfterschoolError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(
        exc.status_code,
        _HTTP_ERROR_TAGS.get(exc.status_code, "error"),
        str(exc.detail or f"HTTP {exc.status_code}"),
    )


async def _request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        return _error_response(400, "malformed_json", "Request body contains invalid JSON.")
    problems = "; ".join(
        f"{'.'.join(str(part) for part in e['loc'])}: {e['msg']}" for e in errors
    )
    return _error_response(422, "validation_error", problems)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", "An internal server error occurred.")


def install_error_handlers(app: FastAPI) -> None:
    """Answer every failure with an {error, message} JSON body."""
    app.add_exception_handler(AfterschoolError, _afterschool_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(Exception, _unhandled_error)


def install_middleware(app: FastAPI, cors_origins: Sequence[str] = ("*",)) -> None:
    """Install all middleware on the app."""
    # Outermost runs first (added last)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)
    install_error_handlers(app)
