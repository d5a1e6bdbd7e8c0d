# src/backend/utils/error_handler.py
from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.backend.utils.errors import AppError
from src.backend.utils.response import error as error_response

logger = logging.getLogger("fastapi")

_ERROR_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    422: "validation_failed",
    429: "too_many_requests",
}


def _safe_args(exc: Exception) -> str:
    a = getattr(exc, "args", None)
    return str(a) if a else "No additional details"


def _log_http(request: Request, status_code: int, detail: str, exc: Exception) -> None:
    """
    Log levels:
    - 404 -> INFO (normal noise)
    - 401/403 -> WARNING (auth/permission)
    - other 4xx -> ERROR (client error worth checking)
    - 5xx -> EXCEPTION (stack trace)
    """
    url = str(request.url)
    method = request.method

    if status_code == 404:
        logger.info("404 Not Found: %s %s", method, url)
        return

    if status_code in (401, 403):
        logger.warning("%s: %s %s | detail=%s", status_code, method, url, detail)
        return

    if 400 <= status_code < 500:
        logger.error(
            "%s: %s %s | detail=%s | args=%s",
            status_code,
            method,
            url,
            detail,
            _safe_args(exc),
        )
        return

    logger.exception("%s: %s %s | detail=%s", status_code, method, url, detail, exc_info=exc)


async def custom_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Render every failure as {success: false, error, message, details}.
    """

    # -----------------------------
    # 1) Domain errors
    # -----------------------------
    if isinstance(exc, AppError):
        _log_http(request, exc.status_code, str(exc), exc)
        return error_response(exc.status_code, exc.error, exc.message, exc.details)

    # -----------------------------
    # 2) Starlette / FastAPI HTTPException
    # -----------------------------
    if isinstance(exc, StarletteHTTPException):
        status = int(exc.status_code)
        detail = str(exc.detail)
        _log_http(request, status, detail, exc)
        response = error_response(status, _ERROR_CODES.get(status, "http_error"), detail)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    # -----------------------------
    # 3) Validation error
    # -----------------------------
    if isinstance(exc, RequestValidationError):
        logger.warning(
            "422 Validation error: %s %s | %s",
            request.method,
            str(request.url),
            exc.errors(),
        )
        return error_response(422, "validation_failed", "Validation failed", exc.errors())

    # -----------------------------
    # 4) Any other unexpected exception
    # -----------------------------
    logger.exception(
        "500 Unhandled exception: %s %s | %s", request.method, str(request.url), str(exc),
        exc_info=exc,
    )
    return error_response(500, "internal_error", "Internal Server Error. Please try again later.")
