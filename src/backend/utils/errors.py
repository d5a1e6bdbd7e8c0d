# src/backend/utils/errors.py
from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base error rendered as the uniform error envelope by the exception handler."""

    status_code: int = 500
    error: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        error: str | None = None,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class MenuValidationError(AppError):
    status_code = 400
    error = "validation_error"


class MenuNotFoundError(AppError):
    status_code = 404
    error = "not_found"


class FixedMenuError(AppError):
    status_code = 403
    error = "forbidden"


class MenuStoreError(AppError):
    status_code = 500
    error = "database_error"
