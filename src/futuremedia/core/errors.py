"""Typed application errors.

Services raise these instead of framework exceptions so they stay usable
outside a request. `register_error_handlers` renders them as
`{"code": ..., "detail": ...}` responses.
"""
from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "INTERNAL_SERVER_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthorizedError(AppError):
    """No authenticated caller."""

    code = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    """Authenticated, but not allowed to act on the resource."""

    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    """Referenced entity does not exist."""

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class BadRequestError(AppError):
    """Request conflicts with current business state."""

    code = "BAD_REQUEST"
    status_code = status.HTTP_400_BAD_REQUEST


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "detail": exc.message},
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the AppError handler to the application."""
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
