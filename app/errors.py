# app/errors.py

from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse


class AppError(Exception):
    """Base error for request-scoped failures. Rendered as {"detail": message}."""

    status_code = 400

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppError):
    """Missing or inactive tech, service, ticket or user."""

    status_code = 404


class ValidationError(AppError):
    """Input the schema layer cannot reject on its own."""

    status_code = 422


class ConflictError(AppError):
    """Slot taken, duplicate record, or a transition the ticket cannot make."""

    status_code = 409


class AuthenticationError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )
