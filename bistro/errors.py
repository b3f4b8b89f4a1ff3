"""API error taxonomy.

Every error raised by the access-control layer or the routers is an ``ApiError``
and is rendered by a single exception handler as::

    {"error": true, "message": "<message>"}
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """Base class for errors rendered with the ``{error, message}`` body."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "bad request"

    def __init__(self, message: str | None = None, headers: dict[str, str] | None = None):
        super().__init__(status_code=self.status_code, detail=message or self.message, headers=headers)


class UnauthorizedError(ApiError):
    """Missing, malformed, invalid or expired bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "unauthorized access"

    def __init__(self, message: str | None = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(ApiError):
    """Authenticated caller lacking the admin role or the resource ownership."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "forbidden access"


class InvalidIdentifierError(ApiError):
    """Path identifier that is not a valid document id."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "invalid identifier"


class InvalidClaimError(ApiError):
    """Identity claim that cannot be signed into a token."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "invalid identity claim"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    logger.debug(f"{request.method} {request.url.path} -> {exc.status_code} {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": True, "message": exc.detail},
        headers=exc.headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
