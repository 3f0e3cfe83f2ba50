"""Error taxonomy and the FastAPI handlers that render it.

Every failure a request can end in is a `PortalError` subclass carrying
the HTTP status and a message that is safe to show the caller. Handlers
below turn them into `{"error": message}` bodies. Server-side failures
(`StorageError`, `HashingError`) keep the real cause on `__cause__` so
it can be logged; it is never sent to the client.
"""

import logging
from contextlib import contextmanager
from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

logger = logging.getLogger("eduportal.errors")


class PortalError(Exception):
    """Base class for request-terminating errors."""
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingField(PortalError):
    status_code = 400
    default_message = "Required fields are missing"


class InvalidRole(PortalError):
    status_code = 400
    default_message = "Invalid role"


class InvalidReference(PortalError):
    status_code = 400
    default_message = "Invalid reference"


class InvalidStatus(PortalError):
    status_code = 400
    default_message = "Invalid status value."


class InvalidCredentials(PortalError):
    status_code = 401
    default_message = "Invalid credentials"


class NotFound(PortalError):
    status_code = 404
    default_message = "Not found"


class StorageError(PortalError):
    status_code = 500


class HashingError(PortalError):
    status_code = 500


@contextmanager
def storage_errors(message: str, session: Optional[Session] = None):
    """Translate database failures inside the block into `StorageError`.

    The session, when given, is rolled back so it stays usable for the
    rest of the request.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        if session is not None:
            session.rollback()
        raise StorageError(message) from exc


def error_body(message: str) -> dict:
    return {"error": message}


async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc.__cause__ or exc,
        )
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("%s %s invalid request at %s", request.method, request.url.path, [e.get("loc") for e in exc.errors()])
    return JSONResponse(status_code=400, content=error_body("Invalid request"))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=error_body("Internal server error"))
