"""
Erreurs métier et rendu JSON des erreurs.

Chaque erreur porte son code HTTP; les handlers installés sur l'app
renvoient toujours un objet {"error": message}.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class BlogError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingToken(BlogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Missing token"


class InvalidToken(BlogError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid token"


class InvalidCredentials(BlogError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class RegistrationFailed(BlogError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Registration failed"


class NotFound(BlogError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Forbidden(BlogError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class MalformedContent(BlogError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Malformed content"


class StoreFailure(BlogError):
    default_message = "Store failure"


class UploadFailure(BlogError):
    default_message = "Upload failed"


def store_error_message(error: SQLAlchemyError) -> str:
    """Message client d'une erreur SQL : classe + 1re ligne du driver, sans requête ni paramètres"""
    orig = getattr(error, "orig", None)
    detail = str(orig).strip().splitlines()[0] if orig is not None and str(orig).strip() else ""
    name = type(error).__name__
    return f"Database error ({name}): {detail}" if detail else f"Database error ({name})"


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else err.get("msg", "invalid"))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BlogError)
    async def blog_error_handler(request: Request, exc: BlogError):
        if exc.status_code >= 500:
            logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
        return error_response(exc.message, exc.status_code)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(_validation_message(exc), status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s", request.url.path)
        return error_response(store_error_message(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        logger.exception("Unexpected error on %s", request.url.path, exc_info=exc)
        return error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)
