from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, cast
import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_CONTENT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
)
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from app.core.logging import get_logger


class AuthorServiceError(Exception):
    """Base class for failures raised by the author service."""

    status_code: ClassVar[int] = HTTP_400_BAD_REQUEST
    error_type: ClassVar[str] = "author_service_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message: str = message


class AuthorNotFound(AuthorServiceError):
    status_code: ClassVar[int] = HTTP_404_NOT_FOUND
    error_type: ClassVar[str] = "author_not_found"


class AuthorAlreadyExists(AuthorServiceError):
    status_code: ClassVar[int] = HTTP_409_CONFLICT
    error_type: ClassVar[str] = "author_already_exists"


class AuthorNotAuthorized(AuthorServiceError):
    status_code: ClassVar[int] = HTTP_403_FORBIDDEN
    error_type: ClassVar[str] = "author_not_authorized"


class InvalidCredentials(AuthorServiceError):
    status_code: ClassVar[int] = HTTP_401_UNAUTHORIZED
    error_type: ClassVar[str] = "invalid_credentials"


class DownstreamServiceError(AuthorServiceError):
    """Raised when a sibling service answers with an unusable body."""

    status_code: ClassVar[int] = HTTP_502_BAD_GATEWAY
    error_type: ClassVar[str] = "downstream_error"


class BookIsEmpty(AuthorServiceError):
    """Raised when a book has no valid content and cannot be completed."""

    status_code: ClassVar[int] = HTTP_422_UNPROCESSABLE_CONTENT
    error_type: ClassVar[str] = "book_is_empty"

    def __init__(self, book_id: str):
        super().__init__(f"Book {book_id} is empty or incomplete")
        self.book_id: str = book_id


class ErrorBody(BaseModel):
    """Structured error body."""
    type: str
    message: str
    details: dict[str, object] | None = None


class ErrorEnvelope(BaseModel):
    error: ErrorBody
    meta: dict[str, object]


def _build_meta(request: Request) -> dict[str, object]:
    """Collect metadata for error responses."""
    return {
        "request_id": getattr(request.state, "correlation_id", "-"),
        "path": request.url.path,
        "method": request.method,
    }

def _serialize_validation_errors(errors: Sequence[Mapping[Any, Any]]) -> list[dict[str, object]]:
    """Serialize validation errors, handling non-serializable objects in context."""

    serialized_errors: list[dict[str, object]] = []

    for error in errors:
        serialized_error: dict[str, object] = dict(error)

        if "ctx" in serialized_error and isinstance(serialized_error["ctx"], dict):
            ctx: dict[str, object] = cast(dict[str, object], serialized_error["ctx"]).copy()

            if "error" in ctx:
                error_value = ctx["error"]

                if hasattr(error_value, "__str__"):
                    ctx["error"] = str(error_value)
            serialized_error["ctx"] = ctx
        serialized_errors.append(serialized_error)
    return serialized_errors


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception."""

    @app.exception_handler(AuthorServiceError)
    async def author_service_error_handler(
        request: Request, exc: AuthorServiceError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning(
            "Request rejected",
            extra={"error_type": exc.error_type, "status_code": exc.status_code},
        )
        body = ErrorEnvelope(
            error=ErrorBody(type=exc.error_type, message=exc.message),
            meta=_build_meta(request),
        )
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("HTTP error", extra={"status_code": exc.status_code})
        if isinstance(exc.detail, dict):
            message = str(exc.detail) if len(str(exc.detail)) < 200 else "Request failed"
            details = exc.detail
        else:
            message = exc.detail or "HTTP error"
            details = None

        body = ErrorEnvelope(
            error=ErrorBody(type="http_error", message=message, details=details),
            meta=_build_meta(request),
        )
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.info("Validation error")
        body = ErrorEnvelope(
            error=ErrorBody(
                type="validation_error",
                message="Invalid request payload",
                details={"errors": _serialize_validation_errors(exc.errors())},
            ),
            meta=_build_meta(request),
        )
        return JSONResponse(
            status_code=HTTP_422_UNPROCESSABLE_CONTENT, content=body.model_dump()
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("Database integrity error", extra={"error": str(exc)})

        error_message = str(exc.orig) if hasattr(exc, 'orig') and exc.orig else str(exc)

        if "unique constraint" in error_message.lower():
            message = "Resource already exists"
            error_type = "duplicate_resource"
        elif "not null constraint" in error_message.lower():
            message = "Missing required value"
            error_type = "invalid_value"
        else:
            message = "Data integrity violation"
            error_type = "integrity_error"

        body = ErrorEnvelope(
            error=ErrorBody(type=error_type, message=message),
            meta=_build_meta(request),
        )
        return JSONResponse(
            status_code=HTTP_400_BAD_REQUEST, content=body.model_dump()
        )

    @app.exception_handler(httpx.HTTPStatusError)
    async def downstream_status_handler(
        request: Request, exc: httpx.HTTPStatusError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning(
            "Downstream service returned an error",
            extra={
                "downstream_url": str(exc.request.url),
                "downstream_status": exc.response.status_code,
            },
        )
        body = ErrorEnvelope(
            error=ErrorBody(
                type="downstream_error",
                message="Downstream service returned an error",
                details={"status_code": exc.response.status_code},
            ),
            meta=_build_meta(request),
        )
        return JSONResponse(status_code=HTTP_502_BAD_GATEWAY, content=body.model_dump())

    @app.exception_handler(httpx.RequestError)
    async def downstream_unreachable_handler(
        request: Request, exc: httpx.RequestError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("Downstream service unreachable", extra={"error": str(exc)})
        body = ErrorEnvelope(
            error=ErrorBody(type="downstream_error", message="Downstream service unreachable"),
            meta=_build_meta(request),
        )
        return JSONResponse(status_code=HTTP_502_BAD_GATEWAY, content=body.model_dump())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.exception("Unhandled server error", exc_info=exc)
        body = ErrorEnvelope(
            error=ErrorBody(type="server_error", message="Internal Server Error"),
            meta=_build_meta(request),
        )
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump()
        )
