from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException


logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "unexpected error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def payload(self) -> dict:
        return {"error": self.message}


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "invalid request"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "not found"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "auth required"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "forbidden"


class PreconditionFailedError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "precondition failed"

    def __init__(self, message: str | None = None, *, progress: int | None = None) -> None:
        super().__init__(message)
        self.progress = progress

    def payload(self) -> dict:
        body = super().payload()
        if self.progress is not None:
            body["progress"] = self.progress
        return body


class PayloadTooLargeError(AppError):
    status_code = 413
    default_message = "upload too large"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "conflicting update, retry the request"


class StoreError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "internal server error"


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path", "form"))
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error_handler(_: Request, exc: AppError) -> ORJSONResponse:
        if isinstance(exc, StoreError):
            logger.error("Store failure: %s", exc.message)
        return ORJSONResponse(status_code=exc.status_code, content=exc.payload())

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(_: Request, exc: RequestValidationError) -> ORJSONResponse:
        return ORJSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": _validation_message(exc)})

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(_: Request, exc: HTTPException) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def _store_error_handler(request: Request, exc: SQLAlchemyError) -> ORJSONResponse:
        logger.exception("Unhandled database error on %s %s", request.method, request.url.path, exc_info=exc)
        error = StoreError()
        return ORJSONResponse(status_code=error.status_code, content=error.payload())

    @app.exception_handler(Exception)
    async def _unexpected_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        error = StoreError()
        return ORJSONResponse(status_code=error.status_code, content=error.payload())
