import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic_core import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.responses import ErrorResponse
from app.services.errors import (
    BaseServiceError,
    ConflictError,
    NotAuthenticatedError,
    NotFoundError,
    PermissionDeniedError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)

FRIENDLY_MESSAGES = {
    400: "The request data is invalid",
    401: "You are not authenticated. Please log in to continue",
    403: "You don't have permission to access this resource",
    404: "The requested resource was not found",
    405: "Method not allowed",
    409: "This resource already exists",
    422: "The provided data could not be processed",
    429: "Too many requests. Please try again later",
}
SERVER_ERROR_MESSAGE = "Something went wrong. Please try again later"


def friendly_message(status_code: int) -> str:
    if 400 <= status_code < 500:
        return FRIENDLY_MESSAGES.get(status_code, "Invalid request")
    return SERVER_ERROR_MESSAGE


def error_response(
    request: Request,
    status_code: int,
    message: str,
    errors: list[Any] | None = None,
    exc: BaseException | None = None,
) -> JSONResponse:
    if status_code >= 500:
        logger.error(
            "%s %s - %s - %s",
            request.method,
            request.url.path,
            status_code,
            message,
            exc_info=exc,
        )
    else:
        logger.warning("%s %s - %s - %s", request.method, request.url.path, status_code, message)
    payload = ErrorResponse(message=message, errors=errors)
    return JSONResponse(
        payload.model_dump(mode="json", exclude_none=True), status_code=status_code
    )


def format_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    grouped: dict[str, list[str]] = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        grouped.setdefault(".".join(location) or "request", []).append(error["msg"])
    return [{"field": field, "errors": messages} for field, messages in grouped.items()]


class DetailJsonExceptionHandler:
    def __init__(self, status_code: int):
        self.status_code = status_code

    async def __call__(self, request: Request, exc: BaseServiceError) -> JSONResponse:
        return error_response(
            request, self.status_code, exc.detail, getattr(exc, "errors", None)
        )


async def validation_error_exception_handler(
    request: Request, exc: RequestValidationError | ValidationError
) -> JSONResponse:
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        friendly_message(status.HTTP_400_BAD_REQUEST),
        format_validation_errors(list(exc.errors())),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else friendly_message(exc.status_code)
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = friendly_message(exc.status_code)
    response = error_response(request, exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def integrity_error_exception_handler(
    request: Request, exc: IntegrityError | StaleDataError
) -> JSONResponse:
    logger.warning("Database conflict: %s", exc)
    return error_response(
        request, status.HTTP_409_CONFLICT, friendly_message(status.HTTP_409_CONFLICT)
    )


def unhandled_exception_handler(debug: bool):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        errors = None
        if debug:
            errors = [str(exc), *traceback.format_exception(exc)]
        return error_response(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE, errors, exc
        )

    return handler


def register_exception_handlers(app: FastAPI, debug: bool = False):
    app.add_exception_handler(
        PermissionDeniedError, DetailJsonExceptionHandler(status.HTTP_403_FORBIDDEN)
    )
    app.add_exception_handler(
        NotAuthenticatedError, DetailJsonExceptionHandler(status.HTTP_401_UNAUTHORIZED)
    )
    app.add_exception_handler(
        NotFoundError, DetailJsonExceptionHandler(status.HTTP_404_NOT_FOUND)
    )
    app.add_exception_handler(
        ConflictError, DetailJsonExceptionHandler(status.HTTP_409_CONFLICT)
    )
    app.add_exception_handler(
        ServiceUnavailableError,
        DetailJsonExceptionHandler(status.HTTP_503_SERVICE_UNAVAILABLE),
    )
    app.add_exception_handler(
        BaseServiceError, DetailJsonExceptionHandler(status.HTTP_400_BAD_REQUEST)
    )
    app.add_exception_handler(RequestValidationError, validation_error_exception_handler)
    app.add_exception_handler(ValidationError, validation_error_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_exception_handler)
    app.add_exception_handler(StaleDataError, integrity_error_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler(debug))
