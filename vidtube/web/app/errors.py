"""
API error taxonomy and the boundary translator that renders errors as envelopes.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException

from .responses import ApiResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Something went wrong"

    def __init__(self, message: str = None, data=None):
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)

    def to_envelope(self) -> ApiResponse:
        return ApiResponse(self.status_code, self.data, self.message)


class InvalidIdentifier(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid identifier"


class InvalidInput(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized request"


class Forbidden(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to perform this action"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class UploadFailed(ApiError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upload to media host failed"


class ExternalDeleteFailed(ApiError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Delete on media host failed"


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Something went wrong"


async def api_error_handler(request: Request, exc: ApiError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return exc.to_envelope().to_response()


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return ApiResponse(exc.status_code, None, message).to_response()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ApiResponse(
        status.HTTP_400_BAD_REQUEST,
        jsonable_encoder(exc.errors()),
        "Invalid request payload"
    ).to_response()


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return InternalError().to_envelope().to_response()


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
