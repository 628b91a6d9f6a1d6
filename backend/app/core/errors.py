# app/core/errors.py
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from app.logging_utils import get_logger

log = get_logger(__name__)


class ApiError(Exception):
    """Error that maps directly onto an `{"error": ...}` response."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ConfigurationError(ApiError):
    status_code = HTTP_400_BAD_REQUEST


class InvalidUpload(ApiError):
    status_code = HTTP_400_BAD_REQUEST
    message = "No audio file received"


class ProcessingFailed(ApiError):
    message = "Failed to process session"


class StageFailed(Exception):
    """A fatal pipeline stage raised; no record is stored."""

    def __init__(self, stage: str) -> None:
        self.stage = stage
        super().__init__(f"pipeline stage '{stage}' failed")


class TranscriptionFailed(StageFailed):
    def __init__(self) -> None:
        super().__init__("transcribe")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def api_error_handler(request: Request, exc: ApiError):
    log.warning(
        "ApiError",
        extra={"path": request.url.path, "status": exc.status_code, "error": exc.message},
    )
    return error_response(exc.status_code, exc.message)


async def generic_exception_handler(request: Request, exc: Exception):
    # Never leak internals to the caller.
    log.error("Unhandled exception", extra={"path": request.url.path}, exc_info=exc)
    return error_response(HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
