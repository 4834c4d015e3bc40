import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class PayloadTooLargeError(AppError):
    status_code = 413


class UnsupportedMediaError(AppError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE


class UpstreamError(AppError):
    """The inference call failed or returned something without text."""


def _format_loc(loc) -> str:
    text = ""
    for item in loc:
        if item == "body" and not text:
            continue
        if isinstance(item, int):
            text += f"[{item}]"
        else:
            text += f".{item}" if text else str(item)
    return text


def describe_errors(errors) -> str:
    """Render the first pydantic/FastAPI error entry as ``loc: msg``."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Malformed JSON body"
    loc = _format_loc(first.get("loc", ()))
    msg = first.get("msg") or "Invalid value"
    return f"{loc}: {msg}" if loc else msg


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code < 500:
        logger.warning(
            "Rejected %s %s status=%d: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await app_error_handler(request, ValidationError(describe_errors(exc.errors())))
