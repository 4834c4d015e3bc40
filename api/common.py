import logging
from collections.abc import Awaitable

from fastapi import Request

from api.generate.schemas import ResultResponse
from errors import AppError, UpstreamError
from gemini_chat import GeminiClient

logger = logging.getLogger(__name__)


def get_gemini_client(request: Request) -> GeminiClient:
    return request.app.state.gemini_client


async def relay(route: str, call: Awaitable[str]) -> ResultResponse:
    """Await an upstream call and wrap its text, mapping failures to a 500.

    Validation and media errors raised inside ``call`` pass through untouched.
    """
    try:
        return ResultResponse(result=await call)
    except AppError as exc:
        if isinstance(exc, UpstreamError):
            logger.error("Error in %s: %s", route, exc.message)
        raise
    except Exception as exc:
        logger.exception("Error in %s", route)
        raise UpstreamError(str(exc) or "Internal error") from exc
