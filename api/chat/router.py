from typing import Any

from fastapi import APIRouter, Body, Depends

from api.common import get_gemini_client, relay
from api.generate.schemas import ErrorResponse, ResultResponse
from gemini_chat import GeminiClient
from .service import chat as chat_service

router = APIRouter(prefix="/api")


@router.post(
    "/chat",
    response_model=ResultResponse,
    responses={code: {"model": ErrorResponse} for code in (400, 413, 500)},
)
async def chat_route(
    body: Any = Body(default=None),
    client: GeminiClient = Depends(get_gemini_client),
) -> ResultResponse:
    return await relay("chat", chat_service(client, body))
