from typing import Any

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile

from api.common import get_gemini_client, relay
from api.generate.schemas import ErrorResponse, ResultResponse
from gemini_chat import GeminiClient
from .service import generate_from_attachment, generate_text

router = APIRouter()

ERROR_RESPONSES = {code: {"model": ErrorResponse} for code in (400, 413, 415, 500)}


@router.post("/generate-text", response_model=ResultResponse, responses=ERROR_RESPONSES)
async def generate_text_route(
    body: Any = Body(default=None),
    client: GeminiClient = Depends(get_gemini_client),
) -> ResultResponse:
    return await relay("generate-text", generate_text(client, body))


@router.post("/generate-image", response_model=ResultResponse, responses=ERROR_RESPONSES)
async def generate_image_route(
    prompt: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    client: GeminiClient = Depends(get_gemini_client),
) -> ResultResponse:
    return await relay("generate-image", generate_from_attachment(client, "image", prompt, image))


@router.post("/generate-from-document", response_model=ResultResponse, responses=ERROR_RESPONSES)
async def generate_from_document_route(
    prompt: str | None = Form(default=None),
    document: UploadFile | None = File(default=None),
    client: GeminiClient = Depends(get_gemini_client),
) -> ResultResponse:
    return await relay("generate-from-document", generate_from_attachment(client, "document", prompt, document))


@router.post("/generate-from-audio", response_model=ResultResponse, responses=ERROR_RESPONSES)
async def generate_from_audio_route(
    prompt: str | None = Form(default=None),
    audio: UploadFile | None = File(default=None),
    client: GeminiClient = Depends(get_gemini_client),
) -> ResultResponse:
    return await relay("generate-from-audio", generate_from_attachment(client, "audio", prompt, audio))
