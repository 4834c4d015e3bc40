from fastapi import UploadFile

from gemini_chat import GeminiClient
from normalizer import normalize_attachment_request, normalize_text_request
from utils import read_upload


async def generate_text(client: GeminiClient, body: object) -> str:
    parts = normalize_text_request(body)
    return await client.generate_from_parts(parts)


async def generate_from_attachment(
    client: GeminiClient,
    kind: str,
    prompt: str | None,
    upload: UploadFile | None,
) -> str:
    attachment = await read_upload(upload)
    parts = normalize_attachment_request(kind, prompt, attachment)
    return await client.generate_from_parts(parts)
