"""Turn raw request data into the ordered parts sent to Gemini.

Nothing in here performs I/O: the functions validate, trim and re-shape what
the HTTP layer hands them, raising the typed errors from :mod:`errors`.
"""

import base64
from dataclasses import dataclass
from typing import Any, Union

from pydantic import ValidationError as PydanticValidationError

from api.chat.schemas import ChatRequest, ConversationTurn
from api.generate.schemas import TextGenerationRequest
from errors import UnsupportedMediaError, ValidationError, describe_errors

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MAX_JSON_BYTES = 2 * 1024 * 1024

ALLOWED_MIME_TYPES: dict[str, tuple[str, ...]] = {
    "image": ("image/png", "image/jpeg", "image/webp", "image/gif"),
    "document": (
        "application/pdf",
        "text/plain",
        "text/markdown",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ),
    "audio": ("audio/webm", "audio/wav", "audio/mpeg", "audio/mp4", "audio/ogg", "audio/opus"),
}


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class InlinePart:
    data: str  # base64
    mime_type: str


Part = Union[TextPart, InlinePart]


@dataclass(frozen=True)
class UploadedFile:
    data: bytes
    mime_type: str
    filename: str | None = None

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ChatPayload:
    conversation: tuple[ConversationTurn, ...]
    instruction: str | None = None


def _validate(model, body: Any):
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return model.model_validate(body)
    except PydanticValidationError as exc:
        raise ValidationError(describe_errors(exc.errors())) from exc


def _base_mime_type(value: str | None) -> str:
    return (value or "").split(";", 1)[0].strip().lower()


def normalize_text_request(body: Any) -> list[Part]:
    request = _validate(TextGenerationRequest, body)
    return [TextPart(request.prompt)]


def normalize_attachment_request(kind: str, prompt: str | None, upload: UploadedFile | None) -> list[Part]:
    """Build ``[TextPart?, InlinePart]`` for an image, document or audio route.

    The missing-file check runs before the MIME check; the text part is only
    included for a prompt that is non-empty after trimming.
    """
    allowed = ALLOWED_MIME_TYPES[kind]
    if upload is None:
        raise ValidationError(f"{kind.capitalize()} file is required (form field '{kind}')")

    mime_type = _base_mime_type(upload.mime_type)
    if mime_type not in allowed:
        raise UnsupportedMediaError(
            f"Unsupported {kind} type: {upload.mime_type or 'unknown'}. Allowed types: {', '.join(allowed)}"
        )

    parts: list[Part] = []
    cleaned_prompt = (prompt or "").strip()
    if cleaned_prompt:
        parts.append(TextPart(cleaned_prompt))
    parts.append(InlinePart(base64.b64encode(upload.data).decode("ascii"), mime_type))
    return parts


def normalize_chat_request(body: Any) -> ChatPayload:
    request = _validate(ChatRequest, body)
    return ChatPayload(conversation=tuple(request.conversation), instruction=request.instruction)
