import base64
import logging
from collections.abc import Sequence
from typing import Any

from google import genai
from google.genai import types

from api.chat.schemas import ConversationTurn
from config import Settings
from errors import UpstreamError
from normalizer import InlinePart, Part, TextPart

logger = logging.getLogger(__name__)


def to_genai_part(part: Part) -> types.Part:
    if isinstance(part, TextPart):
        return types.Part.from_text(text=part.text)
    if isinstance(part, InlinePart):
        return types.Part.from_bytes(data=base64.b64decode(part.data), mime_type=part.mime_type)
    raise TypeError(f"Unsupported part type: {type(part).__name__}")


def to_genai_contents(turns: Sequence[ConversationTurn]) -> list[types.Content]:
    return [types.Content(role=turn.role, parts=[types.Part.from_text(text=turn.text)]) for turn in turns]


def extract_result_text(response: Any) -> str:
    """Return ``response.text``, or ``response.output`` when ``text`` is absent.

    Which of the two fields the SDK fills has varied between releases, so
    both are tried in order rather than assuming one.
    """
    for field in ("text", "output"):
        value = getattr(response, field, None)
        if isinstance(value, str):
            return value
    raise UpstreamError("Gemini response did not contain any text output")


class GeminiClient:
    def __init__(self, api_key: str, model_name: str) -> None:
        self.model_name = model_name
        self._client = genai.Client(api_key=api_key)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(api_key=settings.api_key, model_name=settings.model_name)

    async def _generate(self, contents: list[types.Content], config: types.GenerateContentConfig | None = None) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=config,
            )
        except Exception as exc:
            logger.error("Gemini request failed for model=%s: %s", self.model_name, exc)
            raise
        text = extract_result_text(response)
        logger.info("Gemini response received model=%s resp_len=%d", self.model_name, len(text))
        logger.debug("Response preview: %s", text[:1000])
        return text

    async def generate_from_parts(self, parts: Sequence[Part]) -> str:
        inline_bytes = sum(len(part.data) for part in parts if isinstance(part, InlinePart))
        logger.info(
            "Calling Gemini model=%s parts=%d inline_b64_len=%d",
            self.model_name,
            len(parts),
            inline_bytes,
        )
        contents = [types.Content(role="user", parts=[to_genai_part(part) for part in parts])]
        return await self._generate(contents)

    async def generate_chat(self, turns: Sequence[ConversationTurn], instruction: str | None = None) -> str:
        logger.info(
            "Calling Gemini chat model=%s turns=%d instruction_provided=%s",
            self.model_name,
            len(turns),
            bool(instruction),
        )
        config = types.GenerateContentConfig(system_instruction=instruction) if instruction else None
        return await self._generate(to_genai_contents(turns), config=config)
