from __future__ import annotations

import asyncio
import base64
import logging
from types import SimpleNamespace

import pytest
from google.genai import types

from api.chat.schemas import ConversationTurn
from errors import UpstreamError
from gemini_chat import GeminiClient, extract_result_text, to_genai_contents, to_genai_part
from normalizer import InlinePart, TextPart


class _FakeModels:
    def __init__(self, response) -> None:
        self.response = response
        self.calls: list[dict] = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _client_with(response) -> tuple[GeminiClient, _FakeModels]:
    client = GeminiClient(api_key="test-key", model_name="gemini-test")
    models = _FakeModels(response)
    client._client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return client, models


def test_extract_prefers_text_field() -> None:
    assert extract_result_text(SimpleNamespace(text="from text", output="from output")) == "from text"


def test_extract_falls_back_to_output() -> None:
    assert extract_result_text(SimpleNamespace(text=None, output="from output")) == "from output"
    assert extract_result_text(SimpleNamespace(output="only output")) == "only output"


def test_extract_without_text_or_output_raises() -> None:
    with pytest.raises(UpstreamError):
        extract_result_text(SimpleNamespace(text=None))


def test_text_part_conversion() -> None:
    part = to_genai_part(TextPart("hello"))
    assert part.text == "hello"


def test_inline_part_conversion_decodes_base64() -> None:
    part = to_genai_part(InlinePart(base64.b64encode(b"abc").decode("ascii"), "image/png"))
    assert part.inline_data.data == b"abc"
    assert part.inline_data.mime_type == "image/png"


def test_conversation_conversion_keeps_order_and_roles() -> None:
    contents = to_genai_contents(
        [ConversationTurn(role="user", text="Hi"), ConversationTurn(role="model", text="Hello")]
    )
    assert [c.role for c in contents] == ["user", "model"]
    assert [c.parts[0].text for c in contents] == ["Hi", "Hello"]


def test_generate_from_parts_sends_single_user_content() -> None:
    client, models = _client_with(SimpleNamespace(text="done"))

    result = asyncio.run(
        client.generate_from_parts([TextPart("describe"), InlinePart(base64.b64encode(b"x").decode("ascii"), "image/gif")])
    )

    assert result == "done"
    call = models.calls[0]
    assert call["model"] == "gemini-test"
    assert call["config"] is None
    (content,) = call["contents"]
    assert content.role == "user"
    assert content.parts[0].text == "describe"
    assert content.parts[1].inline_data.mime_type == "image/gif"


def test_generate_chat_passes_system_instruction() -> None:
    client, models = _client_with(SimpleNamespace(text=None, output="chat reply"))

    result = asyncio.run(client.generate_chat([ConversationTurn(role="user", text="Hi")], instruction="Be terse"))

    assert result == "chat reply"
    config = models.calls[0]["config"]
    assert isinstance(config, types.GenerateContentConfig)
    assert config.system_instruction == "Be terse"


def test_upstream_exception_propagates() -> None:
    client, _ = _client_with(RuntimeError("boom"))

    with pytest.raises(RuntimeError, match="boom"):
        asyncio.run(client.generate_from_parts([TextPart("hi")]))


def test_upstream_exception_logged_without_traceback(caplog) -> None:
    client, _ = _client_with(RuntimeError("boom"))
    caplog.set_level(logging.INFO, logger="gemini_chat")

    with pytest.raises(RuntimeError):
        asyncio.run(client.generate_from_parts([TextPart("hi")]))

    (record,) = [r for r in caplog.records if r.name == "gemini_chat" and r.levelno == logging.ERROR]
    assert "model=gemini-test" in record.getMessage()
    assert "boom" in record.getMessage()
    assert record.exc_info is None
