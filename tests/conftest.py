from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import Settings


class FakeGeminiClient:
    """Records what the routes send upstream and replies with canned text."""

    def __init__(self, reply: str = "Hello test", error: Exception | None = None) -> None:
        self.model_name = "gemini-test"
        self.reply = reply
        self.error = error
        self.part_calls: list[list] = []
        self.chat_calls: list[tuple] = []

    async def generate_from_parts(self, parts):
        self.part_calls.append(list(parts))
        if self.error is not None:
            raise self.error
        return self.reply

    async def generate_chat(self, turns, instruction=None):
        self.chat_calls.append((list(turns), instruction))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    static_dir = tmp_path / "public"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<h1>gateway</h1>", encoding="utf-8")
    (static_dir / "app.js").write_text("console.log('hi');", encoding="utf-8")
    return Settings(api_key="test-key", model_name="gemini-test", static_dir=static_dir)


@pytest.fixture
def fake_client() -> FakeGeminiClient:
    return FakeGeminiClient()


@pytest.fixture
def test_client(settings: Settings, fake_client: FakeGeminiClient) -> TestClient:
    return TestClient(create_app(settings, client=fake_client))
