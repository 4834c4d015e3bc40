from typing import Literal

from pydantic import BaseModel, Field, StrictStr, field_validator


class ConversationTurn(BaseModel):
    role: Literal["user", "model"] = Field(..., description="Who produced the turn")
    text: StrictStr = Field(..., description="Turn text, sent as a single text part")

    @field_validator("text")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text must not be empty")
        return value


class ChatRequest(BaseModel):
    conversation: list[ConversationTurn] = Field(..., min_length=1, description="Ordered conversation turns")
    instruction: StrictStr | None = Field(default=None, description="Optional system instruction")

    @field_validator("instruction")
    @classmethod
    def _clean_instruction(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None
