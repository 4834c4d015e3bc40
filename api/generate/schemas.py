from pydantic import BaseModel, Field, StrictStr, field_validator


class TextGenerationRequest(BaseModel):
    prompt: StrictStr = Field(..., description="Prompt to send to Gemini")

    @field_validator("prompt")
    @classmethod
    def _strip_prompt(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("prompt must not be empty")
        return cleaned


class ResultResponse(BaseModel):
    result: str


class ErrorResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    ok: bool = True
    model: str
