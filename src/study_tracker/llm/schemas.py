"""Shared schemas for LLM infrastructure."""

from datetime import datetime

from pydantic import BaseModel, Field


class LLMRequest(BaseModel):
    """Input for LLM call."""

    prompt: str
    system_prompt: str | None = None
    model: str = ""  # providers fall back to their default_model
    temperature: float = 0.7
    max_tokens: int = 8192
    action: str = ""  # chat, hint, feedback, code_review, ...


class LLMResponse(BaseModel):
    """Unified response from an LLM provider."""

    content: str
    provider: str
    model_id: str
    tokens_in: int | None = None
    tokens_out: int | None = None
    latency_ms: int = 0
    action: str = ""
    finished_at: datetime = Field(default_factory=datetime.now)
