"""StudyAssistant: interview-prep help from an LLM.

Each capability is one YAML prompt under ``prompts/assistant/`` plus a
model tier. Longer-form answers (feedback, explanations) go to the
"pro" model with a slightly higher temperature.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any, Literal

import structlog
from pydantic import BaseModel

from study_tracker.agents.prompt_loader import (
    format_user_prompt,
    load_packaged_prompt,
)
from study_tracker.config import Settings
from study_tracker.llm.factory import create_providers
from study_tracker.llm.providers.base import LLMProvider
from study_tracker.llm.schemas import LLMRequest

logger = structlog.get_logger()

PROMPT_GROUP = "assistant"
DEFAULT_TEMPERATURE = 0.7
PRO_TEMPERATURE = 0.8
MAX_OUTPUT_TOKENS = 8192

ModelTier = Literal["default", "pro"]


class ChatMessage(BaseModel):
    role: str
    content: str


class StudyAssistant:
    """Generates hints, reviews, explanations and coaching.

    Args:
        provider: LLM provider used for every call.
        pro_model: Model id used for the "pro" tier; the default tier
            uses the provider's default model.
    """

    def __init__(self, provider: LLMProvider, *, pro_model: str) -> None:
        self._provider = provider
        self._pro_model = pro_model

    async def chat(self, messages: Iterable[ChatMessage]) -> str:
        """Continue a conversation rendered as ``role: content`` lines."""
        conversation = "\n".join(f"{m.role}: {m.content}" for m in messages)
        return await self._run("chat", conversation)

    async def hint(self, problem: str, user_attempt: str | None = None) -> str:
        return await self._run(
            "hint", problem, user_attempt=user_attempt or "None yet"
        )

    async def feedback(
        self, user_stats: Mapping[str, Any], current_topic: str
    ) -> str:
        """Personalized study recommendations for the current topic."""
        return await self._run(
            "feedback",
            current_topic,
            tier="pro",
            lessons_completed=str(user_stats.get("total_lessons_completed") or 0),
            current_streak=str(user_stats.get("current_streak") or 0),
            hours_studied=str(user_stats.get("total_hours_studied") or 0),
        )

    async def code_review(self, code: str) -> str:
        return await self._run("code_review", code)

    async def explain(self, concept: str) -> str:
        return await self._run("explain", concept, tier="pro")

    async def motivation(self, user_stats: Mapping[str, Any]) -> str:
        return await self._run(
            "motivation", json.dumps(dict(user_stats), default=str)
        )

    async def _run(
        self,
        name: str,
        context: str,
        *,
        tier: ModelTier = "default",
        **extras: str,
    ) -> str:
        prompt = load_packaged_prompt(PROMPT_GROUP, name)
        request = LLMRequest(
            prompt=format_user_prompt(prompt.user_prompt_template, context, **extras),
            system_prompt=prompt.system_prompt,
            model=self._pro_model if tier == "pro" else "",
            temperature=PRO_TEMPERATURE if tier == "pro" else DEFAULT_TEMPERATURE,
            max_tokens=MAX_OUTPUT_TOKENS,
            action=name,
        )
        response = await self._provider.complete(request)
        logger.info(
            "assistant_response",
            action=name,
            prompt_version=prompt.version,
            model=response.model_id,
            tokens_out=response.tokens_out,
            latency_ms=response.latency_ms,
        )
        return response.content


def create_assistant(settings: Settings) -> StudyAssistant | None:
    """Build the assistant, or None when no Gemini key is configured."""
    provider = create_providers(settings).get("gemini")
    if provider is None:
        return None
    return StudyAssistant(provider, pro_model=settings.gemini_pro_model)
