"""Tests for StudyAssistant prompt wiring and model tiers."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from study_tracker.agents.assistant import (
    DEFAULT_TEMPERATURE,
    PRO_TEMPERATURE,
    ChatMessage,
    StudyAssistant,
    create_assistant,
)
from study_tracker.config import Settings
from study_tracker.llm.schemas import LLMRequest, LLMResponse


@pytest.fixture()
def provider() -> AsyncMock:
    provider = AsyncMock()
    provider.complete.return_value = LLMResponse(
        content="Try two pointers.", provider="gemini", model_id="m"
    )
    return provider


@pytest.fixture()
def assistant(provider: AsyncMock) -> StudyAssistant:
    return StudyAssistant(provider, pro_model="gemini-pro-test")


def sent_request(provider: AsyncMock) -> LLMRequest:
    return provider.complete.await_args.args[0]


class TestChat:
    async def test_renders_conversation(
        self, assistant: StudyAssistant, provider: AsyncMock
    ) -> None:
        reply = await assistant.chat(
            [
                ChatMessage(role="user", content="What is a heap?"),
                ChatMessage(role="assistant", content="A tree."),
                ChatMessage(role="user", content="More?"),
            ]
        )

        assert reply == "Try two pointers."
        request = sent_request(provider)
        assert "user: What is a heap?\nassistant: A tree.\nuser: More?" in (
            request.prompt
        )
        assert request.action == "chat"
        assert request.model == ""
        assert request.temperature == DEFAULT_TEMPERATURE
        assert request.system_prompt and "FAANG" in request.system_prompt


class TestHint:
    async def test_with_attempt(
        self, assistant: StudyAssistant, provider: AsyncMock
    ) -> None:
        await assistant.hint("Two Sum", "nested loops")
        request = sent_request(provider)
        assert "Problem: Two Sum" in request.prompt
        assert "User's attempt: nested loops" in request.prompt

    async def test_without_attempt(
        self, assistant: StudyAssistant, provider: AsyncMock
    ) -> None:
        await assistant.hint("Two Sum")
        assert "User's attempt: None yet" in sent_request(provider).prompt


class TestFeedback:
    async def test_uses_pro_tier(
        self, assistant: StudyAssistant, provider: AsyncMock
    ) -> None:
        await assistant.feedback(
            {
                "total_lessons_completed": 12,
                "current_streak": 4,
                "total_hours_studied": 20.5,
            },
            "Graphs",
        )
        request = sent_request(provider)
        assert request.model == "gemini-pro-test"
        assert request.temperature == PRO_TEMPERATURE
        assert "Current topic: Graphs" in request.prompt
        assert "Progress: 12 lessons completed" in request.prompt
        assert "Streak: 4 days" in request.prompt
        assert "Hours studied: 20.5" in request.prompt

    async def test_missing_stats_default_to_zero(
        self, assistant: StudyAssistant, provider: AsyncMock
    ) -> None:
        await assistant.feedback({}, "Graphs")
        assert "Progress: 0 lessons completed" in sent_request(provider).prompt


class TestOtherCapabilities:
    async def test_code_review(
        self, assistant: StudyAssistant, provider: AsyncMock
    ) -> None:
        await assistant.code_review("def f(): return {}")
        request = sent_request(provider)
        assert "def f(): return {}" in request.prompt
        assert request.action == "code_review"
        assert request.model == ""

    async def test_explain_uses_pro(
        self, assistant: StudyAssistant, provider: AsyncMock
    ) -> None:
        await assistant.explain("Dijkstra")
        request = sent_request(provider)
        assert request.model == "gemini-pro-test"
        assert "Dijkstra" in request.prompt

    async def test_motivation_serializes_stats(
        self, assistant: StudyAssistant, provider: AsyncMock
    ) -> None:
        await assistant.motivation({"current_streak": 3})
        assert '{"current_streak": 3}' in sent_request(provider).prompt


class TestCreateAssistant:
    def test_none_without_key(self) -> None:
        assert create_assistant(Settings(_env_file=None)) is None  # type: ignore[call-arg]

    def test_built_with_key(self) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            gemini_api_key="g-key",  # type: ignore[arg-type]
        )
        with patch("study_tracker.llm.providers.gemini.genai.Client"):
            assistant = create_assistant(settings)
        assert isinstance(assistant, StudyAssistant)
