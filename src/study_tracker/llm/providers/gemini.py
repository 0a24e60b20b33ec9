"""Google Gemini provider via google-genai SDK."""

import structlog
from google import genai
from google.genai import types

from study_tracker.llm.providers.base import LLMProvider
from study_tracker.llm.schemas import LLMRequest, LLMResponse

logger = structlog.get_logger()


class GeminiProvider(LLMProvider):
    """Gemini provider using the async google-genai client.

    ``request.model`` selects the model per call (the assistant uses a
    "pro" model for longer answers); an empty value means
    ``default_model``.
    """

    provider_name = "gemini"

    def __init__(self, api_key: str, default_model: str) -> None:
        self._client = genai.Client(api_key=api_key)
        self._default_model = default_model

    async def complete(self, request: LLMRequest) -> LLMResponse:
        """Generate text completion via Gemini."""
        model = request.model or self._default_model
        config = types.GenerateContentConfig(
            temperature=request.temperature,
            max_output_tokens=request.max_tokens,
            system_instruction=request.system_prompt,
        )

        with self._measure_latency() as timer:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=request.prompt,
                config=config,
            )

        usage = response.usage_metadata
        logger.debug(
            "llm_call_completed",
            provider=self.provider_name,
            model=model,
            action=request.action,
            latency_ms=timer.elapsed_ms,
        )
        return LLMResponse(
            content=response.text or "",
            provider=self.provider_name,
            model_id=model,
            tokens_in=usage.prompt_token_count if usage else None,
            tokens_out=usage.candidates_token_count if usage else None,
            latency_ms=timer.elapsed_ms,
            action=request.action,
        )
