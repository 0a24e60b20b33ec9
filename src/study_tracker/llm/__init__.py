"""LLM infrastructure: provider interface, Gemini provider, factory.

Quick start::

    from study_tracker.config import get_settings
    from study_tracker.llm import LLMRequest, create_providers

    provider = create_providers(get_settings())["gemini"]
    response = await provider.complete(LLMRequest(prompt="Explain BFS"))
"""

from study_tracker.llm.factory import create_providers
from study_tracker.llm.providers import LLMProvider
from study_tracker.llm.schemas import LLMRequest, LLMResponse

__all__ = [
    "LLMProvider",
    "LLMRequest",
    "LLMResponse",
    "create_providers",
]
