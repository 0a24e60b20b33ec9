"""LLM provider implementations.

PROVIDER_REGISTRY maps provider names to their implementation
classes. A new provider needs a module here, an entry below and a
matching entry in ``factory.PROVIDER_CONFIGS``.
"""

from study_tracker.llm.providers.base import LLMProvider
from study_tracker.llm.providers.gemini import GeminiProvider

PROVIDER_REGISTRY: dict[str, type[LLMProvider]] = {
    "gemini": GeminiProvider,
}

__all__ = [
    "PROVIDER_REGISTRY",
    "GeminiProvider",
    "LLMProvider",
]
