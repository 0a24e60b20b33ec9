"""Provider factory -- creates providers based on available API keys."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import SecretStr

from study_tracker.config import Settings
from study_tracker.llm.providers import PROVIDER_REGISTRY, LLMProvider

logger = structlog.get_logger()


@dataclass(frozen=True)
class ProviderFactoryConfig:
    """Typed configuration for creating an LLM provider instance."""

    get_api_key: Callable[[Settings], SecretStr | None]
    get_default_model: Callable[[Settings], str]


PROVIDER_CONFIGS: dict[str, ProviderFactoryConfig] = {
    "gemini": ProviderFactoryConfig(
        get_api_key=lambda s: s.gemini_api_key,
        get_default_model=lambda s: s.gemini_default_model,
    ),
}


def create_providers(settings: Settings) -> dict[str, LLMProvider]:
    """Instantiate providers for all configured API keys.

    Returns dict: provider_name -> LLMProvider instance.
    Only providers with non-None API keys are created.
    """
    providers: dict[str, LLMProvider] = {}

    for name, provider_cls in PROVIDER_REGISTRY.items():
        config = PROVIDER_CONFIGS.get(name)
        if config is None:
            continue

        api_key_secret = config.get_api_key(settings)
        if api_key_secret is None:
            continue

        kwargs: dict[str, Any] = {
            "api_key": api_key_secret.get_secret_value(),
            "default_model": config.get_default_model(settings),
        }
        providers[name] = provider_cls(**kwargs)
        logger.info("llm_provider_registered", provider=name)

    if not providers:
        logger.warning("no_llm_providers_configured")

    return providers
