"""Select the upstream completion provider from configuration."""

from __future__ import annotations

from chatrelay.ai.providers.base import BaseProvider
from chatrelay.ai.providers.groq_provider import GroqProvider
from chatrelay.ai.providers.openai_compat_provider import OpenAICompatProvider
from chatrelay.core.config import UpstreamConfig


def create_provider(config: UpstreamConfig) -> BaseProvider:
    """Build the provider named by ``config.provider``."""
    if config.provider == "groq":
        return GroqProvider(api_key=config.api_key, timeout=config.timeout)
    if config.provider == "openai":
        return OpenAICompatProvider(
            api_url=config.api_url,
            api_key=config.api_key,
            timeout=config.timeout,
        )
    raise ValueError(f"Unknown upstream provider: {config.provider!r}")
