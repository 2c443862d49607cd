"""Abstract base class for upstream completion providers."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ProviderError(Exception):
    """Raised when an upstream completion call fails for any reason."""


class BaseProvider(ABC):
    """Abstract base class that all completion providers must implement."""

    @abstractmethod
    async def generate(
        self,
        messages: list[dict],
        model: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """Generate a full reply from the upstream service.

        Args:
            messages: List of OpenAI-format message dicts with 'role' and 'content'.
            model: Model identifier to use.
            max_tokens: Maximum tokens in the reply, or None for the upstream default.
            temperature: Sampling temperature, or None for the upstream default.

        Returns:
            The reply text. May be empty if the upstream produced no content.

        Raises:
            ProviderError: On transport errors, error payloads or malformed responses.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if this provider is properly configured and ready."""

    async def aclose(self) -> None:
        """Release any network resources held by the provider."""
