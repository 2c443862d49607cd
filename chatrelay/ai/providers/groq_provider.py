"""Groq API provider implementation."""

from __future__ import annotations

from groq import APIError, APITimeoutError, AsyncGroq, RateLimitError

from chatrelay.ai.providers.base import BaseProvider, ProviderError


class GroqProvider(BaseProvider):
    """Completion provider backed by the Groq API."""

    def __init__(self, api_key: str | None = None, timeout: float = 60.0) -> None:
        self._client: AsyncGroq | None = (
            AsyncGroq(api_key=api_key, timeout=timeout, max_retries=0) if api_key else None
        )

    def is_available(self) -> bool:
        return self._client is not None

    async def generate(
        self,
        messages: list[dict],
        model: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        if not self._client:
            raise ProviderError("GROQ_API_KEY is not set. Cannot call Groq API.")
        extra: dict = {}
        if max_tokens is not None:
            extra["max_tokens"] = max_tokens
        if temperature is not None:
            extra["temperature"] = temperature
        try:
            completion = await self._client.chat.completions.create(
                model=model,
                messages=messages,  # type: ignore[arg-type]
                stream=False,
                **extra,
            )
        except RateLimitError as exc:
            raise ProviderError("Groq rate limit reached. Please wait a moment.") from exc
        except APITimeoutError as exc:
            raise ProviderError("Groq request timed out") from exc
        except APIError as exc:
            raise ProviderError(f"Groq API error: {exc}") from exc

        if not completion.choices:
            raise ProviderError("Groq response has no choices")
        return completion.choices[0].message.content or ""

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
