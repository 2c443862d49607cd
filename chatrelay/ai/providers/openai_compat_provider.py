"""Provider for any OpenAI-compatible chat-completions endpoint."""

from __future__ import annotations

import httpx

from chatrelay.ai.providers.base import BaseProvider, ProviderError


class OpenAICompatProvider(BaseProvider):
    """Posts non-streaming chat-completion requests with a bearer key.

    Works against Zhipu, DeepSeek, OpenRouter and other services that speak
    the OpenAI ``/chat/completions`` dialect.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str | None = None,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_url = api_url
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def is_available(self) -> bool:
        return bool(self._api_key)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def generate(
        self,
        messages: list[dict],
        model: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        if not self._api_key:
            raise ProviderError("Upstream API key is not set. Cannot call the completion service.")
        payload: dict = {
            "model": model,
            "messages": messages,
            "stream": False,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        if temperature is not None:
            payload["temperature"] = temperature

        try:
            resp = await self._client.post(self._api_url, headers=self._headers(), json=payload)
        except httpx.TimeoutException as exc:
            raise ProviderError(f"Upstream request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"Upstream request failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.is_error:
            detail = _error_message(data) or resp.reason_phrase
            raise ProviderError(f"Upstream API error {resp.status_code}: {detail}")
        if not isinstance(data, dict):
            raise ProviderError("Upstream returned a non-JSON response")

        error = _error_message(data)
        if error is not None:
            raise ProviderError(f"Upstream returned an error: {error}")

        return _reply_text(data)

    async def aclose(self) -> None:
        await self._client.aclose()


def _error_message(data: object) -> str | None:
    """Return the ``error.message`` carried by an upstream payload, if any."""
    if not isinstance(data, dict) or "error" not in data:
        return None
    error = data["error"]
    if isinstance(error, dict):
        return str(error.get("message") or "unknown upstream error")
    return str(error)


def _reply_text(data: dict) -> str:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ProviderError("Upstream response has no choices")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        raise ProviderError("Upstream response choice has no message")
    content = message.get("content")
    if content is None:
        return ""
    if not isinstance(content, str):
        raise ProviderError("Upstream response has no usable reply")
    return content
