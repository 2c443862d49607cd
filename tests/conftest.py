"""Shared fixtures for chatrelay tests."""

from __future__ import annotations

import asyncio

import pytest

from chatrelay.ai.providers.base import BaseProvider, ProviderError
from chatrelay.core.config import RelayConfig
from chatrelay.core.orchestrator import SessionOrchestrator
from chatrelay.memory.history_store import HistoryStore


class FakeProvider(BaseProvider):
    """Upstream double that echoes the last message and records every call."""

    def __init__(
        self,
        reply: str | None = None,
        error: str | None = None,
        delay: float = 0.0,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.reply = reply
        self.error = error
        self.delay = delay
        self.gate = gate
        self.calls: list[list[dict]] = []
        self.closed = False

    def is_available(self) -> bool:
        return True

    async def generate(self, messages, model, max_tokens=None, temperature=None):  # noqa: ANN001, ANN201
        self.calls.append(messages)
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise ProviderError(self.error)
        if self.reply is not None:
            return self.reply
        return f"re: {messages[-1]['content']}"

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def config() -> RelayConfig:
    return RelayConfig()


@pytest.fixture
def store() -> HistoryStore:
    return HistoryStore()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def orchestrator(store, provider, config) -> SessionOrchestrator:
    return SessionOrchestrator(store=store, provider=provider, config=config)
