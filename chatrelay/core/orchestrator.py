"""Session orchestrator: connects the history store, context window and provider."""

from __future__ import annotations

import asyncio
import time

import structlog

from chatrelay.ai.providers.base import BaseProvider, ProviderError
from chatrelay.core.config import RelayConfig
from chatrelay.core.errors import (
    ChatFailure,
    ChatReply,
    ChatResult,
    ClearResult,
    DebugSnapshot,
    ErrorKind,
)
from chatrelay.memory.context_window import build_context_window
from chatrelay.memory.history_store import HistoryStore
from chatrelay.memory.turns import Turn

logger = structlog.get_logger()


class SessionOrchestrator:
    """Handles one chat turn end-to-end.

    Holds no state of its own between calls; all conversation state lives in
    the injected :class:`HistoryStore`. The upstream call is made without any
    store lock held, and the store is only written once a reply is in hand.
    """

    def __init__(
        self,
        store: HistoryStore,
        provider: BaseProvider,
        config: RelayConfig | None = None,
    ) -> None:
        self._store = store
        self._provider = provider
        self._config = config or RelayConfig()

    @property
    def store(self) -> HistoryStore:
        return self._store

    @property
    def provider(self) -> BaseProvider:
        return self._provider

    def resolve_user_id(self, user_id: str | None) -> str:
        """Return the user id as given, or the anonymous id when blank."""
        if user_id is None or not user_id.strip():
            return self._config.history.anonymous_user_id
        return user_id

    async def handle_chat(self, user_id: str | None, message: str | None) -> ChatResult:
        """Send ``message`` upstream with recent context and record the exchange.

        Returns a :class:`ChatReply` on success. Any failure is returned as a
        :class:`ChatFailure` and leaves the user's history exactly as it was.
        """
        uid = self.resolve_user_id(user_id)
        if message is None or not message.strip():
            return ChatFailure(ErrorKind.INVALID_INPUT, "Message must not be empty")

        log = logger.bind(user_id=uid)
        history = self._store.get(uid)
        window = build_context_window(history, message, self._config.history.window_size)
        upstream = self._config.upstream

        start = time.monotonic()
        try:
            reply = await asyncio.wait_for(
                self._provider.generate(
                    messages=[turn.to_message() for turn in window],
                    model=upstream.model,
                    max_tokens=upstream.max_tokens,
                    temperature=upstream.temperature,
                ),
                timeout=upstream.timeout,
            )
        except asyncio.TimeoutError:
            log.warning("upstream_timeout", timeout=upstream.timeout)
            return ChatFailure(
                ErrorKind.UPSTREAM_ERROR,
                f"Request failed: upstream did not respond within {upstream.timeout:g}s",
            )
        except ProviderError as exc:
            log.warning("upstream_failed", error=str(exc))
            return ChatFailure(ErrorKind.UPSTREAM_ERROR, f"Request failed: {exc}")
        elapsed = time.monotonic() - start

        if not isinstance(reply, str) or not reply.strip():
            log.warning("upstream_empty_reply")
            return ChatFailure(ErrorKind.UPSTREAM_ERROR, "Request failed: upstream returned no reply")

        window_user_turn = window[-1]
        count = await self._store.append(uid, window_user_turn, Turn.assistant(reply))
        log.info(
            "chat_completed",
            context_turns=len(window),
            message_chars=len(message),
            reply_chars=len(reply),
            history_count=count,
            elapsed=round(elapsed, 3),
        )
        return ChatReply(reply=reply, user_id=uid, history_count=count)

    def clear_history(self, user_id: str) -> ClearResult:
        """Drop a user's stored conversation."""
        if self._store.clear(user_id):
            return ClearResult(True, user_id, f"History for user {user_id} cleared")
        return ClearResult(
            False,
            user_id,
            f"No history stored for user {user_id}",
            kind=ErrorKind.NOT_FOUND,
        )

    def debug_snapshot(self) -> DebugSnapshot:
        counts = self._store.snapshot()
        return DebugSnapshot(total_users=len(counts), per_user_counts=counts)
