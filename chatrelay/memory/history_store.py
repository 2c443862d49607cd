"""In-memory per-user conversation history."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import structlog

from chatrelay.memory.turns import Turn

logger = structlog.get_logger()


@dataclass
class Session:
    """Ordered, append-only turn history for one user."""

    user_id: str
    turns: list[Turn] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)


class HistoryStore:
    """Maps user ids to their sessions.

    Reads return copies and take no lock. Appends are serialized per user, so
    concurrent writers for the same user never interleave while writers for
    different users never contend.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions

    def get(self, user_id: str) -> tuple[Turn, ...]:
        """Return the user's turns in chronological order (empty if unknown)."""
        session = self._sessions.get(user_id)
        if session is None:
            return ()
        return tuple(session.turns)

    async def append(self, user_id: str, *turns: Turn) -> int:
        """Append turns to the end of the user's history as one unit.

        Creates the session if absent. Returns the history length after the
        append.
        """
        while True:
            session = self._sessions.get(user_id)
            if session is None:
                session = self._sessions.setdefault(user_id, Session(user_id))
            async with session.lock:
                # A concurrent clear() may have dropped this session while we
                # waited for the lock; retry against the live one.
                if self._sessions.get(user_id) is not session:
                    continue
                session.turns.extend(turns)
                count = len(session.turns)
            logger.debug("history_appended", user_id=user_id, added=len(turns), total=count)
            return count

    def clear(self, user_id: str) -> bool:
        """Drop the user's session. Returns whether one existed."""
        existed = self._sessions.pop(user_id, None) is not None
        if existed:
            logger.info("history_cleared", user_id=user_id)
        return existed

    def snapshot(self) -> dict[str, int]:
        """Best-effort view of turn counts per user."""
        return {user_id: len(s.turns) for user_id, s in list(self._sessions.items())}
