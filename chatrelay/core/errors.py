"""Typed results returned by the session orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    UPSTREAM_ERROR = "upstream_error"
    NOT_FOUND = "not_found"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ChatReply:
    """A successful chat completion."""

    reply: str
    user_id: str
    history_count: int
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ChatFailure:
    """A chat request that failed; history was not mutated."""

    kind: ErrorKind
    message: str
    timestamp: datetime = field(default_factory=_now)
    ok: bool = field(default=False, init=False)


ChatResult = ChatReply | ChatFailure


@dataclass(frozen=True)
class ClearResult:
    cleared: bool
    user_id: str
    message: str
    kind: ErrorKind | None = None


@dataclass(frozen=True)
class DebugSnapshot:
    total_users: int
    per_user_counts: dict[str, int]
    server_time: datetime = field(default_factory=_now)
