"""Sliding context window sent upstream with each request."""

from __future__ import annotations

from collections.abc import Sequence

from chatrelay.memory.turns import Turn

DEFAULT_WINDOW_SIZE = 6  # three user/assistant exchanges


def build_context_window(
    history: Sequence[Turn],
    message: str,
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> list[Turn]:
    """Return the most recent ``window_size`` turns followed by the new user turn.

    The stored history is left untouched; truncation only affects what is sent
    for this request.
    """
    if window_size < 0:
        raise ValueError(f"window_size must be >= 0, got {window_size}")
    recent = list(history[-window_size:]) if window_size > 0 else []
    return recent + [Turn.user(message)]
