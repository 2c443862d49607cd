"""Tests for turns and the sliding context window."""

from __future__ import annotations

import pytest

from chatrelay.memory.context_window import DEFAULT_WINDOW_SIZE, build_context_window
from chatrelay.memory.turns import Role, Turn


def _history(*contents: str) -> list[Turn]:
    return [
        Turn.user(c) if i % 2 == 0 else Turn.assistant(c) for i, c in enumerate(contents)
    ]


class TestTurn:
    def test_to_message(self):
        assert Turn.user("hi").to_message() == {"role": "user", "content": "hi"}
        assert Turn.assistant("yo").to_message() == {"role": "assistant", "content": "yo"}

    def test_is_immutable(self):
        turn = Turn(Role.USER, "hi")
        with pytest.raises(AttributeError):
            turn.content = "changed"  # type: ignore[misc]


class TestBuildContextWindow:
    def test_empty_history_is_just_the_new_message(self):
        window = build_context_window([], "hello")
        assert window == [Turn.user("hello")]

    @pytest.mark.parametrize("length", [0, 1, 5, 6, 7, 12])
    def test_length_is_capped(self, length):
        history = _history(*(f"m{i}" for i in range(length)))
        window = build_context_window(history, "new")
        assert len(window) == min(length, DEFAULT_WINDOW_SIZE) + 1

    def test_eight_turn_history_keeps_last_six(self):
        history = _history("a", "b", "c", "d", "e", "f", "g", "h")
        window = build_context_window(history, "i")

        assert [t.content for t in window] == ["c", "d", "e", "f", "g", "h", "i"]
        assert window[0].role is Role.USER
        assert window[-1] == Turn.user("i")

    def test_history_is_not_truncated(self):
        history = _history("a", "b", "c", "d", "e", "f", "g", "h")
        build_context_window(history, "i")
        assert len(history) == 8

    def test_custom_window_size(self):
        history = _history("a", "b", "c", "d")
        window = build_context_window(history, "e", window_size=2)
        assert [t.content for t in window] == ["c", "d", "e"]

    def test_zero_window_sends_only_new_message(self):
        window = build_context_window(_history("a", "b"), "c", window_size=0)
        assert window == [Turn.user("c")]

    def test_negative_window_rejected(self):
        with pytest.raises(ValueError):
            build_context_window([], "x", window_size=-1)

    def test_unbalanced_history_passes_through(self):
        history = [Turn.user("a"), Turn.user("b")]
        window = build_context_window(history, "c")
        assert [t.role for t in window] == [Role.USER, Role.USER, Role.USER]
