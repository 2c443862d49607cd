"""Tests for logging setup."""

from __future__ import annotations

import logging

import pytest
import structlog

from chatrelay.core.logging import setup_logging


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


def test_level_filters_debug(capsys):
    setup_logging("INFO")
    log = structlog.get_logger("test")
    log.debug("hidden_event")
    log.info("shown_event", user_id="u1")

    err = capsys.readouterr().err
    assert "shown_event" in err
    assert "hidden_event" not in err


def test_unknown_level_falls_back_to_info():
    setup_logging("chatty")
    assert structlog.get_config()["wrapper_class"] is structlog.make_filtering_bound_logger(logging.INFO)
