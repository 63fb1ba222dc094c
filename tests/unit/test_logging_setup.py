"""Unit tests for logging configuration."""
from __future__ import annotations

import logging

import pytest

from chain_ownership.logging_setup import configure_logging


def _record(name: str, level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


class TestConfigureLogging:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("WARNING", logging.WARNING), ("debug", logging.DEBUG), ("Error", logging.ERROR)],
    )
    def test_level_names_are_case_insensitive(self, name: str, expected: int) -> None:
        configure_logging(name)
        assert logging.getLogger().level == expected

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging("VERBOSE")
        assert logging.getLogger().level == logging.INFO

    def test_line_format(self) -> None:
        configure_logging("INFO")
        (handler,) = logging.getLogger().handlers

        line = handler.format(_record("chain_ownership.resolver", logging.WARNING, "L2: lagging"))

        assert line.endswith("WARNING  chain_ownership.resolver - L2: lagging")

    def test_reconfiguring_replaces_handler(self) -> None:
        configure_logging("INFO")
        configure_logging("DEBUG")

        assert len(logging.getLogger().handlers) == 1
        assert logging.getLogger().level == logging.DEBUG

    def test_aiohttp_stays_quiet_at_debug(self) -> None:
        configure_logging("DEBUG")
        assert not logging.getLogger("aiohttp.client").isEnabledFor(logging.INFO)
