"""Tests for the shared logging setup."""

from __future__ import annotations

import logging

import pytest

from gravefinder.logging import configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    configure_logging()


class TestConfigureLogging:
    def test_level_from_argument(self):
        configure_logging("DEBUG")
        assert logging.getLogger("gravefinder").level == logging.DEBUG

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("GRAVEFINDER_LOG_LEVEL", "error")
        configure_logging()
        assert logging.getLogger("gravefinder").level == logging.ERROR

    def test_single_handler(self):
        configure_logging()
        configure_logging()
        assert len(logging.getLogger("gravefinder").handlers) == 1

    def test_stdlib_and_structlog_share_output(self, capsys):
        configure_logging("INFO", json=True)
        logging.getLogger("gravefinder.store").info("loaded %d records", 3)
        get_logger("gravefinder.engine").info("search", results=2)
        err = capsys.readouterr().err
        assert '"event": "loaded 3 records"' in err
        assert '"logger": "gravefinder.store"' in err
        assert '"results": 2' in err
