"""Tests for uiforge logging setup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from uiforge.core.logging import (
    ROOT_LOGGER,
    ConsoleFormatter,
    JSONLFormatter,
    log_with_context,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    saved = (logger.level, list(logger.handlers), logger.propagate)
    yield
    for handler in logger.handlers:
        handler.close()
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]


def _record(level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="uiforge.core.registry",
        level=level,
        pathname=__file__,
        lineno=1,
        msg="Registered resource '%s'",
        args=("product",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSetupLogging:
    def test_console_only(self) -> None:
        logger = setup_logging("debug")

        assert logger.name == ROOT_LOGGER
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, ConsoleFormatter)

    def test_jsonl_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "uiforge.jsonl"
        logger = setup_logging(logging.INFO, log_file=log_file)
        logging.getLogger("uiforge.core.compiler").info("Compiled 2 resources")
        for handler in logger.handlers:
            handler.flush()

        lines = log_file.read_text().splitlines()
        entry = json.loads(lines[-1])
        assert entry["level"] == "INFO"
        assert entry["logger"] == "uiforge.core.compiler"
        assert entry["message"] == "Compiled 2 resources"

    def test_repeated_setup_replaces_handlers(self) -> None:
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1


class TestFormatters:
    def test_jsonl_includes_context(self) -> None:
        entry = json.loads(JSONLFormatter().format(_record(context={"resource": "product"})))

        assert entry["message"] == "Registered resource 'product'"
        assert entry["context"] == {"resource": "product"}
        assert "source" not in entry

    def test_jsonl_source_for_warnings(self) -> None:
        entry = json.loads(JSONLFormatter().format(_record(level=logging.WARNING)))
        assert entry["source"]["line"] == 1

    def test_console_strips_root_prefix(self) -> None:
        text = ConsoleFormatter().format(_record())

        assert "[core.registry]" in text
        assert text.endswith("Registered resource 'product'")


def test_log_with_context(caplog) -> None:
    logger = logging.getLogger("uiforge.core.compiler")
    with caplog.at_level(logging.INFO, logger=ROOT_LOGGER):
        log_with_context(logger, logging.INFO, "Compiled", {"resources": 2}, embedded=1)

    (record,) = caplog.records
    assert record.context == {"resources": 2, "embedded": 1}
