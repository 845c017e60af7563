"""Unit tests for the JSON extras log formatter."""

from __future__ import annotations

import json
import logging

from seo_engine.core.logging import JSONExtrasFormatter, setup_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="seo_engine.services.opportunity_analysis",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Opportunity analysis completed",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_extras_as_json() -> None:
    line = JSONExtrasFormatter().format(_record(clusters_found=2, opportunities_written=2))

    message, _, extras = line.partition("Opportunity analysis completed ")
    assert "| INFO" in message
    assert json.loads(extras) == {"clusters_found": 2, "opportunities_written": 2}


def test_formatter_without_extras_has_no_json_suffix() -> None:
    line = JSONExtrasFormatter().format(_record())

    assert line.endswith("Opportunity analysis completed")


def test_setup_logging_is_idempotent() -> None:
    logger = logging.getLogger("seo_engine")
    original_handlers = list(logger.handlers)
    original_level = logger.level
    original_propagate = logger.propagate
    logger.handlers = []
    try:
        setup_logging()
        setup_logging()

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONExtrasFormatter)
        assert logger.propagate is False
    finally:
        logger.handlers = original_handlers
        logger.setLevel(original_level)
        logger.propagate = original_propagate


def test_setup_logging_later_call_adjusts_level(monkeypatch) -> None:
    logger = logging.getLogger("seo_engine")
    original_handlers = list(logger.handlers)
    original_level = logger.level
    original_propagate = logger.propagate
    logger.handlers = []
    monkeypatch.setattr("seo_engine.core.logging.settings.debug", False)
    try:
        setup_logging()
        assert logger.level == logging.INFO

        setup_logging(logging.DEBUG)

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.handlers[0].level == logging.DEBUG
    finally:
        logger.handlers = original_handlers
        logger.setLevel(original_level)
        logger.propagate = original_propagate
