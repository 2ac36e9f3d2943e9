"""Tests for logging utilities."""

from __future__ import annotations

import logging

import pytest

from vips_mxe_build.utils.logging_utils import DEFAULT_LOGGER_NAME, setup_logging, status


@pytest.fixture(autouse=True)
def reset_logger() -> None:
    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    for h in logger.handlers[:]:
        logger.removeHandler(h)


def test_setup_logging_defaults() -> None:
    logger = setup_logging()
    assert logger.name == DEFAULT_LOGGER_NAME
    assert logger.level == logging.INFO


def test_setup_logging_verbose() -> None:
    assert setup_logging(verbose=True).level == logging.DEBUG


def test_setup_logging_quiet_wins() -> None:
    assert setup_logging(verbose=True, quiet=True).level == logging.ERROR


def test_setup_logging_singleton() -> None:
    logger1 = setup_logging()
    count = len(logger1.handlers)
    logger2 = setup_logging(verbose=True)
    assert logger1 is logger2
    # Second call shouldn't add more handlers, only change the level.
    assert len(logger2.handlers) == count
    assert logger2.level == logging.DEBUG


def test_status_respects_quiet(capsys: pytest.CaptureFixture[str]) -> None:
    status("[build] vips-web", quiet=True)
    status("[build] done", quiet=False)
    assert capsys.readouterr().out == "[build] done\n"
