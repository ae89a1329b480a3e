"""Tests for logging utilities."""

import logging
from io import StringIO

import pytest

from fnt import Driver, Status, Vector, Verbosity
from fnt.logging import (
    LogContext,
    configure_logging,
    get_logger,
    get_verbosity,
    set_verbosity,
)


def test_get_logger_returns_logger():
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "fnt.test_module"


def test_get_logger_caching():
    assert get_logger("test_module") is get_logger("test_module")
    assert get_logger("fnt.test_module") is get_logger("test_module")


def test_get_logger_different_modules():
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")
    assert logger1 is not logger2
    assert logger1.name != logger2.name


def _capture(name: str) -> tuple[logging.Logger, StringIO]:
    logger = get_logger(name)
    stream = StringIO()
    configure_logging(stream=stream)
    return logger, stream


def test_context_gates_by_verbosity():
    logger, stream = _capture("gate")
    try:
        ctx = LogContext(verbosity=Verbosity.WARN, logger=logger)
        ctx.error("first")
        ctx.warn("second")
        ctx.info("hidden")
        ctx.debug("hidden too")
        output = stream.getvalue()
        assert "[ERROR] fnt.gate: first" in output
        assert "[WARNING] fnt.gate: second" in output
        assert "hidden" not in output
    finally:
        configure_logging()


def test_context_none_is_silent():
    logger, stream = _capture("silent")
    try:
        ctx = LogContext(verbosity="none", logger=logger)
        ctx.error("nothing")
        assert stream.getvalue() == ""
    finally:
        configure_logging()


def test_set_verbosity_only_affects_new_contexts():
    existing = LogContext(verbosity=Verbosity.ERROR)
    set_verbosity("debug")
    assert get_verbosity() is Verbosity.DEBUG
    assert LogContext().verbosity is Verbosity.DEBUG
    assert existing.verbosity is Verbosity.ERROR


@pytest.mark.parametrize(
    "raw, expected",
    [("info", Verbosity.INFO), ("WARNING", Verbosity.WARN), ("4", Verbosity.DEBUG), (0, Verbosity.NONE)],
)
def test_verbosity_parse(raw, expected):
    assert Verbosity.parse(raw) is expected


def test_verbosity_parse_rejects_unknown():
    with pytest.raises(ValueError):
        Verbosity.parse("loud")


def test_driver_failure_is_logged_at_error():
    logger, stream = _capture("driver_errors")
    try:
        drv = Driver.open(log=LogContext(verbosity=Verbosity.ERROR, logger=logger))
        drv.select_method("no such method", 1)
        assert "Unknown method 'no such method'" in stream.getvalue()
    finally:
        configure_logging()


def test_driver_verbosity_never_changes_results():
    outcomes = []
    for level in Verbosity:
        drv = Driver.open(log=LogContext(verbosity=level, logger=get_logger("quiet_check")))
        drv.select_method("secant", 1)
        drv.hparam_set("x_0", 1.0)
        drv.hparam_set("x_1", 2.0)
        x = Vector.allocate(1)
        while drv.is_done() is Status.CONTINUE:
            drv.next(x)
            drv.set_value(x, x[0] ** 2 - 2.0)
        outcomes.append(drv.result("root")[1])
    assert len(set(outcomes)) == 1
