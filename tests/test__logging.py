"""Tests the logging setup"""

import logging

from sigbridge._logging import (
    LEVEL_STYLES,
    LOG_FORMAT,
    ShortNameFilter,
    SignalContextFilter,
)
from sigbridge.levels import LOG_LEVELS, SEVERITY_NAMES
from sigbridge.sink import LoggingSink

from .test_sink import ListHandler, logger

# -----------------------------------------------------------------------------


def make_record(name="sigbridge.bridge", **attrs) -> logging.LogRecord:
    record = logging.LogRecord(
        name, logging.INFO, __file__, 1, "some message", None, None
    )
    record.__dict__.update(attrs)
    return record


# -----------------------------------------------------------------------------


def test_severity_names(logger):
    """The additional severities show up under their own names"""
    for level, name in SEVERITY_NAMES.items():
        assert logging.getLevelName(level) == name
        assert LOG_LEVELS[name.lower()] == level

    handler = ListHandler()
    logger.addHandler(handler)
    sink = LoggingSink(logger)

    for name in ("notice", "alert", "emergency"):
        sink.emit(LOG_LEVELS[name], "Program received signal SIGHUP", {})

    assert [r.levelname for r in handler.records] == [
        "NOTICE",
        "ALERT",
        "EMERGENCY",
    ]


def test_level_styles():
    """All severities have a style"""
    for name in LOG_LEVELS:
        if name in ("warn", "fatal"):
            continue
        assert name in LEVEL_STYLES


def test_filters():
    """Tests the filters that provide the format's custom attributes"""
    record = make_record(context=dict(signo=10, pid=4242))
    assert ShortNameFilter().filter(record)
    assert SignalContextFilter().filter(record)
    assert record.shortname == "bridge"
    assert record.context_str == "  [signo=10, pid=4242]"

    formatter = logging.Formatter(LOG_FORMAT)
    assert formatter.format(record).endswith(
        "some message  [signo=10, pid=4242]"
    )

    # Records without context
    record = make_record(name="sigbridge")
    ShortNameFilter().filter(record)
    SignalContextFilter().filter(record)
    assert record.shortname == "sigbridge"
    assert record.context_str == ""

    record = make_record(context=dict())
    SignalContextFilter().filter(record)
    assert record.context_str == ""

