"""Tests the logger sink contract and its adapter onto standard loggers"""

import logging
import uuid

import pytest

from sigbridge.sink import LoggerSink, LoggingSink
from sigbridge.testtools import RecordingSink

# -----------------------------------------------------------------------------


class ListHandler(logging.Handler):
    """Keeps all handled records"""

    def __init__(self, level=logging.NOTSET):
        super().__init__(level)
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def logger() -> logging.Logger:
    """An isolated logger without handlers that does not propagate.

    It is not created via the logger manager, such that no other party can
    attach handlers to it.
    """
    logger = logging.Logger(f"sigbridge.test.{uuid.uuid4().hex}")
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    return logger


# -----------------------------------------------------------------------------


def test_contract():
    """The contract cannot be instantiated without emit"""
    with pytest.raises(TypeError):
        LoggerSink()

    assert isinstance(RecordingSink(), LoggerSink)


def test_logging_sink(logger):
    """Tests emitting to a standard library logger"""
    handler = ListHandler()
    logger.addHandler(handler)
    sink = LoggingSink(logger)
    assert sink.logger is logger
    assert logger.name in str(sink)

    assert sink.emit(
        logging.INFO, "Program received signal SIGUSR1", {"signo": 10}
    )
    assert len(handler.records) == 1

    record = handler.records[0]
    assert record.levelno == logging.INFO
    assert record.getMessage() == "Program received signal SIGUSR1"
    assert record.context == {"signo": 10}

    # Can also be constructed from a logger name
    name = f"sigbridge.test.{uuid.uuid4().hex}"
    assert LoggingSink(name).logger is logging.getLogger(name)


def test_logging_sink_acceptance(logger):
    """Tests whether the sink reports acceptance like logging routes"""
    sink = LoggingSink(logger)

    # Without any handler, the last resort handler accepts warnings and above
    assert not logger.handlers
    assert not sink.accepts(logging.INFO)
    assert sink.accepts(logging.ERROR)

    # A handler with a higher level does not accept lower ones
    handler = ListHandler(level=logging.ERROR)
    logger.addHandler(handler)
    assert not sink.emit(logging.WARNING, "msg", {})
    assert not handler.records
    assert sink.emit(logging.ERROR, "msg", {})
    assert len(handler.records) == 1

    # The logger's own level is taken into account as well
    logger.setLevel(logging.CRITICAL)
    assert not sink.emit(logging.ERROR, "msg", {})
    assert len(handler.records) == 1


def test_logging_sink_propagation(logger):
    """Handlers of parent loggers count if records propagate"""
    child = logging.Logger(logger.name + ".child")
    child.parent = logger
    handler = ListHandler()
    logger.addHandler(handler)

    sink = LoggingSink(child)
    assert sink.emit(logging.DEBUG, "msg", {"signo": 1})
    assert handler.records[0].context == {"signo": 1}

    child.propagate = False
    assert not sink.accepts(logging.DEBUG)


def test_recording_sink():
    """Tests the in-memory sink"""
    sink = RecordingSink()
    assert sink.emit(
        logging.INFO, "Program received signal SIGURG", {"signo": 23}
    )
    assert len(sink) == 1
    assert sink.has_records("info")
    assert not sink.has_records("critical")
    assert sink.has_record_that_contains("info", "SIGURG")
    assert not sink.has_record_that_contains("info", "SIGINT")

    sink.clear()
    assert len(sink) == 0
    assert not RecordingSink(accept=False).emit(logging.INFO, "msg", {})
