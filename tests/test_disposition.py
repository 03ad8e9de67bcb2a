"""Tests the disposition registry and the disposition variants"""

import signal

import pytest

from sigbridge.disposition import (
    Default,
    Delegate,
    Disposition,
    DispositionRegistry,
    Ignore,
)
from sigbridge.exceptions import (
    InvalidDispositionError,
    UnsupportedSignalError,
)
from sigbridge.testtools import FakeSignalFacade

from ._fixtures import facade

# -----------------------------------------------------------------------------


def handler(signum, frame):
    pass


@pytest.fixture
def registry(facade) -> DispositionRegistry:
    return DispositionRegistry(facade)


# -----------------------------------------------------------------------------


def test_from_raw():
    """Tests building the tagged variant from platform dispositions"""
    assert Disposition.from_raw(signal.SIG_DFL) == Default()
    assert Disposition.from_raw(signal.SIG_IGN) == Ignore()
    assert Disposition.from_raw(None) == Default()
    assert Disposition.from_raw(handler) == Delegate(handler)
    assert Disposition.from_raw(handler) != Delegate(print)
    assert Default() != Ignore()

    assert Default().raw is signal.SIG_DFL
    assert Ignore().raw is signal.SIG_IGN
    assert Delegate(handler).raw is handler

    with pytest.raises(InvalidDispositionError, match="Cannot interpret"):
        Disposition.from_raw("foo")


def test_invoke(facade):
    """Tests carrying out dispositions"""
    Ignore().invoke(signal.SIGUSR1, facade=facade)
    assert facade.default_actions == []

    Default().invoke(signal.SIGUSR1, facade=facade)
    assert facade.default_actions == [signal.SIGUSR1]

    calls = []
    Delegate(lambda *a: calls.append(a)).invoke(
        signal.SIGUSR2, "frame", facade=facade
    )
    assert calls == [(signal.SIGUSR2, "frame")]


def test_capture(registry, facade):
    """Tests capturing dispositions, which does not alter them"""
    h = registry.capture(signal.SIGUSR1)
    assert h.signum == signal.SIGUSR1
    assert h.kind == "default"
    assert h.raw is signal.SIG_DFL
    assert not h.degraded
    assert registry.is_live(h)

    facade.table[signal.SIGUSR2] = signal.SIG_IGN
    assert registry.capture(signal.SIGUSR2).kind == "ignore"

    facade.table[signal.SIGHUP] = handler
    h = registry.capture(signal.SIGHUP)
    assert h.kind == "delegate"
    assert h.disposition.handler is handler
    assert facade.table[signal.SIGHUP] is handler

    # Handles are unique
    assert registry.capture(signal.SIGHUP) != h

    # Invalid signal numbers
    with pytest.raises(UnsupportedSignalError, match="not valid"):
        registry.capture(10000)


def test_capture_degraded():
    """If the platform cannot introspect dispositions, the default action is
    assumed"""
    facade = FakeSignalFacade(introspectable=False)
    facade.table[signal.SIGUSR1] = handler
    registry = DispositionRegistry(facade)

    h = registry.capture(signal.SIGUSR1)
    assert h.degraded
    assert h.kind == "default"
    assert h.raw is None

    # Restoring it installs the default action
    registry.restore(signal.SIGUSR1, h)
    assert facade.table[signal.SIGUSR1] == signal.SIG_DFL


def test_restore(registry, facade):
    """Tests restoring captured dispositions"""
    facade.table[signal.SIGUSR1] = handler
    h = registry.capture(signal.SIGUSR1)

    facade.table[signal.SIGUSR1] = signal.SIG_IGN
    registry.restore(signal.SIGUSR1, h)
    assert facade.table[signal.SIGUSR1] is handler
    assert not registry.is_live(h)

    # Cannot restore twice
    with pytest.raises(InvalidDispositionError, match="already restored"):
        registry.restore(signal.SIGUSR1, h)

    # Cannot restore for another signal number
    h = registry.capture(signal.SIGUSR1)
    with pytest.raises(InvalidDispositionError, match="captured for SIGUSR1"):
        registry.restore(signal.SIGUSR2, h)

    # ... which does not invalidate the handle
    assert registry.is_live(h)

    # Cannot restore from a foreign handle
    other = DispositionRegistry(facade)
    with pytest.raises(InvalidDispositionError, match="not issued"):
        other.restore(signal.SIGUSR1, h)

    # Discarding invalidates without restoring
    facade.table[signal.SIGUSR1] = signal.SIG_IGN
    registry.discard(h)
    assert not registry.is_live(h)
    assert facade.table[signal.SIGUSR1] == signal.SIG_IGN
