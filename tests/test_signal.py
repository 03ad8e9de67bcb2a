"""Tests the signal name and number helpers"""

import signal

import pytest

from sigbridge._signal import SIGMAP, UNCATCHABLE, resolve_signum, signal_name

# -----------------------------------------------------------------------------


def test_sigmap():
    """Tests the map of signal names"""
    assert SIGMAP["SIGINT"] == signal.SIGINT
    assert SIGMAP["SIGTERM"] == signal.SIGTERM

    # Markers are not part of it
    assert "SIG_DFL" not in SIGMAP
    assert "SIG_IGN" not in SIGMAP
    assert not any(name.startswith("SIG_") for name in SIGMAP)

    assert signal.SIGKILL in UNCATCHABLE
    assert signal.SIGINT not in UNCATCHABLE


def test_signal_name():
    """Tests canonical signal names"""
    assert signal_name(signal.SIGINT) == "SIGINT"
    assert signal_name(int(signal.SIGTERM)) == "SIGTERM"
    assert signal_name(signal.SIGUSR1) == "SIGUSR1"
    assert signal_name(signal.SIGURG) == "SIGURG"

    # Unknown numbers are returned as strings
    assert signal_name(10000) == "10000"


@pytest.mark.skipif(
    not hasattr(signal, "SIGRTMIN"), reason="requires real-time signals"
)
def test_signal_name_realtime():
    """Real-time signals without a name of their own are named relative to
    SIGRTMIN"""
    assert signal_name(signal.SIGRTMIN) == "SIGRTMIN"
    assert signal_name(signal.SIGRTMIN + 2) == "SIGRTMIN+2"


def test_resolve_signum():
    """Tests resolving signal specifications"""
    assert resolve_signum(signal.SIGUSR1) == signal.SIGUSR1
    assert resolve_signum(int(signal.SIGUSR1)) == signal.SIGUSR1
    assert resolve_signum("SIGUSR1") == signal.SIGUSR1
    assert resolve_signum("usr1") == signal.SIGUSR1
    assert resolve_signum(" sigterm ") == signal.SIGTERM
    assert resolve_signum(str(int(signal.SIGHUP))) == signal.SIGHUP

    # The result is a plain int
    assert type(resolve_signum(signal.SIGINT)) is int

    with pytest.raises(ValueError, match="Unknown signal name 'SIGFOO'"):
        resolve_signum("SIGFOO")
