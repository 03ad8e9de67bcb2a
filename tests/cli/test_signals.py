"""Tests the `sigbridge signals` subcommand"""

import signal

from . import invoke_cli

# -----------------------------------------------------------------------------


def test_signals():
    """Lists the signals and their dispositions"""
    res = invoke_cli(("signals",))
    print(res.output)
    assert res.exit_code == 0

    assert "--- Signals ---" in res.output
    assert "SIGINT" in res.output
    assert "SIGTERM" in res.output
    assert "SIGKILL" not in res.output

    # Uncatchable signals are shown on demand
    res = invoke_cli(("signals", "--all"))
    assert res.exit_code == 0
    if hasattr(signal, "SIGKILL"):
        assert "SIGKILL" in res.output
        assert "(uncatchable)" in res.output
