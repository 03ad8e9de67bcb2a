"""Tests the `sigbridge config` subcommand"""

import os

import sigbridge.cfg as scfg

from .._fixtures import tmp_cfg_dir
from . import invoke_cli

# -----------------------------------------------------------------------------


def test_config(tmp_cfg_dir):
    """Tests revealing and retrieving the configuration"""
    # Need at least one option
    res = invoke_cli(("config",))
    assert res.exit_code == 1
    assert "Need at least one of the options" in res.output

    # Reveal the user configuration file
    res = invoke_cli(("config", "--reveal"))
    print(res.output)
    assert res.exit_code == 0
    assert scfg.get_cfg_path("signals") in res.output
    assert "does not exist yet" in res.output

    # Retrieve the assembled configuration
    res = invoke_cli(("config", "--get"))
    print(res.output)
    assert res.exit_code == 0
    assert "--- Defaults ---" in res.output
    assert "--- Registrations ---" in res.output
    assert "(none)" in res.output
    assert "async_dispatch" in res.output

    # With a user configuration
    scfg.write_to_cfg_dir(
        "signals",
        dict(registrations=["SIGHUP", dict(signal="usr1", level="info")]),
    )
    assert os.path.isfile(scfg.get_cfg_path("signals"))

    res = invoke_cli(("config", "--get", "-R"))
    print(res.output)
    assert res.exit_code == 0
    assert "does not exist yet" not in res.output
    assert "(none)" not in res.output
    assert "- SIGHUP" in res.output
    assert "- SIGUSR1" in res.output

    # Invalid user configuration
    scfg.write_to_cfg_dir("signals", dict(registrations=["SIGFOO"]))
    res = invoke_cli(("config", "--get"))
    assert res.exit_code == 1
    assert "Invalid configuration!" in res.output
    assert "SIGFOO" in res.output
