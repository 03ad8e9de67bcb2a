"""Implements the `sigbridge config` subcommand"""

import os
import sys

import click

from ._utils import Echo


@click.command(
    help=(
        "Show the sigbridge configuration.\n"
        "\n"
        "The configuration used when attaching signal loggers is assembled "
        "from the package's base configuration and the user configuration "
        "file within the sigbridge config directory."
    )
)
@click.option(
    "-R",
    "--reveal",
    is_flag=True,
    help="Reveals the location of the user configuration file.",
)
@click.option(
    "--get",
    "get_entry",
    is_flag=True,
    help="Retrieve the assembled and validated configuration.",
)
def config(*, reveal: bool, get_entry: bool):
    """Reads configuration entries"""
    if not reveal and not get_entry:
        Echo.error("Need at least one of the options --get or --reveal!")
        Echo.help(exit=1)

    import sigbridge.cfg as scfg
    from sigbridge._signal import signal_name
    from sigbridge.exceptions import ConfigValidationError

    if reveal:
        fpath = scfg.get_cfg_path("signals")
        exists = os.path.isfile(fpath)
        Echo.info(fpath + ("" if exists else "  (does not exist yet)"))

    if not get_entry:
        return

    try:
        cfg = scfg.load_bridge_cfg()

    except ConfigValidationError as err:
        Echo.error("Invalid configuration!", error=err)
        sys.exit(1)

    Echo.info("\n--- Defaults ---")
    for k, v in cfg.defaults.model_dump().items():
        Echo.info(f"  {k:18s} : {v}")

    Echo.info("\n--- Registrations ---")
    if not cfg.registrations:
        Echo.remark("  (none)")

    for reg in cfg.registrations:
        Echo.info(f"- {signal_name(reg.signal)}")
        for k, v in reg.model_dump(exclude={"signal"}).items():
            Echo.remark(f"    {k:16s} : {v}")
