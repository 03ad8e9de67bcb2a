"""Implements the `sigbridge signals` subcommand"""

import click

from ._utils import Echo


@click.command(
    help=(
        "Lists the signals of this platform and their current disposition "
        "within a freshly started Python process.\n"
        "\n"
        "The disposition is one of ``default``, ``ignore``, or ``delegate`` "
        "(a handler function). Signals whose disposition cannot be "
        "introspected are marked as degraded."
    ),
)
@click.option(
    "-a",
    "--all",
    "show_all",
    is_flag=True,
    help="Also show signals that cannot be caught, like SIGKILL.",
)
def signals(show_all: bool):
    """Lists signals and their dispositions"""
    from sigbridge import DispositionRegistry, OSSignalFacade
    from sigbridge._signal import UNCATCHABLE, signal_name
    from sigbridge.exceptions import UnsupportedSignalError

    registry = DispositionRegistry(OSSignalFacade())

    Echo.info("\n--- Signals ---")
    for signum in sorted(registry.facade.valid_signals()):
        if signum in UNCATCHABLE and not show_all:
            continue

        try:
            handle = registry.capture(signum)

        except UnsupportedSignalError as err:
            Echo.remark(f"{signal_name(signum):12s} {signum:>3d}  ({err})")
            continue

        registry.discard(handle)

        info = handle.kind
        if handle.kind == "delegate":
            info += f"  {getattr(handle.raw, '__name__', repr(handle.raw))}"
        if handle.degraded:
            info += "  (degraded)"
        if signum in UNCATCHABLE:
            info += "  (uncatchable)"

        Echo.info(f"{signal_name(signum):12s} {signum:>3d}  {info}")
