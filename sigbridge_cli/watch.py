"""Implements the `sigbridge watch` subcommand"""

import os
import sys
import time
from typing import Tuple

import click

from ._utils import Echo


class _CountingSink:
    """Wraps a sink and counts the emitted records"""

    def __init__(self, sink):
        self.sink = sink
        self.num_emitted = 0

    def emit(self, level, message, context) -> bool:
        self.num_emitted += 1
        return self.sink.emit(level, message, context)

    def __str__(self) -> str:
        return str(self.sink)


@click.command(
    help=(
        "Logs the given signals as they arrive at this process.\n"
        "\n"
        "Signals can be given by name (``SIGUSR1``, ``usr1``) or by number. "
        "Stops after ``--count`` signals were logged or after ``--timeout`` "
        "seconds, whichever comes first; without either, runs until "
        "interrupted. Upon exit, the previous dispositions are restored."
    ),
)
@click.argument("signal_names", nargs=-1, required=True)
@click.option(
    "-l",
    "--level",
    default="info",
    show_default=True,
    help="The severity to log the signals at.",
)
@click.option(
    "-n",
    "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many signals were logged.",
)
@click.option(
    "-t",
    "--timeout",
    type=click.FloatRange(min=0.0),
    default=None,
    help="Stop after this many seconds.",
)
@click.option(
    "--call-previous/--no-call-previous",
    default=False,
    show_default=True,
    help=(
        "Whether to carry out the previous disposition after logging. Note "
        "that this may terminate the process, e.g. for SIGTERM."
    ),
)
@click.option(
    "--queued",
    is_flag=True,
    help=(
        "Use queued dispatch: signals are only logged at poll points in "
        "between sleeps, and repeated signals arriving in between coalesce."
    ),
)
@click.option(
    "--poll-interval",
    type=click.FloatRange(min=0.001),
    default=0.05,
    show_default=True,
    help="Seconds to sleep in between poll points.",
)
def watch(
    *,
    signal_names: Tuple[str],
    level: str,
    count: int,
    timeout: float,
    call_previous: bool,
    queued: bool,
    poll_interval: float,
):
    """Registers the given signals and logs them as they arrive"""
    from sigbridge import DISPATCH_MODE, LoggingSink, SignalBridge
    from sigbridge.exceptions import SignalBridgeException

    sink = _CountingSink(LoggingSink("sigbridge.watch"))
    bridge = SignalBridge(sink)
    previous_mode = DISPATCH_MODE.async_dispatch

    try:
        for name in signal_names:
            bridge.register_signal_handler(
                name,
                level,
                call_previous=call_previous,
                async_dispatch=not queued,
            )

    except SignalBridgeException as err:
        Echo.error("Failed registering signals!", error=err)
        bridge.close()
        DISPATCH_MODE.set_async_dispatch(previous_mode)
        sys.exit(1)

    Echo.progress(
        "Watching %s in process %d ...", ", ".join(signal_names), os.getpid()
    )

    start = time.monotonic()
    try:
        while count is None or sink.num_emitted < count:
            if timeout is not None and time.monotonic() - start >= timeout:
                Echo.caution("Timeout reached.")
                break

            time.sleep(poll_interval)
            bridge.dispatch()

    except KeyboardInterrupt:
        Echo.caution("Interrupted.")

    finally:
        bridge.close()
        DISPATCH_MODE.set_async_dispatch(previous_mode)

    Echo.success("Logged %d signal(s).", sink.num_emitted)
