"""Implements signalling-related functionality and globally relevant data"""

import signal as _signal
from typing import Dict, FrozenSet, Union

SIGMAP: Dict[str, int] = {
    a: int(getattr(_signal, a))
    for a in dir(_signal)
    if a[:3] == "SIG" and a[3:4] not in ("", "_")
}
"""A map from signal names to corresponding integer signal numbers. Markers
like ``SIG_DFL`` or ``SIG_BLOCK`` are not part of it."""

UNCATCHABLE: FrozenSet[int] = frozenset(
    SIGMAP[name] for name in ("SIGKILL", "SIGSTOP") if name in SIGMAP
)
"""Signals that can never have a handler installed"""


def signal_name(signum: int) -> str:
    """Returns the platform's canonical name of a signal number, e.g.
    ``SIGINT``. Real-time signals without a name of their own are denoted
    relative to ``SIGRTMIN``; unknown numbers are returned as a string.
    """
    try:
        return _signal.Signals(signum).name

    except ValueError:
        pass

    rtmin = SIGMAP.get("SIGRTMIN")
    rtmax = SIGMAP.get("SIGRTMAX")
    if rtmin is not None and rtmax is not None and rtmin < signum < rtmax:
        return f"SIGRTMIN+{signum - rtmin}"
    return str(signum)


def resolve_signum(sig: Union[int, str]) -> int:
    """Resolves a signal specification to an integer signal number.

    Args:
        sig (Union[int, str]): Either an integer, a numeric string, or a
            signal name with or without the ``SIG`` prefix (case-insensitive),
            e.g. ``SIGUSR1``, ``usr1``, or ``10``.

    Raises:
        ValueError: On a name that does not correspond to a signal
    """
    if isinstance(sig, _signal.Signals):
        return int(sig)

    if isinstance(sig, int):
        return sig

    s = str(sig).strip()
    if s.lstrip("-").isdigit():
        return int(s)

    name = s.upper()
    if not name.startswith("SIG"):
        name = "SIG" + name

    try:
        return SIGMAP[name]

    except KeyError as err:
        raise ValueError(
            f"Unknown signal name '{sig}'! Available signals: "
            f"{', '.join(sorted(SIGMAP))}"
        ) from err
