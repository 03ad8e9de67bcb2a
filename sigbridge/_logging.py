"""Sets up logging for sigbridge, based on dantro's logging features.

Next to dantro's extended levels, this registers the syslog-style severities
signals may be logged at (see :py:mod:`sigbridge.levels`) and makes the signal
context that :py:class:`~sigbridge.sink.LoggingSink` attaches to records
visible in the log output.
"""

import logging
from typing import Mapping

import coloredlogs as _coloredlogs
from dantro.logging import REMARK as _DEFAULT_LOG_LEVEL
from dantro.logging import getLogger as _getLogger

from .levels import SEVERITY_NAMES

# -----------------------------------------------------------------------------

LOG_FORMAT = "%(levelname)-9s %(shortname)-12s  %(message)s%(context_str)s"
"""The format of sigbridge's log output. ``context_str`` is empty for records
that do not carry a signal context."""

LEVEL_STYLES = dict(
    trace=dict(faint=True),
    debug=dict(faint=True),
    remark=dict(color=246),  # grey
    note=dict(color="cyan"),
    info=dict(bright=True),
    progress=dict(color="green"),
    caution=dict(color=202),  # orange
    hilight=dict(color="yellow", bold=True),
    notice=dict(color="magenta"),
    success=dict(color="green", bold=True),
    warning=dict(color=202, bold=True),  # orange
    error=dict(color="red"),
    critical=dict(color="red", bold=True),
    alert=dict(color="red", bold=True, inverse=True),
    emergency=dict(color="white", background="red", bold=True),
)
"""Styles of the log levels, keyed by lower-case level name"""


class ShortNameFilter(logging.Filter):
    """Adds the ``shortname`` attribute, the last segment of the logger name,
    e.g. ``bridge`` instead of ``sigbridge.bridge``."""

    def filter(self, record):
        record.shortname = record.name.rsplit(".", 1)[-1]
        return True


class SignalContextFilter(logging.Filter):
    """Adds the ``context_str`` attribute, a compact rendering of the signal
    context a record carries in its ``context`` attribute, e.g.
    ``  [signo=10, pid=4242]``. For records without context, it is empty.
    """

    def filter(self, record):
        context = getattr(record, "context", None)
        if isinstance(context, Mapping) and context:
            items = ", ".join(f"{k}={v}" for k, v in context.items())
            record.context_str = f"  [{items}]"
        else:
            record.context_str = ""
        return True


def _register_severities():
    """Makes the severities known to :py:mod:`logging` that it has no name
    for, such that records show up as ``NOTICE`` rather than ``Level 27``."""
    for level, name in SEVERITY_NAMES.items():
        if logging.getLevelName(level) != name:
            logging.addLevelName(level, name)


# -- Logger Setup -------------------------------------------------------------

_register_severities()

_log = _getLogger("sigbridge")
"""The sigbridge root logger"""

# See API reference:  https://coloredlogs.readthedocs.io/en/latest/api.html
_coloredlogs.install(
    level=_DEFAULT_LOG_LEVEL,
    fmt=LOG_FORMAT,
    level_styles=LEVEL_STYLES,
    field_styles=dict(
        levelname=dict(bold=True, faint=True),
        shortname=dict(faint=True),
        context_str=dict(color=246),
    ),
)

# The format relies on attributes set by these filters; handlers that other
# modules installed on the root logger beforehand need them as well.
_filters = (ShortNameFilter(), SignalContextFilter())
for handler in logging.root.handlers:
    for _filter in _filters:
        if _filter not in handler.filters:
            handler.addFilter(_filter)

_log.debug("Logging configured.")
