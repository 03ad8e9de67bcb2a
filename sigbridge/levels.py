"""Implements the severity levels the bridge may log signals at"""

import logging as _logging
from typing import Dict, Union

from .exceptions import InvalidSeverityError

# -----------------------------------------------------------------------------

NOTICE = 27
"""Level of the syslog-style ``notice`` severity, in between the extended
levels of :py:mod:`dantro.logging` and ``WARNING``"""

ALERT = 55
"""Level of the syslog-style ``alert`` severity, above ``CRITICAL``"""

EMERGENCY = 60
"""Level of the syslog-style ``emergency`` severity"""

SEVERITY_NAMES: Dict[int, str] = {
    NOTICE: "NOTICE",
    ALERT: "ALERT",
    EMERGENCY: "EMERGENCY",
}
"""Names of the severities that the standard library does not know of; these
are registered with :py:mod:`logging` when sigbridge is imported"""

LOG_LEVELS: Dict[str, int] = {
    "trace": 5,
    "debug": _logging.DEBUG,
    "info": _logging.INFO,
    "notice": NOTICE,
    "warn": _logging.WARN,
    "warning": _logging.WARNING,
    "error": _logging.ERROR,
    "critical": _logging.CRITICAL,
    "fatal": _logging.FATAL,
    "alert": ALERT,
    "emergency": EMERGENCY,
}
"""A map of severity names to actual level values. Next to the standard
library levels, this includes the syslog-style names ``notice``, ``alert`` and
``emergency``, which map onto values that do not collide with the standard
or the :py:mod:`dantro.logging` levels."""

DEFAULT_LEVEL: str = "critical"
"""The severity signals are logged at if nothing else is specified"""


# -----------------------------------------------------------------------------


def get_level(level: Union[str, int]) -> int:
    """Returns the integer log level from a name or a value, looking names up
    in :py:data:`~sigbridge.levels.LOG_LEVELS`.

    Args:
        level (Union[str, int]): Name of the log level (not case-sensitive)
            or one of the level values in ``LOG_LEVELS``.

    Returns:
        int: The desired log level

    Raises:
        InvalidSeverityError: If the level is not recognized
    """
    if isinstance(level, bool):
        raise InvalidSeverityError(f"Invalid severity {repr(level)}!")

    if isinstance(level, int):
        if level in LOG_LEVELS.values():
            return level
        raise InvalidSeverityError(
            f"Invalid severity value {level}! Valid values: "
            f"{', '.join(str(v) for v in sorted(set(LOG_LEVELS.values())))}"
        )

    try:
        return LOG_LEVELS[str(level).lower()]

    except KeyError as err:
        raise InvalidSeverityError(
            f"Invalid severity '{level}'! Valid names: "
            f"{', '.join(LOG_LEVELS)}"
        ) from err
