"""Tests the levels module"""

import logging

import pytest

from sigbridge.exceptions import InvalidSeverityError
from sigbridge.levels import (
    ALERT,
    DEFAULT_LEVEL,
    EMERGENCY,
    LOG_LEVELS,
    NOTICE,
    get_level,
)

# -----------------------------------------------------------------------------


def test_get_level():
    """Tests resolving severities by name and value"""
    assert get_level("info") == logging.INFO
    assert get_level("INFO") == logging.INFO
    assert get_level("Warning") == logging.WARNING
    assert get_level("notice") == NOTICE
    assert get_level("ALERT") == ALERT
    assert get_level("emergency") == EMERGENCY
    assert get_level("trace") == 5
    assert get_level(DEFAULT_LEVEL) == logging.CRITICAL

    # Values are accepted as long as they are known
    for value in LOG_LEVELS.values():
        assert get_level(value) == value

    # Error messages
    with pytest.raises(InvalidSeverityError, match="Invalid severity 'foo'"):
        get_level("foo")

    with pytest.raises(InvalidSeverityError, match="value 42"):
        get_level(42)

    # Booleans are not taken as level values
    with pytest.raises(ValueError, match="Invalid severity True"):
        get_level(True)
