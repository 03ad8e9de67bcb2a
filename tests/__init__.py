"""sigbridge test suite"""

import logging
import os
import signal

# Set default log level to DEBUG
logging.basicConfig(level=logging.DEBUG)

# -- Shared utilities or definitions ------------------------------------------

HAVE_POSIX_SIGNALS: bool = os.name == "posix" and hasattr(signal, "SIGURG")
"""Whether the real signal tests can run on this platform"""

TEST_SIGNALS = tuple(
    getattr(signal, name)
    for name in ("SIGUSR1", "SIGUSR2", "SIGURG", "SIGCONT", "SIGHUP")
    if hasattr(signal, name)
)
"""Signals whose real dispositions may be changed by tests; these are restored
after each test that uses the ``os_signals`` fixture"""
