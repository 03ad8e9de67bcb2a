"""Implements the logger sink contract the signal bridge emits records to.

The bridge does not implement a logging pipeline of its own; it only relies on
an object with an :py:meth:`~sigbridge.sink.LoggerSink.emit` method. The
:py:class:`~sigbridge.sink.LoggingSink` adapts a standard library logger to
that contract.
"""

import abc
import logging
from typing import Any, Mapping, Union

# -----------------------------------------------------------------------------


class LoggerSink(abc.ABC):
    """The contract the :py:class:`~sigbridge.bridge.SignalBridge` relies on.

    .. note::

        ``emit`` may be invoked from within a signal handler, i.e. at almost
        any point of the program. Implementations should document whether
        they are safe to be called from such an interrupted context.
    """

    @abc.abstractmethod
    def emit(
        self, level: int, message: str, context: Mapping[str, Any]
    ) -> bool:
        """Emits a record.

        Args:
            level (int): The severity, a standard ``logging`` level value
            message (str): The human-readable message
            context (Mapping[str, Any]): Structured signal metadata

        Returns:
            bool: Whether at least one downstream consumer accepted it
        """


class LoggingSink(LoggerSink):
    """Adapts a :py:class:`logging.Logger` to the sink contract.

    The context mapping is made available to handlers and formatters as the
    ``context`` attribute of the log record.

    .. warning::

        Logging handlers acquire (re-entrant) locks and perform I/O. Within
        the main thread this does not deadlock, but a handler that is
        interrupted in the middle of writing may interleave its output with
        the signal record. This sink is thus *not* async-signal-safe in the
        strict sense; use queued dispatch if that matters.
    """

    def __init__(
        self, logger: Union[logging.Logger, str] = "sigbridge.signals"
    ):
        """Sets up the sink.

        Args:
            logger (Union[logging.Logger, str], optional): The logger or the
                name of the logger to emit records to
        """
        if isinstance(logger, str):
            logger = logging.getLogger(logger)
        self.logger = logger

    def emit(
        self, level: int, message: str, context: Mapping[str, Any]
    ) -> bool:
        """Logs the message at the given level, passing the context along as
        ``record.context``, and returns whether any handler accepted it."""
        accepted = self.accepts(level)
        self.logger.log(level, message, extra=dict(context=dict(context)))
        return accepted

    def accepts(self, level: int) -> bool:
        """Determines whether a record of the given level would reach at least
        one handler, following the same rules as :py:mod:`logging` itself:
        the logger's effective level, handler levels and propagation, and the
        ``logging.lastResort`` handler if no handler is found at all.
        """
        if not self.logger.isEnabledFor(level):
            return False

        found = 0
        logger = self.logger
        while logger:
            for handler in logger.handlers:
                found += 1
                if level >= handler.level:
                    return True

            if not logger.propagate:
                break
            logger = logger.parent

        if found == 0 and logging.lastResort is not None:
            return level >= logging.lastResort.level
        return False

    def __str__(self) -> str:
        return f"<{type(self).__name__} '{self.logger.name}'>"
