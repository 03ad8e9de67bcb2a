"""The :py:mod:`sigbridge` package turns operating system signals into log
records, while keeping whatever handling was in place before.

.. default-domain:: sigbridge

- The :py:class:`~.bridge.SignalBridge` registers its handler for signal
  numbers at a chosen severity, emits a record upon delivery and optionally
  forwards to the previous disposition.
- Previous dispositions are captured and restored by the
  :py:class:`~.disposition.DispositionRegistry`, operating on an injectable
  :py:class:`~.facade.SignalFacade`.
- The process-wide dispatch mode (asynchronous or queued until a poll point)
  is held by :py:data:`~.dispatch.DISPATCH_MODE`.
- Records are emitted to a :py:class:`~.sink.LoggerSink`, e.g. a
  :py:class:`~.sink.LoggingSink` onto a standard library logger.
- Registrations can be configured via YAML files, see :py:mod:`.cfg`.
"""

# Set up logging (needs to happen first), then make the most important parts of
# the sigbridge interface available

from ._logging import _DEFAULT_LOG_LEVEL, _getLogger
from .bridge import SignalBridge, SignalRegistration, attach_signal_loggers
from .dispatch import DISPATCH_MODE, DispatchModeController
from .disposition import DispositionHandle, DispositionRegistry
from .facade import OSSignalFacade, SignalFacade
from .sink import LoggerSink, LoggingSink

__version__ = "0.1.0"
"""The :py:mod:`sigbridge` package version"""
