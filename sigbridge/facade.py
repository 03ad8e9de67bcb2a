"""Implements the facade over the process-wide signal disposition table.

The :py:class:`~sigbridge.bridge.SignalBridge` never touches the
:py:mod:`signal` module directly but goes through a
:py:class:`~sigbridge.facade.SignalFacade`. This allows substituting the real
disposition table by an in-memory one, see
:py:class:`~sigbridge.testtools.FakeSignalFacade`.
"""

import abc
import logging
import signal
import threading
from typing import Callable, Dict, Set, Union

from ._signal import UNCATCHABLE, signal_name
from .exceptions import UnsupportedSignalError

log = logging.getLogger(__name__)

RawDisposition = Union[Callable, int, None]
"""What the platform reports as a disposition: ``SIG_DFL``, ``SIG_IGN``, a
callable, or None if it cannot tell"""

# -----------------------------------------------------------------------------


class SignalFacade(abc.ABC):
    """Interface to a process-wide signal disposition table"""

    @abc.abstractmethod
    def valid_signals(self) -> Set[int]:
        """The signal numbers that are valid on this platform"""

    @abc.abstractmethod
    def get_disposition(self, signum: int) -> RawDisposition:
        """Returns the current disposition without altering it.

        May return None if the current disposition cannot be introspected.

        Raises:
            UnsupportedSignalError: If no disposition can be reported for
                this signal number.
        """

    @abc.abstractmethod
    def set_disposition(
        self, signum: int, disposition: RawDisposition
    ) -> RawDisposition:
        """Installs a disposition and returns the one that was replaced.

        Raises:
            UnsupportedSignalError: If the disposition cannot be changed
        """

    @abc.abstractmethod
    def set_restart(self, signum: int, restart: bool) -> None:
        """Sets whether blocking system calls interrupted by this signal are
        restarted automatically. Needs to be called *after*
        :py:meth:`.set_disposition`, which may reset this flag."""

    @abc.abstractmethod
    def perform_default(self, signum: int) -> None:
        """Carries out the platform's default action for this signal, which
        may terminate the process. The disposition that is installed at the
        time of the call is in place again afterwards."""

    def check_catchable(self, signum: int) -> None:
        """Raises :py:exc:`~sigbridge.exceptions.UnsupportedSignalError` if no
        handler can be installed for the given signal number"""
        if isinstance(signum, bool) or not isinstance(signum, int):
            raise UnsupportedSignalError(
                f"Signal numbers need to be integers, got {repr(signum)}!"
            )

        if signum not in self.valid_signals():
            raise UnsupportedSignalError(
                f"Signal number {signum} is not valid on this platform!"
            )

        if signum in UNCATCHABLE:
            raise UnsupportedSignalError(
                f"Signal {signal_name(signum)} cannot be caught!"
            )


# -----------------------------------------------------------------------------


class OSSignalFacade(SignalFacade):
    """A facade onto the actual disposition table of this process, using the
    :py:mod:`signal` module.

    .. note::

        Python-level signal handlers can only be installed from the main
        thread of the main interpreter.
    """

    def __init__(self):
        self._restart: Dict[int, bool] = dict()

    def valid_signals(self) -> Set[int]:
        return {int(s) for s in signal.valid_signals()}

    def get_disposition(self, signum: int) -> RawDisposition:
        if signum not in self.valid_signals():
            raise UnsupportedSignalError(
                f"Signal number {signum} is not valid on this platform!"
            )

        try:
            return signal.getsignal(signum)

        except (ValueError, OSError) as err:
            raise UnsupportedSignalError(
                f"Cannot read disposition of signal {signum}: {err}"
            ) from err

    def set_disposition(
        self, signum: int, disposition: RawDisposition
    ) -> RawDisposition:
        self.check_catchable(signum)
        if threading.current_thread() is not threading.main_thread():
            raise RuntimeError(
                "Signal dispositions can only be changed from the main thread!"
            )

        try:
            return signal.signal(signum, disposition)

        except (ValueError, OSError) as err:
            raise UnsupportedSignalError(
                f"Failed setting disposition of signal "
                f"{signal_name(signum)}: {err}"
            ) from err

    def set_restart(self, signum: int, restart: bool) -> None:
        self._restart[signum] = restart

        if not hasattr(signal, "siginterrupt"):
            log.debug("Platform does not support siginterrupt; ignoring.")
            return

        signal.siginterrupt(signum, not restart)

    def perform_default(self, signum: int) -> None:
        """Temporarily installs the default action, unblocks the signal and
        raises it again. Afterwards, the signal mask, the previously installed
        disposition and its restart flag are restored."""
        current = signal.signal(signum, signal.SIG_DFL)
        old_mask = None
        try:
            if hasattr(signal, "pthread_sigmask"):
                old_mask = signal.pthread_sigmask(signal.SIG_UNBLOCK, {signum})
            signal.raise_signal(signum)

        finally:
            if old_mask is not None:
                signal.pthread_sigmask(signal.SIG_SETMASK, old_mask)

            # Handlers installed outside of Python are reported as None and
            # cannot be reinstated; fall back to the default action then.
            signal.signal(
                signum, current if current is not None else signal.SIG_DFL
            )
            if signum in self._restart:
                self.set_restart(signum, self._restart[signum])

    def __str__(self) -> str:
        return f"<{type(self).__name__}>"
