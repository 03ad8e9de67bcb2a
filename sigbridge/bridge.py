"""Implements the :py:class:`~sigbridge.bridge.SignalBridge`, which turns
operating system signals into log records.

Registering a signal captures the disposition that was in place before, such
that it can be restored later or chained to after logging. Upon delivery, the
bridge builds a context from the signal metadata, emits a single record to its
:py:class:`~sigbridge.sink.LoggerSink` and, if desired, carries out the
previous disposition. Logging always happens before forwarding, such that a
terminating previous disposition cannot suppress the record.

Example:

.. code-block:: python

    from sigbridge import LoggingSink, SignalBridge

    with SignalBridge(LoggingSink("my_app")) as bridge:
        bridge.register_signal_handler("SIGUSR1", "info", call_previous=False)
        ...  # SIGUSR1 is now logged at INFO level

    # Upon exiting the context, the previous disposition is back in place
"""

import collections
import contextlib
import logging
import os
from dataclasses import dataclass
from types import FrameType
from typing import Any, Deque, Dict, Mapping, Optional, Union

from ._signal import resolve_signum, signal_name
from .cfg import load_bridge_cfg
from .dispatch import DISPATCH_MODE, DispatchModeController
from .disposition import (
    REGISTRATION_LOCK,
    DispositionHandle,
    DispositionRegistry,
)
from .exceptions import DeliveryHandlerFault, UnsupportedSignalError
from .facade import OSSignalFacade, SignalFacade
from .levels import DEFAULT_LEVEL, get_level
from .schema import BridgeConfig, parse_bridge_cfg
from .sink import LoggerSink, LoggingSink

log = logging.getLogger(__name__)

MESSAGE_FSTR = "Program received signal {name}"
"""The message that is emitted upon a signal; ``name`` is the canonical name
of the signal, e.g. ``SIGINT``"""

SIGINFO_KEYS = ("code", "errno", "pid", "uid", "status", "band")
"""Context keys that are filled from a siginfo structure, if available. The
``signo`` key is always present and thus not part of this tuple.

On POSIX platforms, these correspond to the ``si_*`` attributes of
:py:class:`signal.struct_siginfo`. Handlers installed via
:py:func:`signal.signal` do not receive a siginfo; there, only ``signo`` is
available.
"""

# -----------------------------------------------------------------------------


def build_context(signum: int, siginfo: Any = None) -> Dict[str, Any]:
    """Builds the context record for a delivered signal.

    Args:
        signum (int): The delivered signal number, always stored as ``signo``
        siginfo (Any, optional): Additional metadata, either a mapping or an
            object with ``si_*`` attributes like
            :py:class:`signal.struct_siginfo`. Mapping keys are taken over
            with a potential ``si_`` prefix removed. Entries that are None are
            omitted.

    Returns:
        Dict[str, Any]: The context
    """
    context = dict(signo=signum)
    if siginfo is None:
        return context

    if isinstance(siginfo, Mapping):
        items = (
            (k[3:] if k.startswith("si_") else k, v)
            for k, v in siginfo.items()
        )
    else:
        items = ((k, getattr(siginfo, "si_" + k, None)) for k in SIGINFO_KEYS)

    context.update((k, v) for k, v in items if v is not None and k != "signo")
    return context


@dataclass(frozen=True)
class SignalRegistration:
    """All data the delivery path needs, resolved at registration time"""

    signum: int
    level: int
    call_previous: bool
    restart_syscalls: bool
    async_dispatch: Optional[bool]
    previous: DispositionHandle
    message: str

    @property
    def name(self) -> str:
        """The canonical name of the registered signal"""
        return signal_name(self.signum)


# -----------------------------------------------------------------------------


class SignalBridge:
    """Bridges operating system signals to a logger sink.

    The bridge holds at most one registration per signal number. The
    disposition that was in place *before the first registration* of a
    signal number is the one that is chained to and restored, regardless of
    how often that signal is re-registered.

    .. note::

        The bridge has no finalizer; call :py:meth:`.close` (or use it as a
        context manager) to restore the previous dispositions.
    """

    MAX_FAULTS: int = 32
    """How many delivery faults are kept in :py:attr:`.faults`"""

    def __init__(
        self,
        sink: LoggerSink,
        *,
        facade: SignalFacade = None,
        dispatch: DispatchModeController = None,
    ):
        """Sets up a signal bridge.

        Args:
            sink (LoggerSink): Where to emit records to
            facade (SignalFacade, optional): The disposition table to operate
                on. By default, uses that of this process.
            dispatch (DispatchModeController, optional): The dispatch mode
                controller. By default, uses the process-wide one,
                :py:data:`~sigbridge.dispatch.DISPATCH_MODE`.
        """
        self._sink = sink
        self._facade = facade if facade is not None else OSSignalFacade()
        self._registry = DispositionRegistry(self._facade)
        self._dispatch = dispatch if dispatch is not None else DISPATCH_MODE
        self._registrations: Dict[int, SignalRegistration] = dict()
        self._fallback_level = get_level(DEFAULT_LEVEL)
        self._closed = False

        self.faults: Deque[DeliveryHandlerFault] = collections.deque(
            maxlen=self.MAX_FAULTS
        )
        """Faults that occurred during delivery, most recent last"""

        log.debug("%s set up.", self)

    # .. Properties ...........................................................

    @property
    def sink(self) -> LoggerSink:
        return self._sink

    @property
    def facade(self) -> SignalFacade:
        return self._facade

    @property
    def registry(self) -> DispositionRegistry:
        return self._registry

    @property
    def dispatch_mode(self) -> DispatchModeController:
        return self._dispatch

    @property
    def registrations(self) -> Dict[int, SignalRegistration]:
        """A copy of the active registrations, keyed by signal number"""
        return dict(self._registrations)

    @property
    def closed(self) -> bool:
        return self._closed

    def is_registered(self, sig: Union[int, str]) -> bool:
        """Whether the given signal is registered with this bridge"""
        try:
            return resolve_signum(sig) in self._registrations
        except ValueError:
            return False

    # .. Registration .........................................................

    def _resolve_signum(self, sig: Union[int, str]) -> int:
        """Resolves and checks a signal specification"""
        try:
            signum = resolve_signum(sig)

        except ValueError as err:
            raise UnsupportedSignalError(str(err)) from err

        self._facade.check_catchable(signum)
        return signum

    def _foreign_handler(self, signum: int) -> Optional[Any]:
        """Returns the installed disposition if it is not this bridge's
        handler; None if it is or if it cannot be introspected"""
        current = self._facade.get_disposition(signum)
        if current is None or current == self._on_signal:
            return None
        return current

    def register_signal_handler(
        self,
        signum: Union[int, str],
        level: Union[str, int] = DEFAULT_LEVEL,
        call_previous: bool = True,
        restart_syscalls: bool = True,
        async_dispatch: Optional[bool] = True,
    ) -> None:
        """Installs the bridge's handler for a signal.

        If the signal was not registered with this bridge before, the current
        disposition is captured first. Re-registering only updates level and
        flags; the originally captured disposition is kept.

        If any step fails, no registration remains and the disposition table
        is as it was before the call.

        Args:
            signum (Union[int, str]): The signal number or name, e.g.
                ``signal.SIGUSR1`` or ``"SIGUSR1"``
            level (Union[str, int], optional): The severity to log at, see
                :py:data:`~sigbridge.levels.LOG_LEVELS`
            call_previous (bool, optional): Whether to carry out the
                previous disposition after logging
            restart_syscalls (bool, optional): Whether blocking system calls
                interrupted by this signal are restarted automatically
                at the OS level. Note that CPython itself retries most system
                calls that were interrupted by a signal (PEP 475), so with
                False, blocking calls made from Python code still do not
                return early; the flag only affects C-level code.
            async_dispatch (Optional[bool], optional): If not None, sets the
                process-wide dispatch mode

        Raises:
            UnsupportedSignalError: If the signal cannot be handled on this
                platform
            InvalidSeverityError: On an unrecognized severity
        """
        if self._closed:
            raise RuntimeError(f"{self} was already closed!")

        signum = self._resolve_signum(signum)
        level = get_level(level)

        with REGISTRATION_LOCK:
            existing = self._registrations.get(signum)
            if existing is None:
                previous = self._registry.capture(signum)

            else:
                previous = existing.previous
                current = self._foreign_handler(signum)
                if current is not None:
                    log.caution(
                        "The handler of %s was replaced outside of this "
                        "bridge by %r. Overwriting it; the disposition "
                        "captured at the first registration is kept.",
                        signal_name(signum),
                        current,
                    )

            # The registration needs to be in place before the handler is
            # installed, as the signal may arrive right afterwards.
            self._registrations[signum] = SignalRegistration(
                signum=signum,
                level=level,
                call_previous=bool(call_previous),
                restart_syscalls=bool(restart_syscalls),
                async_dispatch=(
                    None if async_dispatch is None else bool(async_dispatch)
                ),
                previous=previous,
                message=MESSAGE_FSTR.format(name=signal_name(signum)),
            )

            try:
                self._facade.set_disposition(signum, self._on_signal)

            except BaseException:
                self._rollback(signum, existing, restore=False)
                raise

            try:
                # Installing a disposition may reset the restart flag; thus
                # this needs to come afterwards.
                self._facade.set_restart(signum, restart_syscalls)

            except BaseException:
                self._rollback(signum, existing, restore=True)
                raise

            if async_dispatch is not None:
                self._dispatch.set_async_dispatch(async_dispatch)

        log.remark(
            "Registered %s at level %s (call previous: %s, restart "
            "syscalls: %s, async dispatch: %s).",
            signal_name(signum),
            logging.getLevelName(level),
            call_previous,
            restart_syscalls,
            "unchanged" if async_dispatch is None else async_dispatch,
        )

    def _rollback(
        self,
        signum: int,
        existing: Optional[SignalRegistration],
        *,
        restore: bool,
    ) -> None:
        """Undoes a partially completed registration"""
        if existing is not None:
            self._registrations[signum] = existing
            return

        reg = self._registrations.pop(signum)
        if restore:
            self._registry.restore(signum, reg.previous)
        else:
            self._registry.discard(reg.previous)

    def register_from_cfg(
        self, cfg: Union[BridgeConfig, dict] = None, **update
    ) -> None:
        """Registers all signals specified in a bridge configuration.

        Args:
            cfg (Union[BridgeConfig, dict], optional): The configuration. If
                not given, loads it via
                :py:func:`~sigbridge.cfg.load_bridge_cfg`
            **update: Passed on to ``load_bridge_cfg`` if no ``cfg`` is given
        """
        if cfg is None:
            cfg = load_bridge_cfg(**update)

        elif isinstance(cfg, dict):
            cfg = parse_bridge_cfg(cfg)

        for reg in cfg.registrations:
            self.register_signal_handler(
                reg.signal,
                reg.level,
                call_previous=reg.call_previous,
                restart_syscalls=reg.restart_syscalls,
                async_dispatch=reg.async_dispatch,
            )

    def unregister(self, sig: Union[int, str]) -> None:
        """Restores the previous disposition of a signal and removes its
        registration. A reaction to that signal that is still waiting for the
        next poll point is dropped.

        Bridges that register the same signal are expected to be unregistered
        in reverse order. If the handler was replaced in the meantime, e.g. by
        another bridge, a message is logged and the replacing handler is
        removed as well.

        Raises:
            ValueError: If the signal is not registered with this bridge
        """
        signum = self._resolve_signum(sig)

        with REGISTRATION_LOCK:
            reg = self._registrations.get(signum)
            if reg is None:
                _avail = ", ".join(
                    r.name for r in self._registrations.values()
                )
                raise ValueError(
                    f"Signal {signal_name(signum)} is not registered with "
                    f"this bridge! Registered signals: {_avail or '(none)'}"
                )

            current = self._foreign_handler(signum)
            if current is not None:
                log.caution(
                    "The handler of %s was replaced outside of this bridge "
                    "by %r. Restoring the disposition captured at "
                    "registration nevertheless, which removes that handler.",
                    signal_name(signum),
                    current,
                )

            self._registry.restore(signum, reg.previous)
            del self._registrations[signum]

            if self._dispatch.discard(signum, self._react):
                log.remark(
                    "Dropped pending reaction to %s.", signal_name(signum)
                )

        log.debug("Unregistered %s.", signal_name(signum))

    def close(self) -> None:
        """Restores all previous dispositions, most recent registration first.
        Further registrations are not possible afterwards."""
        for signum in reversed(list(self._registrations)):
            self.unregister(signum)

        self._closed = True
        log.debug("%s closed.", self)

    def __enter__(self) -> "SignalBridge":
        return self

    def __exit__(self, *exc_info):
        self.close()

    # .. Delivery .............................................................

    def _on_signal(self, signum: int, frame: Optional[FrameType]) -> None:
        """The handler that is installed for all registered signals"""
        self._dispatch.deliver(signum, self._react, frame)

    def dispatch(self) -> int:
        """Runs pending reactions; see
        :py:meth:`~sigbridge.dispatch.DispatchModeController.dispatch`"""
        return self._dispatch.dispatch()

    def handle_signal(
        self,
        signum: int,
        siginfo: Any = None,
        frame: Optional[FrameType] = None,
    ) -> None:
        """Reacts to a signal right away, regardless of the dispatch mode.

        This is what happens upon delivery of a registered signal. It can also
        be invoked directly, e.g. with a siginfo obtained from
        :py:func:`signal.sigwaitinfo`. Signals that are not registered are
        logged at the default level and not forwarded.

        Args:
            signum (int): The signal number
            siginfo (Any, optional): Signal metadata, see
                :py:func:`~sigbridge.bridge.build_context`
            frame (Optional[FrameType], optional): The interrupted frame,
                passed on to a previous handler
        """
        self._react(signum, frame, siginfo)

    def _react(
        self,
        signum: int,
        frame: Optional[FrameType] = None,
        siginfo: Any = None,
    ) -> None:
        """Logs the signal and then forwards it to the previous disposition.

        Exceptions are not allowed to propagate into the interrupted frame; an
        exception raised by a previous handler that is *not* an
        :py:exc:`Exception` (e.g. :py:exc:`KeyboardInterrupt`) is considered
        the way that handler terminates and does propagate.
        """
        reg = self._registrations.get(signum)

        try:
            if reg is not None:
                level, message = reg.level, reg.message
            else:
                level = self._fallback_level
                message = MESSAGE_FSTR.format(name=signal_name(signum))

            self._sink.emit(level, message, build_context(signum, siginfo))

        except Exception as exc:
            self._report_fault(DeliveryHandlerFault(signum, "emit", exc))

        if reg is None or not reg.call_previous:
            return

        try:
            reg.previous.disposition.invoke(signum, frame, facade=self._facade)

        except Exception as exc:
            self._report_fault(DeliveryHandlerFault(signum, "previous", exc))

    def _report_fault(self, fault: DeliveryHandlerFault) -> None:
        """Stores a delivery fault and writes a notice to stderr.

        Writes directly to the file descriptor, as the logging machinery may
        be the very thing that failed.
        """
        self.faults.append(fault)
        with contextlib.suppress(OSError):
            os.write(2, f"sigbridge: {fault}\n".encode(errors="replace"))

    # .. Magic methods ........................................................

    def __str__(self) -> str:
        return f"<{type(self).__name__} to {self._sink}>"

    def __repr__(self) -> str:
        names = ", ".join(r.name for r in self._registrations.values())
        return f"<{type(self).__name__} to {self._sink}: [{names}]>"


# -----------------------------------------------------------------------------


def attach_signal_loggers(
    sink: LoggerSink = None,
    *,
    cfg: Union[BridgeConfig, dict] = None,
    facade: SignalFacade = None,
    **update,
) -> SignalBridge:
    """Sets up a :py:class:`~sigbridge.bridge.SignalBridge` and registers the
    signals given in the configuration.

    Args:
        sink (LoggerSink, optional): The sink; if not given, uses a
            :py:class:`~sigbridge.sink.LoggingSink` to the
            ``sigbridge.signals`` logger
        cfg (Union[BridgeConfig, dict], optional): The configuration; if not
            given, loads it from the base and user configuration
        facade (SignalFacade, optional): The disposition table to operate on
        **update: Updates to the loaded configuration, if ``cfg`` is not
            given

    Returns:
        SignalBridge: The bridge, with all configured signals registered
    """
    bridge = SignalBridge(
        sink if sink is not None else LoggingSink(), facade=facade
    )
    bridge.register_from_cfg(cfg, **update)
    return bridge
