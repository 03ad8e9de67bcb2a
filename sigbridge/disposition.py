"""Implements the signal disposition registry, which captures the disposition
that was in place before the bridge installed its own handler and allows to
restore it later.

Dispositions are represented as a tagged variant: a
:py:class:`~sigbridge.disposition.Disposition` is either ``Default``,
``Ignore``, or a ``Delegate`` wrapping a handler callable.
"""

import itertools
import logging
import signal
import threading
from dataclasses import dataclass
from types import FrameType
from typing import Callable, Dict, Optional

from ._signal import signal_name
from .exceptions import InvalidDispositionError
from .facade import RawDisposition, SignalFacade

log = logging.getLogger(__name__)

REGISTRATION_LOCK = threading.RLock()
"""Serializes capturing, installing and restoring of dispositions. Must never
be acquired from within the signal delivery path."""

# -----------------------------------------------------------------------------


class Disposition:
    """Base class of the disposition variants"""

    KIND: str = None
    """Name of the variant"""

    @property
    def raw(self) -> RawDisposition:
        """The disposition in the form the platform uses"""
        raise NotImplementedError()

    def invoke(
        self,
        signum: int,
        frame: Optional[FrameType] = None,
        *,
        facade: SignalFacade,
    ) -> None:
        """Carries out this disposition for the given signal"""
        raise NotImplementedError()

    @classmethod
    def from_raw(cls, raw: RawDisposition) -> "Disposition":
        """Builds the disposition variant from a platform disposition.

        A disposition that could not be introspected (None) is interpreted as
        the default action.
        """
        if raw is None:
            return Default()

        if callable(raw):
            return Delegate(raw)

        if raw == signal.SIG_IGN:
            return Ignore()

        if raw == signal.SIG_DFL:
            return Default()

        raise InvalidDispositionError(
            f"Cannot interpret {repr(raw)} as a signal disposition!"
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"

    def __eq__(self, other) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))


class Default(Disposition):
    """The platform's default action, which may terminate the process"""

    KIND = "default"

    @property
    def raw(self) -> RawDisposition:
        return signal.SIG_DFL

    def invoke(self, signum, frame=None, *, facade):
        facade.perform_default(signum)


class Ignore(Disposition):
    """The signal is ignored; invoking it is a no-op"""

    KIND = "ignore"

    @property
    def raw(self) -> RawDisposition:
        return signal.SIG_IGN

    def invoke(self, signum, frame=None, *, facade):
        pass


class Delegate(Disposition):
    """A previously installed handler, called as ``handler(signum, frame)``"""

    KIND = "delegate"

    def __init__(self, handler: Callable):
        self.handler = handler

    @property
    def raw(self) -> RawDisposition:
        return self.handler

    def invoke(self, signum, frame=None, *, facade):
        self.handler(signum, frame)

    def __repr__(self) -> str:
        return f"<Delegate {self.handler!r}>"

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.handler == other.handler

    def __hash__(self) -> int:
        return hash((type(self), self.handler))


# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class DispositionHandle:
    """An opaque handle to a captured disposition.

    Attributes:
        signum: The signal number the disposition was captured for
        disposition: The disposition variant
        raw: Exactly what the platform reported; restoring passes it back
        degraded: Whether the platform could not report the disposition, in
            which case the default action is assumed
        token: Identifies the handle within the issuing registry
    """

    signum: int
    disposition: Disposition
    raw: RawDisposition
    degraded: bool
    token: int

    @property
    def kind(self) -> str:
        """The kind of the captured disposition"""
        return self.disposition.KIND


class DispositionRegistry:
    """Captures and restores dispositions through a
    :py:class:`~sigbridge.facade.SignalFacade`.

    Each captured handle can be restored exactly once.
    """

    def __init__(self, facade: SignalFacade):
        self._facade = facade
        self._issued: Dict[int, DispositionHandle] = dict()
        self._tokens = itertools.count()

    @property
    def facade(self) -> SignalFacade:
        return self._facade

    def capture(self, signum: int) -> DispositionHandle:
        """Reads the current disposition of ``signum`` without altering it.

        Raises:
            UnsupportedSignalError: If the platform cannot report a
                disposition for this signal number
        """
        with REGISTRATION_LOCK:
            raw = self._facade.get_disposition(signum)
            degraded = raw is None
            if degraded:
                log.caution(
                    "Cannot introspect the current disposition of %s; "
                    "assuming the default action.",
                    signal_name(signum),
                )

            handle = DispositionHandle(
                signum=signum,
                disposition=Disposition.from_raw(raw),
                raw=raw,
                degraded=degraded,
                token=next(self._tokens),
            )
            self._issued[handle.token] = handle

        log.debug(
            "Captured %s disposition of %s.", handle.kind, signal_name(signum)
        )
        return handle

    def is_live(self, handle: DispositionHandle) -> bool:
        """Whether the handle was issued here and was not yet restored"""
        return self._issued.get(handle.token) is handle

    def restore(self, signum: int, handle: DispositionHandle) -> None:
        """Re-installs a previously captured disposition.

        Raises:
            InvalidDispositionError: If the handle is stale or foreign or was
                captured for another signal number
        """
        with REGISTRATION_LOCK:
            if not isinstance(handle, DispositionHandle) or not self.is_live(
                handle
            ):
                raise InvalidDispositionError(
                    f"Cannot restore {signal_name(signum)} from {handle}: the "
                    "handle was either already restored or was not issued by "
                    "this registry!"
                )

            if handle.signum != signum:
                raise InvalidDispositionError(
                    f"Cannot restore {signal_name(signum)} from a handle that "
                    f"was captured for {signal_name(handle.signum)}!"
                )

            raw = handle.raw if not handle.degraded else signal.SIG_DFL
            self._facade.set_disposition(signum, raw)
            del self._issued[handle.token]

        log.debug(
            "Restored %s disposition of %s.", handle.kind, signal_name(signum)
        )

    def discard(self, handle: DispositionHandle) -> None:
        """Invalidates a handle without restoring it"""
        with REGISTRATION_LOCK:
            self._issued.pop(handle.token, None)
