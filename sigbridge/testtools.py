"""Tools that help testing code that uses signal bridges, without touching the
actual signal dispositions of the process"""

import signal
from dataclasses import dataclass, field
from types import FrameType
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from ._signal import SIGMAP
from .exceptions import UnsupportedSignalError
from .facade import RawDisposition, SignalFacade
from .levels import get_level
from .sink import LoggerSink

# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class SinkRecord:
    """A record as received by the :py:class:`.RecordingSink`"""

    level: int
    message: str
    context: Dict[str, Any] = field(default_factory=dict)


class RecordingSink(LoggerSink):
    """A sink that keeps all records in memory"""

    def __init__(self, *, accept: bool = True):
        """Sets up the sink.

        Args:
            accept (bool, optional): What :py:meth:`.emit` returns
        """
        self.records: List[SinkRecord] = []
        self.accept = accept

    def emit(self, level, message, context) -> bool:
        self.records.append(SinkRecord(level, message, dict(context)))
        return self.accept

    def has_records(self, level: Union[str, int]) -> bool:
        """Whether there are any records at the given level"""
        level = get_level(level)
        return any(r.level == level for r in self.records)

    def has_record_that_contains(
        self, level: Union[str, int], substring: str
    ) -> bool:
        """Whether there is a record at the given level whose message
        contains the given substring"""
        level = get_level(level)
        return any(
            r.level == level and substring in r.message for r in self.records
        )

    def clear(self):
        self.records.clear()

    def __len__(self) -> int:
        return len(self.records)


# -----------------------------------------------------------------------------


class FakeSignalFacade(SignalFacade):
    """An in-memory disposition table that behaves like the one of a process,
    but where delivering a signal only calls the installed handler.

    Default actions are not carried out but recorded in
    :py:attr:`.default_actions`.
    """

    def __init__(
        self,
        *,
        signals: Iterable[int] = None,
        introspectable: bool = True,
        initial: Dict[int, RawDisposition] = None,
    ):
        """Sets up the fake disposition table.

        Args:
            signals (Iterable[int], optional): The valid signal numbers. By
                default, all signals known to the :py:mod:`signal` module.
            introspectable (bool, optional): If False, reading a disposition
                reports None, like for handlers installed outside of Python
            initial (Dict[int, RawDisposition], optional): Initial
                dispositions; all others are ``SIG_DFL``
        """
        if signals is None:
            signals = SIGMAP.values()

        self.table: Dict[int, RawDisposition] = {
            int(s): signal.SIG_DFL for s in signals
        }
        self.table.update(initial if initial else dict())
        self.restart: Dict[int, bool] = dict()
        self.default_actions: List[int] = []
        self.introspectable = introspectable

    def valid_signals(self) -> Set[int]:
        return set(self.table)

    def get_disposition(self, signum: int) -> RawDisposition:
        if signum not in self.table:
            raise UnsupportedSignalError(
                f"Signal number {signum} is not valid on this platform!"
            )
        if not self.introspectable:
            return None
        return self.table[signum]

    def set_disposition(
        self, signum: int, disposition: RawDisposition
    ) -> RawDisposition:
        self.check_catchable(signum)
        previous = self.table[signum]
        self.table[signum] = disposition
        return previous

    def set_restart(self, signum: int, restart: bool) -> None:
        self.restart[signum] = restart

    def perform_default(self, signum: int) -> None:
        self.default_actions.append(signum)

    def deliver(self, signum: int, frame: Optional[FrameType] = None) -> None:
        """Simulates the delivery of a signal to the process"""
        disposition = self.table[signum]

        if disposition is None or disposition == signal.SIG_DFL:
            self.perform_default(signum)

        elif disposition == signal.SIG_IGN:
            return

        else:
            disposition(signum, frame)
