"""Implements the process-wide dispatch mode of signal reactions.

In *asynchronous* mode, a reaction runs as soon as the interpreter invokes the
Python-level signal handler, i.e. interleaved with normal execution at some
bytecode boundary of the main thread.

In *queued* mode, the handler merely records the delivery. The reactions are
only run once :py:meth:`~sigbridge.dispatch.DispatchModeController.dispatch`
is called. Multiple deliveries of the same signal number before that poll
point coalesce into a single reaction per reaction target, e.g. per bridge
that registered that signal.
"""

import logging
from types import FrameType
from typing import Callable, Dict, Optional, Tuple

log = logging.getLogger(__name__)

Reaction = Callable[[int, Optional[FrameType]], None]
"""Signature of a reaction to a signal: ``(signum, frame) -> None``"""

# -----------------------------------------------------------------------------


class DispatchModeController:
    """Holds the dispatch mode and the queue of pending reactions"""

    def __init__(self, *, async_dispatch: bool = True):
        self._async = bool(async_dispatch)
        self._pending: Dict[Tuple[int, Reaction], Optional[FrameType]]
        self._pending = dict()

    @property
    def async_dispatch(self) -> bool:
        """Whether reactions are run immediately upon delivery"""
        return self._async

    @property
    def pending(self) -> Tuple[int]:
        """Signal numbers of the reactions waiting for the next poll point"""
        return tuple(dict.fromkeys(s for s, _ in list(self._pending)))

    def set_async_dispatch(self, enabled: bool) -> bool:
        """Switches the dispatch mode.

        Reactions that are pending when switching to asynchronous mode stay
        queued until the next call to :py:meth:`.dispatch`.

        Args:
            enabled (bool): Whether to dispatch asynchronously

        Returns:
            bool: The previous mode
        """
        previous = self._async
        self._async = bool(enabled)

        if previous != self._async:
            log.debug(
                "Switched to %s signal dispatch.",
                "asynchronous" if self._async else "queued",
            )
        return previous

    def deliver(
        self, signum: int, reaction: Reaction, frame: Optional[FrameType]
    ) -> None:
        """Runs the reaction right away or queues it, depending on the mode.

        This is called from within signal handlers and thus only does a dict
        assignment in queued mode.
        """
        if self._async:
            reaction(signum, frame)
        else:
            self._pending[(signum, reaction)] = frame

    def dispatch(self) -> int:
        """The poll point: runs each pending reaction once.

        Reactions that are queued while dispatching, e.g. because a reaction
        forwards the signal to the handler of another bridge, are run as well.
        A reaction that was already run during this call and is queued again
        stays pending until the next poll point.

        Returns:
            int: The number of reactions that were run
        """
        done = set()
        while True:
            keys = [k for k in list(self._pending) if k not in done]
            if not keys:
                break

            for key in keys:
                if key not in self._pending:
                    continue

                frame = self._pending.pop(key)
                done.add(key)
                signum, reaction = key
                reaction(signum, frame)

        return len(done)

    def discard(self, signum: int, reaction: Reaction = None) -> bool:
        """Drops pending reactions to a signal without running them.

        Args:
            signum (int): The signal number
            reaction (Reaction, optional): If given, only drops this reaction;
                otherwise all reactions to that signal

        Returns:
            bool: Whether any reaction was dropped
        """
        keys = [
            k
            for k in list(self._pending)
            if k[0] == signum and (reaction is None or k[1] == reaction)
        ]
        for key in keys:
            self._pending.pop(key, None)
        return bool(keys)

    def __str__(self) -> str:
        mode = "async" if self._async else "queued"
        return f"<{type(self).__name__} {mode}, {len(self._pending)} pending>"


# -----------------------------------------------------------------------------

DISPATCH_MODE = DispatchModeController()
"""The process-wide dispatch mode controller, shared by all bridges"""
