"""Trigger dispatch disciplines: synchronous and queued."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable

from triggerflow.api.errors import MachineError

_LOG = logging.getLogger("triggerflow.machine")

DeferredTrigger = Callable[[], bool]


class SynchronousDispatcher:
    """Run triggers on the caller's stack and reject nested triggers."""

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def pending_count(self) -> int:
        return 0

    def process(self, trigger: DeferredTrigger) -> bool:
        """Execute `trigger` now; raise if another trigger is still running."""
        if self._in_flight:
            raise MachineError(
                f"{self._name}Attempt to process events synchronously while a transition "
                "is already in progress!"
            )
        self._in_flight = True
        try:
            return trigger()
        finally:
            self._in_flight = False


class QueuedDispatcher:
    """FIFO processing of triggers fired from within callbacks.

    The first caller drains the queue; triggers fired while draining are only
    appended and run after the current one completes. An exception discards
    every pending trigger before propagating.
    """

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._queue: deque[DeferredTrigger] = deque()

    @property
    def in_flight(self) -> bool:
        return bool(self._queue)

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    def process(self, trigger: DeferredTrigger) -> bool:
        """Queue `trigger` and drain unless a drain loop is already running."""
        self._queue.append(trigger)
        if len(self._queue) > 1:
            _LOG.debug("%sQueued trigger behind %d pending.", self._name, len(self._queue) - 1)
            return True
        while self._queue:
            try:
                self._queue[0]()
                self._queue.popleft()
            except Exception:
                _LOG.debug(
                    "%sDiscarding %d queued trigger(s) after error.",
                    self._name,
                    len(self._queue),
                )
                self._queue.clear()
                raise
        return True


TransitionDispatcher = SynchronousDispatcher | QueuedDispatcher


def create_dispatcher(*, queued: bool, name: str = "") -> TransitionDispatcher:
    """Create dispatcher matching the machine's queue mode."""
    if queued:
        return QueuedDispatcher(name)
    return SynchronousDispatcher(name)
