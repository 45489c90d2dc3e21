"""Named machine states with enter/exit callbacks."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from triggerflow.api.callbacks import Callback, CallbackSpec
from triggerflow.runtime.arguments import listify

if TYPE_CHECKING:
    from triggerflow.runtime.event import EventData

_LOG = logging.getLogger("triggerflow.state")

STATE_CALLBACK_KINDS: tuple[str, ...] = ("enter", "exit")


class State:
    """A state managed by a ``Machine``.

    ``name`` identifies the state inside the machine; ``value`` is what gets
    written into the model (the enum member for enum states, otherwise the
    name). ``ignore_invalid_triggers`` of ``None`` defers to the machine.
    """

    def __init__(
        self,
        name: str | Enum,
        on_enter: CallbackSpec = None,
        on_exit: CallbackSpec = None,
        ignore_invalid_triggers: bool | None = None,
    ) -> None:
        self._name = name
        self.on_enter: list[Callback] = listify(on_enter)
        self.on_exit: list[Callback] = listify(on_exit)
        self.ignore_invalid_triggers = ignore_invalid_triggers

    @property
    def name(self) -> str:
        if isinstance(self._name, Enum):
            return self._name.name
        return self._name

    @property
    def value(self) -> Any:
        return self._name

    def enter(self, event_data: EventData) -> None:
        """Run enter callbacks in registration order."""
        prefix = event_data.machine.name
        _LOG.debug("%sEntering state %s. Processing callbacks...", prefix, self.name)
        event_data.machine.callbacks(self.on_enter, event_data)
        _LOG.info("%sFinished processing state %s enter callbacks.", prefix, self.name)

    def exit(self, event_data: EventData) -> None:
        """Run exit callbacks in registration order."""
        prefix = event_data.machine.name
        _LOG.debug("%sExiting state %s. Processing callbacks...", prefix, self.name)
        event_data.machine.callbacks(self.on_exit, event_data)
        _LOG.info("%sFinished processing state %s exit callbacks.", prefix, self.name)

    def add_callback(self, kind: str, func: Callback) -> None:
        """Append an ``enter`` or ``exit`` callback."""
        if kind not in STATE_CALLBACK_KINDS:
            raise ValueError(f"unknown state callback kind: {kind}")
        self._callbacks(kind).append(func)

    def has_callback(self, kind: str, func: Callback) -> bool:
        return func in self._callbacks(kind)

    def _callbacks(self, kind: str) -> list[Callback]:
        return self.on_enter if kind == "enter" else self.on_exit

    def __repr__(self) -> str:
        return f"<{type(self).__name__}('{self.name}')@{id(self)}>"
