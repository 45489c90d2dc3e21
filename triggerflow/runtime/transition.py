"""Transition execution pipeline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from triggerflow.api.callbacks import Callback, CallbackSpec
from triggerflow.runtime.arguments import listify
from triggerflow.runtime.condition import Condition

if TYPE_CHECKING:
    from triggerflow.runtime.event import EventData

_LOG = logging.getLogger("triggerflow.transition")

TRANSITION_CALLBACK_KINDS: tuple[str, ...] = ("before", "after", "prepare")


class Transition:
    """One candidate move from `source` to `dest` owned by an ``Event``.

    A ``dest`` of ``None`` marks an internal transition: callbacks run but no
    state is exited or entered and the model keeps its state value.
    """

    def __init__(
        self,
        source: str,
        dest: str | None,
        conditions: CallbackSpec = None,
        unless: CallbackSpec = None,
        before: CallbackSpec = None,
        after: CallbackSpec = None,
        prepare: CallbackSpec = None,
    ) -> None:
        self.source = source
        self.dest = dest
        self.prepare: list[Callback] = listify(prepare)
        self.before: list[Callback] = listify(before)
        self.after: list[Callback] = listify(after)
        self.conditions: list[Condition] = [Condition(func) for func in listify(conditions)]
        self.unless: list[Condition] = [Condition(func, target=False) for func in listify(unless)]

    @property
    def internal(self) -> bool:
        return self.dest is None

    def execute(self, event_data: EventData) -> bool:
        """Run the callback pipeline; return whether the transition fired."""
        machine = event_data.machine
        _LOG.debug(
            "%sInitiating transition from state %s to state %s...",
            machine.name,
            self.source,
            self.dest,
        )
        machine.callbacks(self.prepare, event_data)
        _LOG.debug("%sExecuted callbacks before conditions.", machine.name)

        for condition in (*self.conditions, *self.unless):
            if not condition.check(event_data):
                _LOG.debug(
                    "%sTransition condition failed: %s() does not return %s. Transition halted.",
                    machine.name,
                    condition.func,
                    condition.target,
                )
                return False

        machine.callbacks([*machine.before_state_change, *self.before], event_data)
        _LOG.debug("%sExecuted callback before transition.", machine.name)

        if self.dest is not None:
            self._change_state(event_data, self.dest)

        machine.callbacks([*self.after, *machine.after_state_change], event_data)
        _LOG.debug("%sExecuted callback after transition.", machine.name)
        return True

    def _change_state(self, event_data: EventData, dest: str) -> None:
        machine = event_data.machine
        machine.get_state(self.source).exit(event_data)
        machine.set_state(dest, model=event_data.model)
        event_data.update(dest)
        machine.get_state(dest).enter(event_data)

    def add_callback(self, kind: str, func: Callback) -> None:
        """Append a ``before``, ``after`` or ``prepare`` callback."""
        if kind not in TRANSITION_CALLBACK_KINDS:
            raise ValueError(f"unknown transition callback kind: {kind}")
        getattr(self, kind).append(func)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}('{self.source}', '{self.dest}')@{id(self)}>"
