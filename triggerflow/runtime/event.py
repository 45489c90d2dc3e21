"""Event dispatch: transition selection and per-trigger context."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from itertools import chain
from typing import TYPE_CHECKING, Any

from triggerflow.api.callbacks import Callback
from triggerflow.api.errors import UnknownTriggerError
from triggerflow.runtime.state import State
from triggerflow.runtime.transition import Transition

if TYPE_CHECKING:
    from triggerflow.runtime.machine import Machine

_LOG = logging.getLogger("triggerflow.event")


@dataclass(slots=True)
class EventData:
    """Context shared by every callback of one trigger invocation.

    ``transition`` tracks the candidate currently executing, ``error`` holds
    the exception raised by a callback (visible to ``finalize_event``) and
    ``result`` reports whether a transition fired.
    """

    state: State
    event: Event
    machine: Machine
    model: object
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    transition: Transition | None = None
    error: BaseException | None = None
    result: bool = False

    def update(self, state: State | str | Enum) -> None:
        """Point the context at `state` after a state change."""
        if not isinstance(state, State):
            state = self.machine.get_state(state)
        self.state = state

    def __repr__(self) -> str:
        return f"<{type(self).__name__}('{self.state}', {self.transition})@{id(self)}>"


class Event:
    """Named trigger owning the candidate transitions per source state."""

    def __init__(self, name: str, machine: Machine) -> None:
        self.name = name
        self.machine = machine
        self.transitions: defaultdict[str, list[Transition]] = defaultdict(list)

    def add_transition(self, transition: Transition) -> None:
        """Append candidate; order of registration is the match order."""
        self.transitions[transition.source].append(transition)

    def trigger(self, model: object, *args: Any, **kwargs: Any) -> bool:
        """Process the event for `model` through the machine's dispatcher.

        Returns whether a transition fired; queued machines always report
        ``True`` since guards run later.
        """
        func = partial(self._trigger, model, *args, **kwargs)
        return self.machine.process(func)

    def _trigger(self, model: object, *args: Any, **kwargs: Any) -> bool:
        machine = self.machine
        state = machine.get_model_state(model)
        if state.name not in self.transitions:
            message = (
                f"{machine.name}Can't trigger event {self.name} from state {state.name}!"
            )
            if machine.resolve_ignore_invalid_triggers(state):
                _LOG.warning(message)
                return False
            raise UnknownTriggerError(message, event=self.name, state=state.name)
        event_data = EventData(
            state=state,
            event=self,
            machine=machine,
            model=model,
            args=args,
            kwargs=kwargs,
        )
        return self._process(event_data)

    def _process(self, event_data: EventData) -> bool:
        machine = self.machine
        try:
            machine.callbacks(machine.prepare_event, event_data)
            _LOG.debug("%sExecuted machine preparation callbacks before conditions.", machine.name)
            for transition in tuple(self.transitions[event_data.state.name]):
                event_data.transition = transition
                if transition.execute(event_data):
                    event_data.result = True
                    break
        except Exception as exc:
            event_data.error = exc
            raise
        finally:
            machine.callbacks(machine.finalize_event, event_data)
            _LOG.debug("%sExecuted machine finalize callbacks", machine.name)
        return event_data.result

    def add_callback(self, kind: str, func: Callback) -> None:
        """Append a callback of `kind` to every transition of this event."""
        for transition in chain.from_iterable(self.transitions.values()):
            transition.add_callback(kind, func)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}('{self.name}')@{id(self)}>"
