"""State machine registry, registration helpers and trigger entry points."""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from collections.abc import Callable, Iterable
from enum import Enum
from itertools import chain
from typing import Any

from triggerflow.api.callbacks import Callback, CallbackResolver, CallbackSpec, StateAccessor
from triggerflow.api.errors import (
    InitialStateError,
    InsufficientStatesError,
    RegisteredStateError,
    TriggerNameError,
    UnknownEventError,
    UnknownStateError,
)
from triggerflow.runtime.arguments import listify, prep_ordered_arg
from triggerflow.runtime.dispatch import DeferredTrigger, create_dispatcher
from triggerflow.runtime.event import Event, EventData
from triggerflow.runtime.resolution import AttributeStateAccessor, ModelCallbackResolver
from triggerflow.runtime.state import STATE_CALLBACK_KINDS, State
from triggerflow.runtime.transition import Transition

_LOG = logging.getLogger("triggerflow.machine")

StateRef = str | Enum | State


class Machine:
    """Owns states, events and bound models, and drives their transitions.

    Models are plain host objects; the machine only reads and writes their
    state attribute through a ``StateAccessor`` and never attaches methods to
    them. Hosts fire events with ``trigger(model, name)`` and query states with
    ``is_state(model, name)``.

    Callback lists run in this order for a firing transition:
    ``prepare_event``, transition ``prepare``, guards, ``before_state_change``,
    transition ``before``, exit/enter, transition ``after``,
    ``after_state_change`` and finally ``finalize_event``, which also runs
    when a callback raised.
    """

    WILDCARD_ALL = "*"
    WILDCARD_SAME = "="

    state_cls = State
    transition_cls = Transition
    event_cls = Event

    def __init__(
        self,
        model: object | list[object] | None = None,
        states: Any = None,
        initial: StateRef | None = "initial",
        transitions: Any = None,
        send_event: bool = False,
        auto_transitions: bool = True,
        ordered_transitions: bool = False,
        ignore_invalid_triggers: bool | None = None,
        before_state_change: CallbackSpec = None,
        after_state_change: CallbackSpec = None,
        name: str | None = None,
        queued: bool = False,
        prepare_event: CallbackSpec = None,
        finalize_event: CallbackSpec = None,
        model_attribute: str = "state",
        resolver: CallbackResolver | None = None,
        accessor: StateAccessor | None = None,
    ) -> None:
        self.name = f"{name}: " if name else ""
        self._accessor: StateAccessor = (
            accessor if accessor is not None else AttributeStateAccessor(model_attribute)
        )
        self._resolver: CallbackResolver = (
            resolver if resolver is not None else ModelCallbackResolver()
        )
        self._queued = queued
        self._dispatcher = create_dispatcher(queued=queued, name=self.name)
        self._initial: str | None = None

        self.send_event = send_event
        self.auto_transitions = auto_transitions
        self.ignore_invalid_triggers = bool(ignore_invalid_triggers)
        self.states: dict[str, State] = {}
        self.events: dict[str, Event] = {}
        self.models: list[object] = []
        self.prepare_event = prepare_event
        self.before_state_change = before_state_change
        self.after_state_change = after_state_change
        self.finalize_event = finalize_event

        if states is not None:
            self.add_states(states)
        if initial is not None:
            self.initial = initial
        if transitions is not None:
            self.add_transitions(transitions)
        if ordered_transitions:
            self.add_ordered_transitions()
        if model is not None:
            self.add_model(model)

    @property
    def model_attribute(self) -> str:
        return self._accessor.attribute

    @property
    def has_queue(self) -> bool:
        """Return whether triggers are processed through the FIFO queue."""
        return self._queued

    @property
    def initial(self) -> str | None:
        """Name of the state new models start in."""
        return self._initial

    @initial.setter
    def initial(self, value: StateRef) -> None:
        if isinstance(value, State):
            if value.name not in self.states:
                self.add_state(value)
            else:
                self._has_state(value, raise_error=True)
            self._initial = value.name
            return
        state_name = value.name if isinstance(value, Enum) else value
        if state_name not in self.states:
            self.add_state(value)
        self._initial = state_name

    @property
    def prepare_event(self) -> list[Callback]:
        """Callbacks run once per processed event, before any guard."""
        return self._prepare_event

    @prepare_event.setter
    def prepare_event(self, value: CallbackSpec) -> None:
        self._prepare_event: list[Callback] = listify(value)

    @property
    def before_state_change(self) -> list[Callback]:
        """Callbacks run after guards pass, ahead of transition ``before``."""
        return self._before_state_change

    @before_state_change.setter
    def before_state_change(self, value: CallbackSpec) -> None:
        self._before_state_change: list[Callback] = listify(value)

    @property
    def after_state_change(self) -> list[Callback]:
        """Callbacks run after transition ``after`` callbacks."""
        return self._after_state_change

    @after_state_change.setter
    def after_state_change(self, value: CallbackSpec) -> None:
        self._after_state_change: list[Callback] = listify(value)

    @property
    def finalize_event(self) -> list[Callback]:
        """Callbacks run once per processed event, even when it raised."""
        return self._finalize_event

    @finalize_event.setter
    def finalize_event(self, value: CallbackSpec) -> None:
        self._finalize_event: list[Callback] = listify(value)

    # Models

    def add_model(self, model: object | list[object], initial: StateRef | None = None) -> None:
        """Bind model(s) and place them in `initial` (machine default if omitted)."""
        if initial is None:
            if self.initial is None:
                raise InitialStateError()
            initial = self.initial
        for mod in listify(model):
            if any(existing is mod for existing in self.models):
                continue
            for state in self.states.values():
                self._add_model_to_state(state, mod)
            self.set_state(initial, model=mod)
            self.models.append(mod)

    def remove_model(self, model: object | list[object]) -> None:
        """Unbind model(s); their state attribute is left as is."""
        for mod in listify(model):
            self.models = [existing for existing in self.models if existing is not mod]

    def _add_model_to_state(self, state: State, model: object) -> None:
        # Bound `on_enter_<state>`/`on_exit_<state>` methods join the state's callbacks.
        for kind in STATE_CALLBACK_KINDS:
            method_name = f"on_{kind}_{state.name}"
            method = getattr(model, method_name, None)
            if inspect.ismethod(method) and not state.has_callback(kind, method_name):
                state.add_callback(kind, method_name)
                _LOG.debug("%sBound %s to state %s.", self.name, method_name, state.name)

    # States

    def get_state(self, state: StateRef) -> State:
        """Return registered ``State`` for a name, enum member or state."""
        name = self._plain_name(state)
        if name not in self.states:
            raise RegisteredStateError(name)
        return self.states[name]

    def get_model_state(self, model: object) -> State:
        return self.get_state(self._accessor.get_state(model))

    def is_state(self, model: object, state: StateRef) -> bool:
        """Return whether `model` currently is in `state`."""
        return self._accessor.get_state(model) == self.get_state(state).value

    def set_state(self, state: StateRef, model: object | list[object] | None = None) -> None:
        """Assign `state` to `model`, or to every bound model when omitted."""
        if not isinstance(state, State):
            state = self.get_state(state)
        models = self.models if model is None else listify(model)
        for mod in models:
            self._accessor.set_state(mod, state.value)

    def add_states(
        self,
        states: Any,
        on_enter: CallbackSpec = None,
        on_exit: CallbackSpec = None,
        ignore_invalid_triggers: bool | None = None,
    ) -> None:
        """Register state(s).

        Accepts names, enum members, ``State`` instances, dicts of ``State``
        keyword arguments, or a list of these. `on_enter`, `on_exit` and
        `ignore_invalid_triggers` apply to states created from names, enum
        members and dicts lacking the key.
        """
        for entry in listify(states):
            if isinstance(entry, (str, Enum)):
                state = self.state_cls(
                    entry,
                    on_enter=on_enter,
                    on_exit=on_exit,
                    ignore_invalid_triggers=ignore_invalid_triggers,
                )
            elif isinstance(entry, dict):
                params = dict(entry)
                params.setdefault("ignore_invalid_triggers", ignore_invalid_triggers)
                state = self.state_cls(**params)
            elif isinstance(entry, State):
                state = entry
            else:
                raise TypeError(f"unsupported state definition: {entry!r}")
            if state.name in self.states:
                raise ValueError(f"duplicate state name: {state.name}")
            self.states[state.name] = state
            for model in self.models:
                self._add_model_to_state(state, model)
            if self.auto_transitions:
                self._add_auto_transitions(state)

    add_state = add_states

    def _add_auto_transitions(self, state: State) -> None:
        for other in tuple(self.states):
            if other == state.name:
                self.add_transition(f"to_{other}", self.WILDCARD_ALL, other)
            else:
                self.add_transition(f"to_{other}", state.name, other)

    def add_state_callback(self, state: StateRef, kind: str, func: Callback) -> None:
        """Append an ``enter``/``exit`` callback to a registered state."""
        self.get_state(state).add_callback(kind, func)

    # Transitions

    def add_transition(
        self,
        trigger: str,
        source: Any,
        dest: StateRef | None,
        conditions: CallbackSpec = None,
        unless: CallbackSpec = None,
        before: CallbackSpec = None,
        after: CallbackSpec = None,
        prepare: CallbackSpec = None,
    ) -> None:
        """Register one transition per expanded source under `trigger`.

        `source` may be ``"*"`` for every registered state, or one or more
        states. `dest` may be ``"="`` to keep each source as destination, or
        ``None`` for an internal transition.
        """
        if trigger == self.model_attribute:
            raise TriggerNameError(trigger)
        if source == self.WILDCARD_ALL:
            sources = list(self.states)
        else:
            sources = [self._registered_name(entry) for entry in listify(source)]

        pairs: list[tuple[str, str | None]] = []
        for state_name in sources:
            if dest == self.WILDCARD_SAME:
                pairs.append((state_name, state_name))
            elif dest is not None:
                pairs.append((state_name, self._registered_name(dest)))
            else:
                pairs.append((state_name, None))

        event = self.events.get(trigger)
        if event is None:
            event = self.events[trigger] = self.event_cls(trigger, self)
        for state_name, dest_name in pairs:
            event.add_transition(
                self.transition_cls(
                    state_name,
                    dest_name,
                    conditions=conditions,
                    unless=unless,
                    before=before,
                    after=after,
                    prepare=prepare,
                )
            )

    def add_transitions(self, transitions: Any) -> None:
        """Register transitions given as keyword dicts or positional lists."""
        for transition in listify(transitions):
            if isinstance(transition, (list, tuple)):
                self.add_transition(*transition)
            else:
                self.add_transition(**transition)

    def add_ordered_transitions(
        self,
        states: Any = None,
        trigger: str = "next_state",
        loop: bool = True,
        loop_includes_initial: bool = True,
        conditions: Any = None,
        unless: Any = None,
        before: Any = None,
        after: Any = None,
        prepare: Any = None,
    ) -> None:
        """Add transitions moving linearly through `states` under `trigger`.

        The list is rotated so the initial state comes first. With `loop`, the
        last state transitions back to the first one, or to the state after
        the initial one when `loop_includes_initial` is false.
        """
        if states is None:
            names = list(self.states)
        else:
            names = [self._registered_name(entry) for entry in listify(states)]
        if len(names) < 2:
            raise InsufficientStatesError()
        len_transitions = len(names) if loop else len(names) - 1

        condition_args = prep_ordered_arg(len_transitions, conditions)
        unless_args = prep_ordered_arg(len_transitions, unless)
        before_args = prep_ordered_arg(len_transitions, before)
        after_args = prep_ordered_arg(len_transitions, after)
        prepare_args = prep_ordered_arg(len_transitions, prepare)

        if self._initial in names:
            idx = names.index(self._initial)
            names = names[idx:] + names[:idx]
            first_in_loop = names[0 if loop_includes_initial else 1]
        else:
            first_in_loop = names[0]

        for i in range(len(names) - 1):
            self.add_transition(
                trigger,
                names[i],
                names[i + 1],
                conditions=condition_args[i],
                unless=unless_args[i],
                before=before_args[i],
                after=after_args[i],
                prepare=prepare_args[i],
            )
        if loop:
            self.add_transition(
                trigger,
                names[-1],
                first_in_loop,
                conditions=condition_args[-1],
                unless=unless_args[-1],
                before=before_args[-1],
                after=after_args[-1],
                prepare=prepare_args[-1],
            )

    def get_transitions(
        self, trigger: str = "", source: str = "*", dest: str | None = "*"
    ) -> list[Transition]:
        """Return transitions filtered by trigger, source and destination."""
        if trigger:
            event = self.events.get(trigger)
            events: Iterable[Event] = (event,) if event is not None else ()
        else:
            events = self.events.values()
        return [
            transition
            for event in events
            for transition in chain.from_iterable(event.transitions.values())
            if (source == self.WILDCARD_ALL or transition.source == source)
            and (dest == self.WILDCARD_ALL or transition.dest == dest)
        ]

    def remove_transition(self, trigger: str, source: Any = "*", dest: Any = "*") -> None:
        """Remove matching transitions; drop the event once it has none left."""
        event = self.events.get(trigger)
        if event is None:
            raise UnknownEventError(trigger)
        sources = (
            None
            if source == self.WILDCARD_ALL
            else [self._plain_name(entry) for entry in listify(source)]
        )
        dests = (
            None
            if dest == self.WILDCARD_ALL
            else [self._plain_name(entry) for entry in listify(dest)]
        )

        remaining: defaultdict[str, list[Transition]] = defaultdict(list)
        for state_name, candidates in event.transitions.items():
            kept = [
                transition
                for transition in candidates
                if (sources is not None and transition.source not in sources)
                or (dests is not None and transition.dest not in dests)
            ]
            if kept:
                remaining[state_name] = kept
        if remaining:
            event.transitions = remaining
        else:
            del self.events[trigger]

    def get_triggers(self, *states: StateRef) -> list[str]:
        """Return names of events with at least one transition from `states`."""
        names = {self._plain_name(state) for state in states}
        return [
            trigger
            for trigger, event in self.events.items()
            if any(name in event.transitions for name in names)
        ]

    def add_event_callback(self, trigger: str, kind: str, func: Callback) -> None:
        """Append a ``before``/``after``/``prepare`` callback to every transition of `trigger`."""
        event = self.events.get(trigger)
        if event is None:
            raise UnknownEventError(trigger)
        event.add_callback(kind, func)

    # Triggering

    def trigger(self, model: object, trigger_name: str, *args: Any, **kwargs: Any) -> bool:
        """Fire `trigger_name` on `model`; return whether a transition fired."""
        event = self.events.get(trigger_name)
        if event is None:
            state = self.get_model_state(model)
            if not self.resolve_ignore_invalid_triggers(state):
                raise UnknownEventError(trigger_name)
            _LOG.warning("%sIgnoring unknown event '%s'.", self.name, trigger_name)
            return False
        return event.trigger(model, *args, **kwargs)

    def dispatch(self, trigger_name: str, *args: Any, **kwargs: Any) -> bool:
        """Fire `trigger_name` on every bound model; AND the results."""
        results = [self.trigger(model, trigger_name, *args, **kwargs) for model in self.models]
        return all(results)

    def process(self, trigger: DeferredTrigger) -> bool:
        """Run a deferred event invocation through the dispatch discipline."""
        return self._dispatcher.process(trigger)

    def resolve_ignore_invalid_triggers(self, state: State) -> bool:
        if state.ignore_invalid_triggers is not None:
            return state.ignore_invalid_triggers
        return self.ignore_invalid_triggers

    # Callbacks

    def callbacks(self, funcs: Iterable[Callback], event_data: EventData) -> None:
        """Invoke `funcs` in order with the event's context or raw arguments."""
        for func in funcs:
            self.callback(func, event_data)
            _LOG.debug("%sExecuted callback '%s'", self.name, func)

    def callback(self, func: Callback, event_data: EventData) -> None:
        resolved = self.resolve_callable(func, event_data)
        if self.send_event:
            resolved(event_data)
        else:
            resolved(*event_data.args, **event_data.kwargs)

    def resolve_callable(self, func: Callback, event_data: EventData) -> Callable[..., Any]:
        """Return `func` itself, or resolve a string identifier for this event."""
        if isinstance(func, str):
            return self._resolver.resolve(func, event_data)
        return func

    # Helpers

    def _has_state(self, state: State, raise_error: bool = False) -> bool:
        found = state in self.states.values()
        if not found and raise_error:
            raise UnknownStateError(state.name)
        return found

    def _registered_name(self, state: StateRef) -> str:
        if isinstance(state, State):
            self._has_state(state, raise_error=True)
            return state.name
        name = self._plain_name(state)
        if name not in self.states:
            raise RegisteredStateError(name)
        return name

    @staticmethod
    def _plain_name(state: StateRef) -> str:
        if isinstance(state, (State, Enum)):
            return state.name
        return state
