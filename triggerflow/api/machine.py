"""Public state-machine API contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from triggerflow.api.callbacks import CallbackResolver, CallbackSpec, StateAccessor

if TYPE_CHECKING:
    from triggerflow.runtime.state import State


@dataclass(frozen=True, slots=True)
class MachineConfig:
    """Scalar machine options."""

    initial: str | None = "initial"
    send_event: bool = False
    auto_transitions: bool = True
    ordered_transitions: bool = False
    ignore_invalid_triggers: bool = False
    queued: bool = False
    model_attribute: str = "state"
    name: str | None = None


class StateMachine(Protocol):
    """Public state-machine contract used by hosts."""

    @property
    def initial(self) -> str | None:
        """Return initial state name."""

    @property
    def has_queue(self) -> bool:
        """Return whether triggers are queued."""

    def add_model(self, model: object, initial: str | None = None) -> None:
        """Bind a model and place it in its initial state."""

    def add_states(self, states: Any) -> None:
        """Register state(s)."""

    def add_transition(
        self,
        trigger: str,
        source: Any,
        dest: str | None,
        conditions: CallbackSpec = None,
        unless: CallbackSpec = None,
        before: CallbackSpec = None,
        after: CallbackSpec = None,
        prepare: CallbackSpec = None,
    ) -> None:
        """Register transition(s) under trigger."""

    def add_ordered_transitions(self, states: Any = None, trigger: str = "next_state") -> None:
        """Register linear transitions through states."""

    def get_state(self, state: str) -> State:
        """Return registered state."""

    def is_state(self, model: object, state: str) -> bool:
        """Return whether model is in state."""

    def trigger(self, model: object, trigger_name: str, *args: Any, **kwargs: Any) -> bool:
        """Fire trigger on model."""

    def dispatch(self, trigger_name: str, *args: Any, **kwargs: Any) -> bool:
        """Fire trigger on every bound model."""

    def get_triggers(self, *states: str) -> list[str]:
        """Return triggers valid from states."""


def create_machine(
    config: MachineConfig | None = None,
    *,
    model: object | list[object] | None = None,
    states: Any = None,
    transitions: Any = None,
    prepare_event: CallbackSpec = None,
    before_state_change: CallbackSpec = None,
    after_state_change: CallbackSpec = None,
    finalize_event: CallbackSpec = None,
    resolver: CallbackResolver | None = None,
    accessor: StateAccessor | None = None,
) -> StateMachine:
    """Create default machine implementation from `config`."""
    from triggerflow.runtime.machine import Machine

    cfg = config if config is not None else MachineConfig()
    return Machine(
        model=model,
        states=states,
        initial=cfg.initial,
        transitions=transitions,
        send_event=cfg.send_event,
        auto_transitions=cfg.auto_transitions,
        ordered_transitions=cfg.ordered_transitions,
        ignore_invalid_triggers=cfg.ignore_invalid_triggers,
        before_state_change=before_state_change,
        after_state_change=after_state_change,
        name=cfg.name,
        queued=cfg.queued,
        prepare_event=prepare_event,
        finalize_event=finalize_event,
        model_attribute=cfg.model_attribute,
        resolver=resolver,
        accessor=accessor,
    )


__all__ = ["MachineConfig", "StateMachine", "create_machine"]
