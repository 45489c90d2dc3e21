"""Public state-machine API contracts."""

from triggerflow.api.callbacks import (
    Callback,
    CallbackResolver,
    CallbackSpec,
    StateAccessor,
    create_callback_resolver,
    create_state_accessor,
)
from triggerflow.api.errors import (
    ArgumentsError,
    CallableError,
    InitialStateError,
    InsufficientStatesError,
    MachineError,
    RegisteredStateError,
    TriggerflowError,
    TriggerNameError,
    UnknownEventError,
    UnknownStateError,
    UnknownTriggerError,
)
from triggerflow.api.logging import LoggingConfig, configure_logging
from triggerflow.api.machine import MachineConfig, StateMachine, create_machine

__all__ = [
    "ArgumentsError",
    "Callback",
    "CallableError",
    "CallbackResolver",
    "CallbackSpec",
    "InitialStateError",
    "InsufficientStatesError",
    "LoggingConfig",
    "MachineConfig",
    "MachineError",
    "RegisteredStateError",
    "StateAccessor",
    "StateMachine",
    "TriggerNameError",
    "TriggerflowError",
    "UnknownEventError",
    "UnknownStateError",
    "UnknownTriggerError",
    "configure_logging",
    "create_callback_resolver",
    "create_machine",
    "create_state_accessor",
]
