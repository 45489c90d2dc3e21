"""Embeddable finite-state-machine engine."""

import logging

from triggerflow.api import (
    ArgumentsError,
    CallableError,
    InitialStateError,
    InsufficientStatesError,
    MachineConfig,
    MachineError,
    RegisteredStateError,
    TriggerflowError,
    TriggerNameError,
    UnknownEventError,
    UnknownStateError,
    UnknownTriggerError,
    create_machine,
)
from triggerflow.runtime import Condition, Event, EventData, Machine, State, Transition

logging.getLogger("triggerflow").addHandler(logging.NullHandler())

__all__ = [
    "ArgumentsError",
    "CallableError",
    "Condition",
    "Event",
    "EventData",
    "InitialStateError",
    "InsufficientStatesError",
    "Machine",
    "MachineConfig",
    "MachineError",
    "RegisteredStateError",
    "State",
    "Transition",
    "TriggerNameError",
    "TriggerflowError",
    "UnknownEventError",
    "UnknownStateError",
    "UnknownTriggerError",
    "create_machine",
]
