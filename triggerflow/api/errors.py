"""Public state-machine error taxonomy."""

from __future__ import annotations


class TriggerflowError(Exception):
    """Base class for every error raised by the state-machine engine."""


class MachineError(TriggerflowError):
    """Illegal machine usage while processing transitions."""


class UnknownTriggerError(MachineError):
    """Trigger is not valid from the model's current state."""

    def __init__(self, message: str, *, event: str, state: str) -> None:
        super().__init__(message)
        self.event = event
        self.state = state


class UnknownEventError(TriggerflowError, AttributeError):
    """No event with the given name is registered on the machine."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Do not know event named '{name}'.")
        self.event = name


class RegisteredStateError(TriggerflowError, ValueError):
    """A state name was referenced that has never been added."""

    def __init__(self, name: str) -> None:
        super().__init__(f"State '{name}' is not a registered state.")
        self.state = name


class UnknownStateError(TriggerflowError, ValueError):
    """A ``State`` instance was referenced that has not been added."""

    def __init__(self, name: str) -> None:
        super().__init__(f"State {name} has not been added to the machine")
        self.state = name


class TriggerNameError(TriggerflowError, ValueError):
    """Trigger name collides with the model's state attribute."""

    def __init__(self, trigger: str) -> None:
        super().__init__("Trigger name cannot be same as model attribute name.")
        self.trigger = trigger


class InsufficientStatesError(TriggerflowError, ValueError):
    """Ordered transitions need at least two states."""

    def __init__(self) -> None:
        super().__init__("Can't create ordered transitions on a Machine with fewer than 2 states.")


class ArgumentsError(TriggerflowError, ValueError):
    """Per-transition argument list has the wrong length."""

    def __init__(self) -> None:
        super().__init__(
            "Argument length must be either 1 or the same length as the number of transitions."
        )


class InitialStateError(TriggerflowError, ValueError):
    """A model was added without any initial state to assign."""

    def __init__(self) -> None:
        super().__init__(
            "No initial state configured for machine, must specify when adding model."
        )


class CallableError(TriggerflowError, AttributeError):
    """A string callback could not be resolved."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Callable with name '{name}' could neither be retrieved from the passed model "
            "nor imported from a module."
        )
        self.callable_name = name


__all__ = [
    "ArgumentsError",
    "CallableError",
    "InitialStateError",
    "InsufficientStatesError",
    "MachineError",
    "RegisteredStateError",
    "TriggerNameError",
    "TriggerflowError",
    "UnknownEventError",
    "UnknownStateError",
    "UnknownTriggerError",
]
