"""Public callback and model-access contracts."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from triggerflow.runtime.event import EventData

Callback: TypeAlias = str | Callable[..., Any]
CallbackSpec: TypeAlias = Callback | list[Callback] | tuple[Callback, ...] | None


@runtime_checkable
class CallbackResolver(Protocol):
    """Turn a string callback identifier into an invocable.

    Resolution happens on every invocation so rebinding an attribute on the
    model is picked up by the next trigger. Implementations raise
    ``CallableError`` when the identifier cannot be resolved.
    """

    def resolve(self, name: str, event_data: EventData) -> Callable[..., Any]:
        """Return invocable for `name` in the context of `event_data`."""


@runtime_checkable
class StateAccessor(Protocol):
    """Read and write the state value held by a model."""

    @property
    def attribute(self) -> str:
        """Return name of the state-holding attribute."""

    def get_state(self, model: object) -> Any:
        """Return current state value of `model`."""

    def set_state(self, model: object, value: Any) -> None:
        """Assign state value to `model`."""


def create_callback_resolver() -> CallbackResolver:
    """Create default model/import-path resolver."""
    from triggerflow.runtime.resolution import ModelCallbackResolver

    return ModelCallbackResolver()


def create_state_accessor(attribute: str = "state") -> StateAccessor:
    """Create default attribute-backed state accessor."""
    from triggerflow.runtime.resolution import AttributeStateAccessor

    return AttributeStateAccessor(attribute)


__all__ = [
    "Callback",
    "CallbackResolver",
    "CallbackSpec",
    "StateAccessor",
    "create_callback_resolver",
    "create_state_accessor",
]
