"""Default callback resolution and model state access."""

from __future__ import annotations

from collections.abc import Callable
from importlib import import_module
from typing import TYPE_CHECKING, Any

from triggerflow.api.errors import CallableError

if TYPE_CHECKING:
    from triggerflow.runtime.event import EventData


class ModelCallbackResolver:
    """Resolve names against the model first, then as dotted import paths."""

    def resolve(self, name: str, event_data: EventData) -> Callable[..., Any]:
        try:
            func = getattr(event_data.model, name)
        except AttributeError:
            return _import_callable(name)
        if callable(func):
            return func
        # Properties and plain attributes cannot take arguments.
        value = func

        def _attribute_wrapper(*_: Any, **__: Any) -> Any:
            return value

        return _attribute_wrapper


def _import_callable(path: str) -> Callable[..., Any]:
    try:
        module_name, attr_name = path.rsplit(".", 1)
        target: Any = import_module(module_name)
        func = getattr(target, attr_name)
    except (ImportError, AttributeError, ValueError) as exc:
        raise CallableError(path) from exc
    if not callable(func):
        raise CallableError(path)
    return func


class AttributeStateAccessor:
    """Store the state value in a named attribute of the model."""

    def __init__(self, attribute: str = "state") -> None:
        normalized = attribute.strip()
        if not normalized:
            raise ValueError("attribute must not be empty")
        self._attribute = normalized

    @property
    def attribute(self) -> str:
        return self._attribute

    def get_state(self, model: object) -> Any:
        return getattr(model, self._attribute)

    def set_state(self, model: object, value: Any) -> None:
        setattr(model, self._attribute, value)


CallbackResolver = ModelCallbackResolver
StateAccessor = AttributeStateAccessor
