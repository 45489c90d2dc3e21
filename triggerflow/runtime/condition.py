"""Guard checks attached to transitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from triggerflow.api.callbacks import Callback

if TYPE_CHECKING:
    from triggerflow.runtime.event import EventData


class Condition:
    """Predicate plus the result it must produce for the guard to pass.

    ``target=True`` is used for ``conditions`` entries and ``target=False`` for
    ``unless`` entries.
    """

    def __init__(self, func: Callback, target: bool = True) -> None:
        self.func = func
        self.target = target

    def check(self, event_data: EventData) -> bool:
        """Resolve and evaluate the predicate against the current model."""
        machine = event_data.machine
        predicate = machine.resolve_callable(self.func, event_data)
        if machine.send_event:
            return predicate(event_data) == self.target
        return predicate(*event_data.args, **event_data.kwargs) == self.target

    def __repr__(self) -> str:
        return f"<{type(self).__name__}({self.func})@{id(self)}>"
