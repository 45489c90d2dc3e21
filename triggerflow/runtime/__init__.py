"""State-machine runtime modules."""

from triggerflow.runtime.condition import Condition
from triggerflow.runtime.dispatch import QueuedDispatcher, SynchronousDispatcher
from triggerflow.runtime.event import Event, EventData
from triggerflow.runtime.machine import Machine
from triggerflow.runtime.resolution import AttributeStateAccessor, ModelCallbackResolver
from triggerflow.runtime.state import State
from triggerflow.runtime.transition import Transition

__all__ = [
    "AttributeStateAccessor",
    "Condition",
    "Event",
    "EventData",
    "Machine",
    "ModelCallbackResolver",
    "QueuedDispatcher",
    "State",
    "SynchronousDispatcher",
    "Transition",
]
