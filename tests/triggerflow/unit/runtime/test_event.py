from __future__ import annotations

import logging

import pytest

from tests.triggerflow.conftest import Model, Recorder
from triggerflow.api.errors import MachineError, UnknownEventError, UnknownTriggerError
from triggerflow.runtime.event import EventData
from triggerflow.runtime.machine import Machine
from triggerflow.runtime.state import State


def test_event_fires_first_passing_candidate_only() -> None:
    model = Model()
    recorder = Recorder()
    machine = Machine(model=model, states=["A", "B", "C", "D"], initial="A")
    machine.add_transition("go", "A", "B", conditions=recorder.guard("to_B", False))
    machine.add_transition("go", "A", "C", conditions=recorder.guard("to_C", True))
    machine.add_transition("go", "A", "D", prepare=recorder.hook("to_D"))

    assert machine.trigger(model, "go")
    assert model.state == "C"
    assert recorder.events == ["to_B", "to_C"]


def test_event_reports_false_when_every_candidate_declines() -> None:
    model = Model()
    machine = Machine(model=model, states=["A", "B", "C"], initial="A")
    machine.add_transition("go", "A", "B", conditions=lambda: False)
    machine.add_transition("go", "A", "C", unless=lambda: True)

    assert not machine.trigger(model, "go")
    assert model.state == "A"


def test_event_from_unhandled_state_raises_unknown_trigger() -> None:
    model = Model()
    machine = Machine(model=model, states=["A", "B", "C"], initial="C")
    machine.add_transition("go", "A", "B")

    with pytest.raises(UnknownTriggerError) as excinfo:
        machine.trigger(model, "go")
    assert excinfo.value.event == "go"
    assert excinfo.value.state == "C"
    assert isinstance(excinfo.value, MachineError)


def test_event_from_unhandled_state_is_ignored_by_machine_policy(caplog) -> None:
    model = Model()
    machine = Machine(
        model=model,
        states=["A", "B", "C"],
        initial="C",
        ignore_invalid_triggers=True,
        name="door",
    )
    machine.add_transition("go", "A", "B")

    with caplog.at_level(logging.WARNING, logger="triggerflow.event"):
        assert not machine.trigger(model, "go")
    assert model.state == "C"
    assert "door: Can't trigger event go from state C!" in caplog.text


def test_state_ignore_policy_overrides_machine_default() -> None:
    model = Model()
    machine = Machine(
        model=model,
        states=[State("A", ignore_invalid_triggers=False), "B"],
        initial="A",
        ignore_invalid_triggers=True,
    )
    machine.add_transition("go", "B", "A")

    with pytest.raises(UnknownTriggerError):
        machine.trigger(model, "go")

    strict = Machine(model=Model(), states=["A", "B"], initial="A")
    strict.add_states("C", ignore_invalid_triggers=True)
    strict.add_transition("go", "A", "B")
    lenient_model = Model()
    strict.add_model(lenient_model, initial="C")
    assert not strict.trigger(lenient_model, "go")


def test_unknown_event_name_raises_unless_ignored() -> None:
    model = Model()
    machine = Machine(model=model, states=["A"], initial="A")
    with pytest.raises(UnknownEventError):
        machine.trigger(model, "missing")
    with pytest.raises(AttributeError):
        machine.trigger(model, "missing")

    lenient = Machine(model=model, states=["A"], initial="A", ignore_invalid_triggers=True)
    assert not lenient.trigger(model, "missing")


def test_finalize_runs_and_sees_error_when_callback_raises() -> None:
    model = Model()
    finalized: list[EventData] = []

    def explode(event_data: EventData) -> None:
        raise RuntimeError("boom")

    machine = Machine(
        model=model,
        states=["A", "B"],
        initial="A",
        send_event=True,
        finalize_event=finalized.append,
    )
    machine.add_transition("go", "A", "B", before=explode)

    with pytest.raises(RuntimeError, match="boom"):
        machine.trigger(model, "go")
    assert model.state == "A"
    assert len(finalized) == 1
    assert isinstance(finalized[0].error, RuntimeError)
    assert finalized[0].result is False


def test_finalize_runs_once_when_guards_decline() -> None:
    model = Model()
    finalized: list[EventData] = []
    machine = Machine(
        model=model,
        states=["A", "B", "C"],
        initial="A",
        send_event=True,
        finalize_event=finalized.append,
    )
    machine.add_transition("go", "A", "B", conditions=lambda event_data: False)
    machine.add_transition("go", "A", "C", conditions=lambda event_data: False)

    assert not machine.trigger(model, "go")
    assert len(finalized) == 1
    assert finalized[0].error is None


def test_event_data_tracks_transition_state_and_arguments() -> None:
    model = Model()
    seen: list[tuple[str, str | None, dict]] = []

    def after(event_data: EventData) -> None:
        assert event_data.transition is not None
        seen.append((event_data.state.name, event_data.transition.dest, event_data.kwargs))

    machine = Machine(model=model, states=["A", "B"], initial="A", send_event=True)
    machine.add_transition("go", "A", "B", after=after)

    assert machine.trigger(model, "go", speed=3)
    assert seen == [("B", "B", {"speed": 3})]


def test_raw_arguments_reach_callbacks_without_send_event() -> None:
    model = Model()
    received: list[tuple[tuple, dict]] = []
    machine = Machine(model=model, states=["A", "B"], initial="A")
    machine.add_transition("go", "A", "B", after=lambda *args, **kwargs: received.append((args, kwargs)))

    assert machine.trigger(model, "go", 1, 2, reason="test")
    assert received == [((1, 2), {"reason": "test"})]


def test_event_add_callback_applies_to_every_transition() -> None:
    model = Model()
    recorder = Recorder()
    machine = Machine(model=model, states=["A", "B", "C"], initial="A")
    machine.add_transition("go", ["A", "B"], "C")
    machine.add_event_callback("go", "before", recorder.hook("before_go"))

    assert all(t.before for t in machine.get_transitions("go"))
    assert machine.trigger(model, "go")
    assert recorder.events == ["before_go"]

    with pytest.raises(UnknownEventError):
        machine.add_event_callback("missing", "before", recorder.hook("never"))
