from __future__ import annotations


class Model:
    """Host object whose `state` attribute the machine manages."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.allowed = True
        self.blocked = False

    def record(self, *args, **kwargs) -> None:
        _ = (args, kwargs)
        self.calls.append("record")

    def is_allowed(self, *args, **kwargs) -> bool:
        _ = (args, kwargs)
        return self.allowed


class Recorder:
    """Collects labelled callback invocations in call order."""

    def __init__(self) -> None:
        self.events: list[str] = []

    def hook(self, label: str):
        def _callback(*args, **kwargs) -> None:
            _ = (args, kwargs)
            self.events.append(label)

        return _callback

    def guard(self, label: str, result: bool):
        def _predicate(*args, **kwargs) -> bool:
            _ = (args, kwargs)
            self.events.append(label)
            return result

        return _predicate
