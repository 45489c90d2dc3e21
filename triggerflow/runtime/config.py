"""Environment-sourced defaults for machines and logging."""

from __future__ import annotations

import os

from triggerflow.api.logging import LoggingConfig
from triggerflow.api.machine import MachineConfig


def _flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _text(name: str, default: str | None = None) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip()
    return value or default


def _choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    return value if value in choices else default


def resolve_log_level_name(default: str = "INFO") -> str:
    """Resolve log level with package-prefixed override."""
    value = os.getenv("TRIGGERFLOW_LOG_LEVEL")
    if value is None:
        value = os.getenv("LOG_LEVEL", default)
    return value.strip().upper()


def load_logging_config() -> LoggingConfig:
    """Load logging configuration from env vars."""
    return LoggingConfig(
        level_name=resolve_log_level_name(),
        console_format=_choice("TRIGGERFLOW_LOG_FORMAT", ("text", "json"), "text"),
        file_path=_text("TRIGGERFLOW_LOG_FILE"),
        file_format=_choice("TRIGGERFLOW_LOG_FILE_FORMAT", ("text", "json"), "json"),
    )


def load_machine_config(*, name: str | None = None, initial: str | None = "initial") -> MachineConfig:
    """Load machine defaults from env vars; structural options come from the caller."""
    return MachineConfig(
        initial=initial,
        send_event=_flag("TRIGGERFLOW_SEND_EVENT", False),
        auto_transitions=_flag("TRIGGERFLOW_AUTO_TRANSITIONS", True),
        ignore_invalid_triggers=_flag("TRIGGERFLOW_IGNORE_INVALID_TRIGGERS", False),
        queued=_flag("TRIGGERFLOW_QUEUED", False),
        model_attribute=_text("TRIGGERFLOW_MODEL_ATTRIBUTE", "state") or "state",
        name=name,
    )
