"""Serialization helpers for logging and diagnostics output."""

from triggerflow.diagnostics.json_codec import dumps_bytes, dumps_text

__all__ = ["dumps_bytes", "dumps_text"]
