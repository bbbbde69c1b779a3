"""
Event sink interface.

Sinks consume run events emitted by workers and the orchestrator.
"""
from __future__ import annotations

from typing import Any, Protocol


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Consume a run event."""
