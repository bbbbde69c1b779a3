"""
Append-only file recorder sink.
"""
from __future__ import annotations

import json
import math
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any


def _json_safe(value: Any) -> Any:
    # NaN averages are legal run output but not valid JSON.
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value


class FileRecorderSink:
    """Writes each event as a JSON line to a file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self._path.open("a", encoding="utf-8")
        self._closed = False

    def on_event(self, event: Any) -> None:
        if is_dataclass(event):
            fields = asdict(event)
        elif hasattr(event, "__dict__"):
            fields = dict(event.__dict__)
        else:
            fields = {"event": str(event)}
        record = {"type": type(event).__name__}
        record.update({k: _json_safe(v) for k, v in fields.items()})
        self._fh.write(json.dumps(record) + "\n")
        self._fh.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._fh.flush()
        self._fh.close()
        self._closed = True
