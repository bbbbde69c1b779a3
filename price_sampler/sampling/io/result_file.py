"""Single-line text file holding the last run's final aggregate."""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from pathlib import Path

LOGGER = logging.getLogger(__name__)

DEFAULT_RESULT_PATH = Path("result.txt")
RESULT_LINE_PREFIX = "Final aggregate of USD prices of BTC: "


def format_float(value: float) -> str:
    """Render a float in plain positional notation.

    Integral values drop the fractional part (``100``), non-finite values are
    ``NaN``, ``inf`` and ``-inf``; everything else uses the shortest
    round-tripping digits without an exponent.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


class ResultFileStore:
    """File-backed result store.

    Each write truncates the file; reads tell a missing or unreadable file
    (``None``) apart from an empty one (``""``).
    """

    def __init__(self, path: str | Path = DEFAULT_RESULT_PATH) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def write(self, final_aggregate: float) -> None:
        line = f"{RESULT_LINE_PREFIX}{format_float(final_aggregate)}\n"
        self._path.write_text(line, encoding="utf-8")
        LOGGER.info("final aggregate persisted", extra={"path": str(self._path)})

    def read(self) -> str | None:
        if not self._path.exists():
            return None
        try:
            return self._path.read_text(encoding="utf-8")
        except OSError as exc:
            # e.g. the path is a directory; nothing readable is stored there.
            LOGGER.warning(
                "result file unreadable", extra={"path": str(self._path), "error": repr(exc)}
            )
            return None
