"""Result persistence boundary."""

from __future__ import annotations

from typing import Protocol


class ResultStore(Protocol):
    """Whole-value sink for the final aggregate.

    Last write wins. ``read()`` distinguishes absence (``None``) from an
    empty store (``""``).
    """

    def write(self, final_aggregate: float) -> None:
        """Persist the aggregate, replacing any previous value."""

    def read(self) -> str | None:
        """Return the stored text, ``""`` when empty, ``None`` when absent or unreadable."""
