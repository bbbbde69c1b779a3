"""Price feed boundary.

Workers depend only on this protocol; concrete adapters wrap a specific feed.
"""

from __future__ import annotations

from typing import Callable, Protocol

from price_sampler.core.domain.types import FetchResult


class Sampler(Protocol):
    """One fetch-and-parse attempt against an external price feed.

    Implementations must not raise on network or parse failures; those are
    returned as ``FetchResult.failure``. No retries.
    """

    def fetch_one(self) -> FetchResult:
        """Return one observation or a typed failure."""


# Called once per worker with its worker id.
SamplerFactory = Callable[[int], Sampler]
