"""Core sampling data models.

Configuration models are pydantic schemas (validated once, immutable for the
duration of a run). Per-run values produced by the engine are plain frozen
dataclasses.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_WORKER_COUNT = 5
DEFAULT_POLL_INTERVAL_SECONDS = 1.0


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class RunConfig(BaseModel):
    """Immutable configuration of one sampling run."""

    worker_count: int = Field(default=DEFAULT_WORKER_COUNT, ge=1)
    duration_seconds: int = Field(..., ge=0)
    poll_interval_seconds: float = Field(default=DEFAULT_POLL_INTERVAL_SECONDS, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_json_obj(cls, obj: dict[str, Any]) -> RunConfig:
        """Create a RunConfig instance from a JSON-compatible object."""
        return cls.model_validate(obj)


# ---------------------------------------------------------------------------
# Run values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Deadline:
    """Shared instant (monotonic seconds) after which workers stop sampling.

    Invariant:
    - Computed once per run from a single start instant.
    - Every worker compares against the same value.
    """

    started_at: float
    expires_at: float

    @classmethod
    def starting_at(cls, start: float, duration_seconds: float) -> Deadline:
        return cls(started_at=start, expires_at=start + duration_seconds)

    def reached(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of one sampler attempt: an observation or a failure reason."""

    value: float | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: float) -> FetchResult:
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> FetchResult:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None


@dataclass(frozen=True, slots=True)
class WorkerResult:
    worker_id: int
    local_average: float
    sample_count: int
    failed_samples: int = 0

    @property
    def has_samples(self) -> bool:
        return self.sample_count > 0


@dataclass(frozen=True, slots=True)
class RunResult:
    """Output of one orchestrated run.

    ``final_aggregate`` is the mean of the worker averages (not of the raw
    observations); it is NaN whenever any worker collected no samples.
    """

    final_aggregate: float
    workers: tuple[WorkerResult, ...]

    @property
    def is_nan(self) -> bool:
        return math.isnan(self.final_aggregate)
