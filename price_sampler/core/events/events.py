"""
Run event models.

These events represent immutable facts observed during a sampling run.
They are consumed by loggers and recorders.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class SampleSkippedEvent:
    worker_id: int
    reason: str


@dataclass(slots=True)
class WorkerFinishedEvent:
    worker_id: int

    local_average: float
    sample_count: int
    failed_samples: int


@dataclass(slots=True)
class RunCompletedEvent:
    worker_count: int
    duration_seconds: int

    final_aggregate: float
    elapsed_seconds: float
