"""Fatal run errors.

Transient fetch failures never raise; they are reported as ``FetchResult``
failures and skipped by the worker.
"""

from __future__ import annotations


class SamplerRunError(RuntimeError):
    """Base class for errors that abort a sampling run."""


class WorkerTaskError(SamplerRunError):
    """A worker task terminated abnormally instead of completing its loop."""

    def __init__(self, worker_id: int, message: str) -> None:
        super().__init__(f"worker {worker_id} failed: {message}")
        self.worker_id = worker_id


class ResultStoreError(SamplerRunError):
    """The final aggregate could not be persisted."""
