"""Run orchestration: fan out workers, join, reduce, persist."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Callable

from price_sampler.core.domain.aggregator import Aggregator
from price_sampler.core.domain.errors import ResultStoreError, WorkerTaskError
from price_sampler.core.domain.types import Deadline, RunResult, WorkerResult
from price_sampler.core.events.events import RunCompletedEvent
from price_sampler.core.events.sinks.null_event_bus import NullEventBus
from price_sampler.sampling.engine.worker import SamplingWorker

if TYPE_CHECKING:
    from price_sampler.core.domain.types import RunConfig
    from price_sampler.core.events.event_bus import EventBus
    from price_sampler.core.ports.result_store import ResultStore
    from price_sampler.core.ports.sampler import SamplerFactory

LOGGER = logging.getLogger(__name__)


class SamplingOrchestrator:
    """Runs one time-bounded sampling run.

    One orchestrator may execute several runs; nothing is carried over
    between them (a fresh Aggregator and Deadline per run).

    Invariant:
    - The join barrier is the only synchronization point besides the
      aggregator lock: reduce() runs after every worker has returned.
    - A worker that raises aborts the run; nothing is persisted.
    """

    def __init__(
        self,
        *,
        sampler_factory: SamplerFactory,
        result_store: ResultStore,
        event_bus: EventBus | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._sampler_factory = sampler_factory
        self._result_store = result_store
        self._event_bus = event_bus if event_bus is not None else NullEventBus()
        self._clock = clock
        self._sleep = sleep

    def run(self, config: RunConfig) -> RunResult:
        started = self._clock()
        deadline = Deadline.starting_at(started, config.duration_seconds)
        aggregator = Aggregator()

        workers = [
            SamplingWorker(
                worker_id=worker_id,
                sampler=self._sampler_factory(worker_id),
                deadline=deadline,
                aggregator=aggregator,
                event_bus=self._event_bus,
                poll_interval_seconds=config.poll_interval_seconds,
                clock=self._clock,
                sleep=self._sleep,
            )
            for worker_id in range(1, config.worker_count + 1)
        ]

        LOGGER.info(
            "sampling run started",
            extra={
                "worker_count": config.worker_count,
                "duration_seconds": config.duration_seconds,
            },
        )

        # Leaving the executor block joins every worker thread.
        with ThreadPoolExecutor(
            max_workers=config.worker_count,
            thread_name_prefix="sampler-worker",
        ) as pool:
            futures = [(worker.worker_id, pool.submit(worker.run)) for worker in workers]

        results = self._collect(futures)

        final_aggregate = aggregator.reduce()
        elapsed = self._clock() - started

        LOGGER.info(
            "sampling run finished",
            extra={"final_aggregate": final_aggregate, "elapsed_seconds": elapsed},
        )

        self._persist(final_aggregate)

        self._event_bus.emit(
            RunCompletedEvent(
                worker_count=config.worker_count,
                duration_seconds=config.duration_seconds,
                final_aggregate=final_aggregate,
                elapsed_seconds=elapsed,
            )
        )

        return RunResult(final_aggregate=final_aggregate, workers=tuple(results))

    @staticmethod
    def _collect(futures: list[tuple[int, Future[WorkerResult]]]) -> list[WorkerResult]:
        results: list[WorkerResult] = []
        for worker_id, future in futures:
            exc = future.exception()
            if exc is not None:
                LOGGER.error(
                    "worker task failed",
                    extra={"worker_id": worker_id, "error": repr(exc)},
                )
                raise WorkerTaskError(worker_id, repr(exc)) from exc
            results.append(future.result())
        return results

    def _persist(self, final_aggregate: float) -> None:
        try:
            self._result_store.write(final_aggregate)
        except OSError as exc:
            raise ResultStoreError(f"failed to persist final aggregate: {exc}") from exc
