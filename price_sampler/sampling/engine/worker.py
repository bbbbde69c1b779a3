"""Time-bounded sampling worker."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

from price_sampler.core.domain.types import WorkerResult
from price_sampler.core.events.events import SampleSkippedEvent, WorkerFinishedEvent

if TYPE_CHECKING:
    from price_sampler.core.domain.aggregator import Aggregator
    from price_sampler.core.domain.types import Deadline
    from price_sampler.core.events.event_bus import EventBus
    from price_sampler.core.ports.sampler import Sampler

LOGGER = logging.getLogger(__name__)


class SamplingWorker:
    """Polls a sampler until the shared deadline and contributes its average.

    States:
    - running: check deadline, fetch, fold, sleep
    - finalizing: compute sum / count and append it to the aggregator
    - done: run() returns the WorkerResult

    Invariant:
    - The aggregator receives exactly one contribution per worker, even when
      no sample succeeded (the contribution is then NaN).
    - The deadline is advisory: a worker may overrun it by one poll interval
      plus one fetch latency.
    """

    def __init__(
        self,
        *,
        worker_id: int,
        sampler: Sampler,
        deadline: Deadline,
        aggregator: Aggregator,
        event_bus: EventBus,
        poll_interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.worker_id = worker_id
        self._sampler = sampler
        self._deadline = deadline
        self._aggregator = aggregator
        self._event_bus = event_bus
        self._poll_interval_seconds = poll_interval_seconds
        self._clock = clock
        self._sleep = sleep

        self._sum = 0.0
        self._count = 0
        self._failed = 0

    def run(self) -> WorkerResult:
        while not self._deadline.reached(self._clock()):
            self._sample_once()
            self._sleep(self._poll_interval_seconds)

        return self._finalize()

    def _sample_once(self) -> None:
        result = self._sampler.fetch_one()

        if not result.ok:
            self._failed += 1
            LOGGER.debug(
                "sample skipped",
                extra={"worker_id": self.worker_id, "reason": result.error},
            )
            self._event_bus.emit(
                SampleSkippedEvent(worker_id=self.worker_id, reason=str(result.error))
            )
            return

        self._sum += result.value
        self._count += 1

    def _finalize(self) -> WorkerResult:
        average = local_average(self._sum, self._count)

        if self._count == 0:
            LOGGER.warning(
                "worker collected no samples; contributing NaN",
                extra={"worker_id": self.worker_id, "failed_samples": self._failed},
            )

        self._aggregator.append(average)

        result = WorkerResult(
            worker_id=self.worker_id,
            local_average=average,
            sample_count=self._count,
            failed_samples=self._failed,
        )

        self._event_bus.emit(
            WorkerFinishedEvent(
                worker_id=result.worker_id,
                local_average=result.local_average,
                sample_count=result.sample_count,
                failed_samples=result.failed_samples,
            )
        )
        return result


def local_average(total: float, count: int) -> float:
    """Return total / count, with 0/0 defined as NaN."""
    if count == 0:
        return float("nan")
    return total / count
