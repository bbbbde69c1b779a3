from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from price_sampler.core.domain.types import RunConfig
from price_sampler.core.events.event_bus import EventBus
from price_sampler.core.events.sinks.file_recorder import FileRecorderSink
from price_sampler.core.events.sinks.sink_logging import LoggingEventSink
from price_sampler.sampling.adapters.coinbase import CoinbaseSpotSampler, FeedConfig
from price_sampler.sampling.engine.orchestrator import SamplingOrchestrator
from price_sampler.sampling.io.result_file import (
    DEFAULT_RESULT_PATH,
    ResultFileStore,
    format_float,
)
from price_sampler.sampling.runtime.prometheus_metrics import (
    PrometheusMetricsClient,
    export_run_metrics,
)

if TYPE_CHECKING:
    from price_sampler.core.domain.types import RunResult
    from price_sampler.core.ports.sampler import SamplerFactory

DEFAULT_TIMES_SECONDS = 10

USAGE = """Usage:
  btc-sampler --mode=<cache|read> [--times=<seconds>]"""


class _UsageError(Exception):
    """Raised instead of argparse's exit-on-error behaviour."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="btc-sampler",
        allow_abbrev=False,
        description="Sample the BTC/USD spot price with concurrent workers "
        "(cache) or print the last stored aggregate (read).",
    )

    parser.add_argument("--mode", help="cache or read.")

    parser.add_argument(
        "--times",
        help="Sampling duration in seconds (cache mode).",
    )

    parser.add_argument(
        "--result-path",
        type=Path,
        default=DEFAULT_RESULT_PATH,
        help="File holding the final aggregate.",
    )

    parser.add_argument(
        "--events-path",
        type=Path,
        default=None,
        help="Optional JSONL file recording run events.",
    )

    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Python logging level.",
    )

    return parser


def _parse_times(raw: str) -> int:
    """Parse --times; anything that is not a non-negative integer means the default."""
    try:
        times = int(raw)
    except ValueError:
        return DEFAULT_TIMES_SECONDS
    return times if times >= 0 else DEFAULT_TIMES_SECONDS


def _build_event_bus(events_path: Path | None) -> EventBus:
    event_bus = EventBus(sinks=[LoggingEventSink(logging.getLogger("bus"))])
    if events_path is not None:
        event_bus.register(FileRecorderSink(events_path))
    return event_bus


def print_usage() -> None:
    print(USAGE)


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------

def run_cache_mode(
    *,
    times: int,
    store: ResultFileStore,
    event_bus: EventBus,
    sampler_factory: SamplerFactory | None = None,
) -> RunResult:
    """Sample for ``times`` seconds, print the averages and persist the result."""
    samplers: list[CoinbaseSpotSampler] = []

    if sampler_factory is None:
        feed_cfg = FeedConfig.from_env()

        def _coinbase_sampler(worker_id: int) -> CoinbaseSpotSampler:
            sampler = CoinbaseSpotSampler(feed_cfg)
            samplers.append(sampler)
            return sampler

        sampler_factory = _coinbase_sampler

    orchestrator = SamplingOrchestrator(
        sampler_factory=sampler_factory,
        result_store=store,
        event_bus=event_bus,
    )

    try:
        result = orchestrator.run(RunConfig(duration_seconds=times))
    finally:
        for sampler in samplers:
            sampler.close()

    for worker in result.workers:
        print(
            f"Client {worker.worker_id}: Average USD price of BTC is: "
            f"{format_float(worker.local_average)}"
        )
    print(
        "Aggregator: Final aggregate of USD prices of BTC is: "
        f"{format_float(result.final_aggregate)}"
    )

    return result


def run_read_mode(store: ResultFileStore) -> None:
    """Print the stored result, or say why there is none."""
    content = store.read()
    name = store.path.name

    if content is None:
        print(f"The {name} file does not exist. Run in cache mode first.")
        return

    if content == "":
        print(f"The {name} file is empty. Run in cache mode first.")
        return

    for line in content.splitlines():
        print(line)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    """Run the CLI.

    The first argument selects the mode; anything else there is an invalid
    mode. Options after it may come in any order and unknown ones are ignored.
    """
    raw_args = sys.argv[1:] if argv is None else argv

    if not raw_args:
        print_usage()
        return

    if not raw_args[0].startswith("--mode"):
        print("Invalid mode. Use cache or read.")
        print_usage()
        return

    parser = _build_parser()
    try:
        args, _unknown = parser.parse_known_args(raw_args)
    except _UsageError:
        print_usage()
        return

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = ResultFileStore(args.result_path)

    if args.mode == "cache":
        print("Selected mode: Cache")

        if args.times is None:
            print("Invalid argument for cache mode. Use --times=<seconds>.")
            return

        event_bus = _build_event_bus(args.events_path)
        try:
            result = run_cache_mode(
                times=_parse_times(args.times),
                store=store,
                event_bus=event_bus,
            )
        finally:
            event_bus.close()

        export_run_metrics(PrometheusMetricsClient(), result)
        return

    if args.mode == "read":
        print("Selected mode: Read")
        run_read_mode(store)
        return

    print("Invalid mode. Use cache or read.")
    print_usage()


if __name__ == "__main__":
    main()
