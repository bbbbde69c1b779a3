from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

if TYPE_CHECKING:
    from price_sampler.core.domain.types import RunResult

LOGGER = logging.getLogger(__name__)

METRICS_JOB = "btc_price_sampler"


class PrometheusMetricsClient:
    """Minimal Prometheus Pushgateway client for one-shot sampling runs.

    Expected environment:
    - PROMETHEUS_PUSHGATEWAY_URL: URL to the Pushgateway.
      Example: http://pushgateway.monitoring.svc.cluster.local:9091

    Optional:
    - PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON: JSON object used as grouping key.
      Example:
        {"instance": "sampler-eu-1"}

    Metrics delivery is a side-effect: callers must never fail a run because
    of it.
    """

    def __init__(self) -> None:
        self._pushgateway_url = os.environ.get("PROMETHEUS_PUSHGATEWAY_URL")
        self._grouping_key = self._load_grouping_key()
        self._registry = CollectorRegistry()
        self._gauges: dict[str, Gauge] = {}

    def is_enabled(self) -> bool:
        return self._pushgateway_url is not None

    @staticmethod
    def _load_grouping_key() -> dict[str, str]:
        raw = os.environ.get("PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON")
        if not raw:
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning(
                "Invalid PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON; ignoring"
            )
            return {}

        if not isinstance(data, dict):
            return {}

        grouping: dict[str, str] = {}
        for key, value in data.items():
            if isinstance(key, str) and isinstance(value, str):
                grouping[key] = value
        return grouping

    def push_gauge(
        self,
        *,
        name: str,
        value: float,
        labels: dict[str, str],
    ) -> None:
        if not self._pushgateway_url:
            return

        gauge = self._gauges.get(name)
        if gauge is None:
            gauge = Gauge(
                name,
                documentation=name,
                labelnames=list(labels.keys()),
                registry=self._registry,
            )
            self._gauges[name] = gauge

        if labels:
            gauge.labels(**labels).set(value)
        else:
            gauge.set(value)

    def push_all(self, *, job: str) -> None:
        if not self._pushgateway_url:
            return

        push_to_gateway(
            gateway=self._pushgateway_url,
            job=job,
            registry=self._registry,
            grouping_key=self._grouping_key,
        )

        LOGGER.info(
            "Prometheus metrics pushed",
            extra={"job": job, "grouping_key": self._grouping_key},
        )


def export_run_metrics(client: PrometheusMetricsClient, result: RunResult) -> None:
    """Push per-worker and final values of a completed run (best-effort)."""
    if not client.is_enabled():
        return

    try:
        for worker in result.workers:
            labels = {"worker_id": str(worker.worker_id)}
            client.push_gauge(
                name="btc_sampler_worker_average_usd",
                value=worker.local_average,
                labels=labels,
            )
            client.push_gauge(
                name="btc_sampler_worker_samples",
                value=worker.sample_count,
                labels=labels,
            )
            client.push_gauge(
                name="btc_sampler_worker_failed_samples",
                value=worker.failed_samples,
                labels=labels,
            )

        client.push_gauge(
            name="btc_sampler_final_aggregate_usd",
            value=result.final_aggregate,
            labels={},
        )

        client.push_all(job=METRICS_JOB)

    except Exception:
        LOGGER.exception("Prometheus push failed")
