"""Public API for the price_sampler package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Domain Types
# ----------------------------------------------------------------------
from price_sampler.core.domain.aggregator import Aggregator
from price_sampler.core.domain.errors import (
    ResultStoreError,
    SamplerRunError,
    WorkerTaskError,
)
from price_sampler.core.domain.types import (
    Deadline,
    FetchResult,
    RunConfig,
    RunResult,
    WorkerResult,
)

# ----------------------------------------------------------------------
# Ports
# ----------------------------------------------------------------------
from price_sampler.core.ports.result_store import ResultStore
from price_sampler.core.ports.sampler import Sampler, SamplerFactory

# ----------------------------------------------------------------------
# Engine API
# ----------------------------------------------------------------------
from price_sampler.sampling.adapters.coinbase import CoinbaseSpotSampler, FeedConfig
from price_sampler.sampling.engine.orchestrator import SamplingOrchestrator
from price_sampler.sampling.engine.worker import SamplingWorker
from price_sampler.sampling.io.result_file import ResultFileStore

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Engine
    "SamplingOrchestrator",
    "SamplingWorker",
    "Aggregator",

    # Config
    "RunConfig",
    "FeedConfig",

    # Adapters
    "CoinbaseSpotSampler",
    "ResultFileStore",

    # Ports
    "Sampler",
    "SamplerFactory",
    "ResultStore",

    # Domain values
    "Deadline",
    "FetchResult",
    "WorkerResult",
    "RunResult",

    # Errors
    "SamplerRunError",
    "WorkerTaskError",
    "ResultStoreError",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("btc-price-sampler")
except PackageNotFoundError:
    __version__ = "0.0.0"
