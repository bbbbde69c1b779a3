"""Coinbase spot-price feed adapter.

One ``CoinbaseSpotSampler`` per worker: it owns a ``requests.Session`` so
connections are reused across polls, and sessions are never shared between
threads.
"""

from __future__ import annotations

import logging
import math
import os
from typing import Any

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from price_sampler.core.domain.types import FetchResult

LOGGER = logging.getLogger(__name__)

DEFAULT_SPOT_PRICE_URL = "https://api.coinbase.com/v2/prices/spot"
DEFAULT_CURRENCY = "USD"
DEFAULT_TIMEOUT_SECONDS = 10.0


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class FeedConfig(BaseModel):
    """Spot-price feed settings.

    Expected environment (all optional):
    - BTC_SAMPLER_FEED_URL: spot-price endpoint without query string.
    - BTC_SAMPLER_CURRENCY: quote currency.
    - BTC_SAMPLER_HTTP_TIMEOUT: per-request timeout in seconds.
    """

    url: str = Field(default=DEFAULT_SPOT_PRICE_URL, min_length=1)
    currency: str = Field(default=DEFAULT_CURRENCY, min_length=1)
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_env(cls) -> FeedConfig:
        raw: dict[str, Any] = {}

        url = os.environ.get("BTC_SAMPLER_FEED_URL")
        if url:
            raw["url"] = url

        currency = os.environ.get("BTC_SAMPLER_CURRENCY")
        if currency:
            raw["currency"] = currency

        timeout = os.environ.get("BTC_SAMPLER_HTTP_TIMEOUT")
        if timeout:
            raw["timeout_seconds"] = timeout

        return cls.model_validate(raw)


# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------


class SpotPriceData(BaseModel):
    amount: str = Field(..., min_length=1)

    # The feed also sends "base" and "currency".
    model_config = ConfigDict(extra="ignore")


class SpotPriceResponse(BaseModel):
    data: SpotPriceData

    model_config = ConfigDict(extra="ignore")

    def price(self) -> float:
        """Parse the decimal amount; raises ValueError when unparsable."""
        value = float(self.data.amount)
        if not math.isfinite(value):
            raise ValueError(f"non-finite amount: {self.data.amount!r}")
        return value


# ---------------------------------------------------------------------------
# Sampler
# ---------------------------------------------------------------------------


class CoinbaseSpotSampler:
    """Sampler performing one HTTP GET per observation."""

    def __init__(
        self,
        config: FeedConfig | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._config = config if config is not None else FeedConfig()
        self._session = session if session is not None else requests.Session()

    def fetch_one(self) -> FetchResult:
        try:
            response = self._session.get(
                self._config.url,
                params={"currency": self._config.currency},
                timeout=self._config.timeout_seconds,
            )
            response.raise_for_status()
            payload = SpotPriceResponse.model_validate(response.json())
            return FetchResult.success(payload.price())
        except requests.RequestException as exc:
            return FetchResult.failure(f"request failed: {exc}")
        except ValidationError as exc:
            return FetchResult.failure(f"unexpected response shape: {exc.error_count()} error(s)")
        except ValueError as exc:
            # Covers JSON decode errors and unparsable amounts.
            return FetchResult.failure(f"unparsable response: {exc}")

    def close(self) -> None:
        self._session.close()
