"""
Semantic test: the HTTP sampler reports failures instead of raising.

Invariant:
Network errors, HTTP error statuses, undecodable bodies, unexpected shapes
and unparsable amounts all yield FetchResult failures; a well-formed body
yields the parsed amount.
"""

from __future__ import annotations

from typing import Any

import pytest
import requests

from price_sampler.sampling.adapters.coinbase import (
    DEFAULT_SPOT_PRICE_URL,
    CoinbaseSpotSampler,
    FeedConfig,
)


class _FakeResponse:
    def __init__(self, payload: Any = None, *, status: int = 200, json_error: bool = False) -> None:
        self._payload = payload
        self._status = status
        self._json_error = json_error

    def raise_for_status(self) -> None:
        if self._status >= 400:
            raise requests.HTTPError(f"{self._status} Server Error")

    def json(self) -> Any:
        if self._json_error:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class _FakeSession:
    def __init__(self, response: _FakeResponse | None = None, error: Exception | None = None) -> None:
        self._response = response
        self._error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self._error is not None:
            raise self._error
        assert self._response is not None
        return self._response

    def close(self) -> None:
        self.closed = True


def _sampler(session: _FakeSession) -> CoinbaseSpotSampler:
    return CoinbaseSpotSampler(FeedConfig(timeout_seconds=2.5), session=session)  # type: ignore[arg-type]


def test_well_formed_body_is_parsed() -> None:
    session = _FakeSession(
        _FakeResponse({"data": {"amount": "64123.45", "base": "BTC", "currency": "USD"}})
    )

    result = _sampler(session).fetch_one()

    assert result.ok
    assert result.value == 64123.45
    assert session.calls == [
        {"url": DEFAULT_SPOT_PRICE_URL, "params": {"currency": "USD"}, "timeout": 2.5}
    ]


@pytest.mark.parametrize(
    "response",
    [
        _FakeResponse({"data": {"amount": "not-a-number"}}),
        _FakeResponse({"data": {"amount": "NaN"}}),
        _FakeResponse({"data": {}}),
        _FakeResponse({"errors": [{"id": "not_found"}]}),
        _FakeResponse({"data": {"amount": 64123.45}}),
        _FakeResponse(json_error=True),
        _FakeResponse({"data": {"amount": "1"}}, status=503),
    ],
)
def test_bad_responses_are_failures(response: _FakeResponse) -> None:
    result = _sampler(_FakeSession(response)).fetch_one()

    assert not result.ok
    assert result.value is None
    assert result.error


@pytest.mark.parametrize(
    "error",
    [
        requests.ConnectionError("connection refused"),
        requests.Timeout("read timed out"),
    ],
)
def test_network_errors_are_failures(error: Exception) -> None:
    result = _sampler(_FakeSession(error=error)).fetch_one()

    assert not result.ok
    assert "request failed" in (result.error or "")


def test_close_releases_session() -> None:
    session = _FakeSession(_FakeResponse({"data": {"amount": "1"}}))
    sampler = _sampler(session)

    sampler.close()

    assert session.closed


def test_feed_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BTC_SAMPLER_FEED_URL", "http://localhost:8080/spot")
    monkeypatch.setenv("BTC_SAMPLER_CURRENCY", "EUR")
    monkeypatch.setenv("BTC_SAMPLER_HTTP_TIMEOUT", "3")

    cfg = FeedConfig.from_env()

    assert cfg.url == "http://localhost:8080/spot"
    assert cfg.currency == "EUR"
    assert cfg.timeout_seconds == 3.0


def test_feed_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("BTC_SAMPLER_FEED_URL", "BTC_SAMPLER_CURRENCY", "BTC_SAMPLER_HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)

    assert FeedConfig.from_env() == FeedConfig()
