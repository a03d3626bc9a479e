"""Async GraphQL client for the Blink USD/BTC spot price."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

BTC_PRICE_LIST_QUERY = """
query btcPriceList($range: PriceGraphRange!) {
  btcPriceList(range: $range) {
    timestamp
    price {
      base
      offset
      currencyUnit
      formattedAmount
    }
  }
}
"""


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------


class PriceError(Exception):
    """Base exception for spot-price fetches."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PriceConnectionError(PriceError):
    """Network/DNS failure."""


class PriceTimeoutError(PriceError):
    """Request timeout."""


class PriceUnavailableError(PriceError):
    """The API answered but returned no usable price."""


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------


def price_to_usd(base: float, offset: int) -> float:
    """Convert a Blink price (USD cents scaled by ``10**offset``) to dollars.

    ``base=27085000000, offset=4`` is 2,708,500 cents, i.e. $27,085.
    """
    return base / 10 ** offset / 100


def latest_usd_price(payload: Any) -> float:
    """Return the most recent USD price from a ``btcPriceList`` response."""
    if not isinstance(payload, dict):
        raise PriceUnavailableError("Price response is not an object")
    if payload.get("errors"):
        raise PriceUnavailableError(f"GraphQL errors: {payload['errors']}")

    items = (payload.get("data") or {}).get("btcPriceList") or []
    if not items:
        raise PriceUnavailableError("No price data available")

    try:
        latest = max(items, key=lambda item: item["timestamp"])
        price = latest["price"]
        return price_to_usd(price["base"], price["offset"])
    except (KeyError, TypeError) as e:
        raise PriceUnavailableError(f"Malformed price entry: {e}") from e


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class PriceClient:
    """Async client for the Blink GraphQL price endpoint."""

    def __init__(self, url: str = "https://api.blink.sv/graphql") -> None:
        self._url = url
        self._client = httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(connect=5.0, read=10.0, write=10.0, pool=5.0),
        )

    async def get_btc_price_usd(self, price_range: str = "ONE_DAY") -> float:
        """POST the ``btcPriceList`` query and return the latest USD price."""
        payload = {
            "query": BTC_PRICE_LIST_QUERY,
            "variables": {"range": price_range},
        }
        try:
            response = await self._client.post(self._url, json=payload)
        except httpx.ConnectError as exc:
            raise PriceConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise PriceTimeoutError(str(exc)) from exc

        if response.status_code >= 400:
            raise PriceError(
                f"API request failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise PriceUnavailableError(f"Response is not JSON: {exc}") from exc
        return latest_usd_price(data)

    # -- lifecycle ------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> PriceClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
