"""Async HTTP client for mempool.space recommended fee rates."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from feequote.snapshot import FALLBACK_SNAPSHOT, FeeRateSnapshot, SnapshotFormatError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------


class MempoolError(Exception):
    """Base exception for fee-rate fetches."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MempoolNotFoundError(MempoolError):
    """404 — endpoint not found (wrong host or API version)."""


class MempoolRateLimitError(MempoolError):
    """429 — too many requests."""


class MempoolServerError(MempoolError):
    """5xx — server-side error (retryable)."""


class MempoolConnectionError(MempoolError):
    """Network/DNS failure (retryable)."""


class MempoolTimeoutError(MempoolError):
    """Request timeout (retryable)."""


class MempoolFormatError(MempoolError):
    """Response body is not a valid recommended-fees payload."""


RETRYABLE_ERRORS: tuple[type[MempoolError], ...] = (
    MempoolServerError,
    MempoolConnectionError,
    MempoolTimeoutError,
)


_STATUS_MAP: dict[int, type[MempoolError]] = {
    404: MempoolNotFoundError,
    429: MempoolRateLimitError,
}


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class MempoolClient:
    """Async client for the mempool.space REST API v1."""

    def __init__(self, host: str = "https://mempool.space") -> None:
        base_url = host.rstrip("/") + "/api/v1"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(connect=5.0, read=10.0, write=10.0, pool=5.0),
        )

    async def _request(self, method: str, endpoint: str) -> Any:
        """Send a request and map errors to the mempool exception hierarchy."""
        try:
            response = await self._client.request(method, endpoint)
        except httpx.ConnectError as exc:
            raise MempoolConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise MempoolTimeoutError(str(exc)) from exc

        if response.status_code >= 400:
            body = response.text
            exc_cls = _STATUS_MAP.get(response.status_code)
            if exc_cls is not None:
                raise exc_cls(body, status_code=response.status_code)
            if response.status_code >= 500:
                raise MempoolServerError(body, status_code=response.status_code)
            raise MempoolError(body, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise MempoolFormatError(
                f"Response is not JSON: {exc}", status_code=response.status_code
            ) from exc

    async def get_recommended_fees(self) -> FeeRateSnapshot:
        """GET /fees/recommended — current fee-rate snapshot."""
        data = await self._request("GET", "/fees/recommended")
        try:
            snapshot = FeeRateSnapshot.from_dict(data)
        except SnapshotFormatError as exc:
            raise MempoolFormatError(
                f"Invalid data format received from mempool.space API: {exc}"
            ) from exc
        logger.debug("Fee-rate snapshot received: %s", snapshot)
        return snapshot

    # -- lifecycle ------------------------------------------------------------

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> MempoolClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


# ---------------------------------------------------------------------------
# Retry with fallback
# ---------------------------------------------------------------------------


async def fetch_snapshot_with_fallback(
    client: MempoolClient,
    *,
    retries: int = 3,
    retry_delay: float = 0.5,
    fallback: FeeRateSnapshot = FALLBACK_SNAPSHOT,
) -> tuple[FeeRateSnapshot, bool]:
    """Fetch a snapshot, retrying transient failures up to *retries* times.

    Returns ``(snapshot, used_fallback)``. Never raises a ``MempoolError``:
    a non-retryable error, or exhausting the retries, yields *fallback*.
    """
    attempts = 1 + max(retries, 0)
    for attempt in range(1, attempts + 1):
        try:
            return await client.get_recommended_fees(), False
        except RETRYABLE_ERRORS as e:
            if attempt == attempts:
                logger.warning(
                    "Fee-rate fetch failed after %d attempts: %s; using fallback snapshot.",
                    attempts, e,
                )
                break
            logger.debug("Fee-rate fetch attempt %d failed: %s; retrying.", attempt, e)
            if retry_delay > 0:
                await asyncio.sleep(retry_delay)
        except MempoolError as e:
            logger.warning("Fee-rate fetch failed: %s; using fallback snapshot.", e)
            break
    return fallback, True
