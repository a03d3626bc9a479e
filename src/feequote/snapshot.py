"""Fee-rate snapshot — the recommended sat/vB rates at one point in time.

Pure data model, no I/O. Snapshots are immutable and replaced wholesale on
each refresh. Field ordering (fastest >= half_hour >= ...) is *not* checked:
the source API is trusted to be roughly consistent, and the engine only
reads ``fastest``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

# mempool.space /api/v1/fees/recommended keys -> snapshot attribute
_API_KEYS: dict[str, str] = {
    "fastest": "fastestFee",
    "half_hour": "halfHourFee",
    "hour": "hourFee",
    "economy": "economyFee",
    "minimum": "minimumFee",
}


class SnapshotFormatError(ValueError):
    """Raised when a fee-rate payload is missing fields or has non-numeric rates."""


@dataclass(frozen=True)
class FeeRateSnapshot:
    """Recommended fee rates in sat/vB."""

    fastest: float
    half_hour: float
    hour: float
    economy: float
    minimum: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the mempool.space key names."""
        data: dict[str, Any] = {
            api_key: getattr(self, attr)
            for attr, api_key in _API_KEYS.items()
        }
        if self.minimum is None:
            del data["minimumFee"]
        return data

    @classmethod
    def from_dict(cls, data: Any) -> FeeRateSnapshot:
        """Parse a mempool.space recommended-fees payload.

        ``minimumFee`` is optional; every other key is required. Every rate
        present must be a finite positive number. Booleans are rejected even
        though they are ints.
        """
        if not isinstance(data, dict):
            raise SnapshotFormatError(
                f"Fee-rate payload must be an object, got {type(data).__name__}"
            )

        values: dict[str, float | None] = {}
        for attr, api_key in _API_KEYS.items():
            raw = data.get(api_key)
            if raw is None and attr == "minimum":
                values[attr] = None
                continue
            if raw is None:
                raise SnapshotFormatError(f"Fee-rate payload missing {api_key!r}")
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise SnapshotFormatError(
                    f"{api_key} must be a number, got {raw!r}"
                )
            if not math.isfinite(raw):
                raise SnapshotFormatError(f"{api_key} must be finite, got {raw!r}")
            if raw <= 0:
                raise SnapshotFormatError(f"{api_key} must be positive, got {raw!r}")
            values[attr] = raw

        return cls(**values)


# Used when the fee-rate source is unreachable after retries.
FALLBACK_SNAPSHOT = FeeRateSnapshot(
    fastest=50,
    half_hour=30,
    hour=20,
    economy=10,
    minimum=1,
)
