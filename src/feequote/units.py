"""Sats/BTC conversion and rounding helpers.

Every rounding step in the fee pipeline goes through ``round_half_up`` so
quotes are identical across implementations. Python's ``round()`` rounds
half to even and is never used for money here.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from feequote.constants import SATS_PER_BTC
from feequote.errors import InvalidAmount


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity."""
    return math.floor(value + 0.5)


def sats_to_btc(sats: int) -> float:
    return sats / SATS_PER_BTC


# Fees are quoted on payments of at most 1 BTC, so a displayed fee above
# that means the congestion rate is unrealistic.
_FEE_DISPLAY_MAX_SATS = 100_000_000


def sats_to_btc_string(sats: int, *, max_sats: int = _FEE_DISPLAY_MAX_SATS) -> str:
    """Render a fee in sats as BTC with 8 decimal places.

    Negative fees and fees above *max_sats* raise ValueError rather than
    being shown.
    """
    if sats < 0:
        raise ValueError(f"sats must be non-negative, got {sats}")
    if sats > max_sats:
        raise ValueError(
            f"sats ({sats:,}) exceeds ceiling ({max_sats:,})"
        )
    return f"{sats / SATS_PER_BTC:.8f}"


def btc_to_sats(btc: str | float | Decimal) -> int:
    """Convert a BTC amount to satoshis, rounding half-up.

    Goes through ``Decimal`` so ``"0.1"`` is exactly 10,000,000 sats.
    """
    try:
        value = Decimal(str(btc).strip())
    except InvalidOperation as e:
        raise ValueError(f"Not a BTC amount: {btc!r}") from e
    if not value.is_finite():
        raise ValueError(f"Not a BTC amount: {btc!r}")
    return int((value * SATS_PER_BTC).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def parse_amount(text: str, unit: str = "sats") -> int:
    """Parse user-entered amount text in ``"sats"`` or ``"btc"`` into satoshis.

    Range checks are left to the engine; this only rejects text that is not
    a number (or a fractional sats amount).
    """
    raw = text.strip()
    unit = unit.lower()
    if unit == "btc":
        try:
            return btc_to_sats(raw)
        except ValueError as e:
            raise InvalidAmount(str(e), field="amount") from e
    if unit == "sats":
        try:
            return int(raw)
        except ValueError as e:
            raise InvalidAmount(
                f"Not a whole number of sats: {text!r}", field="amount",
            ) from e
    raise ValueError(f"Unknown unit {unit!r}; expected 'sats' or 'btc'")
