"""Percentage-of-amount fee component.

Small payments pay a high percentage that decays exponentially toward the
tier's ``min_rate`` as the amount approaches 4M sats; above that the
percentage is ``cap_divisor / amount`` so the absolute charge stays flat.
The result is then pulled toward ``tier_floor`` as congestion rises from 1
to 2000 sat/vB.

At the 4M boundary ``cap_divisor / 4_000_000 == min_rate`` for every tier,
which keeps the curve continuous.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from feequote.constants import MAX_CONGESTION_SAT_VB, MIN_CONGESTION_SAT_VB, FeeTier
from feequote.errors import InvalidCongestion

DECAY_START_SATS = 21_000
DECAY_END_SATS = 4_000_000
DECAY_STEEPNESS = 21


@dataclass(frozen=True)
class PercentageCurve:
    min_rate: float
    max_rate: float
    cap_divisor: float
    tier_floor: float


PERCENTAGE_CURVES: dict[FeeTier, PercentageCurve] = {
    FeeTier.PRIORITY: PercentageCurve(
        min_rate=0.0075, max_rate=0.04, cap_divisor=30_000, tier_floor=0.005,
    ),
    FeeTier.STANDARD: PercentageCurve(
        min_rate=0.005, max_rate=0.03, cap_divisor=20_000, tier_floor=0.0025,
    ),
    FeeTier.ECONOMY: PercentageCurve(
        min_rate=0.003125, max_rate=0.02, cap_divisor=12_500, tier_floor=0.001,
    ),
}


def exp_decay(
    amount_sats: int,
    min_rate: float,
    max_rate: float,
    cap_divisor: float,
) -> float:
    """Decay-based percentage before congestion blending."""
    if amount_sats < DECAY_END_SATS:
        progress = (amount_sats - DECAY_START_SATS) / (DECAY_END_SATS - DECAY_START_SATS)
        return min_rate + (max_rate - min_rate) * math.exp(-progress * DECAY_STEEPNESS)
    return cap_divisor / amount_sats


def check_congestion(congestion_rate: float) -> None:
    """Raise ``InvalidCongestion`` unless the rate is finite and positive."""
    if isinstance(congestion_rate, bool) or not isinstance(congestion_rate, (int, float)):
        raise InvalidCongestion(
            f"Congestion rate must be a number, got {congestion_rate!r}",
            field="congestion_rate",
            bound="> 0",
        )
    if not math.isfinite(congestion_rate) or congestion_rate <= 0:
        raise InvalidCongestion(
            f"Congestion rate must be a positive finite sat/vB value, got {congestion_rate}",
            field="congestion_rate",
            bound="> 0",
        )


def fee_percentage(amount_sats: int, tier: FeeTier, congestion_rate: float) -> float:
    """Fraction of the amount charged at *tier* under *congestion_rate*.

    Returns 0 for a zero amount. Rates above 2000 sat/vB extrapolate the
    blend past ``tier_floor``; they are not clamped.
    """
    check_congestion(congestion_rate)
    if amount_sats == 0:
        return 0.0

    curve = PERCENTAGE_CURVES[tier]
    decayed = exp_decay(amount_sats, curve.min_rate, curve.max_rate, curve.cap_divisor)
    weight = (congestion_rate - MIN_CONGESTION_SAT_VB) / (
        MAX_CONGESTION_SAT_VB - MIN_CONGESTION_SAT_VB
    )
    return decayed + weight * (curve.tier_floor - decayed)
