"""Network-cost multiplier per tier.

``numerator / rate + floor``: the weight shrinks toward the tier floor as
congestion rises and grows without bound as congestion approaches zero.
"""

from __future__ import annotations

from dataclasses import dataclass

from feequote.constants import FeeTier
from feequote.percentage import check_congestion


@dataclass(frozen=True)
class MultiplierCurve:
    numerator: float
    floor: float


MULTIPLIER_CURVES: dict[FeeTier, MultiplierCurve] = {
    FeeTier.PRIORITY: MultiplierCurve(numerator=2, floor=1.3),
    FeeTier.STANDARD: MultiplierCurve(numerator=1, floor=1.1),
    FeeTier.ECONOMY: MultiplierCurve(numerator=2, floor=1.1),
}


def base_multiplier(tier: FeeTier, congestion_rate: float) -> float:
    check_congestion(congestion_rate)
    curve = MULTIPLIER_CURVES[tier]
    return curve.numerator / congestion_rate + curve.floor
