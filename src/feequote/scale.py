"""Slider position <-> congestion rate mapping for fee simulation.

The slider runs 0-100. The lower half is linear over 1-50 sat/vB and the
upper half is logarithmic over 50-2000 sat/vB, so everyday rates get most of
the travel while extreme congestion is still reachable.
"""

from __future__ import annotations

import math

from feequote.constants import MAX_CONGESTION_SAT_VB, MIN_CONGESTION_SAT_VB
from feequote.units import round_half_up

SLIDER_MIN = 0
SLIDER_MAX = 100
SLIDER_MID = 50
MID_RATE_SAT_VB = 50

_LOG_MID = math.log(MID_RATE_SAT_VB)
_LOG_MAX = math.log(MAX_CONGESTION_SAT_VB)


def rate_from_slider_position(position: float) -> int:
    """Map a slider position to a whole sat/vB rate in [1, 2000]."""
    if not math.isfinite(position):
        raise ValueError(f"Slider position must be a finite number, got {position!r}")
    if position <= SLIDER_MIN:
        return MIN_CONGESTION_SAT_VB
    if position >= SLIDER_MAX:
        return MAX_CONGESTION_SAT_VB

    if position <= SLIDER_MID:
        rate = MIN_CONGESTION_SAT_VB + (position / SLIDER_MID) * (
            MID_RATE_SAT_VB - MIN_CONGESTION_SAT_VB
        )
    else:
        fraction = (position - SLIDER_MID) / (SLIDER_MAX - SLIDER_MID)
        rate = math.exp(_LOG_MID + fraction * (_LOG_MAX - _LOG_MID))
    return round_half_up(rate)


def slider_position_from_rate(rate: float) -> int:
    """Map a sat/vB rate to a whole slider position in [0, 100]."""
    if not math.isfinite(rate):
        raise ValueError(f"Congestion rate must be a finite number, got {rate!r}")
    if rate <= MIN_CONGESTION_SAT_VB:
        return SLIDER_MIN
    if rate >= MAX_CONGESTION_SAT_VB:
        return SLIDER_MAX

    if rate <= MID_RATE_SAT_VB:
        position = (rate - MIN_CONGESTION_SAT_VB) / (
            MID_RATE_SAT_VB - MIN_CONGESTION_SAT_VB
        ) * SLIDER_MID
    else:
        fraction = (math.log(rate) - _LOG_MID) / (_LOG_MAX - _LOG_MID)
        position = SLIDER_MID + fraction * (SLIDER_MAX - SLIDER_MID)
    return round_half_up(position)
