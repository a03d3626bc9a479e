"""Absolute on-chain cost the operator bears to settle one payment."""

from __future__ import annotations

import math

from feequote.constants import BATCH_SIZE, FeeTier
from feequote.errors import InvalidCongestion
from feequote.percentage import check_congestion
from feequote.sizing import tier_transaction_size
from feequote.units import round_half_up


def network_cost(amount_sats: int, tier: FeeTier, congestion_rate: float) -> int:
    """Cost in sats of settling *amount_sats* at *tier*.

    Economy payments share one batch transaction, so each pays a tenth of the
    batch cost. Priority and Standard pay for a whole transaction.
    """
    check_congestion(congestion_rate)
    size = tier_transaction_size(amount_sats, tier)
    cost = size * congestion_rate
    if tier == FeeTier.ECONOMY:
        cost /= BATCH_SIZE
    if not math.isfinite(cost):
        raise InvalidCongestion(
            f"Congestion rate {congestion_rate} overflows the network cost",
            field="congestion_rate",
            bound="finite fee",
        )
    return round_half_up(cost)
