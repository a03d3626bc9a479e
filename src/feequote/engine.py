"""Fee engine: turns a request and a fee-rate snapshot into a quote.

Stateless and side-effect free. Each component (size, percentage,
multiplier, network cost) is computed independently from the request and the
effective congestion rate, then combined as
``amount * percentage + network_cost * multiplier``.

Every tier reads congestion from ``snapshot.fastest``; ``half_hour``,
``hour`` and ``economy`` are carried on the snapshot but not priced.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from feequote.constants import MAX_AMOUNT_SATS, MIN_AMOUNT_SATS, FeeTier
from feequote.errors import InvalidAmount, InvalidCongestion, MissingSnapshot
from feequote.multiplier import base_multiplier
from feequote.network_cost import network_cost
from feequote.percentage import check_congestion, fee_percentage
from feequote.sizing import tier_transaction_size
from feequote.snapshot import FeeRateSnapshot
from feequote.units import round_half_up, sats_to_btc


@dataclass(frozen=True)
class FeeRequest:
    """One quote request.

    ``congestion_override`` is a what-if sat/vB rate used in place of
    ``snapshot.fastest``. The snapshot itself is never modified.
    """

    amount_sats: int
    tier: FeeTier
    congestion_override: float | None = None


@dataclass(frozen=True)
class FeeQuote:
    fee_sats: int
    fee_btc: float
    transaction_size_vbytes: int
    fee_percentage: float
    base_multiplier: float
    network_cost_sats: int


def validate_amount(amount_sats: int) -> None:
    """Raise ``InvalidAmount`` unless *amount_sats* is a whole number in range."""
    if isinstance(amount_sats, bool) or not isinstance(amount_sats, int):
        raise InvalidAmount(
            f"amount_sats must be a whole number of sats, got {amount_sats!r}",
            field="amount_sats",
            bound="integer",
        )
    if amount_sats < MIN_AMOUNT_SATS:
        raise InvalidAmount(
            f"amount_sats must be at least {MIN_AMOUNT_SATS:,} sats, got {amount_sats:,}",
            field="amount_sats",
            bound=f">= {MIN_AMOUNT_SATS}",
        )
    if amount_sats > MAX_AMOUNT_SATS:
        raise InvalidAmount(
            f"amount_sats must be at most {MAX_AMOUNT_SATS:,} sats, got {amount_sats:,}",
            field="amount_sats",
            bound=f"<= {MAX_AMOUNT_SATS}",
        )


def _congestion_field(request: FeeRequest) -> str:
    if request.congestion_override is not None:
        return "congestion_override"
    return "snapshot.fastest"


def effective_congestion(
    request: FeeRequest, snapshot: FeeRateSnapshot | None,
) -> float:
    """The sat/vB rate every formula reads for *request*."""
    if request.congestion_override is not None:
        rate = request.congestion_override
    elif snapshot is None:
        raise MissingSnapshot(
            "No fee-rate snapshot available and no congestion override given",
            field="snapshot",
        )
    else:
        rate = snapshot.fastest

    try:
        check_congestion(rate)
    except InvalidCongestion as e:
        raise InvalidCongestion(
            str(e), field=_congestion_field(request), bound=e.bound,
        ) from e
    return rate


def quote(request: FeeRequest, snapshot: FeeRateSnapshot | None) -> FeeQuote:
    """Price *request* against *snapshot*.

    Raises:
        InvalidAmount: amount outside [10,000, 100,000,000] sats or not an int.
        MissingSnapshot: *snapshot* is None and the request has no override.
        InvalidCongestion: the effective rate is not a positive finite number,
            or is so large that the fee overflows a float.
    """
    validate_amount(request.amount_sats)
    if not isinstance(request.tier, FeeTier):
        raise ValueError(f"Unknown fee tier: {request.tier!r}")
    rate = effective_congestion(request, snapshot)

    amount = request.amount_sats
    size = tier_transaction_size(amount, request.tier)
    try:
        percentage = fee_percentage(amount, request.tier, rate)
        multiplier = base_multiplier(request.tier, rate)
        cost = network_cost(amount, request.tier, rate)
        raw_fee = amount * percentage + cost * multiplier
        if not math.isfinite(raw_fee):
            raise InvalidCongestion(
                f"Congestion rate {rate} produces a non-finite fee",
                bound="finite fee",
            )
    except InvalidCongestion as e:
        raise InvalidCongestion(
            str(e), field=_congestion_field(request), bound=e.bound,
        ) from e

    fee_sats = round_half_up(raw_fee)
    return FeeQuote(
        fee_sats=fee_sats,
        fee_btc=sats_to_btc(fee_sats),
        transaction_size_vbytes=size,
        fee_percentage=percentage,
        base_multiplier=multiplier,
        network_cost_sats=cost,
    )
