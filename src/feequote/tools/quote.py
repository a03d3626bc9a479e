"""Quote tools: quote_fee, simulate_fee, live_quote.

Presentation-facing wrappers around the fee engine. They never raise for
user errors; every result is a plain dict with a ``success`` flag.
"""

from __future__ import annotations

import logging
from typing import Any

from feequote.config import FeeQuoteConfig
from feequote.constants import FeeTier
from feequote.engine import FeeRequest, quote
from feequote.errors import FeeQuoteError
from feequote.mempool_client import MempoolClient, fetch_snapshot_with_fallback
from feequote.price_client import PriceClient, PriceError
from feequote.scale import rate_from_slider_position
from feequote.sizing import tier_shape
from feequote.snapshot import FeeRateSnapshot
from feequote.units import parse_amount, sats_to_btc_string

logger = logging.getLogger(__name__)

# Accepted spellings, including the mempool rate-field names the calculator
# UI used as tier keys.
_TIER_ALIASES: dict[str, FeeTier] = {
    "priority": FeeTier.PRIORITY,
    "fast": FeeTier.PRIORITY,
    "fastestfee": FeeTier.PRIORITY,
    "standard": FeeTier.STANDARD,
    "hourfee": FeeTier.STANDARD,
    "economy": FeeTier.ECONOMY,
    "slow": FeeTier.ECONOMY,
    "economyfee": FeeTier.ECONOMY,
}


def tier_from_name(name: str | FeeTier) -> FeeTier:
    """Resolve a user-facing tier name to a ``FeeTier``.

    Raises ValueError for anything unrecognised.
    """
    if isinstance(name, FeeTier):
        return name
    tier = _TIER_ALIASES.get(str(name).strip().lower())
    if tier is None:
        raise ValueError(
            f"Unknown fee tier {name!r}; expected priority, standard or economy."
        )
    return tier


def _shape_message(amount_sats: int, tier: FeeTier, size: int) -> str:
    num_inputs, num_outputs = tier_shape(amount_sats, tier)
    noun = "input" if num_inputs == 1 else "inputs"
    return (
        f"This calculation uses {num_inputs} {noun} and {num_outputs} outputs "
        f"({size} vbytes) based on your payment amount."
    )


def quote_fee_tool(
    snapshot: FeeRateSnapshot | None,
    amount: int | str,
    tier: str | FeeTier,
    congestion_override: float | None = None,
    usd_per_btc: float | None = None,
    unit: str = "sats",
) -> dict[str, Any]:
    """Quote the fee for one payment.

    *amount* is an int of sats, or user-entered text in *unit* (``"sats"``
    or ``"btc"``).

    Returns dict with:
        success: True when a quote was produced.
        fee_sats, fee_btc, transaction_size_vbytes, fee_percentage,
        base_multiplier, network_cost_sats: The quote fields.
        fee_btc_display: fee_btc as an 8-decimal string.
        fee_usd: Present only when *usd_per_btc* is given.
        tier, tier_name: Tier key and display name.
        congestion_rate: The sat/vB rate the quote was priced at.
        simulated: True when *congestion_override* was used.
        message: Transaction-shape summary.

    Errors: Returns success=False with ``error`` (and ``field``/``bound``
    for range violations) on a bad tier, amount, or congestion rate.
    """
    if isinstance(amount, str):
        try:
            amount_sats = parse_amount(amount, unit)
        except FeeQuoteError as e:
            return {
                "success": False,
                "error": str(e),
                "error_type": type(e).__name__,
                "field": e.field,
            }
        except ValueError as e:
            return {"success": False, "error": str(e), "field": "unit"}
    else:
        amount_sats = amount

    try:
        fee_tier = tier_from_name(tier)
    except ValueError as e:
        return {"success": False, "error": str(e), "field": "tier"}

    request = FeeRequest(
        amount_sats=amount_sats,
        tier=fee_tier,
        congestion_override=congestion_override,
    )
    try:
        result = quote(request, snapshot)
    except FeeQuoteError as e:
        return {
            "success": False,
            "error": str(e),
            "error_type": type(e).__name__,
            "field": e.field,
            "bound": e.bound,
        }

    try:
        fee_btc_display = sats_to_btc_string(result.fee_sats)
    except ValueError:
        logger.error(
            "Quoted fee %d sats exceeds the 1 BTC display ceiling (amount %d, tier %s).",
            result.fee_sats, amount_sats, fee_tier.value,
        )
        return {
            "success": False,
            "error": (
                f"Quoted fee ({result.fee_sats:,} sats) exceeds the 1 BTC ceiling. "
                "Check the congestion rate."
            ),
            "field": "congestion_rate",
        }

    simulated = congestion_override is not None
    rate = congestion_override if simulated else snapshot.fastest

    response: dict[str, Any] = {
        "success": True,
        "tier": fee_tier.value,
        "tier_name": fee_tier.display_name,
        "amount_sats": amount_sats,
        "fee_sats": result.fee_sats,
        "fee_btc": result.fee_btc,
        "fee_btc_display": fee_btc_display,
        "transaction_size_vbytes": result.transaction_size_vbytes,
        "fee_percentage": result.fee_percentage,
        "base_multiplier": result.base_multiplier,
        "network_cost_sats": result.network_cost_sats,
        "congestion_rate": rate,
        "simulated": simulated,
        "message": _shape_message(amount_sats, fee_tier, result.transaction_size_vbytes),
    }
    if usd_per_btc is not None:
        response["usd_per_btc"] = usd_per_btc
        response["fee_usd"] = result.fee_btc * usd_per_btc
    return response


def simulate_fee_tool(
    snapshot: FeeRateSnapshot | None,
    amount: int | str,
    tier: str | FeeTier,
    slider_position: float,
    usd_per_btc: float | None = None,
    unit: str = "sats",
) -> dict[str, Any]:
    """Quote at the congestion rate selected by a 0-100 simulator slider."""
    try:
        simulated_rate = rate_from_slider_position(slider_position)
    except (TypeError, ValueError) as e:
        return {
            "success": False,
            "error": str(e),
            "field": "slider_position",
            "slider_position": slider_position,
        }
    result = quote_fee_tool(
        snapshot,
        amount,
        tier,
        congestion_override=simulated_rate,
        usd_per_btc=usd_per_btc,
        unit=unit,
    )
    result["slider_position"] = slider_position
    result["simulated_rate"] = simulated_rate
    return result


async def live_quote_tool(
    mempool: MempoolClient,
    prices: PriceClient | None,
    config: FeeQuoteConfig,
    amount: int | str,
    tier: str | FeeTier,
    unit: str = "sats",
) -> dict[str, Any]:
    """Fetch current fee rates (and the spot price), then quote.

    Fee-rate failures fall back to ``config.fallback_snapshot`` and set
    ``fallback_snapshot_used``. A price failure only drops ``fee_usd``.
    """
    snapshot, used_fallback = await fetch_snapshot_with_fallback(
        mempool,
        retries=config.fetch_retries,
        retry_delay=config.retry_delay_secs,
        fallback=config.fallback_snapshot,
    )

    usd_per_btc: float | None = None
    if prices is not None:
        try:
            usd_per_btc = await prices.get_btc_price_usd(config.price_range)
        except PriceError as e:
            logger.warning("Spot price unavailable: %s", e)

    result = quote_fee_tool(
        snapshot, amount, tier, usd_per_btc=usd_per_btc, unit=unit,
    )
    result["fallback_snapshot_used"] = used_fallback
    if used_fallback and result["success"]:
        result["message"] += " Live fee rates were unavailable; fallback rates were used."
    return result
