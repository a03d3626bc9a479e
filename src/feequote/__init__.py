"""feequote — on-chain Bitcoin fee quotes.

Deterministic fee pricing from a fee-rate snapshot and a speed/cost tier.
"""

__version__ = "0.1.0"

from feequote.config import FeeQuoteConfig
from feequote.constants import FeeTier, MIN_AMOUNT_SATS, MAX_AMOUNT_SATS, SATS_PER_BTC
from feequote.errors import FeeQuoteError, InvalidAmount, MissingSnapshot, InvalidCongestion
from feequote.snapshot import FeeRateSnapshot, FALLBACK_SNAPSHOT
from feequote.engine import FeeRequest, FeeQuote, quote
from feequote.scale import rate_from_slider_position, slider_position_from_rate
from feequote.units import btc_to_sats, parse_amount, sats_to_btc, sats_to_btc_string
from feequote.mempool_client import MempoolClient, MempoolError, fetch_snapshot_with_fallback
from feequote.price_client import PriceClient, PriceError

__all__ = [
    "FeeQuoteConfig",
    "FeeTier",
    "MIN_AMOUNT_SATS",
    "MAX_AMOUNT_SATS",
    "SATS_PER_BTC",
    "FeeQuoteError",
    "InvalidAmount",
    "MissingSnapshot",
    "InvalidCongestion",
    "FeeRateSnapshot",
    "FALLBACK_SNAPSHOT",
    "FeeRequest",
    "FeeQuote",
    "quote",
    "rate_from_slider_position",
    "slider_position_from_rate",
    "btc_to_sats",
    "parse_amount",
    "sats_to_btc",
    "sats_to_btc_string",
    "MempoolClient",
    "MempoolError",
    "fetch_snapshot_with_fallback",
    "PriceClient",
    "PriceError",
]
