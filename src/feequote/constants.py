"""Constants for on-chain fee quoting."""

from enum import Enum


SATS_PER_BTC = 100_000_000

MIN_AMOUNT_SATS = 10_000  # smallest payment we quote
MAX_AMOUNT_SATS = 100_000_000  # 1 BTC cap per quote

# Congestion range covered by the percentage blend and the simulation slider.
MIN_CONGESTION_SAT_VB = 1
MAX_CONGESTION_SAT_VB = 2000

# P2WPKH serialized sizes in vbytes — protocol-derived, not configurable.
BASE_TX_VBYTES = 11
P2WPKH_INPUT_VBYTES = 68
P2WPKH_OUTPUT_VBYTES = 31

DEFAULT_OUTPUTS = 2  # payment + change
BATCH_OUTPUTS = 11  # ten batched payments + change
BATCH_SIZE = 10  # payments sharing one batch transaction


class FeeTier(str, Enum):
    """Speed/cost preference for a quote."""

    PRIORITY = "priority"
    STANDARD = "standard"
    ECONOMY = "economy"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()
