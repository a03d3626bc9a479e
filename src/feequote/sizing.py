"""Transaction shape estimates: input counts and virtual size.

The input counts are empirical step functions approximating how many UTXOs
a wallet consumes as payment size grows. Economy payments are assumed to
ride in a batch transaction, which needs more inputs in aggregate.
"""

from __future__ import annotations

from bisect import bisect_right

from feequote.constants import (
    BASE_TX_VBYTES,
    BATCH_OUTPUTS,
    DEFAULT_OUTPUTS,
    P2WPKH_INPUT_VBYTES,
    P2WPKH_OUTPUT_VBYTES,
    FeeTier,
)

# Upper-exclusive amount breakpoints (sats). An amount below the first
# breakpoint needs one input, below the second two, and so on.
_INPUT_BREAKPOINTS: tuple[int, ...] = (
    500_000,
    3_000_000,
    10_000_000,
    22_000_000,
    70_000_000,
)

_BATCH_EXTRA_INPUTS = 2


def input_count(amount_sats: int) -> int:
    """Inputs assumed for a regular (Priority/Standard) payment."""
    if amount_sats < 1:
        return 0
    return 1 + bisect_right(_INPUT_BREAKPOINTS, amount_sats)


def batch_input_count(amount_sats: int) -> int:
    """Inputs assumed for an Economy payment settled inside a batch."""
    return 1 + bisect_right(_INPUT_BREAKPOINTS, amount_sats) + _BATCH_EXTRA_INPUTS


def transaction_size(num_inputs: int, num_outputs: int = DEFAULT_OUTPUTS) -> int:
    """Virtual size in vbytes of an all-P2WPKH transaction."""
    return (
        BASE_TX_VBYTES
        + num_inputs * P2WPKH_INPUT_VBYTES
        + num_outputs * P2WPKH_OUTPUT_VBYTES
    )


def tier_shape(amount_sats: int, tier: FeeTier) -> tuple[int, int]:
    """Return ``(num_inputs, num_outputs)`` assumed for *tier*."""
    if tier == FeeTier.ECONOMY:
        return batch_input_count(amount_sats), BATCH_OUTPUTS
    return input_count(amount_sats), DEFAULT_OUTPUTS


def tier_transaction_size(amount_sats: int, tier: FeeTier) -> int:
    """Virtual size of the transaction that settles a payment at *tier*.

    For Economy this is the whole batch transaction, not the per-payment share.
    """
    return transaction_size(*tier_shape(amount_sats, tier))
