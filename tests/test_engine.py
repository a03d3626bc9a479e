"""Tests for the fee engine entry point."""

import dataclasses

import pytest
from hypothesis import given
from hypothesis import strategies as st

from feequote.constants import FeeTier
from feequote.engine import FeeQuote, FeeRequest, effective_congestion, quote
from feequote.errors import InvalidAmount, InvalidCongestion, MissingSnapshot
from feequote.multiplier import base_multiplier
from feequote.network_cost import network_cost
from feequote.percentage import fee_percentage
from feequote.snapshot import FeeRateSnapshot
from feequote.units import round_half_up


def _snapshot(fastest: float = 50, **overrides) -> FeeRateSnapshot:
    values = {"fastest": fastest, "half_hour": 30, "hour": 20, "economy": 10, "minimum": 1}
    values.update(overrides)
    return FeeRateSnapshot(**values)


# ---------------------------------------------------------------------------
# Worked scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_priority_one_million_at_50(self) -> None:
        q = quote(FeeRequest(1_000_000, FeeTier.PRIORITY), _snapshot(50))
        assert q.transaction_size_vbytes == 209
        assert q.network_cost_sats == 10_450
        assert q.base_multiplier == pytest.approx(1.34)
        assert q.fee_percentage == fee_percentage(1_000_000, FeeTier.PRIORITY, 50)
        assert q.fee_sats == round_half_up(
            1_000_000 * q.fee_percentage + 10_450 * q.base_multiplier
        )
        assert 21_000 < q.fee_sats < 22_000

    def test_economy_batch_at_20(self) -> None:
        q = quote(FeeRequest(9_999_999, FeeTier.ECONOMY), _snapshot(20))
        assert q.transaction_size_vbytes == 692
        assert q.network_cost_sats == 1384
        assert q.base_multiplier == pytest.approx(1.2)

    def test_economy_reports_whole_batch_size(self) -> None:
        q = quote(FeeRequest(10_000_000, FeeTier.ECONOMY), _snapshot(20))
        assert q.transaction_size_vbytes == 760
        assert q.network_cost_sats == 1520

    def test_fee_btc_matches_fee_sats(self) -> None:
        q = quote(FeeRequest(250_000, FeeTier.STANDARD), _snapshot(12))
        assert q.fee_btc == q.fee_sats / 100_000_000

    def test_components_match_standalone_functions(self) -> None:
        q = quote(FeeRequest(5_000_000, FeeTier.STANDARD), _snapshot(35))
        assert q.fee_percentage == fee_percentage(5_000_000, FeeTier.STANDARD, 35)
        assert q.base_multiplier == base_multiplier(FeeTier.STANDARD, 35)
        assert q.network_cost_sats == network_cost(5_000_000, FeeTier.STANDARD, 35)

    def test_quote_is_frozen(self) -> None:
        q = quote(FeeRequest(250_000, FeeTier.STANDARD), _snapshot())
        with pytest.raises(dataclasses.FrozenInstanceError):
            q.fee_sats = 0  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Congestion source
# ---------------------------------------------------------------------------


class TestCongestionSource:
    @pytest.mark.parametrize("tier", list(FeeTier))
    def test_every_tier_reads_fastest(self, tier: FeeTier) -> None:
        a = quote(FeeRequest(1_000_000, tier), _snapshot(40, hour=2, economy=1))
        b = quote(FeeRequest(1_000_000, tier), _snapshot(40, hour=35, economy=30))
        assert a == b

    def test_override_replaces_fastest(self) -> None:
        simulated = quote(
            FeeRequest(1_000_000, FeeTier.PRIORITY, congestion_override=300),
            _snapshot(50),
        )
        direct = quote(FeeRequest(1_000_000, FeeTier.PRIORITY), _snapshot(300))
        assert simulated == direct

    def test_override_leaves_snapshot_untouched(self) -> None:
        snap = _snapshot(50)
        quote(FeeRequest(1_000_000, FeeTier.PRIORITY, congestion_override=300), snap)
        assert snap.fastest == 50

    def test_override_without_snapshot(self) -> None:
        q = quote(FeeRequest(1_000_000, FeeTier.STANDARD, congestion_override=20), None)
        assert q.network_cost_sats == 209 * 20

    def test_effective_congestion_prefers_override(self) -> None:
        req = FeeRequest(1_000_000, FeeTier.STANDARD, congestion_override=7.5)
        assert effective_congestion(req, _snapshot(50)) == 7.5

    def test_effective_congestion_falls_back_to_fastest(self) -> None:
        req = FeeRequest(1_000_000, FeeTier.STANDARD)
        assert effective_congestion(req, _snapshot(42)) == 42


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_below_minimum(self) -> None:
        with pytest.raises(InvalidAmount) as exc_info:
            quote(FeeRequest(5_000, FeeTier.PRIORITY), _snapshot())
        assert exc_info.value.field == "amount_sats"
        assert exc_info.value.bound == ">= 10000"

    def test_above_maximum(self) -> None:
        with pytest.raises(InvalidAmount) as exc_info:
            quote(FeeRequest(100_000_001, FeeTier.PRIORITY), _snapshot())
        assert exc_info.value.bound == "<= 100000000"

    @pytest.mark.parametrize("amount", [10_000, 100_000_000])
    def test_bounds_are_inclusive(self, amount: int) -> None:
        assert quote(FeeRequest(amount, FeeTier.ECONOMY), _snapshot()).fee_sats > 0

    @pytest.mark.parametrize("amount", [50_000.0, "50000", True, None])
    def test_rejects_non_integer(self, amount) -> None:
        with pytest.raises(InvalidAmount, match="whole number"):
            quote(FeeRequest(amount, FeeTier.PRIORITY), _snapshot())

    @pytest.mark.parametrize("amount", [0, -10_000])
    def test_rejects_non_positive(self, amount: int) -> None:
        with pytest.raises(InvalidAmount):
            quote(FeeRequest(amount, FeeTier.PRIORITY), _snapshot())

    def test_missing_snapshot(self) -> None:
        with pytest.raises(MissingSnapshot) as exc_info:
            quote(FeeRequest(1_000_000, FeeTier.PRIORITY), None)
        assert exc_info.value.field == "snapshot"

    def test_amount_checked_before_snapshot(self) -> None:
        with pytest.raises(InvalidAmount):
            quote(FeeRequest(5_000, FeeTier.PRIORITY), None)

    @pytest.mark.parametrize("rate", [0, -5, float("nan"), float("inf")])
    def test_bad_override(self, rate: float) -> None:
        with pytest.raises(InvalidCongestion) as exc_info:
            quote(FeeRequest(1_000_000, FeeTier.PRIORITY, congestion_override=rate), _snapshot())
        assert exc_info.value.field == "congestion_override"

    def test_bad_snapshot_rate(self) -> None:
        with pytest.raises(InvalidCongestion) as exc_info:
            quote(FeeRequest(1_000_000, FeeTier.PRIORITY), _snapshot(0))
        assert exc_info.value.field == "snapshot.fastest"

    @pytest.mark.parametrize("tier", list(FeeTier))
    def test_overflowing_override(self, tier: FeeTier) -> None:
        with pytest.raises(InvalidCongestion) as exc_info:
            quote(FeeRequest(1_000_000, tier, congestion_override=1e307), _snapshot())
        assert exc_info.value.field == "congestion_override"
        assert exc_info.value.bound == "finite fee"

    def test_overflowing_snapshot_rate(self) -> None:
        with pytest.raises(InvalidCongestion) as exc_info:
            quote(FeeRequest(100_000_000, FeeTier.PRIORITY), _snapshot(1e307))
        assert exc_info.value.field == "snapshot.fastest"
        assert exc_info.value.bound == "finite fee"

    def test_huge_but_finite_override_still_quotes(self) -> None:
        q = quote(FeeRequest(1_000_000, FeeTier.STANDARD, congestion_override=1e12), _snapshot())
        assert q.network_cost_sats == 209 * 10**12

    def test_unknown_tier(self) -> None:
        with pytest.raises(ValueError, match="Unknown fee tier"):
            quote(FeeRequest(1_000_000, "turbo"), _snapshot())  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestProperties:
    @given(
        st.integers(min_value=10_000, max_value=100_000_000),
        st.sampled_from(list(FeeTier)),
        st.floats(min_value=1, max_value=2000),
    )
    def test_deterministic(self, amount: int, tier: FeeTier, rate: float) -> None:
        request = FeeRequest(amount, tier)
        snap = _snapshot(rate)
        first = quote(request, snap)
        second = quote(request, snap)
        assert first == second
        assert isinstance(first, FeeQuote)

    @given(
        st.integers(min_value=10_000, max_value=100_000_000),
        st.sampled_from(list(FeeTier)),
        st.floats(min_value=1, max_value=2000),
    )
    def test_fee_positive(self, amount: int, tier: FeeTier, rate: float) -> None:
        q = quote(FeeRequest(amount, tier), _snapshot(rate))
        assert q.fee_sats > 0
        assert q.network_cost_sats >= 0
