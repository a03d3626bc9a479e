"""Tests for the fee-rate snapshot data model."""

import dataclasses

import pytest

from feequote.snapshot import FALLBACK_SNAPSHOT, FeeRateSnapshot, SnapshotFormatError

PAYLOAD = {
    "fastestFee": 42,
    "halfHourFee": 30,
    "hourFee": 21,
    "economyFee": 8,
    "minimumFee": 2,
}


class TestFromDict:
    def test_full_payload(self) -> None:
        snap = FeeRateSnapshot.from_dict(PAYLOAD)
        assert snap == FeeRateSnapshot(42, 30, 21, 8, 2)

    def test_minimum_optional(self) -> None:
        data = {k: v for k, v in PAYLOAD.items() if k != "minimumFee"}
        snap = FeeRateSnapshot.from_dict(data)
        assert snap.minimum is None
        assert snap.fastest == 42

    def test_fractional_rates(self) -> None:
        snap = FeeRateSnapshot.from_dict({**PAYLOAD, "fastestFee": 3.5})
        assert snap.fastest == 3.5

    def test_extra_keys_ignored(self) -> None:
        snap = FeeRateSnapshot.from_dict({**PAYLOAD, "blockHeight": 850_000})
        assert snap.hour == 21

    def test_missing_required(self) -> None:
        data = {k: v for k, v in PAYLOAD.items() if k != "fastestFee"}
        with pytest.raises(SnapshotFormatError, match="fastestFee"):
            FeeRateSnapshot.from_dict(data)

    @pytest.mark.parametrize("bad", ["42", True, [42], float("inf")])
    def test_non_numeric(self, bad) -> None:
        with pytest.raises(SnapshotFormatError):
            FeeRateSnapshot.from_dict({**PAYLOAD, "hourFee": bad})

    @pytest.mark.parametrize("key", ["fastestFee", "economyFee", "minimumFee"])
    @pytest.mark.parametrize("bad", [0, -1, -0.5])
    def test_non_positive_rate(self, key: str, bad: float) -> None:
        with pytest.raises(SnapshotFormatError, match="must be positive"):
            FeeRateSnapshot.from_dict({**PAYLOAD, key: bad})

    def test_not_an_object(self) -> None:
        with pytest.raises(SnapshotFormatError, match="must be an object"):
            FeeRateSnapshot.from_dict([PAYLOAD])

    def test_ordering_not_enforced(self) -> None:
        snap = FeeRateSnapshot.from_dict({**PAYLOAD, "fastestFee": 1, "economyFee": 90})
        assert snap.fastest < snap.economy


class TestToDict:
    def test_api_key_names(self) -> None:
        assert FeeRateSnapshot(42, 30, 21, 8, 2).to_dict() == PAYLOAD

    def test_omits_missing_minimum(self) -> None:
        assert "minimumFee" not in FeeRateSnapshot(42, 30, 21, 8).to_dict()

    def test_parses_back(self) -> None:
        snap = FeeRateSnapshot(42, 30, 21, 8)
        assert FeeRateSnapshot.from_dict(snap.to_dict()) == snap


class TestSnapshotValue:
    def test_frozen(self) -> None:
        snap = FeeRateSnapshot(42, 30, 21, 8)
        with pytest.raises(dataclasses.FrozenInstanceError):
            snap.fastest = 1  # type: ignore[misc]

    def test_fallback_values(self) -> None:
        assert FALLBACK_SNAPSHOT.to_dict() == {
            "fastestFee": 50,
            "halfHourFee": 30,
            "hourFee": 20,
            "economyFee": 10,
            "minimumFee": 1,
        }
