"""
tests/test_bands.py

Tests for bands.py — band table lookup and unit formatting.
"""

from __future__ import annotations

import pytest

from wsprqso.bands import (
    _BAND_TABLE,
    _shortest,
    Band,
    classify,
    dbm_to_watts,
    format_frequency,
    format_power,
    try_classify,
)
from wsprqso.errors import UnknownBand


# ---------------------------------------------------------------------------
# Band table
# ---------------------------------------------------------------------------

class TestBandTable:

    def test_sorted_and_disjoint(self):
        previous_high = -1
        for low, high, _ in _BAND_TABLE:
            assert low <= high
            assert low > previous_high
            previous_high = high

    def test_spans_lf_to_mm(self):
        assert _BAND_TABLE[0][0] == 135_700
        assert _BAND_TABLE[-1][1] == 250_000_000_000

    def test_band_forms(self):
        band = Band("70", "cm")
        assert band.compact == "70cm"
        assert str(band) == "70 cm"


# ---------------------------------------------------------------------------
# classify()
# ---------------------------------------------------------------------------

class TestClassify:

    @pytest.mark.parametrize("hz,expected", [
        (136_000, Band("2200", "m")),
        (135_700, Band("2200", "m")),
        (137_800, Band("2200", "m")),
        (475_700, Band("630", "m")),
        (1_838_100, Band("160", "m")),
        (7_040_100, Band("40", "m")),
        (14_097_100, Band("20", "m")),
        (54_000_000, Band("6", "m")),
        (54_000_001, Band("5", "m")),
        (144_490_500, Band("2", "m")),
        (10_368_100_000, Band("1.25", "cm")),
        (250_000_000_000, Band("1", "mm")),
    ])
    def test_in_band(self, hz, expected):
        assert classify(hz) == expected

    @pytest.mark.parametrize("hz", [
        0,
        135_699,
        137_801,
        137_900_000,
        14_350_001,
        250_000_000_001,
    ])
    def test_gap_raises(self, hz):
        with pytest.raises(UnknownBand) as exc_info:
            classify(hz)
        assert exc_info.value.frequency == hz

    def test_try_classify_returns_none_in_gap(self):
        assert try_classify(137_900_000) is None
        assert try_classify(14_097_100) == Band("20", "m")


# ---------------------------------------------------------------------------
# Unit formatting
# ---------------------------------------------------------------------------

class TestFormatFrequency:

    @pytest.mark.parametrize("hz,expected", [
        (500, "500 Hz"),
        (136_000, "136 kHz"),
        (137_500, "137.5 kHz"),
        (14_097_100, "14.0971 MHz"),
        (14_000_000, "14 MHz"),
        (144_000_000, "144 MHz"),
        (10_368_100_000, "10.3681 GHz"),
    ])
    def test_scaled(self, hz, expected):
        assert format_frequency(hz) == expected


class TestPower:

    def test_37_dbm_is_about_5_watts(self):
        assert dbm_to_watts(37) == pytest.approx(5.0119, abs=1e-4)

    def test_0_dbm_is_one_milliwatt(self):
        assert dbm_to_watts(0) == pytest.approx(0.001)

    @pytest.mark.parametrize("dbm,expected", [
        (37, "5.0 W"),
        (30, "1.0 W"),
        (40, "10 W"),
        (23, "200 mW"),
        (0, "1.0 mW"),
        (-10, "100 µW"),
        (60, "1.0 kW"),
    ])
    def test_human_readable(self, dbm, expected):
        assert format_power(dbm) == expected

    def test_below_microwatt_keeps_full_precision(self):
        text = format_power(-31)
        assert text.startswith("794.328")
        assert text.endswith(" nW")
        assert len(text) > len("794 nW")

    def test_below_microwatt_never_in_exponent_form(self):
        text = format_power(-128)
        assert text.startswith("0.000000158")
        assert "e" not in text

    @pytest.mark.parametrize("value,expected", [
        (100.0, "100"),
        (0.5, "0.5"),
        (1.5e-07, "0.00000015"),
    ])
    def test_shortest_decimal(self, value, expected):
        assert _shortest(value) == expected
