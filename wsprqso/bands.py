"""
wsprqso/bands.py

Amateur band lookup and human-readable unit formatting.

The band table is shared by correlation (band pairs are part of the QSO key)
and by the ADIF writer (BAND / BAND_RX tags, comment text), so both always
agree on where a band starts and ends. Ranges are inclusive, in Hz, sorted
and non-overlapping: a frequency belongs to at most one band.
"""

from __future__ import annotations

import bisect
from decimal import Decimal
from typing import NamedTuple

from .errors import UnknownBand


class Band(NamedTuple):
    """A named amateur band, e.g. Band("40", "m")."""

    designator: str
    unit: str

    @property
    def compact(self) -> str:
        """ADIF form: '40m', '70cm'."""
        return f"{self.designator}{self.unit}"

    def __str__(self) -> str:
        return f"{self.designator} {self.unit}"


# (low Hz, high Hz, band), inclusive on both ends
_BAND_TABLE: tuple[tuple[int, int, Band], ...] = (
    (135_700, 137_800, Band("2200", "m")),
    (160_000, 190_000, Band("1750", "m")),
    (472_000, 479_000, Band("630", "m")),
    (1_800_000, 2_000_000, Band("160", "m")),
    (3_500_000, 4_000_000, Band("80", "m")),
    (5_060_000, 5_450_500, Band("60", "m")),
    (7_000_000, 7_300_000, Band("40", "m")),
    (10_100_000, 10_150_000, Band("30", "m")),
    (14_000_000, 14_350_000, Band("20", "m")),
    (18_068_000, 18_168_000, Band("17", "m")),
    (21_000_000, 21_450_000, Band("15", "m")),
    (24_890_000, 24_990_000, Band("12", "m")),
    (28_000_000, 29_700_000, Band("10", "m")),
    (40_000_000, 45_000_000, Band("8", "m")),
    (50_000_000, 54_000_000, Band("6", "m")),
    (54_000_001, 69_900_000, Band("5", "m")),
    (70_000_000, 71_000_000, Band("4", "m")),
    (144_000_000, 148_000_000, Band("2", "m")),
    (219_000_000, 225_000_000, Band("1.25", "m")),
    (420_000_000, 450_000_000, Band("70", "cm")),
    (902_000_000, 928_000_000, Band("33", "cm")),
    (1_240_000_000, 1_300_000_000, Band("23", "cm")),
    (2_300_000_000, 2_450_000_000, Band("13", "cm")),
    (3_300_000_000, 3_500_000_000, Band("9", "cm")),
    (5_600_000_000, 5_925_000_000, Band("6", "cm")),
    (10_000_000_000, 10_500_000_000, Band("1.25", "cm")),
    (24_000_000_000, 24_250_000_000, Band("6", "mm")),
    (75_500_000_000, 81_000_000_000, Band("4", "mm")),
    (119_980_000_000, 120_020_000_000, Band("2.5", "mm")),
    (142_000_000_000, 149_000_000_000, Band("2", "mm")),
    (241_000_000_000, 250_000_000_000, Band("1", "mm")),
)

_LOWER_EDGES = [low for low, _, _ in _BAND_TABLE]


def classify(frequency: int) -> Band:
    """
    Return the band containing `frequency` (Hz).

    Raises:
        UnknownBand: the frequency lies outside every band in the table.
    """
    idx = bisect.bisect_right(_LOWER_EDGES, frequency) - 1
    if idx >= 0:
        low, high, band = _BAND_TABLE[idx]
        if low <= frequency <= high:
            return band
    raise UnknownBand(frequency)


def try_classify(frequency: int) -> Band | None:
    """Like classify() but returns None for out-of-band frequencies."""
    try:
        return classify(frequency)
    except UnknownBand:
        return None


# ---------------------------------------------------------------------------
# Unit formatting
# ---------------------------------------------------------------------------

def mhz(frequency: int) -> float:
    return frequency / 1e6


def format_frequency(frequency: int) -> str:
    """Scale a Hz value to Hz / kHz / MHz / GHz: 14097100 -> '14.0971 MHz'."""
    for scale, unit in ((10**9, "GHz"), (10**6, "MHz"), (10**3, "kHz")):
        if frequency >= scale:
            value = Decimal(frequency) / Decimal(scale)
            return f"{value.normalize():f} {unit}"
    return f"{frequency} Hz"


def dbm_to_watts(dbm: int) -> float:
    """10^(dBm/10 - 3), computed as 10^(dBm/10) / 1000 so 0 dBm is exactly 1 mW."""
    return 10 ** (dbm / 10) / 1000


def _round_to(value: float, quantum: float) -> float:
    return round(value / quantum) * quantum


def _shortest(value: float) -> str:
    """Shortest round-trip decimal form, never in exponent notation."""
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def format_power(dbm: int) -> str:
    """
    Human-readable transmit power with roughly two significant digits.

    37 dBm -> '5.0 W', 23 dBm -> '200 mW', 0 dBm -> '1.0 mW'.
    Below 1 µW the nanowatt value is printed at full float precision.
    """
    watts = dbm_to_watts(dbm)

    if watts < 1e-6:
        return f"{_shortest(watts * 1e9)} nW"
    if watts < 1e-5:
        return f"{watts * 1e6:.1f} µW"
    if watts < 1e-4:
        return f"{_round_to(watts, 1e-6) * 1e6:.0f} µW"
    if watts < 1e-3:
        return f"{_round_to(watts, 1e-5) * 1e6:.0f} µW"
    if watts < 1e-2:
        return f"{watts * 1e3:.1f} mW"
    if watts < 1e-1:
        return f"{_round_to(watts, 1e-3) * 1e3:.0f} mW"
    if watts < 1:
        return f"{_round_to(watts, 1e-2) * 1e3:.0f} mW"
    if watts < 10:
        return f"{watts:.1f} W"
    if watts < 100:
        return f"{_round_to(watts, 1):.0f} W"
    if watts < 1000:
        return f"{_round_to(watts, 10):.0f} W"
    return f"{watts / 1e3:.1f} kW"
