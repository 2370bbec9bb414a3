"""
ingest/parser.py

Converts one WSPRnet CSV row into a typed Report.

Design principles:
  - Pure: no I/O and no logging.
  - Fields are read in the fixed WSPRnet column order; any extra trailing
    columns (band, version, code in newer dumps) are ignored.
  - The first missing or malformed field raises MalformedRecord naming it,
    so an operator can fix the upstream feed. The caller logs and skips.
  - Frequency arrives as decimal MHz text and is stored as exact integer Hz,
    converted with Decimal so no float drift creeps in.

Column order:
  id, timestamp, reporter call, reporter grid, SNR, frequency (MHz),
  transmitter call, transmitter grid, power (dBm), drift, distance
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from ..errors import MalformedRecord
from ..models import Report

_HZ_PER_MHZ = Decimal(1_000_000)

# Integer columns and the range their WSPRnet type allows
_INT8 = (-128, 127)
_UINT16 = (0, 65_535)
_UINT64 = (0, 2**64 - 1)

# Latest timestamp whose QSO end time (+ one cycle) is still a valid date,
# 9999-12-31 23:57:59 UTC
_TIMESTAMP = (0, 253_402_300_679)


def _int_field(value: str, name: str, line: str, bounds: tuple[int, int]) -> int:
    # int() also takes "1_000" and non-ASCII digits; WSPRnet never sends either
    if not value.isascii() or "_" in value:
        raise MalformedRecord(name, line, f"{value!r} is not an integer")
    try:
        number = int(value, 10)
    except ValueError:
        raise MalformedRecord(name, line, f"{value!r} is not an integer") from None
    low, high = bounds
    if not low <= number <= high:
        raise MalformedRecord(name, line, f"{number} outside {low}..{high}")
    return number


def _text_field(value: str, name: str, line: str) -> str:
    if not value:
        raise MalformedRecord(name, line, "empty")
    return value


def _frequency_field(value: str, line: str) -> int:
    """Decimal MHz text -> nearest whole Hz (ties to even)."""
    name = "frequency"
    try:
        mhz = Decimal(value)
    except InvalidOperation:
        raise MalformedRecord(name, line, f"{value!r} is not a number") from None
    if not mhz.is_finite() or mhz < 0:
        raise MalformedRecord(name, line, f"{value!r} is not a valid frequency")
    try:
        hz = (mhz * _HZ_PER_MHZ).quantize(Decimal(1), rounding=ROUND_HALF_EVEN)
    except InvalidOperation:
        raise MalformedRecord(name, line, f"{value!r} is out of range") from None
    return int(hz)


def parse_report(line: str) -> Report:
    """
    Parse a WSPRnet CSV row into a Report.

    Args:
        line: One input line; a trailing newline is tolerated.

    Returns:
        The parsed Report.

    Raises:
        MalformedRecord: naming the first missing or malformed field.
    """
    row = line.rstrip("\r\n")
    fields = iter(col.strip() for col in row.split(","))

    def take(name: str) -> str:
        try:
            return next(fields)
        except StopIteration:
            raise MalformedRecord(name, row, "missing") from None

    spot_id = _int_field(take("ID"), "ID", row, _UINT64)
    timestamp = _int_field(take("timestamp"), "timestamp", row, _TIMESTAMP)
    call_rx = _text_field(take("reporter call sign"), "reporter call sign", row)
    grid_rx = _text_field(take("reporter grid"), "reporter grid", row)
    snr = _int_field(take("SNR"), "SNR", row, _INT8)
    frequency = _frequency_field(take("frequency"), row)
    call_tx = _text_field(take("transmitter call sign"), "transmitter call sign", row)
    grid_tx = _text_field(take("transmitter grid"), "transmitter grid", row)
    power = _int_field(take("transmission power"), "transmission power", row, _INT8)
    drift = _int_field(take("frequency drift"), "frequency drift", row, _INT8)
    distance = _int_field(take("distance"), "distance", row, _UINT16)

    return Report(
        id=spot_id,
        timestamp=timestamp,
        call_rx=call_rx,
        grid_rx=grid_rx,
        snr=snr,
        frequency=frequency,
        call_tx=call_tx,
        grid_tx=grid_tx,
        power=power,
        drift=drift,
        distance=distance,
    )
