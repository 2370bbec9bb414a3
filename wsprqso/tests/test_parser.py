"""
tests/test_parser.py

Parametrized tests for ingest/parser.py.
Rows are plain strings in WSPRnet CSV column order — no files required.
"""

from __future__ import annotations

import pytest

from wsprqso.errors import MalformedRecord
from wsprqso.ingest.parser import parse_report
from wsprqso.models import Report

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

FIELDS = [
    "3101123456",   # id
    "1700000040",   # timestamp
    "DK1ABC",       # reporter call
    "JO31",         # reporter grid
    "-12",          # SNR
    "14.097100",    # frequency (MHz)
    "K1XYZ",        # transmitter call
    "FN42",         # transmitter grid
    "37",           # power (dBm)
    "0",            # drift
    "6123",         # distance
]


def row(**overrides: str) -> str:
    names = [
        "id", "timestamp", "call_rx", "grid_rx", "snr", "frequency",
        "call_tx", "grid_tx", "power", "drift", "distance",
    ]
    values = dict(zip(names, FIELDS))
    values.update(overrides)
    return ",".join(values[n] for n in names)


# ---------------------------------------------------------------------------
# Valid rows
# ---------------------------------------------------------------------------

class TestParseValidRow:

    def test_all_fields_typed(self):
        r = parse_report(row())
        assert r.id == 3101123456
        assert r.timestamp == 1700000040
        assert r.call_rx == "DK1ABC"
        assert r.grid_rx == "JO31"
        assert r.snr == -12
        assert r.frequency == 14_097_100
        assert r.call_tx == "K1XYZ"
        assert r.grid_tx == "FN42"
        assert r.power == 37
        assert r.drift == 0
        assert r.distance == 6123

    def test_trailing_newline_and_cr_tolerated(self):
        r = parse_report(row() + "\r\n")
        assert r.distance == 6123

    def test_extra_columns_ignored(self):
        r = parse_report(row() + ",20,2.6.1,0")
        assert r.distance == 6123

    def test_call_case_preserved(self):
        r = parse_report(row(call_tx="k1xyz", grid_tx="fn42ab"))
        assert r.call_tx == "k1xyz"
        assert r.grid_tx == "fn42ab"

    def test_identity_is_id_only(self):
        a = parse_report(row())
        b = parse_report(row(snr="5", call_tx="W1AW"))
        assert a == b
        assert hash(a) == hash(b)
        assert a != parse_report(row(id="1"))

    def test_returns_report(self):
        assert isinstance(parse_report(row()), Report)


# ---------------------------------------------------------------------------
# Frequency conversion
# ---------------------------------------------------------------------------

class TestFrequencyConversion:

    @pytest.mark.parametrize("text,expected_hz", [
        ("14.0971", 14_097_100),
        ("0.137500", 137_500),
        ("7.0401", 7_040_100),
        ("10368.1", 10_368_100_000),
        ("0.1374955", 137_496),     # .5 rounds to even
        ("0.1374965", 137_496),     # .5 rounds to even
        ("0.13749651", 137_497),
        ("14.097100000000001", 14_097_100),
    ])
    def test_mhz_to_hz(self, text, expected_hz):
        assert parse_report(row(frequency=text)).frequency == expected_hz

    @pytest.mark.parametrize("text", ["abc", "", "-14.0971", "nan", "inf"])
    def test_bad_frequency(self, text):
        with pytest.raises(MalformedRecord) as exc_info:
            parse_report(row(frequency=text))
        assert exc_info.value.field == "frequency"


# ---------------------------------------------------------------------------
# Malformed rows
# ---------------------------------------------------------------------------

class TestMalformedRow:

    @pytest.mark.parametrize("override,field", [
        ({"id": "x1"}, "ID"),
        ({"timestamp": "-5"}, "timestamp"),
        ({"call_rx": ""}, "reporter call sign"),
        ({"grid_rx": " "}, "reporter grid"),
        ({"snr": "loud"}, "SNR"),
        ({"snr": "200"}, "SNR"),
        ({"call_tx": ""}, "transmitter call sign"),
        ({"power": "3.5"}, "transmission power"),
        ({"drift": "-300"}, "frequency drift"),
        ({"distance": "-1"}, "distance"),
        ({"distance": "70000"}, "distance"),
    ])
    def test_names_offending_field(self, override, field):
        with pytest.raises(MalformedRecord) as exc_info:
            parse_report(row(**override))
        assert exc_info.value.field == field
        assert field in str(exc_info.value)

    @pytest.mark.parametrize("n_fields,field", [
        (1, "timestamp"),
        (5, "frequency"),
        (10, "distance"),
    ])
    def test_missing_fields(self, n_fields, field):
        line = ",".join(FIELDS[:n_fields])
        with pytest.raises(MalformedRecord) as exc_info:
            parse_report(line)
        assert exc_info.value.field == field

    @pytest.mark.parametrize("override,field", [
        ({"snr": "1_0"}, "SNR"),
        ({"distance": "6_123"}, "distance"),
        ({"power": "٣٧"}, "transmission power"),       # Arabic-Indic digits
        ({"id": "３１０１"}, "ID"),                      # full-width digits
    ])
    def test_only_plain_ascii_digits(self, override, field):
        with pytest.raises(MalformedRecord) as exc_info:
            parse_report(row(**override))
        assert exc_info.value.field == field

    def test_signed_integers_accepted(self):
        r = parse_report(row(snr="+5", drift="-1"))
        assert r.snr == 5
        assert r.drift == -1

    def test_timestamp_upper_bound(self):
        assert parse_report(row(timestamp="253402300679")).timestamp == 253_402_300_679
        with pytest.raises(MalformedRecord) as exc_info:
            parse_report(row(timestamp="253402300680"))
        assert exc_info.value.field == "timestamp"

    def test_timestamp_beyond_year_9999_rejected(self):
        with pytest.raises(MalformedRecord) as exc_info:
            parse_report(row(timestamp=str(10**12)))
        assert exc_info.value.field == "timestamp"

    def test_first_bad_field_wins(self):
        with pytest.raises(MalformedRecord) as exc_info:
            parse_report(row(snr="?", power="?"))
        assert exc_info.value.field == "SNR"

    def test_error_carries_raw_line(self):
        line = row(snr="?")
        with pytest.raises(MalformedRecord) as exc_info:
            parse_report(line + "\n")
        assert exc_info.value.line == line

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            parse_report("garbage")
