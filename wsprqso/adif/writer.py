"""
adif/writer.py

ADIF serialisation of the log header and of finalized QSOs.

Every field is written as <NAME:n>value where n is the length of the value
in UTF-8 bytes (the power comment may contain 'µ'), so ADIF readers that
slice by the declared length land exactly on the next tag.
"""

from __future__ import annotations

from datetime import datetime, timezone

from ..bands import dbm_to_watts, format_frequency, format_power, mhz, try_classify
from ..correlation.models import QsoAggregate
from ..version import ADIF_VERSION, PROGRAM_ID, PROGRAM_VERSION

END_OF_HEADER = "<EOH>"
END_OF_RECORD = "<EOR>"

# A QSO stays on the air until the end of the last confirming cycle
_QSO_TAIL_SECONDS = 120


def adif_field(name: str, value: object) -> str:
    text = str(value)
    return f"<{name}:{len(text.encode('utf-8'))}>{text}"


def _utc(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def format_header(self_call: str, created: datetime | None = None) -> str:
    """
    Preamble line plus ADIF header fields, terminated by <EOH>.

    Args:
        self_call: Operator call sign, shown in the free-text preamble.
        created:   Creation time (defaults to now, UTC).
    """
    created = created or datetime.now(timezone.utc)
    return (
        f"Mutual WSPR spots for {self_call}\n"
        + adif_field("ADIF_VER", ADIF_VERSION)
        + adif_field("CREATED_TIMESTAMP", created.strftime("%Y%m%d %H%M%S"))
        + adif_field("PROGRAMID", PROGRAM_ID)
        + adif_field("PROGRAMVERSION", PROGRAM_VERSION)
        + END_OF_HEADER
    )


def _band_text(frequency: int) -> str:
    band = try_classify(frequency)
    return str(band) if band is not None else f"{frequency} Hz"


def format_comment(qso: QsoAggregate) -> str:
    """Free-text summary of the contact's side of the QSO."""
    band_op = _band_text(qso.freq_op)
    band_ct = _band_text(qso.freq_ct)
    band_str = band_op if band_op == band_ct else f"{band_op} (RX {band_ct})"
    return (
        f"2-way WSPR spot on {band_str} with {format_power(qso.power_ct)} "
        f"({qso.power_ct} dBm), SNR {qso.snr_ct} dB, drift {qso.drift_ct:+d} Hz/s, "
        f"distance {qso.distance} km"
    )


def format_record(qso: QsoAggregate) -> str:
    """Serialise one finalized QSO as a single ADIF record."""
    time_on = _utc(qso.time_first)
    time_off = _utc(qso.time_last + _QSO_TAIL_SECONDS)

    fields = [
        ("QSO_DATE", time_on.strftime("%Y%m%d")),
        ("TIME_ON", time_on.strftime("%H%M")),
        ("QSO_DATE_OFF", time_off.strftime("%Y%m%d")),
        ("TIME_OFF", time_off.strftime("%H%M")),
        ("OPERATOR", qso.call_op),
        ("CALL", qso.call_ct),
        ("MY_GRIDSQUARE", qso.grid_op),
        ("GRIDSQUARE", qso.grid_ct),
        ("RST_RCVD", f"{qso.snr_op:+03d}"),
        ("RST_SENT", f"{qso.snr_ct:+03d}"),
        ("FREQ", f"{mhz(qso.freq_op):.6f}"),
        ("RX_FREQ", f"{mhz(qso.freq_ct):.6f}"),
    ]

    # Out-of-band frequencies simply get no band tag
    band_op = try_classify(qso.freq_op)
    if band_op is not None:
        fields.append(("BAND", band_op.compact))
    band_ct = try_classify(qso.freq_ct)
    if band_ct is not None:
        fields.append(("BAND_RX", band_ct.compact))

    comment = format_comment(qso)
    spot_ids = ", ".join(str(i) for i in qso.sorted_report_ids)
    fields += [
        ("TX_PWR", f"{dbm_to_watts(qso.power_op):.4f}"),
        ("RX_PWR", f"{dbm_to_watts(qso.power_ct):.4f}"),
        ("DISTANCE", qso.distance),
        ("QSLMSG", comment),
        ("COMMENT", comment),
        ("NOTES", f"WSPRnet spot IDs {spot_ids}"),
        ("MODE", "WSPR"),
        ("QSO_RANDOM", "Y"),
    ]
    return "".join(adif_field(name, value) for name, value in fields) + END_OF_RECORD


def describe(qso: QsoAggregate) -> str:
    """One-line console summary used in log messages."""
    return (
        f"{qso.call_op} ⇄ {qso.call_ct} ({qso.grid_ct}) "
        f"on {format_frequency(qso.freq_op)}, {len(qso.report_ids)} spots"
    )
