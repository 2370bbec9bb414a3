"""
correlation/models.py

Data models for the correlation stage.

CorrelationKey — hashable 5-tuple identifying one evolving QSO
QsoAggregate   — merged evidence from every reciprocal spot pair of a QSO

Naming: in a reciprocal pair, `heard` is the spot where the self station is
the reporter (self decoded the contact) and `heard_by` is the spot where the
self station is the transmitter (the contact decoded self).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from ..bands import Band
    from ..models import Report


# ---------------------------------------------------------------------------
# CorrelationKey: hashable, direction-invariant
# ---------------------------------------------------------------------------

class CorrelationKey(NamedTuple):
    """
    Key of one QSO between self and a contact.

    The same two stations may hold independent QSOs on different band pairs
    or from different grids at the same time; each gets its own key.
    Call and grids are upper-cased so key equality is case-insensitive.
    """

    call_ct: str
    grid_op: str
    grid_ct: str
    band_heard: Band
    """Band of the spot in which self is the reporter."""

    band_heard_by: Band
    """Band of the spot in which self is the transmitter."""

    def __repr__(self) -> str:
        return (
            f"{self.grid_op}⇄{self.call_ct}/{self.grid_ct}"
            f"@{self.band_heard.compact}/{self.band_heard_by.compact}"
        )


def make_correlation_key(
    heard: Report,
    heard_by: Report,
    band_heard: Band,
    band_heard_by: Band,
) -> CorrelationKey:
    """
    Build the key from a reciprocal spot pair.

    Every component comes from a fixed role in the pair, never from "the
    newer spot", so the key is the same whichever spot arrived last.
    """
    return CorrelationKey(
        call_ct=heard.call_tx.upper(),
        grid_op=heard.grid_rx.upper(),
        grid_ct=heard.grid_tx.upper(),
        band_heard=band_heard,
        band_heard_by=band_heard_by,
    )


# ---------------------------------------------------------------------------
# QsoAggregate: merged per-QSO evidence
# ---------------------------------------------------------------------------

@dataclass
class QsoAggregate:
    """
    A two-way WSPR contact assembled from one or more reciprocal spot pairs.

    `_op` fields describe the operator's (self) transmission as the contact
    decoded it; `_ct` fields describe the contact's transmission as self
    decoded it. SNR and drift keep the best value seen, power the lowest:
    the log shows the most favourable demonstrated link.
    """

    call_op: str
    call_ct: str
    grid_op: str
    grid_ct: str

    time_first: int
    """Earliest spot timestamp of any contributing pair."""

    time_last: int
    """Latest spot timestamp of any contributing pair."""

    snr_op: int
    snr_ct: int
    power_op: int
    """Operator transmit power in dBm (running minimum)."""

    power_ct: int
    freq_op: int
    """Operator transmit frequency in Hz."""

    freq_ct: int
    drift_op: int
    drift_ct: int
    distance: int

    report_ids: set[int] = field(default_factory=set)
    """WSPRnet ids of every contributing spot."""

    @classmethod
    def from_pair(cls, heard: Report, heard_by: Report) -> QsoAggregate:
        """Create a QSO from its first reciprocal spot pair."""
        return cls(
            call_op=heard.call_rx,
            call_ct=heard.call_tx,
            grid_op=heard.grid_rx,
            grid_ct=heard.grid_tx,
            time_first=min(heard.timestamp, heard_by.timestamp),
            time_last=max(heard.timestamp, heard_by.timestamp),
            snr_op=heard_by.snr,
            snr_ct=heard.snr,
            power_op=heard_by.power,
            power_ct=heard.power,
            freq_op=heard_by.frequency,
            freq_ct=heard.frequency,
            drift_op=heard_by.drift,
            drift_ct=heard.drift,
            distance=heard.distance,
            report_ids={heard.id, heard_by.id},
        )

    def merge(self, heard: Report, heard_by: Report) -> None:
        """Fold another reciprocal spot pair for the same key into this QSO."""
        self.time_first = min(self.time_first, heard.timestamp, heard_by.timestamp)
        self.time_last = max(self.time_last, heard.timestamp, heard_by.timestamp)
        self.snr_op = max(self.snr_op, heard_by.snr)
        self.snr_ct = max(self.snr_ct, heard.snr)
        self.drift_op = max(self.drift_op, heard_by.drift)
        self.drift_ct = max(self.drift_ct, heard.drift)
        self.power_op = min(self.power_op, heard_by.power)
        self.power_ct = min(self.power_ct, heard.power)
        self.report_ids.add(heard.id)
        self.report_ids.add(heard_by.id)

    @property
    def sorted_report_ids(self) -> list[int]:
        return sorted(self.report_ids)

    def last_cycle(self, cycle_seconds: int) -> int:
        return self.time_last // cycle_seconds

    def __repr__(self) -> str:
        return (
            f"QsoAggregate({self.call_op}/{self.grid_op} ⇄ "
            f"{self.call_ct}/{self.grid_ct} "
            f"t={self.time_first}..{self.time_last} "
            f"spots={len(self.report_ids)})"
        )
