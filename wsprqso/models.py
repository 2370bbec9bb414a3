"""
wsprqso/models.py

Shared types for the ingest stage of the pipeline.
The correlation-stage types (CorrelationKey, QsoAggregate) live in
correlation/models.py.
"""

from __future__ import annotations

from dataclasses import dataclass


def same_call(a: str, b: str) -> bool:
    """ASCII case-insensitive comparison for call signs and grid locators."""
    return a.upper() == b.upper()


# ---------------------------------------------------------------------------
# Stage 1: parser output
# ---------------------------------------------------------------------------

@dataclass(slots=True, eq=False)
class Report:
    """
    One WSPRnet spot: station `call_rx` decoded a transmission of `call_tx`.

    Identity is the WSPRnet spot id alone; two Reports with the same id are
    equal whatever their other fields say.
    """

    id: int
    """Unique spot id assigned by WSPRnet."""

    timestamp: int
    """Unix epoch seconds of the spot."""

    call_rx: str
    """Reporter call sign, stored verbatim."""

    grid_rx: str
    """Reporter Maidenhead locator."""

    snr: int
    """Signal-to-noise ratio in dB."""

    frequency: int
    """Received frequency in whole Hz."""

    call_tx: str
    """Transmitter call sign."""

    grid_tx: str
    """Transmitter Maidenhead locator."""

    power: int
    """Transmit power in dBm, as reported by the transmitting station."""

    drift: int
    """Frequency drift in Hz/s."""

    distance: int
    """Great-circle distance between transmitter and reporter in km."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Report):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return (
            f"Report(#{self.id} t={self.timestamp} "
            f"{self.call_rx}/{self.grid_rx} <- {self.call_tx}/{self.grid_tx} "
            f"{self.frequency} Hz snr={self.snr})"
        )
