"""
correlation/correlator.py

Correlator — the windowed spot → QSO engine.

Takes parsed Reports one at a time, keeps the self station's recent spots
in two WindowBuffers (one per role), pairs each new spot with reciprocal
spots of the opposite role, merges the pairs into QsoAggregates and hands
back the QSOs whose evidence has aged out.

Per-spot ordering (each step sees the state left by the previous one):
  1. Advance the cycle clock; if it moved, prune both buffers.
  2. Drop spots already behind the retention horizon, spots from excluded
     stations and spots on unknown bands.
  3. Match against the opposite buffer, create/merge QSOs, then buffer
     the spot under its own role.
  4. Finalize QSOs whose last cycle is behind the retention horizon.

Stats dict (logged by main.py on shutdown):
    spots_ingested   — self spots that reached the clock
    matches          — reciprocal pairs found
    qsos_opened      — distinct QSOs created
    qsos_finalized   — QSOs handed back for emission
"""

from __future__ import annotations

import logging

from ..bands import Band, classify
from ..errors import UnknownBand
from ..ingest.filter import is_excluded, spot_role
from ..metrics import METRICS
from ..models import Report, same_call
from .models import QsoAggregate, make_correlation_key
from .qso_tracker import QsoTracker
from .window import CYCLE_SECONDS, RETENTION_CYCLES, CycleClock, WindowBuffer

logger = logging.getLogger(__name__)


def _grids_cross_match(a: Report, b: Report) -> bool:
    """True if a's reporter is b's transmitter location and vice versa."""
    return same_call(a.grid_rx, b.grid_tx) and same_call(a.grid_tx, b.grid_rx)


class Correlator:
    """
    Correlates the self station's spots into two-way QSOs.

    Args:
        self_call:     The operator's call sign (compared case-insensitively).
        excluded:      Upper-cased call signs never to log (see build_exclusion_set).
        cycle_seconds: Cycle length in seconds.
        retention:     Cycles of evidence kept behind the current cycle.
    """

    def __init__(
        self,
        self_call: str,
        excluded: frozenset[str] = frozenset(),
        cycle_seconds: int = CYCLE_SECONDS,
        retention: int = RETENTION_CYCLES,
    ) -> None:
        self.self_call = self_call
        self._excluded = excluded
        self.clock = CycleClock(cycle_seconds=cycle_seconds, retention=retention)
        self.heard = WindowBuffer("heard")
        self.heard_by = WindowBuffer("heard_by")
        self._tracker = QsoTracker(self.clock)

        self.stats: dict[str, int] = {
            "spots_ingested": 0,
            "matches": 0,
            "qsos_opened": 0,
            "qsos_finalized": 0,
        }
        logger.info(
            "Correlator ready — self=%s cycle=%ds retention=%d excluded=%s",
            self_call,
            cycle_seconds,
            retention,
            sorted(excluded) or "none",
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def ingest(self, report: Report) -> list[QsoAggregate]:
        """
        Run one spot through the engine.

        Returns:
            QSOs finalized by this step, in finalization order (often empty).
        """
        role = spot_role(report, self.self_call)
        if role is None:
            METRICS.reports_not_self.inc()
            return []

        self.stats["spots_ingested"] += 1
        cycle = self.clock.cycle_of(report.timestamp)
        if self.clock.advance(report.timestamp):
            self.heard.prune(self.clock)
            self.heard_by.prune(self.clock)

        if self.clock.is_expired(cycle):
            METRICS.reports_too_late.inc()
            logger.debug(
                "Dropping late spot #%d from cycle %d (horizon %d)",
                report.id,
                cycle,
                self.clock.horizon,
            )
        elif role == "heard":
            self._ingest_heard(report, cycle)
        else:
            self._ingest_heard_by(report, cycle)

        return self._finalize(self._tracker.expire())

    def flush(self) -> list[QsoAggregate]:
        """Finalize every QSO still open. Call once at end of input."""
        return self._finalize(self._tracker.flush())

    @property
    def open_qsos(self) -> int:
        return self._tracker.open_count

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _band_or_skip(self, report: Report) -> Band | None:
        try:
            return classify(report.frequency)
        except UnknownBand as exc:
            METRICS.reports_unknown_band.inc()
            logger.warning("Unable to determine band for spot #%d: %s", report.id, exc)
            return None

    def _ingest_heard(self, report: Report, cycle: int) -> None:
        """Self decoded `report.call_tx`; look for that station decoding self."""
        if is_excluded(report.call_tx, self._excluded):
            METRICS.reports_excluded.inc()
            logger.debug("Skipping spot #%d of excluded %s", report.id, report.call_tx)
            return
        band = self._band_or_skip(report)
        if band is None:
            return

        for other in self.heard_by:
            if same_call(other.report.call_rx, report.call_tx) and _grids_cross_match(
                other.report, report
            ):
                key = make_correlation_key(report, other.report, band, other.band)
                self._record_match(key, report, other.report)

        self.heard.append(report, band, cycle)

    def _ingest_heard_by(self, report: Report, cycle: int) -> None:
        """`report.call_rx` decoded self; look for self decoding that station."""
        if is_excluded(report.call_rx, self._excluded):
            METRICS.reports_excluded.inc()
            logger.debug("Skipping spot #%d of excluded %s", report.id, report.call_rx)
            return
        band = self._band_or_skip(report)
        if band is None:
            return

        for other in self.heard:
            if same_call(other.report.call_tx, report.call_rx) and _grids_cross_match(
                other.report, report
            ):
                key = make_correlation_key(other.report, report, other.band, band)
                self._record_match(key, other.report, report)

        self.heard_by.append(report, band, cycle)

    def _record_match(self, key, heard: Report, heard_by: Report) -> None:
        self._tracker.update(key, heard, heard_by)
        self.stats["matches"] += 1
        self.stats["qsos_opened"] += self._tracker.pop_new_qso_count()
        METRICS.matches.inc()
        logger.debug("Match #%d ⇄ #%d for %r", heard.id, heard_by.id, key)

    def _finalize(self, qsos: list[QsoAggregate]) -> list[QsoAggregate]:
        self.stats["qsos_finalized"] += len(qsos)
        return qsos
