"""
correlation/qso_tracker.py

QsoTracker — owns every QSO that is still collecting evidence.

Design constraints:
  - One QsoAggregate per CorrelationKey; later reciprocal pairs for the
    same key merge into it.
  - A QSO is finalized once its newest spot has left the retention window
    (last cycle < current cycle - retention). Finalized QSOs are removed
    from the dict and handed back to the caller for emission, so each one
    is returned exactly once.
  - Finalization order is the order in which QSOs were first created
    (dict insertion order), which keeps the output stable between runs.
"""

from __future__ import annotations

import logging

from ..models import Report
from .models import CorrelationKey, QsoAggregate
from .window import CycleClock

logger = logging.getLogger(__name__)


class QsoTracker:
    """
    Tracks open QSOs keyed on CorrelationKey.

    Thread safety: NOT thread-safe. Called exclusively from the Correlator.
    """

    def __init__(self, clock: CycleClock) -> None:
        self.qsos: dict[CorrelationKey, QsoAggregate] = {}
        self._clock = clock
        self._new_qso_count: int = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def update(self, key: CorrelationKey, heard: Report, heard_by: Report) -> QsoAggregate:
        """
        Create or merge the QSO for `key` from a reciprocal spot pair.

        Returns the updated QsoAggregate.
        """
        qso = self.qsos.get(key)
        if qso is None:
            qso = QsoAggregate.from_pair(heard, heard_by)
            self.qsos[key] = qso
            self._new_qso_count += 1
            logger.debug("New QSO: %r (open: %d)", key, len(self.qsos))
        qso.merge(heard, heard_by)
        return qso

    def expire(self) -> list[QsoAggregate]:
        """
        Remove and return every QSO whose evidence has aged out.

        Must run after the current spot has been matched, so a QSO that the
        spot just extended is judged on its new time_last.
        """
        cycle_seconds = self._clock.cycle_seconds
        keys_to_remove = [
            k for k, q in self.qsos.items()
            if self._clock.is_expired(q.last_cycle(cycle_seconds))
        ]
        finalized = [self.qsos.pop(k) for k in keys_to_remove]
        if finalized:
            logger.debug(
                "Finalized %d QSO(s) before cycle %d (still open: %d)",
                len(finalized),
                self._clock.horizon,
                len(self.qsos),
            )
        return finalized

    def flush(self) -> list[QsoAggregate]:
        """Remove and return every open QSO (end of input)."""
        finalized = list(self.qsos.values())
        self.qsos.clear()
        if finalized:
            logger.info("Flushing %d open QSO(s) at end of input", len(finalized))
        return finalized

    def pop_new_qso_count(self) -> int:
        """Return and reset the count of new QSOs since the last call."""
        count = self._new_qso_count
        self._new_qso_count = 0
        return count

    @property
    def open_count(self) -> int:
        return len(self.qsos)
