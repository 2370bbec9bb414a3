"""
correlation/window.py

CycleClock and WindowBuffer — the time-bounded state of the correlator.

Design:
  - Time is measured in WSPR cycles: floor(timestamp / 120). Spot
    timestamps drive the clock, never the wall clock, so replaying an old
    dump behaves exactly like a live feed.
  - The clock only moves forward. A late spot inside the window is still
    matched but never rewinds the clock; one already behind the horizon
    is dropped by the Correlator before matching.
  - A WindowBuffer keeps spots from the last `retention` cycles in arrival
    order and is pruned each time the clock advances.

Thread safety: NOT thread-safe. Owned by a single Correlator.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterator, NamedTuple

from ..bands import Band
from ..models import Report

logger = logging.getLogger(__name__)

CYCLE_SECONDS = 120
RETENTION_CYCLES = 2


class CycleClock:
    """
    Monotonic cycle counter derived from spot timestamps.

    Args:
        cycle_seconds: Length of one cycle in seconds.
        retention:     How many cycles behind `current` evidence stays live.
    """

    def __init__(
        self,
        cycle_seconds: int = CYCLE_SECONDS,
        retention: int = RETENTION_CYCLES,
    ) -> None:
        self.cycle_seconds = cycle_seconds
        self.retention = retention
        self.current = 0

    def cycle_of(self, timestamp: int) -> int:
        return timestamp // self.cycle_seconds

    def advance(self, timestamp: int) -> bool:
        """
        Move the clock to the cycle of `timestamp` if that is later.

        Returns True if the clock moved (callers must prune before matching).
        """
        cycle = self.cycle_of(timestamp)
        if cycle <= self.current:
            return False
        logger.debug("Cycle advanced %d -> %d", self.current, cycle)
        self.current = cycle
        return True

    @property
    def horizon(self) -> int:
        """Oldest cycle that is still inside the retention window."""
        return self.current - self.retention

    def is_expired(self, cycle: int) -> bool:
        return cycle < self.horizon


class BufferedSpot(NamedTuple):
    """A spot held in a WindowBuffer together with its band and cycle."""

    report: Report
    band: Band
    cycle: int


class WindowBuffer:
    """
    Arrival-ordered spots of one role, limited to the retention window.

    Args:
        role: 'heard' or 'heard_by' — used in log messages only.
    """

    def __init__(self, role: str) -> None:
        self.role = role
        self._spots: deque[BufferedSpot] = deque()

    def append(self, report: Report, band: Band, cycle: int) -> None:
        self._spots.append(BufferedSpot(report, band, cycle))

    def prune(self, clock: CycleClock) -> int:
        """Drop spots older than the clock's horizon. Returns how many went."""
        before = len(self._spots)
        self._spots = deque(s for s in self._spots if not clock.is_expired(s.cycle))
        dropped = before - len(self._spots)
        if dropped:
            logger.debug(
                "Pruned %d %s spot(s) older than cycle %d (kept %d)",
                dropped,
                self.role,
                clock.horizon,
                len(self._spots),
            )
        return dropped

    def __iter__(self) -> Iterator[BufferedSpot]:
        return iter(self._spots)

    def __len__(self) -> int:
        return len(self._spots)
