"""
ingest/filter.py

Station-level filtering for incoming spots.

Two cheap checks run before any correlation work:
  - Role: is the self station the reporter, the transmitter, or neither?
    Spots that do not involve the self station are dropped outright.
  - Exclusion: operators who have asked not to be logged. The exclusion set
    is built once at startup and passed explicitly into the correlator.

Usage:
    excluded = build_exclusion_set(["DL6WAB"])
    role = spot_role(report, "DK1ABC")   # 'heard' | 'heard_by' | None
"""

from __future__ import annotations

import logging
from typing import Iterable, Literal

from ..models import Report, same_call

logger = logging.getLogger(__name__)

SpotRole = Literal["heard", "heard_by"]


def build_exclusion_set(calls: Iterable[str] | None = None) -> frozenset[str]:
    """
    Normalise a list of call signs into an immutable, upper-cased set.

    Blank entries are dropped with a warning.

    Examples:
        >>> sorted(build_exclusion_set(["dl6wab", " K1ABC "]))
        ['DL6WAB', 'K1ABC']
    """
    excluded: set[str] = set()
    for call in calls or ():
        norm = call.strip().upper()
        if not norm:
            logger.warning("Ignoring blank call sign in exclusion list")
            continue
        excluded.add(norm)
    logger.debug("Exclusion set built: %s", sorted(excluded) or "none")
    return frozenset(excluded)


def is_excluded(call: str, excluded: frozenset[str]) -> bool:
    return call.upper() in excluded


def spot_role(report: Report, self_call: str) -> SpotRole | None:
    """
    Classify a spot relative to the self station.

    Returns:
        'heard'    — self is the reporter (self decoded the other station)
        'heard_by' — self is the transmitter (the other station decoded self)
        None       — self is not involved
    """
    if same_call(report.call_rx, self_call):
        return "heard"
    if same_call(report.call_tx, self_call):
        return "heard_by"
    return None
