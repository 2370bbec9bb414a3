"""
wsprqso/pipeline.py

The sequential stage chain: line → Report → Correlator → ADIF record.

One line is parsed, correlated and its finalized QSOs written before the
next line is read. Per-record problems (MalformedRecord, UnknownBand) are
logged to the diagnostic stream and skipped here; they never escape
run_pipeline(). Read failures (FatalIO) do, and end the run.

The primary stream only ever receives the header and complete ADIF
records; every diagnostic goes through logging (stderr).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import IO, Iterable

from .adif.writer import describe, format_header, format_record
from .correlation.correlator import Correlator
from .correlation.models import QsoAggregate
from .errors import MalformedRecord
from .ingest.parser import parse_report
from .metrics import METRICS

logger = logging.getLogger(__name__)


class QsoLog:
    """
    Primary output stream: ADIF header followed by one record per QSO.

    Args:
        out: Text stream the log is written to (stdout in production).
    """

    def __init__(self, out: IO[str]) -> None:
        self._out = out
        self.qsos_logged = 0
        self.contacts: set[str] = set()

    def write_header(self, self_call: str, created: datetime | None = None) -> None:
        print(format_header(self_call, created), file=self._out, flush=True)

    def write(self, qso: QsoAggregate) -> None:
        print(format_record(qso), file=self._out, flush=True)
        self.qsos_logged += 1
        self.contacts.add(qso.call_ct.upper())
        METRICS.qsos_logged.inc()
        logger.info("Logged QSO %s", describe(qso))

    @property
    def unique_calls(self) -> int:
        return len(self.contacts)

    def summary(self) -> str:
        return f"Logged {self.qsos_logged} QSOs with {self.unique_calls} unique call signs"


def process_line(line: str, correlator: Correlator) -> list[QsoAggregate]:
    """
    Run one input line through parsing and correlation.

    Returns the QSOs finalized by this line. Blank and malformed lines
    return an empty list.
    """
    if not line.strip():
        logger.debug("Skipping blank input line %r", line)
        return []
    try:
        report = parse_report(line)
    except MalformedRecord as exc:
        METRICS.reports_parse_error.inc()
        logger.warning("Failed to parse row: %s\n\n%s", exc, exc.line)
        return []
    METRICS.reports_parsed_ok.inc()
    return correlator.ingest(report)


def run_pipeline(lines: Iterable[str], correlator: Correlator, log: QsoLog) -> None:
    """
    Consume `lines` until exhausted, writing QSOs as they are finalized,
    then flush the QSOs still open at end of input.

    Raises:
        FatalIO: propagated from the line source.
    """
    for line in lines:
        for qso in process_line(line, correlator):
            log.write(qso)

    for qso in correlator.flush():
        log.write(qso)
