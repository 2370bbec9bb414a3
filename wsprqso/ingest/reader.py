"""
ingest/reader.py

SpotReader — yields raw CSV lines from stdin or a file.

Key decisions:
  - The blocking read of the next line is the pipeline's only suspension
    point; everything downstream runs synchronously per line.
  - Read and decode failures are not per-record problems: the stream cannot
    be trusted past that point, so they surface as FatalIO and end the run.
  - Lines are handed on untouched; parsing lives in parser.py.

Lifecycle:
    with SpotReader(path="spots.csv") as reader:
        for line in reader:
            ...
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Iterator

from ..errors import FatalIO
from ..metrics import METRICS

logger = logging.getLogger(__name__)


class SpotReader:
    """
    Iterates over the lines of a spot feed.

    Args:
        path:     File to read; None or '-' reads the given stream instead.
        stream:   Already-open text stream (defaults to sys.stdin).
        encoding: Encoding used when opening `path`.
    """

    def __init__(
        self,
        path: str | None = None,
        stream: IO[str] | None = None,
        encoding: str = "utf-8",
    ) -> None:
        self._path = None if path in (None, "-") else path
        self._stream = stream
        self._encoding = encoding
        self._owned: IO[str] | None = None

    # ------------------------------------------------------------------
    # Context management
    # ------------------------------------------------------------------

    def open(self) -> None:
        if self._path is None:
            return
        try:
            self._owned = open(self._path, "r", encoding=self._encoding, newline="")
        except OSError as exc:
            raise FatalIO(f"Cannot open input {self._path!r}: {exc}") from exc
        logger.info("Reading spots from %s", self._path)

    def close(self) -> None:
        if self._owned is not None:
            self._owned.close()
            self._owned = None

    def __enter__(self) -> SpotReader:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[str]:
        source = self._owned or self._stream or sys.stdin
        try:
            for line in source:
                METRICS.lines_read.inc()
                yield line
        except (OSError, UnicodeDecodeError) as exc:
            raise FatalIO(
                f"Failed to read input after {METRICS.lines_read.value} lines: {exc}"
            ) from exc

    def __repr__(self) -> str:  # pragma: no cover
        return f"SpotReader(path={self._path!r}, encoding={self._encoding!r})"
