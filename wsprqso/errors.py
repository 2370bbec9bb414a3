"""
wsprqso/errors.py

Exception taxonomy for the spot → QSO pipeline.

Per-record errors (MalformedRecord, UnknownBand) are recovered inside the
pipeline: logged, counted and skipped. FatalIO and ConfigurationError are
the only ones allowed to reach main() and end the process.
"""

from __future__ import annotations


class WsprQsoError(Exception):
    """Base class for every error raised by wsprqso."""


class MalformedRecord(WsprQsoError, ValueError):
    """A CSV row could not be turned into a Report."""

    def __init__(self, field: str, line: str, reason: str = "") -> None:
        self.field = field
        self.line = line
        self.reason = reason
        message = f"Missing or malformed {field} field"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnknownBand(WsprQsoError, ValueError):
    """A frequency falls between the known amateur bands."""

    def __init__(self, frequency: int) -> None:
        self.frequency = frequency
        super().__init__(f"Unknown frequency band for {frequency} Hz")


class FatalIO(WsprQsoError, OSError):
    """The input stream could not be read any further."""


class ConfigurationError(WsprQsoError, ValueError):
    """Startup configuration is unusable (e.g. no self call sign)."""
