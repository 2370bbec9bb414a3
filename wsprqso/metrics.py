"""
wsprqso/metrics.py

Plain integer counters for the spot pipeline.
The pipeline is single-threaded, so no locking is involved.

Usage:
    from wsprqso.metrics import METRICS
    METRICS.lines_read.inc()
    print(METRICS.as_dict())
"""


class Counter:
    """An integer counter."""

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value = 0

    def inc(self, amount: int = 1) -> None:
        self._value += amount

    def reset(self) -> None:
        self._value = 0

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:  # pragma: no cover
        return f"Counter({self._value})"


class Metrics:
    """Singleton holding all pipeline counters."""

    def __init__(self) -> None:
        # --- Ingest ---
        self.lines_read: Counter = Counter()
        """Input lines consumed, blank ones included."""

        self.reports_parsed_ok: Counter = Counter()
        self.reports_parse_error: Counter = Counter()
        """Lines skipped as MalformedRecord."""

        # --- Correlation ---
        self.reports_not_self: Counter = Counter()
        """Spots that name neither the self station as reporter nor transmitter."""

        self.reports_excluded: Counter = Counter()
        self.reports_unknown_band: Counter = Counter()
        self.reports_too_late: Counter = Counter()
        """Spots whose cycle was already behind the retention horizon on arrival."""

        self.matches: Counter = Counter()
        """Reciprocal spot pairs found (several may feed one QSO)."""

        # --- Output ---
        self.qsos_logged: Counter = Counter()

    def as_dict(self) -> dict:
        """Return all counters as a plain dict."""
        return {
            name: counter.value
            for name, counter in vars(self).items()
            if isinstance(counter, Counter)
        }

    def reset_all(self) -> None:
        """Reset every counter to zero (useful in tests)."""
        for attr in vars(self).values():
            if isinstance(attr, Counter):
                attr.reset()


# Module-level singleton, import from here everywhere
METRICS = Metrics()
