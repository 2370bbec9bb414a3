"""
wsprqso/main.py

Command-line entry point: turn a WSPRnet spot dump into an ADIF log of
two-way WSPR QSOs for one station.

    wsprqso DK1ABC < wsprspots-2024-05.csv > qsos.adi
    wsprqso DK1ABC --input wsprspots-2024-05.csv --exclude DB0ABC

stdout carries only the ADIF log; diagnostics and the closing summary go to
stderr. Exit status is 1 for a missing call sign or an unreadable input,
0 otherwise — bad individual rows never fail the run.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn

from .config import Settings, settings
from .correlation.correlator import Correlator
from .errors import ConfigurationError, FatalIO
from .ingest.filter import build_exclusion_set
from .ingest.reader import SpotReader
from .metrics import METRICS
from .pipeline import QsoLog, run_pipeline
from .version import PROGRAM_ID, PROGRAM_VERSION

logger = logging.getLogger("wsprqso.main")


def resolve_self_call(arg_call: str | None, cfg: Settings = settings) -> str:
    """
    Pick the self call sign: command line first, then SELF_CALL.

    Raises:
        ConfigurationError: neither source provides a call sign.
    """
    call = (arg_call or cfg.SELF_CALL or "").strip()
    if not call:
        raise ConfigurationError(
            "Missing operator call sign (pass it as an argument or set SELF_CALL)"
        )
    return call


def build_correlator(
    self_call: str,
    extra_excluded: list[str] | None = None,
    cfg: Settings = settings,
) -> Correlator:
    excluded = build_exclusion_set([*cfg.EXCLUDED_CALLS, *(extra_excluded or [])])
    return Correlator(
        self_call=self_call,
        excluded=excluded,
        cycle_seconds=cfg.CYCLE_SECONDS,
        retention=cfg.RETENTION_CYCLES,
    )


def run(self_call: str, input_path: str | None, extra_excluded: list[str]) -> QsoLog:
    """
    Write the ADIF header, process the whole input and return the log.

    Raises:
        FatalIO: the input could not be opened or read.
    """
    correlator = build_correlator(self_call, extra_excluded)
    log = QsoLog(sys.stdout)
    log.write_header(self_call)

    with SpotReader(path=input_path, encoding=settings.INPUT_ENCODING) as reader:
        run_pipeline(reader, correlator, log)

    logger.debug("Final stats — correlator=%s metrics=%s", correlator.stats, METRICS.as_dict())
    return log


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_ID,
        description="Find two-way WSPR QSOs in a WSPRnet spot dump and log them as ADIF",
    )
    parser.add_argument(
        "call", nargs="?", default=None,
        help="operator call sign (default: SELF_CALL setting)",
    )
    parser.add_argument(
        "--input", "-i", default=None,
        help="CSV spot file to read (default: stdin)",
    )
    parser.add_argument(
        "--exclude", "-x", action="append", default=[], metavar="CALL",
        help="never log QSOs with CALL (repeatable; adds to EXCLUDED_CALLS)",
    )
    parser.add_argument(
        "--log-level", default=settings.LOG_LEVEL.upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {PROGRAM_VERSION}",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> NoReturn:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        self_call = resolve_self_call(args.call)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    # Declared ADIF field lengths are UTF-8 byte counts
    reconfigure = getattr(sys.stdout, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(encoding="utf-8")

    try:
        log = run(self_call, args.input, args.exclude)
    except FatalIO as e:
        logger.error("Fatal input error: %s", e)
        sys.exit(1)

    print(log.summary(), file=sys.stderr, flush=True)
    sys.exit(0)


if __name__ == "__main__":
    main()
