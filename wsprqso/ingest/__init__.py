"""
ingest/__init__.py

Public API for the ingest sub-package.
"""

from .filter import build_exclusion_set, is_excluded, spot_role
from .parser import parse_report
from .reader import SpotReader

__all__ = [
    "SpotReader",
    "parse_report",
    "build_exclusion_set",
    "is_excluded",
    "spot_role",
]
