"""
correlation/__init__.py

Public API for the correlation sub-package.
"""

from .correlator import Correlator
from .models import CorrelationKey, QsoAggregate, make_correlation_key
from .qso_tracker import QsoTracker
from .window import CycleClock, WindowBuffer

__all__ = [
    "Correlator",
    "QsoTracker",
    "CorrelationKey",
    "QsoAggregate",
    "make_correlation_key",
    "CycleClock",
    "WindowBuffer",
]
