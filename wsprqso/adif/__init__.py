"""
adif/__init__.py

Public API for the adif sub-package.
"""

from .writer import adif_field, describe, format_header, format_record

__all__ = ["adif_field", "describe", "format_header", "format_record"]
