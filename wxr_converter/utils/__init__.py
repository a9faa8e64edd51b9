"""
Utility helpers used by the converter.

This subpackage exposes convenience functions for structured diagnostics,
URL canonicalization and redirect map generation.
"""

from .errors import ERRORS, DiagnosticLog
from .redirects import generate_redirects_csv
from .urls import UrlCanonicalizer

__all__ = ["ERRORS", "DiagnosticLog", "UrlCanonicalizer", "generate_redirects_csv"]
