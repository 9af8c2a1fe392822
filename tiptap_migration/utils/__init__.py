"""
Utility helpers used by the migration tool.

This subpackage exposes convenience functions for structured logging,
pre-flight checks and redirect generation.
"""

from .errors import ERRORS, report_error, report_ok
from .pre_flight_checks import PreFlightCheckError, run_pre_flight_checks
from .redirects import build_redirect_rules, generate_redirects_csv, write_redirects_file

__all__ = [
    "ERRORS",
    "PreFlightCheckError",
    "build_redirect_rules",
    "generate_redirects_csv",
    "report_error",
    "report_ok",
    "run_pre_flight_checks",
    "write_redirects_file",
]
