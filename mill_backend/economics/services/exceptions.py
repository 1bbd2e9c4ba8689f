# economics/services/exceptions.py

"""
ECONOMICS REPORT ERRORS
"""


class EconomicsReportError(Exception):
    """Base exception for the mill economics report."""


class InvalidReportRangeError(EconomicsReportError, ValueError):
    """Unparsable dates, or start after end. Raised before any query runs."""


class ReportCompilationError(EconomicsReportError):
    """Any failure while aggregating. The report is never returned partially."""
