# File: hyperenrich/errors.py
# Location: hyperenrich/hyperenrich/errors.py
"""
Exception classes shared by the hyperenrich modules.

All errors derive from HyperEnrichError so callers can catch the package's
failures in one place. The concrete classes also derive from the matching
builtin (ValueError, RuntimeError) so generic handlers keep working.
"""

from typing import Dict, Optional


class HyperEnrichError(Exception):
    """Base exception for all hyperenrich errors."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        """Initialize hyperenrich error.

        Parameters
        ----------
        message : str
            Error message
        details : dict, optional
            Additional error details (offending arguments, line numbers)
        """
        super().__init__(message)
        self.details = details or {}


class InvalidArgumentError(HyperEnrichError, ValueError):
    """Raised when index arguments are structurally inconsistent (e.g. k > n in a choose)."""


class InternalError(HyperEnrichError, RuntimeError):
    """Raised when an internal invariant of the engine is violated."""


class AnnotationFormatError(HyperEnrichError, ValueError):
    """Raised when an annotation line or vocabulary value cannot be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        """Initialize annotation format error."""
        details = {"line_number": line_number} if line_number is not None else None
        super().__init__(message, details)
        self.line_number = line_number
