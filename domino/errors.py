"""
Exception types raised by domino.
"""

from typing import Optional


class DominoError(Exception):
    """Base class for all domino errors."""


class ParseFailure(DominoError, TypeError):
    """Raised when the parser is handed something that is not a string."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Cannot parse markup of type {type(value).__name__}, expected str")


class InvalidSelector(DominoError, ValueError):
    """
    Raised when a CSS selector cannot be compiled.

    Distinct from an empty selection: a selector that compiles but matches
    nothing yields an empty NodeSet instead.
    """

    def __init__(self, selector: object, reason: Optional[str] = None):
        self.selector = selector
        self.reason = reason
        message = f"Invalid selector {selector!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class FileReadFailure(DominoError, OSError):
    """Raised internally when a file cannot be read."""


class RescuableFailure(DominoError):
    """Raised by result.fail()."""


class UnwrapError(DominoError):
    """Raised when unwrapping an Err result."""
