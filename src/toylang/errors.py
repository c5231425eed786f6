"""
toylang Error Hierarchy
=======================

This module defines the exception hierarchy for the toylang front end.
All exceptions inherit from ToyError, allowing callers to catch every
front-end error with a single except clause if desired.

Exception Hierarchy
-------------------
ToyError (base)
├── ToySyntaxError - parser expectation violated
│   ├── UnexpectedTokenError - token cannot start an expression
│   └── MissingTokenError - required token not found
└── PrecedenceError - invalid operator precedence table entry

Syntax errors never escape the parser's public entry points. They are
raised inside the recursive productions and converted into a failed
ParseResult at the boundary, so the driver can decide how to recover.

Error messages follow this format when a location is known:
    filename:line:column: error: description
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class ToyError(Exception):
    """
    Base exception for all toylang errors.

        try:
            table = PrecedenceTable({"+": -1})
        except ToyError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source text for error reporting.

    Attributes:
        filename: Name of the source (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Syntax Errors
# =============================================================================

class ToySyntaxError(ToyError):
    """
    Syntax error found while parsing.

    Carries the bare expectation message (used for the one-line
    "Error <message>" diagnostic) and the location of the offending token.

    Attributes:
        message: The violated expectation, e.g. "expected ')'"
        location: Where the offending token starts (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
    ):
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"{self.location}: error: {self.message}"
        return f"error: {self.message}"

    @property
    def diagnostic(self) -> str:
        """The single diagnostic line written for this error."""
        return f"Error {self.message}"


class UnexpectedTokenError(ToySyntaxError):
    """
    A token that cannot start an expression was found.

    Attributes:
        found: Printable form of the offending token
    """

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
    ):
        self.found = found
        super().__init__("unknown token when expecting an expression", location)


class MissingTokenError(ToySyntaxError):
    """
    A required token (like ')' or a function name) is missing.

    Attributes:
        expected: Description of what was required
        found: Printable form of the token that was found instead
    """

    def __init__(
        self,
        message: str,
        expected: str,
        found: str,
        location: Optional[SourceLocation] = None,
    ):
        self.expected = expected
        self.found = found
        super().__init__(message, location)


# =============================================================================
# Configuration Errors
# =============================================================================

class PrecedenceError(ToyError):
    """Raised when a precedence table entry is not a valid binary operator."""
    pass


# =============================================================================
# Error Collection
# =============================================================================

class ErrorCollector:
    """
    Collects the syntax errors of one parse session for batch reporting.

    The driver keeps going after a failed construct, so a session can
    accumulate many errors. The collector keeps them for a summary at
    the end without affecting the per-error diagnostics.

    Example:
        collector = ErrorCollector(max_errors=100)
        collector.add(error)
        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to keep; later ones are counted only
        """
        self.errors: list[ToySyntaxError] = []
        self.max_errors = max_errors
        self._dropped = 0

    def add(self, error: ToySyntaxError) -> None:
        """Add an error to the collection."""
        if len(self.errors) >= self.max_errors:
            self._dropped += 1
            return
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return self.error_count() > 0

    def error_count(self) -> int:
        """Return the number of errors seen, including dropped ones."""
        return len(self.errors) + self._dropped

    def report(self) -> str:
        """Format all errors for display."""
        lines = [str(error) for error in self.errors]

        if self._dropped:
            lines.append(f"... {self._dropped} more not shown")

        count = self.error_count()
        error_word = "error" if count == 1 else "errors"
        lines.append(f"{count} {error_word}")

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()
        self._dropped = 0
