"""
TacticLang Error Hierarchy
==========================

This module defines the exception hierarchy for the TacticLang front-end.
All exceptions inherit from TacticError, allowing callers to catch every
front-end error with a single except clause if desired.

Exception Hierarchy
-------------------
TacticError (base)
├── FrontendError - diagnostics tied to a source location
│   ├── LexicalError - error token produced by the scanner
│   └── TacticSyntaxError - grammar mismatch found by the parser
├── EmptySourceError - source file has no content
└── CompilationFailed - aggregate report of collected diagnostics

Error Message Format
--------------------
Diagnostics carry source location information and follow this format:

    filename:line:column: error: description
        source_line_text
            ^ (pointer to error location)
    hint: suggestion for fixing (when available)

Example:
    soldier.tac:4:13: error: Expected ';' after variable declaration.
        troop x = 1
                    ^
"""

from dataclasses import dataclass
from typing import List, Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class TacticError(Exception):
    """
    Base exception for all TacticLang front-end errors.

    Example:
        try:
            check_file("soldier.tac")
        except TacticError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
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
# Located Diagnostics
# =============================================================================

class FrontendError(TacticError):
    """
    Base class for scanner and parser diagnostics.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            soldier.tac:2:5: error: Unexpected character: @
                @troop x;
                ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexicalError(FrontendError):
    """
    Lexical error reported by the scanner.

    The scanner never raises: it emits an ERROR token whose lexeme is the
    message. This class wraps such a token for reporting once the caller
    has decided the run cannot continue to parsing.

    Examples:
        - Unexpected character: @
        - Unterminated string
        - Unknown directive: #import
    """
    pass


class TacticSyntaxError(FrontendError):
    """
    Syntax error found by the parser.

    Raised by grammar rules when the current token does not match the
    expected construct. Caught at the declaration boundary, where the
    parser records it and synchronizes.

    Attributes:
        found: Lexeme of the offending token, or None at end of input
        expected: Description of the construct the parser wanted
    """

    def __init__(
        self,
        expected: str,
        found: Optional[str],
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected
        where = "at end" if found is None else f"at '{found}'"
        super().__init__(
            f"{where}: {expected}",
            location=location,
            hint=hint,
            source_line=source_line,
        )

    @property
    def at_end(self) -> bool:
        """True if the offending token was end of input."""
        return self.found is None

    def describe(self) -> str:
        """Return the one-line '[Line L, Col C] Error at ...' form."""
        line = self.location.line if self.location else 0
        column = self.location.column if self.location else 0
        return f"[Line {line}, Col {column}] Error {self.message}"


class EmptySourceError(TacticError):
    """Raised when a source file is empty or could not be read."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(
            f"Source file is empty or could not be read: {filename}"
        )


class CompilationFailed(TacticError):
    """
    Aggregate error containing multiple diagnostics.

    The message is already a formatted report from ErrorCollector and is
    passed through unchanged.
    """

    def __init__(self, report: str, errors: Optional[List[FrontendError]] = None):
        self.errors = list(errors or [])
        super().__init__(report)


# =============================================================================
# Error Collection (for multi-error reporting)
# =============================================================================

class ErrorCollector:
    """
    Collects multiple diagnostics for batch reporting.

    The parser uses this to continue after a syntax error, collecting all
    errors before reporting them together.

    Example:
        collector = ErrorCollector(max_errors=100)

        while not at_end:
            try:
                parse_declaration()
            except TacticSyntaxError as e:
                collector.add(e)
                if collector.should_stop():
                    break

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before stopping
        """
        self.errors: List[FrontendError] = []
        self.max_errors = max_errors

    def add(self, error: FrontendError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def should_stop(self) -> bool:
        """Return True if max_errors has been reached."""
        return len(self.errors) >= self.max_errors

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """Format all errors for display."""
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        error_word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {error_word}")

        return "\n".join(lines)

    def clear(self) -> None:
        """Clear all collected errors."""
        self.errors.clear()

    def raise_if_errors(self) -> None:
        """Raise CompilationFailed if any errors were collected."""
        if self.has_errors():
            raise CompilationFailed(self.report(), self.errors)
