"""
Diagnostics for the StoryScript front-end.

Classes:
    SourceLocation: File name plus 1-based line/column, attached to every AST node.
    Diagnostic: An error message pinned to a SourceLocation.
    ParseError: Raised inside the parser to unwind to the nearest top-level boundary.

Diagnostics render in the two textual formats the command-line driver prints:

    >>> d = Diagnostic(SourceLocation("cave.story", 3, 7), "Expected expression.")
    >>> str(d)
    'Error at 3:7 - Expected expression.'
    >>> d.format_with_file()
    'cave.story:3:7: Error: Expected expression.'
"""

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class SourceLocation:
    """Position of a construct in a source file.

    Attributes:
        filename (str): Name used when reporting errors.
        line (int): 1-based line number.
        column (int): 1-based column number.
    """

    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Diagnostic:
    """A single error recorded by the lexer or the parser.

    Attributes:
        location (SourceLocation): Where the error was detected.
        message (str): Human-readable description, e.g. "Expected ';' after message.".
    """

    location: SourceLocation
    message: str

    def __str__(self) -> str:
        return f"Error at {self.location.line}:{self.location.column} - {self.message}"

    def format_with_file(self) -> str:
        return f"{self.location}: Error: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.location.filename,
            "line": self.location.line,
            "col": self.location.column,
            "message": self.message,
        }


Reporter = Callable[[Diagnostic], None]
"""Hook invoked with each diagnostic as soon as it is recorded."""


class ParseError(Exception):
    """Signals that the current top-level construct cannot be continued.

    The parser records a Diagnostic before raising, then catches this at the
    top-level loop and resynchronizes. It never escapes ``Parser.parse()``.

    Attributes:
        diagnostic (Diagnostic): The error that triggered the unwind.
    """

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic


__all__ = ["Diagnostic", "ParseError", "Reporter", "SourceLocation"]
