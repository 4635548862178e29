"""
Lexical analyzer for the StoryScript language.

This module converts raw story source into tokens, one token per call:

Classes:
    CharacterStream: Reads characters with line and column tracking, and can be rewound to a mark.
    Token: Immutable token with kind, exact source text, and start position.
    Lexer: Pull-based tokenizer over a CharacterStream.

Features:
    - Skips whitespace and `//` line comments
    - Recognizes:
        * Identifiers and the case-sensitive keyword set (`room`, `item`, `say`, ...)
        * Numbers (digits with an optional fractional part)
        * Strings delimited by double quotes, lexeme kept with its quotes
        * One- and two-character operators (`=`/`==`, `!`/`!=`, `<`/`<=`, `>`/`>=`)
    - Never raises on bad input: unknown characters and unterminated strings
      become UNKNOWN tokens carrying a message

Example:
    >>> lexer = Lexer('say "hello";')
    >>> lexer.next_token()
    Token(SAY, say)
    >>> lexer.next_token().text
    '"hello"'

Exports:
    - CharacterStream
    - Lexer
    - SourceLocation
    - Token
"""

from dataclasses import dataclass
from typing import Any

from storyscript.storyscript_constants import (
    WHITESPACE,
    TokenKind,
    keyword_map,
    lookahead_operators,
    symbol_map,
)
from storyscript.storyscript_errors import Diagnostic, Reporter, SourceLocation

StreamMark = tuple[int, int, int]


class CharacterStream:
    """
    Reads characters from a source string while tracking line and column.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Returns:
            str: The next character.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)

    def mark(self) -> StreamMark:
        """Snapshots the cursor so it can be restored with `reset`."""
        return (self.position, self.line, self.column)

    def reset(self, mark: StreamMark) -> None:
        self.position, self.line, self.column = mark

    def slice(self, start: int) -> str:
        """Returns the source text between `start` and the cursor."""
        return self.source[start : self.position]


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        kind (TokenKind): The token's category.
        text (str): The exact source text of the lexeme ("" for EOF).
        line (int): 1-based line of the lexeme's first character.
        column (int): 1-based column of the lexeme's first character.
        message (str | None): Lexer error message, set only on UNKNOWN tokens.
    """

    kind: TokenKind
    text: str
    line: int
    column: int
    message: str | None = None

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.text})"

    def describe(self) -> str:
        """Formats the token as `[KIND, 'text', line: L, col: C]` for token listings."""
        text = self.message if self.message is not None else self.text
        return f"[{self.kind}, '{text}', line: {self.line}, col: {self.column}]"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": str(self.kind),
            "text": self.text,
            "line": self.line,
            "col": self.column,
        }
        if self.message is not None:
            data["message"] = self.message
        return data


def is_identifier_start(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def is_identifier_part(ch: str) -> bool:
    return is_identifier_start(ch) or is_digit(ch)


def is_digit(ch: str) -> bool:
    return ch != "" and "0" <= ch <= "9"


class Lexer:
    """Lexical analyzer for StoryScript.

    Tokens are produced on demand by `next_token()`; `tokenize()` drains the
    whole source. Lexical errors are returned as UNKNOWN tokens and recorded
    in `diagnostics`.

    Attributes:
        stream (CharacterStream): The source being scanned.
        filename (str): Name used in SourceLocations and diagnostics.
        diagnostics (list[Diagnostic]): Lexical errors recorded so far.
    """

    def __init__(
        self,
        source: str,
        filename: str = "script.story",
        report: Reporter | None = None,
    ) -> None:
        """Initializes the Lexer over a complete source text.

        Args:
            source (str): The story source code.
            filename (str, optional): Name reported in diagnostics. Defaults to "script.story".
            report (Reporter | None, optional): Called with each lexical diagnostic.
        """
        self.stream = CharacterStream(source)
        self.filename = filename
        self.report = report
        self.diagnostics: list[Diagnostic] = []
        self._peeking = False

    def next_token(self) -> Token:
        """Consumes and returns the next Token.

        Once the end of input is reached every further call returns an EOF
        token at the same line and column.
        """
        self.skip_whitespace()

        start = self.stream.position
        line, col = self.stream.line, self.stream.column

        if self.stream.end_of_file():
            return Token(TokenKind.EOF, "", line, col)

        ch = self.stream.next()

        if is_identifier_start(ch):
            return self.identifier(start, line, col)
        if is_digit(ch):
            return self.number(start, line, col)
        if ch == '"':
            return self.string(start, line, col)

        if ch in symbol_map:
            return Token(symbol_map[ch], ch, line, col)
        if ch == "/":
            return Token(TokenKind.DIVIDE, ch, line, col)
        if ch in lookahead_operators:
            with_equals, alone = lookahead_operators[ch]
            kind = with_equals if self.match("=") else alone
            return Token(kind, self.stream.slice(start), line, col)

        return self.error_token("Unexpected character.", start, line, col)

    def peek_token(self) -> Token:
        """Returns the next Token without consuming it."""
        mark = self.stream.mark()
        recorded = len(self.diagnostics)
        self._peeking = True
        try:
            return self.next_token()
        finally:
            self._peeking = False
            self.stream.reset(mark)
            del self.diagnostics[recorded:]

    def tokenize(self) -> list[Token]:
        """Returns every remaining token, including the terminal EOF token."""
        tokens = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.kind == TokenKind.EOF:
                return tokens

    def get_current_location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.stream.line, self.stream.column)

    def error(self, message: str) -> None:
        """Records a lexical diagnostic at the current scan position."""
        self._record(Diagnostic(self.get_current_location(), message))

    def match(self, expected: str) -> bool:
        if self.stream.peek() != expected:
            return False
        self.stream.next()
        return True

    def skip_whitespace(self) -> None:
        """Skips whitespace and `//` comments."""
        while not self.stream.end_of_file():
            ch = self.stream.peek()
            if ch in WHITESPACE:
                self.stream.next()
            elif ch == "/" and self.stream.peek(1) == "/":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.stream.peek() != "\n":
            self.stream.next()

    def identifier(self, start: int, line: int, col: int) -> Token:
        while is_identifier_part(self.stream.peek()):
            self.stream.next()
        text = self.stream.slice(start)
        return Token(keyword_map.get(text, TokenKind.IDENTIFIER), text, line, col)

    def number(self, start: int, line: int, col: int) -> Token:
        while is_digit(self.stream.peek()):
            self.stream.next()
        # "3." leaves the dot for the next token
        if self.stream.peek() == "." and is_digit(self.stream.peek(1)):
            self.stream.next()
            while is_digit(self.stream.peek()):
                self.stream.next()
        return Token(TokenKind.NUMBER, self.stream.slice(start), line, col)

    def string(self, start: int, line: int, col: int) -> Token:
        while not self.stream.end_of_file() and self.stream.peek() != '"':
            self.stream.next()
        if self.stream.end_of_file():
            return self.error_token("Unterminated string.", start, line, col)
        self.stream.next()
        return Token(TokenKind.STRING, self.stream.slice(start), line, col)

    def error_token(self, message: str, start: int, line: int, col: int) -> Token:
        self._record(Diagnostic(SourceLocation(self.filename, line, col), message))
        return Token(TokenKind.UNKNOWN, self.stream.slice(start), line, col, message)

    def _record(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)
        if self.report is not None and not self._peeking:
            self.report(diagnostic)


__all__ = ["CharacterStream", "Lexer", "SourceLocation", "Token"]
