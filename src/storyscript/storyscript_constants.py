"""
Token vocabulary shared by the StoryScript lexer and parser.

Exports:
    - TokenKind: closed enumeration of every lexical category.
    - keyword_map: reserved word → TokenKind (case-sensitive).
    - symbol_map: single-character symbol → TokenKind.
    - lookahead_operators: first character → (kind when followed by '=', kind otherwise).
    - sync_kinds: token kinds the parser may resume at after an error.
    - WHITESPACE: characters skipped between tokens (newline handled by the stream).
"""

from enum import Enum


class TokenKind(str, Enum):
    """Every lexical category a StoryScript token can have."""

    # Keywords
    ROOM = "ROOM"
    ITEM = "ITEM"
    VAR = "VAR"
    FUNCTION = "FUNCTION"
    IF = "IF"
    ELSE = "ELSE"
    WHILE = "WHILE"
    FOR = "FOR"
    RETURN = "RETURN"
    WHEN = "WHEN"
    ENTERED = "ENTERED"
    SAY = "SAY"
    GOTO = "GOTO"
    TRUE = "TRUE"
    FALSE = "FALSE"
    NOT = "NOT"
    AND = "AND"
    OR = "OR"

    # Names and values
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Operators
    PLUS = "PLUS"
    MINUS = "MINUS"
    MULTIPLY = "MULTIPLY"
    DIVIDE = "DIVIDE"
    MODULO = "MODULO"
    ASSIGN = "ASSIGN"
    EQ = "EQ"
    NEQ = "NEQ"
    LT = "LT"
    GT = "GT"
    LTE = "LTE"
    GTE = "GTE"

    # Structure symbols
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    COLON = "COLON"
    COMMA = "COMMA"
    SEMICOLON = "SEMICOLON"
    DOT = "DOT"

    # Special
    EOF = "EOF_TOKEN"
    UNKNOWN = "UNKNOWN"
    COMMENT = "COMMENT"

    def __str__(self) -> str:
        return self.value


keyword_map: dict[str, TokenKind] = {
    "room": TokenKind.ROOM,
    "item": TokenKind.ITEM,
    "var": TokenKind.VAR,
    "function": TokenKind.FUNCTION,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "while": TokenKind.WHILE,
    "for": TokenKind.FOR,
    "return": TokenKind.RETURN,
    "when": TokenKind.WHEN,
    "entered": TokenKind.ENTERED,
    "say": TokenKind.SAY,
    "goto": TokenKind.GOTO,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "not": TokenKind.NOT,
    "and": TokenKind.AND,
    "or": TokenKind.OR,
}

symbol_map: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    ".": TokenKind.DOT,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.MULTIPLY,
    "%": TokenKind.MODULO,
}

# '/' is absent on purpose: the lexer must first rule out a '//' comment.
lookahead_operators: dict[str, tuple[TokenKind, TokenKind]] = {
    "=": (TokenKind.EQ, TokenKind.ASSIGN),
    "!": (TokenKind.NEQ, TokenKind.NOT),
    "<": (TokenKind.LTE, TokenKind.LT),
    ">": (TokenKind.GTE, TokenKind.GT),
}

sync_kinds: frozenset[TokenKind] = frozenset(
    {
        TokenKind.ROOM,
        TokenKind.ITEM,
        TokenKind.FUNCTION,
        TokenKind.VAR,
        TokenKind.IF,
        TokenKind.WHILE,
        TokenKind.RETURN,
        TokenKind.SAY,
        TokenKind.GOTO,
    }
)

WHITESPACE = " \t\r\n"

__all__ = [
    "TokenKind",
    "WHITESPACE",
    "keyword_map",
    "lookahead_operators",
    "symbol_map",
    "sync_kinds",
]
