"""
StoryScript Language Parser

Parses StoryScript tokens into a `Program` abstract syntax tree.

The parser pulls tokens from a `Lexer` one at a time, keeping only the current
token (lookahead) and the previous one (lookback). Declarations and statements
are parsed by recursive descent; expressions use one method per precedence tier.

Supported Constructs
--------------------
- Story declarations:
    * `room Hall { description: "..."; item lamp { lit: false; } when entered { ... } }`
    * `item` blocks of `name: expression;` properties
- Functions: `function greet(who, times) { ... }`
- Statements:
    * `var x = 1;`, `{ ... }`, `if (c) stmt else stmt`, `while (c) stmt`
    * `return [expr];`, `say expr;`, `goto (expr);`, `expr;`
- Expressions, lowest to highest precedence:
    * `=` (right-associative, target must be a variable)
    * `or`, `and`, `== !=`, `< > <= >=`, `+ -`, `* / %`
    * prefix `-`, `!`/`not`
    * calls `f(a, b)` and property access `a.b`
    * literals, identifiers, parenthesized expressions

Error Handling
--------------
Errors never escape `parse()`. Each one is recorded as a `Diagnostic` (and
passed to the optional `report` hook); a failed `consume` returns the
mismatched token so the caller can still build a best-effort node. Only a
missing expression, or nesting deeper than `Parser.max_depth`, unwinds via
`ParseError` to the top-level loop, which then calls `synchronize()` to skip
to the next statement boundary or declaration keyword. Check `had_error()`
before trusting the returned tree.

Entry Points
------------
- `parse()`: Parse a full program.
- `parse_statement()`: Parse a single statement.
- `parse_expression()`: Parse a single expression.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from storyscript.storyscript_ast import (
    Binary,
    Block,
    Call,
    Expression,
    ExpressionStmt,
    Function,
    Goto,
    If,
    Item,
    Literal,
    Program,
    Return,
    Room,
    Say,
    Statement,
    Unary,
    Var,
    Variable,
    While,
)
from storyscript.storyscript_constants import TokenKind, sync_kinds
from storyscript.storyscript_errors import (
    Diagnostic,
    ParseError,
    Reporter,
    SourceLocation,
)
from storyscript.storyscript_lexer import Lexer, Token


class Parser:
    """
    StoryScript Parser Class

    Builds a `Program` from the tokens of a single `Lexer`. A lexer must not
    be shared between parsers; to re-parse a source, construct a new lexer.

    Attributes
    ----------
    lexer : Lexer
        The token source.
    current : Token
        The next token to be consumed.
    previous : Token
        The most recently consumed token.
    diagnostics : list[Diagnostic]
        Every syntax error recorded so far, in detection order.
    report : Reporter | None
        Optional hook called with each diagnostic as it is recorded.
    depth : int
        Current statement/expression nesting, bounded by `max_depth`.
    equality_ops, comparison_ops, term_ops, factor_ops, unary_ops : frozenset[TokenKind]
        Operator kinds accepted at each binary/unary precedence tier.

    Methods
    -------
    parse() -> Program
        Parse a complete program, recovering from errors.
    had_error() -> bool
        Whether any error was recorded.
    parse_statement() -> Statement
        Parse a single statement.
    parse_expression() -> Expression
        Parse a single expression.
    """

    # Each expression level costs about a dozen interpreter frames.
    max_depth = 50

    def __init__(self, lexer: Lexer, report: Reporter | None = None) -> None:
        self.lexer = lexer
        self.report = report
        self.diagnostics: list[Diagnostic] = []
        self.depth = 0

        self.equality_ops = frozenset({TokenKind.EQ, TokenKind.NEQ})
        self.comparison_ops = frozenset(
            {TokenKind.GT, TokenKind.GTE, TokenKind.LT, TokenKind.LTE}
        )
        self.term_ops = frozenset({TokenKind.PLUS, TokenKind.MINUS})
        self.factor_ops = frozenset(
            {TokenKind.MULTIPLY, TokenKind.DIVIDE, TokenKind.MODULO}
        )
        self.unary_ops = frozenset({TokenKind.MINUS, TokenKind.NOT})

        self.current: Token = Token(TokenKind.EOF, "", 1, 1)
        self.previous: Token = self.current
        self.advance()

    # Token stream

    def advance(self) -> Token:
        self.previous = self.current
        self.current = self.lexer.next_token()
        return self.previous

    def check(self, kind: TokenKind) -> bool:
        return self.current.kind == kind

    def match(self, *kinds: TokenKind) -> bool:
        if self.current.kind in kinds:
            self.advance()
            return True
        return False

    def consume(self, kinds: TokenKind | Iterable[TokenKind], message: str) -> Token:
        """Consume the current token if it has an expected kind, else record `message`.

        On a mismatch the current token is returned without being consumed,
        so the caller can keep building a (possibly bogus) node.
        """
        expected = {kinds} if isinstance(kinds, TokenKind) else set(kinds)
        if self.current.kind in expected:
            return self.advance()
        self.error(message)
        return self.current

    # Errors

    def error(self, message: str, token: Token | None = None) -> Diagnostic:
        """Record a syntax error at `token` (defaults to the current token)."""
        diagnostic = Diagnostic(self.location_of(token or self.current), message)
        self.diagnostics.append(diagnostic)
        if self.report is not None:
            self.report(diagnostic)
        return diagnostic

    def had_error(self) -> bool:
        return bool(self.diagnostics)

    def synchronize(self) -> None:
        """Skip tokens until a statement boundary or a declaration keyword."""
        self.advance()
        while not self.check(TokenKind.EOF):
            if self.previous.kind == TokenKind.SEMICOLON:
                return
            if self.current.kind in sync_kinds:
                return
            self.advance()

    def location_of(self, token: Token) -> SourceLocation:
        return SourceLocation(self.lexer.filename, token.line, token.column)

    @contextmanager
    def nested(self, what: str) -> Iterator[None]:
        """Track recursion depth; past `max_depth` record an error and unwind."""
        self.depth += 1
        try:
            if self.depth > self.max_depth:
                raise ParseError(self.error(f"{what} nesting too deep."))
            yield
        finally:
            self.depth -= 1

    # Declarations

    def parse(self) -> Program:
        """Parse a full StoryScript program and return its root node."""
        program = Program(self.location_of(self.current))
        while not self.check(TokenKind.EOF):
            try:
                if self.match(TokenKind.ROOM):
                    program.add_room(self.parse_room())
                elif self.match(TokenKind.FUNCTION):
                    program.add_function(self.parse_function())
                else:
                    program.add_statement(self.parse_statement())
            except ParseError:
                self.synchronize()
        return program

    def parse_room(self) -> Room:
        keyword = self.previous
        name = self.consume(TokenKind.IDENTIFIER, "Expected room name.")
        self.consume(TokenKind.LBRACE, "Expected '{' after room name.")

        room = Room(self.location_of(keyword), name)
        while not self.check(TokenKind.RBRACE) and not self.check(TokenKind.EOF):
            if self.match(TokenKind.ITEM):
                room.items.append(self.parse_item())
            elif self.match(TokenKind.WHEN):
                event = self.consume(
                    (TokenKind.IDENTIFIER, TokenKind.ENTERED),
                    "Expected event type after 'when'.",
                )
                self.consume(TokenKind.LBRACE, "Expected '{' after event type.")
                room.events.append((event.text, self.parse_block()))
            else:
                room.properties.append(self.parse_property())

        self.consume(TokenKind.RBRACE, "Expected '}' after room body.")
        return room

    def parse_item(self) -> Item:
        keyword = self.previous
        name = self.consume(TokenKind.IDENTIFIER, "Expected item name.")
        self.consume(TokenKind.LBRACE, "Expected '{' after item name.")

        item = Item(self.location_of(keyword), name)
        while not self.check(TokenKind.RBRACE) and not self.check(TokenKind.EOF):
            item.properties.append(self.parse_property())

        self.consume(TokenKind.RBRACE, "Expected '}' after item body.")
        return item

    def parse_property(self) -> tuple[str, Expression]:
        name = self.consume(TokenKind.IDENTIFIER, "Expected property name.")
        self.consume(TokenKind.COLON, "Expected ':' after property name.")
        value = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "Expected ';' after property value.")
        return (name.text, value)

    def parse_function(self) -> Function:
        keyword = self.previous
        name = self.consume(TokenKind.IDENTIFIER, "Expected function name.")
        self.consume(TokenKind.LPAREN, "Expected '(' after function name.")

        params: list[Token] = []
        if not self.check(TokenKind.RPAREN):
            params.append(
                self.consume(TokenKind.IDENTIFIER, "Expected parameter name.")
            )
            while self.match(TokenKind.COMMA):
                params.append(
                    self.consume(TokenKind.IDENTIFIER, "Expected parameter name.")
                )

        self.consume(TokenKind.RPAREN, "Expected ')' after parameters.")
        self.consume(TokenKind.LBRACE, "Expected '{' before function body.")
        body = self.parse_block()
        return Function(self.location_of(keyword), name, params, body)

    # Statements

    def parse_statement(self) -> Statement:
        """Parse one statement; anything without a leading keyword is an expression statement."""
        with self.nested("Statement"):
            return self._parse_statement()

    def _parse_statement(self) -> Statement:
        if self.match(TokenKind.IF):
            return self.parse_if_statement()
        if self.match(TokenKind.WHILE):
            return self.parse_while_statement()
        if self.match(TokenKind.VAR):
            return self.parse_var_declaration()
        if self.match(TokenKind.LBRACE):
            return self.parse_block()
        if self.match(TokenKind.RETURN):
            return self.parse_return_statement()
        if self.match(TokenKind.SAY):
            return self.parse_say_statement()
        if self.match(TokenKind.GOTO):
            return self.parse_goto_statement()
        return self.parse_expression_statement()

    def parse_var_declaration(self) -> Var:
        keyword = self.previous
        name = self.consume(TokenKind.IDENTIFIER, "Expected variable name.")
        initializer = None
        if self.match(TokenKind.ASSIGN):
            initializer = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "Expected ';' after variable declaration.")
        return Var(self.location_of(keyword), name, initializer)

    def parse_block(self) -> Block:
        """Parse statements up to and including the closing '}'.

        The opening '{' must already have been consumed.
        """
        brace = self.previous
        statements: list[Statement] = []
        while not self.check(TokenKind.RBRACE) and not self.check(TokenKind.EOF):
            statements.append(self.parse_statement())
        self.consume(TokenKind.RBRACE, "Expected '}' after block.")
        return Block(self.location_of(brace), statements)

    def parse_if_statement(self) -> If:
        keyword = self.previous
        self.consume(TokenKind.LPAREN, "Expected '(' after 'if'.")
        condition = self.parse_expression()
        self.consume(TokenKind.RPAREN, "Expected ')' after if condition.")
        then_branch = self.parse_statement()
        else_branch = None
        if self.match(TokenKind.ELSE):
            else_branch = self.parse_statement()
        return If(self.location_of(keyword), condition, then_branch, else_branch)

    def parse_while_statement(self) -> While:
        keyword = self.previous
        self.consume(TokenKind.LPAREN, "Expected '(' after 'while'.")
        condition = self.parse_expression()
        self.consume(TokenKind.RPAREN, "Expected ')' after while condition.")
        body = self.parse_statement()
        return While(self.location_of(keyword), condition, body)

    def parse_return_statement(self) -> Return:
        keyword = self.previous
        value = None
        if not self.check(TokenKind.SEMICOLON):
            value = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "Expected ';' after return value.")
        return Return(self.location_of(keyword), keyword, value)

    def parse_say_statement(self) -> Say:
        keyword = self.previous
        message = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "Expected ';' after message.")
        return Say(self.location_of(keyword), message)

    def parse_goto_statement(self) -> Goto:
        keyword = self.previous
        self.consume(TokenKind.LPAREN, "Expected '(' after 'goto'.")
        destination = self.parse_expression()
        self.consume(TokenKind.RPAREN, "Expected ')' after goto destination.")
        self.consume(TokenKind.SEMICOLON, "Expected ';' after goto statement.")
        return Goto(self.location_of(keyword), destination)

    def parse_expression_statement(self) -> ExpressionStmt:
        expr = self.parse_expression()
        self.consume(TokenKind.SEMICOLON, "Expected ';' after expression.")
        return ExpressionStmt(expr.location, expr)

    # Expressions

    def parse_expression(self) -> Expression:
        with self.nested("Expression"):
            return self.parse_assignment()

    def parse_assignment(self) -> Expression:
        expr = self.parse_logical_or()
        if self.match(TokenKind.ASSIGN):
            equals = self.previous
            value = self.parse_assignment()
            if isinstance(expr, Variable):
                return Binary(expr.location, expr, equals, value)
            self.error("Invalid assignment target.", equals)
        return expr

    def parse_logical_or(self) -> Expression:
        expr = self.parse_logical_and()
        while self.match(TokenKind.OR):
            operator = self.previous
            right = self.parse_logical_and()
            expr = Binary(expr.location, expr, operator, right)
        return expr

    def parse_logical_and(self) -> Expression:
        expr = self.parse_equality()
        while self.match(TokenKind.AND):
            operator = self.previous
            right = self.parse_equality()
            expr = Binary(expr.location, expr, operator, right)
        return expr

    def parse_equality(self) -> Expression:
        expr = self.parse_comparison()
        while self.match(*self.equality_ops):
            operator = self.previous
            right = self.parse_comparison()
            expr = Binary(expr.location, expr, operator, right)
        return expr

    def parse_comparison(self) -> Expression:
        expr = self.parse_term()
        while self.match(*self.comparison_ops):
            operator = self.previous
            right = self.parse_term()
            expr = Binary(expr.location, expr, operator, right)
        return expr

    def parse_term(self) -> Expression:
        expr = self.parse_factor()
        while self.match(*self.term_ops):
            operator = self.previous
            right = self.parse_factor()
            expr = Binary(expr.location, expr, operator, right)
        return expr

    def parse_factor(self) -> Expression:
        expr = self.parse_unary()
        while self.match(*self.factor_ops):
            operator = self.previous
            right = self.parse_unary()
            expr = Binary(expr.location, expr, operator, right)
        return expr

    def parse_unary(self) -> Expression:
        if self.match(*self.unary_ops):
            operator = self.previous
            with self.nested("Expression"):
                operand = self.parse_unary()
            return Unary(self.location_of(operator), operator, operand)
        return self.parse_call()

    def parse_call(self) -> Expression:
        expr = self.parse_primary()
        while True:
            if self.match(TokenKind.LPAREN):
                expr = self.finish_call(expr)
            elif self.match(TokenKind.DOT):
                name = self.consume(
                    TokenKind.IDENTIFIER, "Expected property name after '.'."
                )
                # The object expression is not kept: `a.b` reads as `b`.
                expr = Variable(self.location_of(name), name)
            else:
                return expr

    def finish_call(self, callee: Expression) -> Call:
        arguments: list[Expression] = []
        if not self.check(TokenKind.RPAREN):
            arguments.append(self.parse_expression())
            while self.match(TokenKind.COMMA):
                arguments.append(self.parse_expression())
        paren = self.consume(TokenKind.RPAREN, "Expected ')' after arguments.")
        return Call(callee.location, callee, paren, arguments)

    def parse_primary(self) -> Expression:
        tok = self.current
        location = self.location_of(tok)

        if self.match(TokenKind.FALSE):
            return Literal(location, False)
        if self.match(TokenKind.TRUE):
            return Literal(location, True)
        if self.match(TokenKind.NUMBER):
            return Literal(location, float(tok.text))
        if self.match(TokenKind.STRING):
            return Literal(location, tok.text[1:-1])
        if self.match(TokenKind.IDENTIFIER):
            return Variable(location, tok)
        if self.match(TokenKind.LPAREN):
            expr = self.parse_expression()
            self.consume(TokenKind.RPAREN, "Expected ')' after expression.")
            return expr

        raise ParseError(self.error("Expected expression."))


__all__ = ["Parser"]
