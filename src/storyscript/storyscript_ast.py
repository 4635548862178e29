"""
Defines the abstract syntax tree (AST) produced by the StoryScript parser.

Node families:
    Expressions:
        Literal, Variable, Binary, Unary, Call
    Statements:
        ExpressionStmt, Var, Block, If, While, Function, Return, Say, Goto
    Story declarations:
        Room, Item
    Root:
        Program

Every node is a dataclass carrying a `location` (SourceLocation) and a
class-level `kind` tag used for dispatch by the printer and for serialization.
Nodes own their children exclusively; tokens embedded in nodes are immutable
values. Assignment is represented as a `Binary` whose operator is `=`.

Usage:
    program.to_dict() returns a JSON-ready dict of the whole tree:

    {"kind": "program", "line": 1, "col": 1, "rooms": [...], ...}
"""

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Union

from storyscript.storyscript_errors import SourceLocation
from storyscript.storyscript_lexer import Token

LiteralValue = Union[float, str, bool]


def _serialize(value: Any) -> Any:
    if isinstance(value, (ASTNode, Token)):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True)
class ASTNode:
    """Base for every StoryScript syntax node.

    Attributes:
        location (SourceLocation): Where the construct starts in the source.
        kind (str): Class-level tag naming the node type (e.g. "binary", "room").
    """

    kind: ClassVar[str] = "node"

    location: SourceLocation

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "kind": self.kind,
            "line": self.location.line,
            "col": self.location.column,
        }
        for f in fields(self):
            if f.name != "location":
                data[f.name] = _serialize(getattr(self, f.name))
        return data


# Expressions


@dataclass(frozen=True)
class Literal(ASTNode):
    kind: ClassVar[str] = "literal"

    value: LiteralValue


@dataclass(frozen=True)
class Variable(ASTNode):
    kind: ClassVar[str] = "variable"

    name: Token


@dataclass(frozen=True)
class Binary(ASTNode):
    kind: ClassVar[str] = "binary"

    left: "Expression"
    operator: Token
    right: "Expression"


@dataclass(frozen=True)
class Unary(ASTNode):
    kind: ClassVar[str] = "unary"

    operator: Token
    operand: "Expression"


@dataclass(frozen=True)
class Call(ASTNode):
    """A call `callee(arg, ...)`; `paren` is the closing parenthesis token."""

    kind: ClassVar[str] = "call"

    callee: "Expression"
    paren: Token
    arguments: list["Expression"] = field(default_factory=list)


Expression = Union[Literal, Variable, Binary, Unary, Call]


# Statements


@dataclass(frozen=True)
class ExpressionStmt(ASTNode):
    kind: ClassVar[str] = "expression"

    expression: Expression


@dataclass(frozen=True)
class Var(ASTNode):
    kind: ClassVar[str] = "var"

    name: Token
    initializer: Expression | None = None


@dataclass(frozen=True)
class Block(ASTNode):
    kind: ClassVar[str] = "block"

    statements: list["Statement"] = field(default_factory=list)


@dataclass(frozen=True)
class If(ASTNode):
    kind: ClassVar[str] = "if"

    condition: Expression
    then_branch: "Statement"
    else_branch: "Statement | None" = None


@dataclass(frozen=True)
class While(ASTNode):
    kind: ClassVar[str] = "while"

    condition: Expression
    body: "Statement"


@dataclass(frozen=True)
class Function(ASTNode):
    kind: ClassVar[str] = "function"

    name: Token
    params: list[Token]
    body: Block


@dataclass(frozen=True)
class Return(ASTNode):
    kind: ClassVar[str] = "return"

    keyword: Token
    value: Expression | None = None


@dataclass(frozen=True)
class Say(ASTNode):
    kind: ClassVar[str] = "say"

    message: Expression


@dataclass(frozen=True)
class Goto(ASTNode):
    kind: ClassVar[str] = "goto"

    destination: Expression


Statement = Union[ExpressionStmt, Var, Block, If, While, Function, Return, Say, Goto]


# Story declarations


@dataclass(frozen=True)
class Item(ASTNode):
    """An `item name { prop: expr; ... }` declaration."""

    kind: ClassVar[str] = "item"

    name: Token
    properties: list[tuple[str, Expression]] = field(default_factory=list)


@dataclass(frozen=True)
class Room(ASTNode):
    """A `room` declaration with its properties, nested items and `when` event handlers.

    Attributes:
        name (Token): The room's identifier.
        properties (list[tuple[str, Expression]]): `name: value;` pairs in source order.
        items (list[Item]): Items declared inside the room.
        events (list[tuple[str, Block]]): `when <event> { ... }` handlers, e.g. ("entered", Block).
    """

    kind: ClassVar[str] = "room"

    name: Token
    properties: list[tuple[str, Expression]] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    events: list[tuple[str, Block]] = field(default_factory=list)


@dataclass(frozen=True)
class Program(ASTNode):
    """Root of a parsed story.

    Rooms, functions and remaining top-level statements are each kept in
    their own list, in source order; relative order across the three lists
    is not recorded.
    """

    kind: ClassVar[str] = "program"

    rooms: list[Room] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)
    statements: list[Statement] = field(default_factory=list)

    def add_room(self, room: Room) -> None:
        self.rooms.append(room)

    def add_function(self, function: Function) -> None:
        self.functions.append(function)

    def add_statement(self, statement: Statement) -> None:
        self.statements.append(statement)


__all__ = [
    "ASTNode",
    "Binary",
    "Block",
    "Call",
    "Expression",
    "ExpressionStmt",
    "Function",
    "Goto",
    "If",
    "Item",
    "Literal",
    "LiteralValue",
    "Program",
    "Return",
    "Room",
    "Say",
    "Statement",
    "Unary",
    "Var",
    "Variable",
    "While",
]
