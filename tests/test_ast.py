import dataclasses
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from storyscript.storyscript_ast import (
    Binary,
    Block,
    Call,
    ExpressionStmt,
    Item,
    Literal,
    Program,
    Room,
    Say,
    Var,
    Variable,
)
from storyscript.storyscript_constants import TokenKind
from storyscript.storyscript_errors import SourceLocation
from storyscript.storyscript_lexer import Lexer, Token
from storyscript.storyscript_parser import Parser

LOC = SourceLocation("t.story", 1, 1)


def ident(name: str, col: int = 1) -> Token:
    return Token(TokenKind.IDENTIFIER, name, 1, col)


def test_node_kinds() -> None:
    assert Literal.kind == "literal"
    assert ExpressionStmt.kind == "expression"
    assert Room.kind == "room"
    assert Program.kind == "program"


def test_nodes_compare_structurally() -> None:
    a = Binary(LOC, Literal(LOC, 1.0), Token(TokenKind.PLUS, "+", 1, 3), Literal(LOC, 2.0))
    b = Binary(LOC, Literal(LOC, 1.0), Token(TokenKind.PLUS, "+", 1, 3), Literal(LOC, 2.0))
    c = Binary(LOC, Literal(LOC, 1.0), Token(TokenKind.MINUS, "-", 1, 3), Literal(LOC, 2.0))
    assert a == b
    assert a != c
    assert Literal(LOC, "x") != Literal(SourceLocation("t.story", 2, 1), "x")


def test_nodes_are_frozen() -> None:
    node = Variable(LOC, ident("x"))
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.name = ident("y")  # type: ignore[misc]


def test_optional_fields_default_to_none() -> None:
    assert Var(LOC, ident("x")).initializer is None
    assert Call(LOC, Variable(LOC, ident("f")), Token(TokenKind.RPAREN, ")", 1, 3)).arguments == []


def test_program_add_methods_keep_source_order() -> None:
    program = Program(LOC)
    first = Room(LOC, ident("A"))
    second = Room(LOC, ident("B"))
    say = Say(LOC, Literal(LOC, "hi"))
    program.add_room(first)
    program.add_statement(say)
    program.add_room(second)
    assert program.rooms == [first, second]
    assert program.statements == [say]
    assert program.functions == []


def test_default_lists_are_not_shared() -> None:
    one, two = Program(LOC), Program(LOC)
    one.add_statement(Say(LOC, Literal(LOC, 1.0)))
    assert two.statements == []
    assert Room(LOC, ident("A")).items is not Room(LOC, ident("B")).items


def test_literal_to_dict() -> None:
    assert Literal(SourceLocation("t.story", 3, 4), 2.5).to_dict() == {
        "kind": "literal",
        "line": 3,
        "col": 4,
        "value": 2.5,
    }


def test_variable_to_dict_serializes_token() -> None:
    d = Variable(LOC, ident("lamp")).to_dict()
    assert d["name"] == {"kind": "IDENTIFIER", "text": "lamp", "line": 1, "col": 1}


def test_room_to_dict_serializes_pairs() -> None:
    body = Block(LOC, [Say(LOC, Literal(LOC, "hi"))])
    room = Room(
        LOC,
        ident("Hall"),
        properties=[("title", Literal(LOC, "Hall"))],
        items=[Item(LOC, ident("lamp"))],
        events=[("entered", body)],
    )
    d = room.to_dict()
    assert d["kind"] == "room"
    assert d["properties"][0][0] == "title"
    assert d["properties"][0][1]["value"] == "Hall"
    assert d["items"][0]["kind"] == "item"
    assert d["events"][0][0] == "entered"
    assert d["events"][0][1]["statements"][0]["kind"] == "say"


def test_parsed_program_to_dict_is_json_serializable(adventure_source: str) -> None:
    program = Parser(Lexer(adventure_source)).parse()
    d = program.to_dict()
    text = json.dumps(d)
    assert json.loads(text)["kind"] == "program"
    assert [r["name"]["text"] for r in d["rooms"]] == ["Hall", "Cellar"]
    assert d["functions"][0]["params"][1]["text"] == "loud"


@given(st.text(), st.integers(min_value=1), st.integers(min_value=1))  # type: ignore[misc]
def test_literal_to_dict_keeps_position(value: str, line: int, col: int) -> None:
    d = Literal(SourceLocation("t.story", line, col), value).to_dict()
    assert (d["line"], d["col"], d["value"]) == (line, col, value)
