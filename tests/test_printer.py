from dataclasses import dataclass
from typing import ClassVar

import pytest

from storyscript.storyscript_ast import ASTNode, Literal, Program
from storyscript.storyscript_errors import SourceLocation
from storyscript.storyscript_lexer import Lexer
from storyscript.storyscript_parser import Parser
from storyscript.storyscript_printer import AstPrinter


def outline(source: str) -> str:
    parser = Parser(Lexer(source))
    program = parser.parse()
    assert not parser.had_error()
    return AstPrinter().print_program(program)


def test_empty_program() -> None:
    assert outline("") == "(program)"


def test_room_outline() -> None:
    source = """
    room Hall {
        title: "Hall";
        item lamp { lit: false; }
        when entered { say "Hi " + name; }
    }
    """
    assert outline(source) == "\n".join(
        [
            "(program",
            "  (room Hall",
            '    (property title "Hall")',
            "    (item lamp",
            "      (property lit false))",
            "    (when entered",
            "      (block",
            '        (say (+ "Hi " name))))))',
        ]
    )


def test_statement_outline() -> None:
    source = """
    function walk(from, to) {
        var steps;
        while (steps < 10) steps = steps + 1;
        if (to) goto(to); else { return; }
        return steps;
    }
    var x = -1.5;
    tick();
    """
    assert outline(source) == "\n".join(
        [
            "(program",
            "  (function walk (from to)",
            "    (block",
            "      (var steps)",
            "      (while (< steps 10)",
            "        (expr (= steps (+ steps 1))))",
            "      (if to",
            "        (goto to)",
            "        (else",
            "          (block",
            "            (return))))",
            "      (return steps)))",
            "  (var x (- 1.5))",
            "  (expr (call tick)))",
        ]
    )


def test_categories_print_rooms_then_functions_then_statements() -> None:
    text = outline("say 1; function f() {} room R {}")
    assert text.splitlines() == [
        "(program",
        "  (room R)",
        "  (function f ()",
        "    (block))",
        "  (say 1))",
    ]


def test_indent_width() -> None:
    program = Parser(Lexer("{ say true; }")).parse()
    text = AstPrinter(indent_width=4).print_program(program)
    assert text.splitlines()[2] == "        (say true)))"


def test_printer_is_reusable() -> None:
    printer = AstPrinter()
    program = Parser(Lexer("say 1;")).parse()
    first = printer.print_program(program)
    assert printer.print_program(program) == first


@pytest.mark.parametrize(
    "value,expected",
    [(3.0, "3"), (0.25, "0.25"), (True, "true"), (False, "false"), ("a b", '"a b"')],
)  # type: ignore[misc]
def test_literal_formatting(value: float | str | bool, expected: str) -> None:
    loc = SourceLocation("t.story", 1, 1)
    assert AstPrinter().format_expression(Literal(loc, value)) == expected


@dataclass(frozen=True)
class Mystery(ASTNode):
    kind: ClassVar[str] = "mystery"


def test_unknown_statement_kind_raises() -> None:
    program = Program(SourceLocation("t.story", 1, 1))
    program.add_statement(Mystery(SourceLocation("t.story", 4, 2)))  # type: ignore[arg-type]
    with pytest.raises(NotImplementedError, match="mystery.*line 4, col 2"):
        AstPrinter().print_program(program)


def test_unknown_expression_kind_raises() -> None:
    with pytest.raises(NotImplementedError, match="mystery"):
        AstPrinter().format_expression(Mystery(SourceLocation("t.story", 1, 1)))  # type: ignore[arg-type]
