"""
Renders StoryScript ASTs as indented s-expression outlines.

This module defines `AstPrinter`, used by the command-line driver (`--ast`) and
by tests to inspect parse results. Declarations and statements are printed one
per line with nested indentation; expressions are printed inline in prefix
form.

Example:
    room Hall { title: "Hall"; when entered { say "Hi " + name; } }

prints as

    (program
      (room Hall
        (property title "Hall")
        (when entered
          (block
            (say (+ "Hi " name))))))

Raises:
    - `NotImplementedError`: If a node kind has no corresponding emit/expr method.
"""

from storyscript.storyscript_ast import (
    ASTNode,
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
    Unary,
    Var,
    Variable,
    While,
)


class AstPrinter:
    """Emits an outline of a StoryScript AST.

    Attributes:
        lines (list[str]): Accumulated output lines.
        indent (int): Current nesting depth.
        indent_width (int): Spaces per nesting level.

    Methods:
        print_program(program): Returns the outline of a whole program.
        format_expression(expr): Returns the single-line form of an expression.
        get_output(): Returns the lines emitted so far.
    """

    def __init__(self, indent_width: int = 2) -> None:
        self.lines: list[str] = []
        self.indent = 0
        self.indent_width = indent_width

    def indent_str(self) -> str:
        return " " * (self.indent * self.indent_width)

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def print_program(self, program: Program) -> str:
        self.lines = []
        self.indent = 0
        self._visit(program)
        return self.get_output()

    def _open(self, header: str) -> None:
        self.lines.append(f"{self.indent_str()}({header}")
        self.indent += 1

    def _close(self) -> None:
        self.indent -= 1
        self.lines[-1] += ")"

    def _leaf(self, text: str) -> None:
        self.lines.append(f"{self.indent_str()}({text})")

    def _visit(self, node: ASTNode) -> None:
        """Dispatches a declaration or statement node to its `emit_<kind>` method.

        Raises:
            NotImplementedError: If no emitter is defined for the node kind.
        """
        method = getattr(self, f"emit_{node.kind}", None)
        if method is None:
            raise NotImplementedError(
                f"No emitter method for node kind '{node.kind}' "
                f"(line {node.location.line}, col {node.location.column})"
            )
        method(node)

    # Declarations

    def emit_program(self, node: Program) -> None:
        self._open("program")
        for room in node.rooms:
            self._visit(room)
        for function in node.functions:
            self._visit(function)
        for statement in node.statements:
            self._visit(statement)
        self._close()

    def emit_room(self, node: Room) -> None:
        self._open(f"room {node.name.text}")
        for name, value in node.properties:
            self._leaf(f"property {name} {self.format_expression(value)}")
        for item in node.items:
            self._visit(item)
        for event, body in node.events:
            self._open(f"when {event}")
            self._visit(body)
            self._close()
        self._close()

    def emit_item(self, node: Item) -> None:
        self._open(f"item {node.name.text}")
        for name, value in node.properties:
            self._leaf(f"property {name} {self.format_expression(value)}")
        self._close()

    def emit_function(self, node: Function) -> None:
        params = " ".join(p.text for p in node.params)
        self._open(f"function {node.name.text} ({params})")
        self._visit(node.body)
        self._close()

    # Statements

    def emit_block(self, node: Block) -> None:
        self._open("block")
        for statement in node.statements:
            self._visit(statement)
        self._close()

    def emit_expression(self, node: ExpressionStmt) -> None:
        self._leaf(f"expr {self.format_expression(node.expression)}")

    def emit_var(self, node: Var) -> None:
        if node.initializer is None:
            self._leaf(f"var {node.name.text}")
        else:
            self._leaf(f"var {node.name.text} {self.format_expression(node.initializer)}")

    def emit_if(self, node: If) -> None:
        self._open(f"if {self.format_expression(node.condition)}")
        self._visit(node.then_branch)
        if node.else_branch is not None:
            self._open("else")
            self._visit(node.else_branch)
            self._close()
        self._close()

    def emit_while(self, node: While) -> None:
        self._open(f"while {self.format_expression(node.condition)}")
        self._visit(node.body)
        self._close()

    def emit_return(self, node: Return) -> None:
        if node.value is None:
            self._leaf("return")
        else:
            self._leaf(f"return {self.format_expression(node.value)}")

    def emit_say(self, node: Say) -> None:
        self._leaf(f"say {self.format_expression(node.message)}")

    def emit_goto(self, node: Goto) -> None:
        self._leaf(f"goto {self.format_expression(node.destination)}")

    # Expressions

    def format_expression(self, node: Expression) -> str:
        """Returns the prefix form of an expression, e.g. `(+ 1 (* 2 3))`.

        Raises:
            NotImplementedError: If no formatter exists for the node kind.
        """
        method = getattr(self, f"expr_{node.kind}", None)
        if method is None:
            raise NotImplementedError(f"No expression emitter for kind '{node.kind}'")
        return str(method(node))

    def expr_literal(self, node: Literal) -> str:
        value = node.value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            return str(int(value)) if value.is_integer() else repr(value)
        return f'"{value}"'

    def expr_variable(self, node: Variable) -> str:
        return node.name.text

    def expr_binary(self, node: Binary) -> str:
        left = self.format_expression(node.left)
        right = self.format_expression(node.right)
        return f"({node.operator.text} {left} {right})"

    def expr_unary(self, node: Unary) -> str:
        return f"({node.operator.text} {self.format_expression(node.operand)})"

    def expr_call(self, node: Call) -> str:
        parts = [self.format_expression(node.callee)]
        parts.extend(self.format_expression(arg) for arg in node.arguments)
        return f"(call {' '.join(parts)})"


__all__ = ["AstPrinter"]
