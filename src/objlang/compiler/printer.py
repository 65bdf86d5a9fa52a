"""
objlang Printer.

Renders trees and lifted definitions as text. Two renderings are provided:

- source form (``format_*``), which re-parses to a structurally equal tree:
      {foo(n): n.add(2, 3), baz: 7}.baz
- structural form (``dump_*``), which spells out node kinds:
      Access(Object{foo(n): Call(Ident(n), "add", [Int(2), Int(3)]), baz: Int(7)}, "baz")

Usage:
    objlang fmt input.obj
"""

from __future__ import annotations

from typing import Optional

from objlang.compiler.ast_nodes import (
    ASTVisitor,
    Expression,
    Field,
    Identifier,
    IntegerLiteral,
    MemberAccess,
    MethodCall,
    MethodDefinition,
    ObjectDefinition,
    ObjectLiteral,
)
from objlang.compiler.lexer import tokenize
from objlang.compiler.lifter import LiftResult
from objlang.compiler.parser import DEFAULT_MAX_DEPTH, Parser
from objlang.utils.errors import ParserError

# Receiver parameter shown in front of every lifted method's parameters
RECEIVER_NAME = "self"


class SourcePrinter(ASTVisitor):
    """Renders expressions and definitions in concrete syntax."""

    def visit_identifier(self, node: Identifier) -> str:
        return node.name

    def visit_integer_literal(self, node: IntegerLiteral) -> str:
        return str(node.value)

    def visit_member_access(self, node: MemberAccess) -> str:
        return f"{self.visit(node.owner)}.{node.member}"

    def visit_method_call(self, node: MethodCall) -> str:
        args = ", ".join(self.visit(a) for a in node.arguments)
        return f"{self.visit(node.owner)}.{node.method}({args})"

    def visit_object_literal(self, node: ObjectLiteral) -> str:
        return "{" + ", ".join(self._format_field(f) for f in node.fields) + "}"

    def visit_object_definition(self, node: ObjectDefinition) -> str:
        fields = ", ".join(self._format_field(f) for f in node.fields)
        return f"{node.name} = {{{fields}}}"

    def visit_method_definition(self, node: MethodDefinition) -> str:
        params = ", ".join((RECEIVER_NAME,) + node.parameters)
        return f"{node.name}({params}) = {self.visit(node.body)}"

    def _format_field(self, f: Field) -> str:
        header = f.name
        if f.is_method:
            header += "(" + ", ".join(f.parameters) + ")"
        return f"{header}: {self.visit(f.definition)}"


class StructurePrinter(ASTVisitor):
    """Renders expressions and definitions with explicit node kinds."""

    def visit_identifier(self, node: Identifier) -> str:
        return f"Ident({node.name})"

    def visit_integer_literal(self, node: IntegerLiteral) -> str:
        return f"Int({node.value})"

    def visit_member_access(self, node: MemberAccess) -> str:
        return f'Access({self.visit(node.owner)}, "{node.member}")'

    def visit_method_call(self, node: MethodCall) -> str:
        args = ", ".join(self.visit(a) for a in node.arguments)
        return f'Call({self.visit(node.owner)}, "{node.method}", [{args}])'

    def visit_object_literal(self, node: ObjectLiteral) -> str:
        return "Object{" + ", ".join(self._dump_field(f) for f in node.fields) + "}"

    def visit_object_definition(self, node: ObjectDefinition) -> str:
        return node.name + "{" + ", ".join(self._dump_field(f) for f in node.fields) + "}"

    def visit_method_definition(self, node: MethodDefinition) -> str:
        params = ", ".join(node.parameters)
        return f"{node.name}({params}) = {self.visit(node.body)}"

    def _dump_field(self, f: Field) -> str:
        header = f.name
        if f.is_method:
            header += "(" + ", ".join(f.parameters) + ")"
        return f"{header}: {self.visit(f.definition)}"


_source_printer = SourcePrinter()
_structure_printer = StructurePrinter()


def format_expression(expr: Expression) -> str:
    """Render an expression in concrete syntax."""
    return _source_printer.visit(expr)


def format_object_definition(definition: ObjectDefinition) -> str:
    return _source_printer.visit(definition)


def format_method_definition(definition: MethodDefinition) -> str:
    return _source_printer.visit(definition)


def format_lift_result(result: LiftResult) -> str:
    """Render lifted objects, then methods, then the residual expression."""
    lines = [format_object_definition(o) for o in result.objects]
    lines.extend(format_method_definition(m) for m in result.methods)
    lines.append(format_expression(result.residual))
    return "\n".join(lines)


def dump_expression(expr: Expression) -> str:
    """Render an expression with explicit node kinds."""
    return _structure_printer.visit(expr)


def dump_lift_result(result: LiftResult) -> str:
    lines = [_structure_printer.visit(o) for o in result.objects]
    lines.extend(_structure_printer.visit(m) for m in result.methods)
    lines.append(dump_expression(result.residual))
    return "\n".join(lines)


def format_source(
    source: str,
    filename: str = "<input>",
    max_depth: Optional[int] = None,
) -> str:
    """
    Re-print objlang source in canonical form.

    Args:
        source: The source text
        filename: Filename for error reporting
        max_depth: Nesting limit handed to the parser

    Returns:
        The canonical text followed by a newline

    Raises:
        ParserError: If the source does not parse
    """
    tokens = tokenize(source, filename)
    parser = Parser(
        tokens,
        source=source,
        filename=filename,
        max_depth=max_depth if max_depth is not None else DEFAULT_MAX_DEPTH,
    )
    return format_expression(parser.parse()) + "\n"


def check_format(source: str) -> bool:
    """
    Check if source code is already in canonical form.

    Returns:
        True if formatting would not change the source. Unparseable source
        is reported as not formatted.
    """
    try:
        return format_source(source) == source
    except ParserError:
        return False
