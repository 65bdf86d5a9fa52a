"""
Abstract Syntax Tree (AST) node definitions for objlang.

The expression language is a closed set of five node kinds: identifiers,
integer literals, field access, method calls and object literals. Lifted
output adds two definition kinds. Every node is immutable; source locations
are carried for diagnostics but do not take part in structural equality.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from objlang.utils.errors import SourceLocation


class ASTNode(ABC):
    """Base class for all AST nodes."""

    location: Optional[SourceLocation]

    @abstractmethod
    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor for tree traversal."""
        pass


class ASTVisitor(ABC):
    """
    Visitor pattern base class for AST traversal.

    Implement this to create custom tree processors (the lifter, the
    printer, symbol collectors, ...).
    """

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to the appropriate visit method."""
        return node.accept(self)


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------


class Expression(ASTNode):
    """Base class for all expressions."""

    pass


@dataclass(frozen=True, slots=True)
class Identifier(Expression):
    """
    An identifier expression.

    Example:
        bar, n, _tmp
    """

    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_identifier(self)


@dataclass(frozen=True, slots=True)
class IntegerLiteral(Expression):
    """An integer literal, already saturated to the signed 32-bit range."""

    value: int
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_integer_literal(self)


@dataclass(frozen=True, slots=True)
class MemberAccess(Expression):
    """
    A field access expression (dot notation without arguments).

    Example:
        obj.baz, a.b.c
    """

    owner: Expression
    member: str
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_member_access(self)


@dataclass(frozen=True, slots=True)
class MethodCall(Expression):
    """
    A method call on a receiver.

    Example:
        n.add(2, 3), counter.reset()
    """

    owner: Expression
    method: str
    arguments: tuple[Expression, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_method_call(self)


@dataclass(frozen=True, slots=True)
class Field:
    """
    A field of an object literal.

    A field written with a parenthesized parameter list is a method, even
    when the list is empty; a field written as ``name: expr`` is data.

    Attributes:
        name: The field name
        definition: The field's expression (the method body for methods)
        parameters: Parameter names, in source order
        is_method: Whether the field was declared with a parameter list
    """

    name: str
    definition: Expression
    parameters: tuple[str, ...] = ()
    is_method: bool = False
    location: Optional[SourceLocation] = field(default=None, compare=False)

    @property
    def is_data(self) -> bool:
        return not self.is_method


@dataclass(frozen=True, slots=True)
class ObjectLiteral(Expression):
    """
    An inline object literal.

    Example:
        {foo: bar, baz: 7}
        {add(a, b): a.plus(b)}
    """

    fields: tuple[Field, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_object_literal(self)

    @property
    def methods(self) -> tuple[Field, ...]:
        return tuple(f for f in self.fields if f.is_method)

    @property
    def data_fields(self) -> tuple[Field, ...]:
        return tuple(f for f in self.fields if f.is_data)


# -----------------------------------------------------------------------------
# Lifted definitions
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ObjectDefinition(ASTNode):
    """
    A top-level object produced by lifting one object literal.

    Attributes:
        object_id: Id issued to the literal, equal to its index in the
            lifted object list
        name: Synthetic name the residual tree refers to (``obj<id>``)
        fields: Data fields retained from the literal, in source order
    """

    object_id: int
    name: str
    fields: tuple[Field, ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_object_definition(self)


@dataclass(frozen=True, slots=True)
class MethodDefinition(ASTNode):
    """
    A top-level method produced by lifting a method field.

    Attributes:
        object_id: Id of the literal that declared the method
        name: Synthetic name (``m<id><field>``)
        field_name: The field name the method was declared under
        parameters: Hygiene-marked parameter names
        body: The lifted body expression
    """

    object_id: int
    name: str
    field_name: str
    parameters: tuple[str, ...]
    body: Expression
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_method_definition(self)


# -----------------------------------------------------------------------------
# Default traversal
# -----------------------------------------------------------------------------


class BaseASTVisitor(ASTVisitor):
    """
    Base visitor with default implementations that traverse children.

    Override only the methods you care about.
    """

    def visit_identifier(self, node: Identifier) -> Any:
        pass

    def visit_integer_literal(self, node: IntegerLiteral) -> Any:
        pass

    def visit_member_access(self, node: MemberAccess) -> Any:
        self.visit(node.owner)

    def visit_method_call(self, node: MethodCall) -> Any:
        self.visit(node.owner)
        for arg in node.arguments:
            self.visit(arg)

    def visit_object_literal(self, node: ObjectLiteral) -> Any:
        for f in node.fields:
            self.visit(f.definition)

    def visit_object_definition(self, node: ObjectDefinition) -> Any:
        for f in node.fields:
            self.visit(f.definition)

    def visit_method_definition(self, node: MethodDefinition) -> Any:
        self.visit(node.body)


class _NodeCollector(BaseASTVisitor):
    def __init__(self) -> None:
        self.nodes: list[ASTNode] = []

    def visit(self, node: ASTNode) -> Any:
        self.nodes.append(node)
        return node.accept(self)


def walk(node: ASTNode) -> Iterator[ASTNode]:
    """Yield ``node`` and every expression beneath it, in pre-order."""
    collector = _NodeCollector()
    collector.visit(node)
    return iter(collector.nodes)


def contains_object_literal(node: ASTNode) -> bool:
    """Check whether any object literal remains in the tree."""
    return any(isinstance(n, ObjectLiteral) for n in walk(node))
