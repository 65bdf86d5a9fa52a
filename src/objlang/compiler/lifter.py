"""
Object lifting pass for objlang.

Removes every object literal from an expression tree. Each literal becomes a
top-level ObjectDefinition holding its data fields, each method field
becomes a top-level MethodDefinition, and the literal itself is replaced by
an identifier naming its definition. User identifiers are renamed with a
hygiene marker so they can never collide with the synthesized names.

Naming, for the literal issued id ``k``:
    object      obj<k>
    method f    m<k>f
    user name n x<n>

Example:
    {foo(n): n.add(2, 3), baz: 7}.baz

    obj0 = {baz: 7}
    m0foo(self, xn) = xn.add(2, 3)
    obj0.baz
"""

import logging
from dataclasses import dataclass, field
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

logger = logging.getLogger(__name__)

HYGIENE_MARKER = "x"
OBJECT_PREFIX = "obj"
METHOD_PREFIX = "m"


def hygienic_name(name: str) -> str:
    """Rename a user identifier out of the synthesized-name space."""
    return HYGIENE_MARKER + name


def object_name(object_id: int) -> str:
    return f"{OBJECT_PREFIX}{object_id}"


def method_name(object_id: int, field_name: str) -> str:
    return f"{METHOD_PREFIX}{object_id}{field_name}"


@dataclass(frozen=True, slots=True)
class LiftResult:
    """
    Output of the lifting pass.

    Attributes:
        methods: Lifted methods in discovery order
        objects: Lifted objects; ``objects[k].object_id == k``
        residual: The input tree with every object literal replaced
    """

    methods: tuple[MethodDefinition, ...]
    objects: tuple[ObjectDefinition, ...]
    residual: Expression


@dataclass
class LiftContext:
    """
    Mutable state of one lifting run.

    The object list doubles as the id counter: an id is issued by reserving
    the next slot, so the slot index is the id and ids follow the textual
    order of the opening braces. Methods reserve their slot the same way
    before their body is lifted, so both lists end up in discovery order.
    """

    methods: list[Optional[MethodDefinition]] = field(default_factory=list)
    objects: list[Optional[ObjectDefinition]] = field(default_factory=list)

    def issue_object_id(self) -> int:
        self.objects.append(None)
        return len(self.objects) - 1

    def define_object(self, definition: ObjectDefinition) -> None:
        if self.objects[definition.object_id] is not None:
            raise ValueError(f"object {definition.object_id} defined twice")
        self.objects[definition.object_id] = definition

    def reserve_method_slot(self) -> int:
        self.methods.append(None)
        return len(self.methods) - 1

    def define_method(self, slot: int, definition: MethodDefinition) -> None:
        if self.methods[slot] is not None:
            raise ValueError(f"method slot {slot} defined twice")
        self.methods[slot] = definition

    def finish(self, residual: Expression) -> LiftResult:
        objects = tuple(self.objects)
        methods = tuple(self.methods)
        if any(obj is None for obj in objects):
            raise ValueError("lifting finished with an undefined object")
        if any(method is None for method in methods):
            raise ValueError("lifting finished with an undefined method")
        return LiftResult(methods=methods, objects=objects, residual=residual)


class Lifter(ASTVisitor):
    """
    Pre-order rewriting visitor implementing the lifting pass.

    Each visit method returns the rewritten expression. A Lifter holds the
    state of one run; use ``lift()`` for independent runs.

    Usage:
        result = Lifter().lift(tree)
    """

    def __init__(self) -> None:
        self.context = LiftContext()

    def lift(self, expr: Expression) -> LiftResult:
        """Lift every object literal out of ``expr``."""
        residual = self.visit(expr)
        result = self.context.finish(residual)
        logger.debug(
            "lifted %d object(s) and %d method(s)",
            len(result.objects),
            len(result.methods),
        )
        return result

    def visit_identifier(self, node: Identifier) -> Expression:
        return Identifier(name=hygienic_name(node.name), location=node.location)

    def visit_integer_literal(self, node: IntegerLiteral) -> Expression:
        return node

    def visit_member_access(self, node: MemberAccess) -> Expression:
        return MemberAccess(
            owner=self.visit(node.owner),
            member=node.member,
            location=node.location,
        )

    def visit_method_call(self, node: MethodCall) -> Expression:
        owner = self.visit(node.owner)
        arguments = tuple(self.visit(arg) for arg in node.arguments)
        return MethodCall(
            owner=owner,
            method=node.method,
            arguments=arguments,
            location=node.location,
        )

    def visit_object_literal(self, node: ObjectLiteral) -> Expression:
        object_id = self.context.issue_object_id()
        retained: list[Field] = []

        # One pass in source order keeps nested ids in textual order.
        for f in node.fields:
            if f.is_method:
                self._lift_method(object_id, f)
            else:
                retained.append(
                    Field(
                        name=f.name,
                        definition=self.visit(f.definition),
                        location=f.location,
                    )
                )

        name = object_name(object_id)
        self.context.define_object(
            ObjectDefinition(
                object_id=object_id,
                name=name,
                fields=tuple(retained),
                location=node.location,
            )
        )
        return Identifier(name=name, location=node.location)

    def _lift_method(self, object_id: int, f: Field) -> None:
        slot = self.context.reserve_method_slot()
        body = self.visit(f.definition)
        self.context.define_method(
            slot,
            MethodDefinition(
                object_id=object_id,
                name=method_name(object_id, f.name),
                field_name=f.name,
                parameters=tuple(hygienic_name(p) for p in f.parameters),
                body=body,
                location=f.location,
            ),
        )

    def visit_object_definition(self, node: ObjectDefinition) -> Expression:
        raise TypeError("lifted definitions cannot be lifted again")

    def visit_method_definition(self, node: MethodDefinition) -> Expression:
        raise TypeError("lifted definitions cannot be lifted again")


def lift(expr: Expression) -> LiftResult:
    """
    Lift every object literal out of ``expr``.

    Each call uses fresh state, so ids restart at 0.
    """
    return Lifter().lift(expr)
