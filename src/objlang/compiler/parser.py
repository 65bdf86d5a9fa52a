"""
objlang Parser.

A recursive descent parser that turns a token list into one expression tree.
Sub-expressions are built on a shared operand stack instead of per-node
lists: each parse call is handed the caller's cursor as its frame base,
leaves the expressions it produced at the start of that frame, and reports
how many it produced. Object literals and argument lists parse their
children onto successive slots and then collapse the run into one node.

Grammar:
    program        := expr EOF
    expr           := primary postfixes
    primary        := NAME | INT | '(' expr ')' | object-literal
    postfixes      := ( '.' NAME [ '(' arglist ')' ] )*
    object-literal := '{' [ field (',' field)* ] '}'
    field          := NAME [ '(' paramlist ')' ] ':' expr
    arglist        := expr (',' expr)* | ε
    paramlist      := NAME (',' NAME)* | ε

The first error aborts the parse; there is no recovery.
"""

import re
from typing import Optional

from objlang.compiler.ast_nodes import (
    Expression,
    Field,
    Identifier,
    IntegerLiteral,
    MemberAccess,
    MethodCall,
    ObjectLiteral,
)
from objlang.compiler.operand_stack import OperandStack
from objlang.compiler.tokens import Token, TokenType
from objlang.utils.diagnostics import (
    Diagnostic,
    DiagnosticEmitter,
    SourceSpan,
    create_duplicate_field_diagnostic,
    create_missing_token_diagnostic,
    create_nesting_too_deep_diagnostic,
    create_unclosed_delimiter_diagnostic,
    create_unexpected_character_diagnostic,
    create_unexpected_token_diagnostic,
)
from objlang.utils.errors import ParseErrorKind, ParserError

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

DEFAULT_MAX_DEPTH = 200

_HEX_LITERAL = re.compile(r"0[xX]([0-9a-fA-F]+)")
_OCTAL_LITERAL = re.compile(r"0([0-7]*)")
_DECIMAL_LITERAL = re.compile(r"[0-9]*")


def saturate_int32(value: int) -> int:
    """Clamp ``value`` to the signed 32-bit range."""
    return max(INT32_MIN, min(INT32_MAX, value))


def parse_integer_literal(text: str) -> int:
    """
    Convert integer literal text to a saturated 32-bit value.

    Follows C ``strtol`` with base 0: an optional sign, then ``0x``/``0X``
    for hexadecimal, a leading ``0`` for octal, decimal otherwise. Parsing
    stops at the first digit that is invalid for the base. Out-of-range
    values saturate instead of wrapping.

    Examples:
        parse_integer_literal("42")          -> 42
        parse_integer_literal("017")         -> 15
        parse_integer_literal("99999999999") -> 2147483647
    """
    sign = 1
    body = text
    if body[:1] in ("+", "-"):
        if body[0] == "-":
            sign = -1
        body = body[1:]

    match = _HEX_LITERAL.match(body)
    if match:
        digits, base = match.group(1), 16
    else:
        match = _OCTAL_LITERAL.match(body)
        if match:
            digits, base = match.group(1), 8
        else:
            digits, base = _DECIMAL_LITERAL.match(body).group(0), 10

    value = int(digits, base) if digits else 0
    return saturate_int32(sign * value)


class Parser:
    """
    Stack-based recursive descent parser for objlang.

    Usage:
        parser = Parser(tokens)
        tree = parser.parse()

    When ``source`` is given, a rich diagnostic is recorded for the failure
    before the ``ParserError`` is raised.
    """

    def __init__(
        self,
        tokens: list[Token],
        source: str = "",
        filename: str = "<input>",
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer, ending with EOF
            source: Optional source code for rich diagnostics
            filename: Optional filename for error reporting
            max_depth: Deepest nesting of expressions accepted
        """
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token list must end with an EOF token")

        self.tokens = tokens
        self.pos = 0
        self.max_depth = max_depth
        self.stack = OperandStack()
        self.diagnostics: list[Diagnostic] = []

        self._depth = 0
        self._source = source
        self._source_lines: list[str] = source.splitlines() if source else []
        self._filename = filename
        self._emitter: Optional[DiagnosticEmitter] = None
        self._delimiter_stack: list[Token] = []  # open ( and { tokens

        if source:
            self._emitter = DiagnosticEmitter(source, filename)

    # -------------------------------------------------------------------------
    # Token helpers
    # -------------------------------------------------------------------------

    @property
    def _current(self) -> Token:
        """Get the current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.pos]

    def _is_at_end(self) -> bool:
        return self._current.type == TokenType.EOF

    def _check(self, *types: TokenType) -> bool:
        """Check if the current token is one of the given types."""
        return self._current.type in types

    def _advance(self) -> Token:
        """Consume and return the current token."""
        token = self._current
        if not self._is_at_end():
            self.pos += 1
        return token

    def _match(self, *types: TokenType) -> bool:
        """Consume current token if it matches one of the given types."""
        if self._check(*types):
            self._advance()
            return True
        return False

    def _expect_name(self, context: str) -> Token:
        if self._check(TokenType.IDENTIFIER):
            return self._advance()
        raise self._error(ParseErrorKind.NAME_EXPECTED, f"a name {context}")

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------

    def _span(self, token: Token) -> SourceSpan:
        return SourceSpan.from_location(
            token.location.line,
            token.location.column,
            max(1, token.length),
            self._filename,
        )

    def _source_line(self, token: Token) -> Optional[str]:
        if token.location is None:
            return None
        line = token.location.line
        if 1 <= line <= len(self._source_lines):
            return self._source_lines[line - 1]
        return None

    def _error(
        self,
        kind: ParseErrorKind,
        expected: str,
        help_msg: str = "",
        related: Optional[Token] = None,
    ) -> ParserError:
        """
        Create a parser error for the current token, with a rich diagnostic if possible.

        ``related`` is an earlier token the diagnostic points back to, such as
        the first definition of a repeated field name.
        """
        token = self._current
        found = token.text if token.type != TokenType.EOF else "end of input"

        if self._emitter and token.location is not None:
            span = self._span(token)
            if kind == ParseErrorKind.NESTING_TOO_DEEP:
                diagnostic = create_nesting_too_deep_diagnostic(self._emitter, self.max_depth, span)
            elif kind == ParseErrorKind.DUPLICATE_FIELD and related is not None:
                diagnostic = create_duplicate_field_diagnostic(
                    self._emitter, token.text, self._span(related), span
                )
            elif token.type == TokenType.ERROR:
                diagnostic = create_unexpected_character_diagnostic(self._emitter, token.text, span)
            elif token.type == TokenType.EOF and self._delimiter_stack:
                opener = self._delimiter_stack[-1]
                diagnostic = create_unclosed_delimiter_diagnostic(
                    self._emitter, opener.text, self._span(opener), span
                )
            elif kind in (
                ParseErrorKind.COMMA_EXPECTED,
                ParseErrorKind.COLON_EXPECTED,
                ParseErrorKind.CLOSE_PAREN_EXPECTED,
            ):
                diagnostic = create_missing_token_diagnostic(
                    self._emitter, expected, found, span, help_msg
                )
            else:
                diagnostic = create_unexpected_token_diagnostic(
                    self._emitter, expected, found, span
                )
            self.diagnostics.append(diagnostic)

        return ParserError(kind, token, source_line=self._source_line(token))

    def get_diagnostics(self) -> list[Diagnostic]:
        """Get the rich diagnostics recorded during parsing."""
        return self.diagnostics

    def render_diagnostics(self, use_color: bool = True) -> str:
        """Render all diagnostics as formatted strings."""
        if self._emitter:
            return self._emitter.render_all(use_color)
        return ""

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def parse(self) -> Expression:
        """
        Parse the whole token list as one expression.

        Returns:
            The root expression.

        Raises:
            ParserError: On the first syntax error.
        """
        self.pos = 0
        self._depth = 0
        self._delimiter_stack = []
        self.stack.clear()

        produced = self._parse_expression(0)

        if not self._is_at_end():
            raise self._error(ParseErrorKind.UNEXPECTED_TOKEN, "end of input")

        (root,) = self.stack.collapse(0, produced)
        return root

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def _parse_expression(self, base: int) -> int:
        """
        Parse one expression into the frame starting at ``base``.

        Returns:
            The number of slots produced, always 1.
        """
        self._depth += 1
        if self._depth > self.max_depth:
            raise self._error(ParseErrorKind.NESTING_TOO_DEEP, "a shallower expression")

        produced = self._parse_primary(base)
        self._resolve_postfixes(base)
        self.stack.check_frame(base, produced)

        self._depth -= 1
        return produced

    def _parse_primary(self, base: int) -> int:
        """Parse a primary expression onto the stack at ``base``."""
        token = self._current

        if self._match(TokenType.IDENTIFIER):
            self.stack.push(base, Identifier(name=token.text, location=token.location))
            return 1

        if self._match(TokenType.INTEGER):
            value = parse_integer_literal(token.text)
            self.stack.push(base, IntegerLiteral(value=value, location=token.location))
            return 1

        if self._check(TokenType.LPAREN):
            return self._parse_grouped(base)

        if self._check(TokenType.LBRACE):
            return self._parse_object_literal(base)

        raise self._error(ParseErrorKind.UNEXPECTED_TOKEN, "an expression")

    def _parse_grouped(self, base: int) -> int:
        """Parse ``( expr )``; the parentheses leave no node behind."""
        self._delimiter_stack.append(self._advance())
        produced = self._parse_expression(base)
        if not self._check(TokenType.RPAREN):
            raise self._error(ParseErrorKind.CLOSE_PAREN_EXPECTED, ")")
        self._advance()
        self._delimiter_stack.pop()
        return produced

    def _parse_object_literal(self, base: int) -> int:
        """
        Parse ``{ field, ... }``.

        Each field definition lands on its own slot; once the closing brace
        is consumed the run is collapsed into a single ObjectLiteral written
        back at ``base``.
        """
        open_brace = self._advance()
        self._delimiter_stack.append(open_brace)

        headers: list[tuple[Token, tuple[str, ...], bool]] = []
        seen: dict[str, Token] = {}
        cursor = base

        if not self._match(TokenType.RBRACE):
            while True:
                headers.append(self._parse_field_header(seen))
                cursor += self._parse_expression(cursor)
                if self._match(TokenType.RBRACE):
                    break
                if not self._check(TokenType.COMMA):
                    raise self._error(ParseErrorKind.COMMA_EXPECTED, ",")
                self._advance()

        self._delimiter_stack.pop()

        definitions = self.stack.collapse(base, len(headers))
        fields = tuple(
            Field(
                name=name.text,
                definition=definition,
                parameters=parameters,
                is_method=is_method,
                location=name.location,
            )
            for (name, parameters, is_method), definition in zip(headers, definitions)
        )
        self.stack.push(base, ObjectLiteral(fields=fields, location=open_brace.location))
        return 1

    def _parse_field_header(
        self, seen: dict[str, Token]
    ) -> tuple[Token, tuple[str, ...], bool]:
        """
        Parse ``NAME [ '(' paramlist ')' ] ':'`` of a field.

        ``seen`` maps the names already used in this literal to their tokens.
        """
        if self._check(TokenType.IDENTIFIER) and self._current.text in seen:
            raise self._error(
                ParseErrorKind.DUPLICATE_FIELD,
                "a new field name",
                related=seen[self._current.text],
            )
        name = self._expect_name("for a field")
        seen[name.text] = name

        parameters: tuple[str, ...] = ()
        is_method = False
        if self._check(TokenType.LPAREN):
            is_method = True
            parameters = self._parse_parameters()

        if not self._match(TokenType.COLON):
            raise self._error(
                ParseErrorKind.COLON_EXPECTED,
                ":",
                "a field name is followed by ':' and its definition",
            )

        return name, parameters, is_method

    def _parse_parameters(self) -> tuple[str, ...]:
        """Parse ``( NAME, ... )`` of a method field."""
        self._delimiter_stack.append(self._advance())

        names: list[str] = []
        if not self._match(TokenType.RPAREN):
            if not self._check(TokenType.IDENTIFIER):
                raise self._error(
                    ParseErrorKind.CLOSE_PAREN_EXPECTED,
                    ")",
                    "a parameter list holds names only",
                )
            names.append(self._advance().text)
            while not self._match(TokenType.RPAREN):
                if not self._check(TokenType.COMMA):
                    raise self._error(ParseErrorKind.COMMA_EXPECTED, ",")
                self._advance()
                names.append(self._expect_name("for a parameter").text)

        self._delimiter_stack.pop()
        return tuple(names)

    # -------------------------------------------------------------------------
    # Postfix chains
    # -------------------------------------------------------------------------

    def _resolve_postfixes(self, base: int) -> None:
        """
        Apply ``.name`` and ``.name(args)`` suffixes to the expression at ``base``.

        The receiver is popped from its slot, wrapped, and the wrapper pushed
        back into the same slot, so the frame still holds one expression.
        Each link nests the receiver one level deeper and counts toward
        ``max_depth``; arguments are parsed at the depth of their link.
        """
        links = 0
        while self._match(TokenType.DOT):
            links += 1
            self._depth += 1
            if self._depth > self.max_depth:
                raise self._error(ParseErrorKind.NESTING_TOO_DEEP, "a shorter member chain")
            member = self._expect_name("after '.'")

            if self._check(TokenType.LPAREN):
                arguments = self._parse_arguments(base + 1)
                receiver = self.stack.pop(base)
                self.stack.push(
                    base,
                    MethodCall(
                        owner=receiver,
                        method=member.text,
                        arguments=arguments,
                        location=receiver.location,
                    ),
                )
            else:
                receiver = self.stack.pop(base)
                self.stack.push(
                    base,
                    MemberAccess(owner=receiver, member=member.text, location=receiver.location),
                )

        self._depth -= links

    def _parse_arguments(self, base: int) -> tuple[Expression, ...]:
        """
        Parse ``( expr, ... )`` with each argument on its own slot from ``base``.

        Returns:
            The arguments, collapsed off the stack in source order.
        """
        self._delimiter_stack.append(self._advance())

        cursor = base
        if not self._match(TokenType.RPAREN):
            while True:
                cursor += self._parse_expression(cursor)
                if self._match(TokenType.RPAREN):
                    break
                if not self._check(TokenType.COMMA):
                    raise self._error(ParseErrorKind.COMMA_EXPECTED, ",")
                self._advance()

        self._delimiter_stack.pop()
        return self.stack.collapse(base, cursor - base)


def parse(
    tokens: list[Token],
    source: str = "",
    filename: str = "<input>",
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Expression:
    """
    Convenience function to parse a token list.

    Raises:
        ParserError: On the first syntax error.
    """
    return Parser(tokens, source, filename, max_depth).parse()
