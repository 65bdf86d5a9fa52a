"""
Error types and source location tracking for the objlang compiler.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from objlang.compiler.tokens import Token, TokenType


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Attributes:
        line: 1-indexed line number
        column: 1-indexed column number
        offset: 0-indexed character offset from start of source
        filename: Optional filename for error reporting
    """

    line: int
    column: int
    offset: int = 0
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


class ObjLangError(Exception):
    """Base exception for all objlang compiler errors."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.message = message
        self.location = location
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []

        if self.location:
            parts.append(f"[{self.location}]")

        parts.append(self.message)

        if self.source_line and self.location:
            parts.append(f"\n    {self.source_line}")
            # Caret under the offending column
            padding = " " * (4 + self.location.column - 1)
            parts.append(f"\n{padding}^")

        return " ".join(parts) if not self.source_line else parts[0] + " " + "".join(parts[1:])


class ParseErrorKind(Enum):
    """The ways a parse can fail. Every kind aborts the whole parse."""

    NAME_EXPECTED = "name expected"
    COMMA_EXPECTED = "',' expected"
    COLON_EXPECTED = "':' expected"
    CLOSE_PAREN_EXPECTED = "')' expected"
    UNEXPECTED_TOKEN = "unexpected token"
    NESTING_TOO_DEEP = "input nested too deeply"
    DUPLICATE_FIELD = "duplicate field name"


class ParserError(ObjLangError):
    """
    Raised when the parser encounters a syntax error.

    Attributes:
        kind: Which rule failed
        token: The token actually observed where the failure happened
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        token: "Token",
        message: Optional[str] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.token = token
        if message is None:
            message = f"{kind.value}, found {token.describe()}"
        super().__init__(message, token.location, source_line)

    @property
    def found(self) -> "TokenType":
        """The kind of the observed token."""
        return self.token.type


class StackDisciplineError(ObjLangError):
    """
    Raised when a parse step touches operand-stack slots outside its frame.

    This signals a bug in the parser, never a problem with the input.
    """

    pass
