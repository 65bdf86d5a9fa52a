"""
Token definitions for the objlang lexer.

The token set is deliberately tiny: seven punctuation marks, names,
integers, a one-character error token and the end-of-input marker.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from objlang.utils.errors import SourceLocation


class TokenType(Enum):
    """Enumeration of all token types in objlang."""

    # End of input (always the last token)
    EOF = auto()

    # A single character outside the language
    ERROR = auto()

    # Punctuation
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    COMMA = auto()  # ,
    COLON = auto()  # :
    DOT = auto()  # .

    # Names and literals
    IDENTIFIER = auto()
    INTEGER = auto()


SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    ".": TokenType.DOT,
}

WHITESPACE = " \t\n"


@dataclass(frozen=True, slots=True)
class Token:
    """
    Represents a single token from the source code.

    A token is a view into the source text: ``text`` is the lexeme and
    ``location.offset`` where it starts. The EOF token has empty text.

    Attributes:
        type: The type of this token
        text: The lexeme as it appears in the source
        location: Source location of the first character
    """

    type: TokenType
    text: str
    location: Optional[SourceLocation] = None

    def __repr__(self) -> str:
        if self.text:
            return f"Token({self.type.name}, {self.text!r}, {self.location})"
        return f"Token({self.type.name}, {self.location})"

    @property
    def length(self) -> int:
        """Number of source characters covered by this token."""
        return len(self.text)

    def describe(self) -> str:
        """Human-readable form used in error messages."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type in (TokenType.IDENTIFIER, TokenType.INTEGER):
            return f"{self.type.name.lower()} '{self.text}'"
        return f"'{self.text}'"
