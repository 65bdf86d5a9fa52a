"""
objlang Lexer (Tokenizer).

Transforms source text into a list of tokens in one linear scan. The lexer
never fails: characters outside the language become one-character ERROR
tokens and are reported by the parser if they are ever consumed.
"""

from typing import Iterator, Optional

from objlang.compiler.tokens import SINGLE_CHAR_TOKENS, WHITESPACE, Token, TokenType
from objlang.utils.errors import SourceLocation


def _is_name_start(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_name_char(char: str) -> bool:
    return _is_name_start(char) or _is_digit(char)


class Lexer:
    """
    Tokenizer for objlang source code.

    The lexer recognizes:
    - Names: an ASCII letter or underscore, then letters, digits, underscores
    - Integers: runs of ASCII digits
    - Punctuation: ( ) { } , : .
    - Whitespace (space, tab, newline), which is skipped

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()
        # or iterate: for token in lexer: ...
    """

    def __init__(self, source: str, filename: Optional[str] = None) -> None:
        """
        Initialize the lexer with source code.

        Args:
            source: The objlang source code to tokenize
            filename: Optional filename for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    @property
    def _current_char(self) -> Optional[str]:
        """Return the current character or None if at end."""
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    def _location(self) -> SourceLocation:
        """Create a SourceLocation for the current position."""
        return SourceLocation(
            line=self.line,
            column=self.column,
            offset=self.pos,
            filename=self.filename,
        )

    def _advance(self) -> str:
        """Consume and return the current character."""
        char = self.source[self.pos]
        self.pos += 1

        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        return char

    def _skip_whitespace(self) -> None:
        while self._current_char is not None and self._current_char in WHITESPACE:
            self._advance()

    def _read_while(self, predicate) -> str:
        """Consume the maximal run of characters satisfying ``predicate``."""
        start = self.pos
        while self._current_char is not None and predicate(self._current_char):
            self._advance()
        return self.source[start:self.pos]

    def _next_token(self) -> Token:
        """Extract the next token from the source."""
        self._skip_whitespace()

        start_loc = self._location()
        char = self._current_char

        if char is None:
            return Token(TokenType.EOF, "", start_loc)

        if char in SINGLE_CHAR_TOKENS:
            self._advance()
            return Token(SINGLE_CHAR_TOKENS[char], char, start_loc)

        if _is_name_start(char):
            return Token(TokenType.IDENTIFIER, self._read_while(_is_name_char), start_loc)

        if _is_digit(char):
            return Token(TokenType.INTEGER, self._read_while(_is_digit), start_loc)

        self._advance()
        return Token(TokenType.ERROR, char, start_loc)

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source code.

        Returns:
            A list of all tokens, always ending with exactly one EOF token.
        """
        self.tokens = []
        self.pos = 0
        self.line = 1
        self.column = 1

        while True:
            token = self._next_token()
            self.tokens.append(token)
            if token.type == TokenType.EOF:
                break

        return self.tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens (tokenizes on first use)."""
        if not self.tokens:
            self.tokenize()
        return iter(self.tokens)


def tokenize(source: str, filename: Optional[str] = None) -> list[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: objlang source code
        filename: Optional filename for error reporting

    Returns:
        List of tokens
    """
    return Lexer(source, filename).tokenize()
