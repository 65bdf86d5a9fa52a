"""
Unit tests for the objlang Lexer.
"""

from objlang.compiler.lexer import Lexer
from objlang.compiler.tokens import Token, TokenType


def types_of(tokens: list[Token]) -> list[TokenType]:
    return [t.type for t in tokens]


class TestLexerBasics:
    """Basic tokenization."""

    def test_empty_source(self, tokenize):
        tokens = tokenize("")
        assert types_of(tokens) == [TokenType.EOF]
        assert tokens[0].text == ""

    def test_whitespace_only(self, tokenize):
        assert types_of(tokenize(" \t\n  ")) == [TokenType.EOF]

    def test_exactly_one_eof(self, tokenize):
        tokens = tokenize("a b c")
        assert types_of(tokens).count(TokenType.EOF) == 1
        assert tokens[-1].type == TokenType.EOF

    def test_punctuation(self, tokenize):
        assert types_of(tokenize("(){},:.")) == [
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.LBRACE,
            TokenType.RBRACE,
            TokenType.COMMA,
            TokenType.COLON,
            TokenType.DOT,
            TokenType.EOF,
        ]

    def test_sample_program(self, tokenize):
        tokens = tokenize("{foo: bar, baz: 7}.baz")
        assert [(t.type, t.text) for t in tokens] == [
            (TokenType.LBRACE, "{"),
            (TokenType.IDENTIFIER, "foo"),
            (TokenType.COLON, ":"),
            (TokenType.IDENTIFIER, "bar"),
            (TokenType.COMMA, ","),
            (TokenType.IDENTIFIER, "baz"),
            (TokenType.COLON, ":"),
            (TokenType.INTEGER, "7"),
            (TokenType.RBRACE, "}"),
            (TokenType.DOT, "."),
            (TokenType.IDENTIFIER, "baz"),
            (TokenType.EOF, ""),
        ]


class TestLexerNames:
    """Identifier scanning."""

    def test_name_with_digits(self, tokenize):
        tokens = tokenize("abc123")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].text == "abc123"

    def test_underscore_names(self, tokenize):
        tokens = tokenize("_tmp a_b")
        assert [t.text for t in tokens[:-1]] == ["_tmp", "a_b"]
        assert all(t.type == TokenType.IDENTIFIER for t in tokens[:-1])

    def test_digits_then_letters_split(self, tokenize):
        """A digit run ends where letters begin."""
        tokens = tokenize("12ab")
        assert [(t.type, t.text) for t in tokens[:-1]] == [
            (TokenType.INTEGER, "12"),
            (TokenType.IDENTIFIER, "ab"),
        ]

    def test_non_ascii_letter_is_error(self, tokenize):
        tokens = tokenize("é")
        assert tokens[0].type == TokenType.ERROR
        assert tokens[0].text == "é"


class TestLexerErrors:
    """Characters outside the language."""

    def test_unknown_character_is_single_error_token(self, tokenize):
        tokens = tokenize("a + b")
        assert types_of(tokens) == [
            TokenType.IDENTIFIER,
            TokenType.ERROR,
            TokenType.IDENTIFIER,
            TokenType.EOF,
        ]
        assert tokens[1].text == "+"

    def test_each_bad_character_gets_its_own_token(self, tokenize):
        tokens = tokenize("@#")
        assert types_of(tokens) == [TokenType.ERROR, TokenType.ERROR, TokenType.EOF]

    def test_minus_is_not_part_of_integer(self, tokenize):
        tokens = tokenize("-5")
        assert types_of(tokens) == [TokenType.ERROR, TokenType.INTEGER, TokenType.EOF]

    def test_carriage_return_is_not_whitespace(self, tokenize):
        tokens = tokenize("a\rb")
        assert types_of(tokens) == [
            TokenType.IDENTIFIER,
            TokenType.ERROR,
            TokenType.IDENTIFIER,
            TokenType.EOF,
        ]
        assert tokens[1].text == "\r"
        assert tokens[2].location.column == 3


class TestLexerLocations:
    """Source positions on tokens."""

    def test_columns(self, tokenize):
        tokens = tokenize("a.bc")
        assert [t.location.column for t in tokens] == [1, 2, 3, 5]
        assert [t.location.offset for t in tokens] == [0, 1, 2, 4]

    def test_lines(self, tokenize):
        tokens = tokenize("{\n  x: 1\n}")
        x = tokens[1]
        assert (x.location.line, x.location.column) == (2, 3)
        close = tokens[-2]
        assert (close.location.line, close.location.column) == (3, 1)

    def test_token_length(self, tokenize):
        tokens = tokenize("counter 1234")
        assert tokens[0].length == 7
        assert tokens[1].length == 4
        assert tokens[2].length == 0

    def test_filename_recorded(self):
        tokens = Lexer("x", filename="prog.obj").tokenize()
        assert tokens[0].location.filename == "prog.obj"
        assert str(tokens[0].location) == "prog.obj:1:1"


class TestLexerIteration:
    def test_iterates_tokens(self):
        lexer = Lexer("a.b")
        assert [t.type for t in lexer] == [
            TokenType.IDENTIFIER,
            TokenType.DOT,
            TokenType.IDENTIFIER,
            TokenType.EOF,
        ]

    def test_tokenize_is_repeatable(self):
        lexer = Lexer("{x: 1}")
        assert lexer.tokenize() == lexer.tokenize()


class TestTokenDescribe:
    def test_describe(self, tokenize):
        name, colon, number, close, eof = tokenize("x:1}")
        assert name.describe() == "identifier 'x'"
        assert colon.describe() == "':'"
        assert number.describe() == "integer '1'"
        assert close.describe() == "'}'"
        assert eof.describe() == "end of input"
