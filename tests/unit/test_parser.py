"""
Unit tests for the objlang Parser.
"""

import pytest

from objlang.compiler.ast_nodes import (
    Field,
    Identifier,
    IntegerLiteral,
    MemberAccess,
    MethodCall,
    ObjectLiteral,
)
from objlang.compiler.parser import (
    DEFAULT_MAX_DEPTH,
    INT32_MAX,
    INT32_MIN,
    Parser,
    parse,
    parse_integer_literal,
    saturate_int32,
)
from objlang.compiler.tokens import Token, TokenType
from objlang.utils.diagnostics import ErrorCode
from objlang.utils.errors import ParseErrorKind, ParserError, SourceLocation


class TestParserScenarios:
    """End-to-end parses of representative programs."""

    def test_integer(self, parse):
        assert parse("7") == IntegerLiteral(7)

    def test_identifier(self, parse):
        assert parse("bar") == Identifier("bar")

    def test_sample_program(self, parse):
        tree = parse("{foo: bar, baz: 7}.baz")
        assert tree == MemberAccess(
            owner=ObjectLiteral(
                fields=(
                    Field("foo", Identifier("bar")),
                    Field("baz", IntegerLiteral(7)),
                )
            ),
            member="baz",
        )

    def test_method_field(self, parse):
        tree = parse("{foo(n): n.add(2, 3), baz: 7}.baz")
        literal = tree.owner
        assert isinstance(literal, ObjectLiteral)
        foo, baz = literal.fields
        assert foo.is_method
        assert foo.parameters == ("n",)
        assert foo.definition == MethodCall(
            owner=Identifier("n"),
            method="add",
            arguments=(IntegerLiteral(2), IntegerLiteral(3)),
        )
        assert baz.is_data
        assert baz.definition == IntegerLiteral(7)

    def test_postfix_chain_is_left_associative(self, parse):
        tree = parse("a.b.c(1)")
        assert tree == MethodCall(
            owner=MemberAccess(owner=Identifier("a"), member="b"),
            method="c",
            arguments=(IntegerLiteral(1),),
        )

    def test_postfix_on_call_result(self, parse):
        tree = parse("a.f().g")
        assert tree == MemberAccess(
            owner=MethodCall(owner=Identifier("a"), method="f"),
            member="g",
        )

    def test_parentheses_leave_no_node(self, parse):
        assert parse("((x))") == Identifier("x")
        assert parse("(a.b).c") == parse("a.b.c")

    def test_whitespace_is_insignificant(self, parse):
        assert parse("{ a :1 ,b( p ,q ):p }\n.\nb") == parse("{a: 1, b(p, q): p}.b")


class TestParserObjectLiterals:
    def test_empty_object(self, parse):
        assert parse("{}") == ObjectLiteral(fields=())

    def test_zero_parameter_method(self, parse):
        """A parameter list, even an empty one, marks a method."""
        (f,) = parse("{f(): 1}").fields
        assert f.is_method
        assert f.parameters == ()

    def test_data_field_is_not_method(self, parse):
        (f,) = parse("{f: 1}").fields
        assert not f.is_method
        assert f.is_data

    def test_fields_keep_source_order(self, parse):
        tree = parse("{c: 1, a: 2, b: 3}")
        assert [f.name for f in tree.fields] == ["c", "a", "b"]

    def test_methods_and_data_fields(self, parse):
        tree = parse("{m(x): x, d: 1, n(): 2}")
        assert [f.name for f in tree.methods] == ["m", "n"]
        assert [f.name for f in tree.data_fields] == ["d"]

    def test_nested_objects(self, parse):
        tree = parse("{a: {b: {}}}")
        inner = tree.fields[0].definition
        assert isinstance(inner, ObjectLiteral)
        assert inner.fields[0].definition == ObjectLiteral()

    def test_object_as_argument(self, parse):
        tree = parse("f.g({x: 1}, 2)")
        assert tree.arguments == (
            ObjectLiteral(fields=(Field("x", IntegerLiteral(1)),)),
            IntegerLiteral(2),
        )

    @pytest.mark.parametrize(
        "source",
        ["{a: 1, a: 2}", "{f(a): a, f(b): b}", "{f: 1, f(): 2}"],
    )
    def test_duplicate_field_name_rejected(self, parse, source):
        with pytest.raises(ParserError) as exc_info:
            parse(source)
        assert exc_info.value.kind == ParseErrorKind.DUPLICATE_FIELD
        assert exc_info.value.token.text == source[1]
        assert exc_info.value.location.column == source.index(",") + 3

    def test_same_name_in_nested_literal_is_allowed(self, parse):
        tree = parse("{a: {a: 1}, b(a): a}")
        assert [f.name for f in tree.fields] == ["a", "b"]
        assert tree.fields[0].definition.fields[0].name == "a"


class TestParserIntegers:
    """Integer literal conversion."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("0", 0),
            ("42", 42),
            ("017", 15),
            ("09", 0),
            ("0x1F", 31),
            ("0XfF", 255),
            ("-12", -12),
            ("+12", 12),
            ("2147483647", INT32_MAX),
            ("2147483648", INT32_MAX),
            ("99999999999", INT32_MAX),
            ("-99999999999", INT32_MIN),
        ],
    )
    def test_parse_integer_literal(self, text, expected):
        assert parse_integer_literal(text) == expected

    def test_saturation_through_parser(self, parse):
        assert parse("99999999999") == IntegerLiteral(2**31 - 1)

    def test_negative_saturation_from_token(self):
        tokens = [
            Token(TokenType.INTEGER, "-99999999999", SourceLocation(1, 1)),
            Token(TokenType.EOF, "", SourceLocation(1, 13, 12)),
        ]
        assert parse(tokens) == IntegerLiteral(-(2**31))

    def test_leading_zero_is_octal(self, parse):
        assert parse("010") == IntegerLiteral(8)

    def test_saturate_int32(self):
        assert saturate_int32(2**40) == INT32_MAX
        assert saturate_int32(-(2**40)) == INT32_MIN
        assert saturate_int32(5) == 5


class TestParserErrors:
    """Every failure kind, and the token observed when it happens."""

    def assert_fails(self, parse, source, kind, found):
        with pytest.raises(ParserError) as exc_info:
            parse(source)
        assert exc_info.value.kind == kind
        assert exc_info.value.found == found
        return exc_info.value

    def test_missing_field_definition(self, parse):
        error = self.assert_fails(parse, "{foo: }", ParseErrorKind.UNEXPECTED_TOKEN, TokenType.RBRACE)
        assert error.message == "unexpected token, found '}'"

    def test_name_expected_after_dot(self, parse):
        self.assert_fails(parse, "a.1", ParseErrorKind.NAME_EXPECTED, TokenType.INTEGER)
        self.assert_fails(parse, "a.", ParseErrorKind.NAME_EXPECTED, TokenType.EOF)

    def test_name_expected_for_field(self, parse):
        self.assert_fails(parse, "{1: x}", ParseErrorKind.NAME_EXPECTED, TokenType.INTEGER)

    def test_trailing_comma_in_object(self, parse):
        self.assert_fails(parse, "{a: 1,}", ParseErrorKind.NAME_EXPECTED, TokenType.RBRACE)

    def test_name_expected_after_parameter_comma(self, parse):
        self.assert_fails(parse, "{f(a,): x}", ParseErrorKind.NAME_EXPECTED, TokenType.RPAREN)

    def test_unclosed_paren(self, parse):
        self.assert_fails(parse, "(a", ParseErrorKind.CLOSE_PAREN_EXPECTED, TokenType.EOF)
        self.assert_fails(parse, "(a }", ParseErrorKind.CLOSE_PAREN_EXPECTED, TokenType.RBRACE)

    def test_parameter_list_holds_names_only(self, parse):
        self.assert_fails(parse, "{f(1): x}", ParseErrorKind.CLOSE_PAREN_EXPECTED, TokenType.INTEGER)

    def test_comma_expected_between_fields(self, parse):
        self.assert_fails(parse, "{a: 1 b: 2}", ParseErrorKind.COMMA_EXPECTED, TokenType.IDENTIFIER)

    def test_comma_expected_between_arguments(self, parse):
        self.assert_fails(parse, "f.g(1 2)", ParseErrorKind.COMMA_EXPECTED, TokenType.INTEGER)

    def test_comma_expected_between_parameters(self, parse):
        self.assert_fails(parse, "{f(a b): x}", ParseErrorKind.COMMA_EXPECTED, TokenType.IDENTIFIER)

    def test_unclosed_object(self, parse):
        self.assert_fails(parse, "{a: 1", ParseErrorKind.COMMA_EXPECTED, TokenType.EOF)

    def test_colon_expected(self, parse):
        self.assert_fails(parse, "{a 1}", ParseErrorKind.COLON_EXPECTED, TokenType.INTEGER)
        self.assert_fails(parse, "{f(x) x}", ParseErrorKind.COLON_EXPECTED, TokenType.IDENTIFIER)

    def test_empty_input(self, parse):
        self.assert_fails(parse, "", ParseErrorKind.UNEXPECTED_TOKEN, TokenType.EOF)

    def test_trailing_input(self, parse):
        self.assert_fails(parse, "a b", ParseErrorKind.UNEXPECTED_TOKEN, TokenType.IDENTIFIER)
        self.assert_fails(parse, "7)", ParseErrorKind.UNEXPECTED_TOKEN, TokenType.RPAREN)

    def test_error_token(self, parse):
        self.assert_fails(parse, "+", ParseErrorKind.UNEXPECTED_TOKEN, TokenType.ERROR)

    def test_trailing_comma_in_arguments(self, parse):
        self.assert_fails(parse, "f.g(1,)", ParseErrorKind.UNEXPECTED_TOKEN, TokenType.RPAREN)

    def test_error_carries_location(self, parse):
        error = self.assert_fails(parse, "{a: 1,\n  2: b}", ParseErrorKind.NAME_EXPECTED, TokenType.INTEGER)
        assert (error.location.line, error.location.column) == (2, 3)
        assert error.source_line == "  2: b}"


class TestParserNesting:
    def test_default_depth(self):
        assert DEFAULT_MAX_DEPTH == 200

    def test_deep_but_allowed(self, parse):
        depth = 150
        tree = parse("{a: " * depth + "1" + "}" * depth)
        for _ in range(depth):
            assert isinstance(tree, ObjectLiteral)
            tree = tree.fields[0].definition
        assert tree == IntegerLiteral(1)

    def test_too_deep(self, parse):
        with pytest.raises(ParserError) as exc_info:
            parse("(" * 300 + "x" + ")" * 300)
        assert exc_info.value.kind == ParseErrorKind.NESTING_TOO_DEEP

    def test_custom_limit(self, parse):
        assert parse("((((x))))", max_depth=5) == Identifier("x")
        with pytest.raises(ParserError) as exc_info:
            parse("(((((x)))))", max_depth=5)
        assert exc_info.value.kind == ParseErrorKind.NESTING_TOO_DEEP

    def test_member_chain_within_limit(self, parse):
        tree = parse("a" + ".b" * (DEFAULT_MAX_DEPTH - 1))
        links = 0
        while isinstance(tree, MemberAccess):
            links += 1
            tree = tree.owner
        assert links == DEFAULT_MAX_DEPTH - 1
        assert tree == Identifier("a")

    @pytest.mark.parametrize("links", [DEFAULT_MAX_DEPTH, 350, 1000])
    def test_member_chain_too_long(self, parse, links):
        with pytest.raises(ParserError) as exc_info:
            parse("a" + ".b" * links)
        assert exc_info.value.kind == ParseErrorKind.NESTING_TOO_DEEP

    def test_call_chain_too_long(self, parse):
        with pytest.raises(ParserError) as exc_info:
            parse("a" + ".f(1)" * 1000)
        assert exc_info.value.kind == ParseErrorKind.NESTING_TOO_DEEP

    def test_chain_links_count_with_other_nesting(self, parse):
        assert parse("(a.b.c)", max_depth=4) == MemberAccess(
            MemberAccess(Identifier("a"), "b"), "c"
        )
        with pytest.raises(ParserError) as exc_info:
            parse("((a.b.c))", max_depth=4)
        assert exc_info.value.kind == ParseErrorKind.NESTING_TOO_DEEP

    def test_arguments_nest_below_their_link(self, parse):
        assert parse("a.f(b.c)", max_depth=4) is not None
        with pytest.raises(ParserError):
            parse("a.f(b.c.d)", max_depth=4)

    def test_chain_depth_is_released_after_chain(self, parse):
        tree = parse("{x: a.b.c, y: d.e.f}", max_depth=5)
        assert [f.name for f in tree.fields] == ["x", "y"]


class TestParserConstruction:
    def test_requires_eof(self):
        with pytest.raises(ValueError):
            Parser([Token(TokenType.IDENTIFIER, "x")])

    def test_parse_is_repeatable(self, parser_factory):
        parser = parser_factory("{a: 1}.a")
        assert parser.parse() == parser.parse()

    def test_no_diagnostics_without_source(self, tokenize):
        parser = Parser(tokenize("{a: }"))
        with pytest.raises(ParserError):
            parser.parse()
        assert parser.get_diagnostics() == []
        assert parser.render_diagnostics() == ""

    def test_locations_point_at_source(self, parse):
        tree = parse("  a.b")
        assert tree.location.column == 3
        assert tree.owner.location.column == 3


class TestParserDiagnostics:
    """Rich diagnostics recorded alongside the raised error."""

    def diagnose(self, parser_factory, source, **kwargs):
        parser = parser_factory(source, **kwargs)
        with pytest.raises(ParserError):
            parser.parse()
        assert len(parser.diagnostics) == 1
        return parser, parser.diagnostics[0]

    def test_unexpected_token(self, parser_factory):
        _, diag = self.diagnose(parser_factory, "{foo: }")
        assert diag.code == ErrorCode.E0201
        assert diag.message == "expected an expression, found '}'"
        assert diag.primary_label.span.start_col == 7

    def test_unclosed_delimiter(self, parser_factory):
        _, diag = self.diagnose(parser_factory, "(a")
        assert diag.code == ErrorCode.E0202
        assert diag.message == "unclosed delimiter '('"
        assert any(not label.is_primary for label in diag.labels)

    def test_missing_colon(self, parser_factory):
        _, diag = self.diagnose(parser_factory, "{a 1}")
        assert diag.code == ErrorCode.E0203
        assert diag.message == "expected ':', found '1'"
        assert diag.helps

    def test_unexpected_character(self, parser_factory):
        _, diag = self.diagnose(parser_factory, "a + b")
        assert diag.code == ErrorCode.E0208

    def test_nesting(self, parser_factory):
        _, diag = self.diagnose(parser_factory, "((x))", max_depth=2)
        assert diag.code == ErrorCode.E0209
        assert diag.notes == ["the maximum nesting depth is 2"]

    def test_long_member_chain(self, parser_factory):
        _, diag = self.diagnose(parser_factory, "a" + ".b" * 350)
        assert diag.code == ErrorCode.E0209
        assert diag.notes == [f"the maximum nesting depth is {DEFAULT_MAX_DEPTH}"]

    def test_duplicate_field(self, parser_factory):
        _, diag = self.diagnose(parser_factory, "{f(a): a, f(b): b}")
        assert diag.code == ErrorCode.E0204
        assert diag.message == "duplicate field name 'f'"
        assert diag.primary_label.span.start_col == 11
        (first,) = [label for label in diag.labels if not label.is_primary]
        assert first.span.start_col == 2
        assert first.message == "'f' first defined here"

    def test_render(self, parser_factory):
        parser, _ = self.diagnose(parser_factory, "{foo: }")
        rendered = parser.render_diagnostics(use_color=False)
        assert "error[E0201]" in rendered
        assert "test.obj:1:7" in rendered
        assert "{foo: }" in rendered
        assert "      ^" in rendered
