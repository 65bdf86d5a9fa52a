"""
Pytest configuration and shared fixtures for objlang tests.
"""

import pytest

from objlang.compiler import CompilationResult, CompilerConfig, compile_source
from objlang.compiler.ast_nodes import Expression
from objlang.compiler.lexer import Lexer
from objlang.compiler.lifter import LiftResult, Lifter
from objlang.compiler.parser import Parser
from objlang.compiler.tokens import Token


@pytest.fixture
def lexer_factory():
    """Factory fixture for creating lexers."""

    def _create_lexer(source: str, filename: str = "test.obj") -> Lexer:
        return Lexer(source, filename)

    return _create_lexer


@pytest.fixture
def parser_factory(lexer_factory):
    """Factory fixture for creating parsers from source (with diagnostics enabled)."""

    def _create_parser(source: str, **kwargs) -> Parser:
        tokens = lexer_factory(source).tokenize()
        return Parser(tokens, source=source, filename="test.obj", **kwargs)

    return _create_parser


@pytest.fixture
def tokenize(lexer_factory):
    """Fixture to tokenize source code."""

    def _tokenize(source: str) -> list[Token]:
        return lexer_factory(source).tokenize()

    return _tokenize


@pytest.fixture
def parse(parser_factory):
    """Fixture to parse source code into a tree."""

    def _parse(source: str, **kwargs) -> Expression:
        return parser_factory(source, **kwargs).parse()

    return _parse


@pytest.fixture
def lift(parse):
    """Fixture to parse and lift source code."""

    def _lift(source: str) -> LiftResult:
        return Lifter().lift(parse(source))

    return _lift


@pytest.fixture
def compile_program():
    """Fixture running the whole pipeline."""

    def _compile(source: str, max_depth: int | None = None) -> CompilationResult:
        config = CompilerConfig(max_depth=max_depth) if max_depth is not None else None
        return compile_source(source, filename="test.obj", config=config)

    return _compile
