"""
objlang Compiler Package.

This package contains the front end of the objlang language:
- Lexer: Tokenizes source text
- Parser: Builds one expression tree on a shared operand stack
- AST: Node definitions for expressions and lifted definitions
- Lifter: Moves object literals and their methods to top-level definitions
- Printer: Renders trees and definitions as text

The pipeline runs tokenize -> parse -> lift. A syntax error stops it before
lifting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from objlang.compiler.ast_nodes import (
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
from objlang.compiler.lexer import Lexer, tokenize
from objlang.compiler.lifter import LiftResult, Lifter, lift
from objlang.compiler.parser import DEFAULT_MAX_DEPTH, Parser, parse
from objlang.compiler.printer import (
    dump_expression,
    dump_lift_result,
    format_expression,
    format_lift_result,
)
from objlang.compiler.tokens import Token, TokenType

logger = logging.getLogger(__name__)

# Input used when no source is given
SAMPLE_PROGRAM = "{foo: bar, baz: 7}.baz"


@dataclass
class CompilerConfig:
    """
    Configuration for one compilation.

    Attributes:
        max_depth: Deepest expression nesting the parser accepts
    """

    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")


@dataclass
class CompilationResult:
    """
    Everything produced by one run of the pipeline.

    Attributes:
        source: The compiled source text
        filename: Name used in diagnostics
        tokens: Token list, ending with EOF
        tree: The parsed expression
        lifted: The lifting pass output
    """

    source: str
    filename: str
    tokens: list[Token] = field(default_factory=list)
    tree: Optional[Expression] = None
    lifted: Optional[LiftResult] = None

    def render(self) -> str:
        """Render the lifted program as text."""
        if self.lifted is None:
            return ""
        return format_lift_result(self.lifted)


def compile_source(
    source: str,
    filename: str = "<input>",
    config: Optional[CompilerConfig] = None,
) -> CompilationResult:
    """
    Tokenize, parse and lift objlang source.

    Args:
        source: The source text
        filename: Filename for error reporting
        config: Optional compiler configuration

    Returns:
        The compilation result

    Raises:
        ParserError: On the first syntax error
    """
    config = config or CompilerConfig()

    tokens = Lexer(source, filename).tokenize()
    logger.debug("%s: %d token(s)", filename, len(tokens))

    parser = Parser(tokens, source=source, filename=filename, max_depth=config.max_depth)
    tree = parser.parse()
    logger.debug("%s: parsed, operand stack peaked at %d slot(s)", filename, parser.stack.high_water)

    lifted = Lifter().lift(tree)

    return CompilationResult(
        source=source,
        filename=filename,
        tokens=tokens,
        tree=tree,
        lifted=lifted,
    )


def compile_file(
    path: Union[str, Path],
    config: Optional[CompilerConfig] = None,
) -> CompilationResult:
    """
    Compile an objlang source file.

    Raises:
        FileNotFoundError: If the file does not exist
        ParserError: On the first syntax error
    """
    path = Path(path)
    source = path.read_text(encoding="utf-8")
    return compile_source(source, filename=str(path), config=config)


__all__ = [
    # Pipeline
    "SAMPLE_PROGRAM",
    "CompilerConfig",
    "CompilationResult",
    "compile_source",
    "compile_file",
    # Stages
    "Lexer",
    "tokenize",
    "Parser",
    "parse",
    "Lifter",
    "lift",
    "LiftResult",
    # Printing
    "format_expression",
    "format_lift_result",
    "dump_expression",
    "dump_lift_result",
    # Tokens and nodes
    "Token",
    "TokenType",
    "Expression",
    "Identifier",
    "IntegerLiteral",
    "MemberAccess",
    "MethodCall",
    "ObjectLiteral",
    "Field",
    "ObjectDefinition",
    "MethodDefinition",
]
