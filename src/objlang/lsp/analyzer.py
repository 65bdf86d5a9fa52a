"""
Document analysis for objlang LSP.

Parses a document once and answers the outline query. The outline lists
every object literal under the name the lifting pass would give it, with
its fields as children: methods as Method symbols, data fields as Field
symbols. Literals nested in a field's definition appear under that field.
"""

from typing import Optional

from lsprotocol import types

from objlang.compiler.ast_nodes import BaseASTVisitor, Expression, Field, ObjectLiteral
from objlang.compiler.lexer import Lexer
from objlang.compiler.lifter import object_name
from objlang.compiler.parser import Parser
from objlang.compiler.tokens import Token
from objlang.lsp.diagnostics import DiagnosticProvider
from objlang.utils.errors import ObjLangError, SourceLocation


def _make_range(location: Optional[SourceLocation], length: int) -> types.Range:
    if location is None:
        start = types.Position(line=0, character=0)
    else:
        start = types.Position(line=location.line - 1, character=location.column - 1)
    end = types.Position(line=start.line, character=start.character + max(1, length))
    return types.Range(start=start, end=end)


class _OutlineBuilder(BaseASTVisitor):
    """Collects document symbols in the order the lifter issues object ids."""

    def __init__(self) -> None:
        self.symbols: list[types.DocumentSymbol] = []
        self._target = self.symbols
        self._next_id = 0

    def visit_object_literal(self, node: ObjectLiteral) -> None:
        object_id = self._next_id
        self._next_id += 1

        children: list[types.DocumentSymbol] = []
        brace = _make_range(node.location, 1)
        self._target.append(
            types.DocumentSymbol(
                name=object_name(object_id),
                kind=types.SymbolKind.Object,
                range=brace,
                selection_range=brace,
                detail=f"{len(node.fields)} field(s)",
                children=children,
            )
        )

        for f in node.fields:
            children.append(self._field_symbol(f))
            outer = self._target
            self._target = children[-1].children
            self.visit(f.definition)
            self._target = outer

    def _field_symbol(self, f: Field) -> types.DocumentSymbol:
        name_range = _make_range(f.location, len(f.name))
        if f.is_method:
            kind = types.SymbolKind.Method
            detail = "(" + ", ".join(f.parameters) + ")"
        else:
            kind = types.SymbolKind.Field
            detail = None
        return types.DocumentSymbol(
            name=f.name,
            kind=kind,
            range=name_range,
            selection_range=name_range,
            detail=detail,
            children=[],
        )


class DocumentAnalyzer:
    """
    Analyzes an objlang document for LSP features.

    Usage:
        analyzer = DocumentAnalyzer(source, uri)
        analyzer.analyze()
        analyzer.diagnostics, analyzer.get_document_symbols()
    """

    def __init__(self, source: str, uri: str) -> None:
        self.source = source
        self.uri = uri

        self.tokens: list[Token] = []
        self.ast: Optional[Expression] = None
        self.diagnostics: list[types.Diagnostic] = []

        self._parse_error: Optional[str] = None

    @property
    def parse_error(self) -> Optional[str]:
        return self._parse_error

    def analyze(self) -> None:
        """Tokenize, parse and collect diagnostics for the document."""
        self.ast = None
        self._parse_error = None

        self.tokens = Lexer(self.source, filename=self.uri).tokenize()
        parser = Parser(self.tokens, source=self.source, filename=self.uri)

        error: Optional[ObjLangError] = None
        try:
            self.ast = parser.parse()
        except ObjLangError as e:
            error = e
            self._parse_error = str(e)

        self.diagnostics = DiagnosticProvider(self.source, self.uri).from_parse(parser, error)

    def get_document_symbols(self) -> list[types.DocumentSymbol]:
        """
        Get the outline of the document.

        Returns:
            One symbol per object literal, in textual order; empty when the
            document does not parse.
        """
        if self.ast is None:
            return []
        builder = _OutlineBuilder()
        builder.visit(self.ast)
        return builder.symbols
