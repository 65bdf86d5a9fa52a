"""
Diagnostic generation for objlang LSP.

This module converts parser failures into LSP-compatible diagnostic
messages for display in editors.
"""

from typing import Optional

from lsprotocol import types

from objlang.compiler.lexer import Lexer
from objlang.compiler.parser import Parser
from objlang.utils.diagnostics import Diagnostic as CompilerDiagnostic
from objlang.utils.diagnostics import DiagnosticLevel
from objlang.utils.errors import ObjLangError, ParserError

DIAGNOSTIC_SOURCE = "objlang"


class DiagnosticProvider:
    """
    Generates LSP diagnostics from objlang source code.

    The parser stops at the first error, so a document yields at most one
    diagnostic.
    """

    def __init__(self, source: str, uri: str) -> None:
        """
        Initialize the diagnostic provider.

        Args:
            source: The objlang source code to analyze
            uri: The document URI for location information
        """
        self.source = source
        self.uri = uri
        self._diagnostics: list[types.Diagnostic] = []

    def get_diagnostics(self) -> list[types.Diagnostic]:
        """
        Get all diagnostics for the document.

        Returns:
            List of LSP diagnostic objects
        """
        tokens = Lexer(self.source, filename=self.uri).tokenize()
        parser = Parser(tokens, source=self.source, filename=self.uri)

        error: Optional[ObjLangError] = None
        try:
            parser.parse()
        except ObjLangError as e:
            error = e

        return self.from_parse(parser, error)

    def from_parse(
        self, parser: Parser, error: Optional[ObjLangError]
    ) -> list[types.Diagnostic]:
        """
        Convert the outcome of a parse that already ran into LSP diagnostics.

        Args:
            parser: The parser that was run over this document's source
            error: The error the parse raised, or None if it succeeded

        Returns:
            List of LSP diagnostic objects
        """
        self._diagnostics = []
        if error is None:
            return self._diagnostics

        compiler_diagnostics = parser.get_diagnostics()
        if isinstance(error, ParserError) and compiler_diagnostics:
            for diag in compiler_diagnostics:
                self._add_compiler_diagnostic(diag)
        else:
            self._add_objlang_error(error, types.DiagnosticSeverity.Error)

        return self._diagnostics

    def _add_objlang_error(self, error: ObjLangError, severity: types.DiagnosticSeverity) -> None:
        """Add a plain compiler error as an LSP diagnostic."""
        line = 0
        character = 0
        length = 1

        if error.location:
            line = max(0, error.location.line - 1)  # Convert to 0-indexed
            character = max(0, error.location.column - 1)
        if isinstance(error, ParserError):
            length = max(1, error.token.length)

        self._diagnostics.append(
            types.Diagnostic(
                range=types.Range(
                    start=types.Position(line=line, character=character),
                    end=types.Position(line=line, character=character + length),
                ),
                message=error.message,
                severity=severity,
                source=DIAGNOSTIC_SOURCE,
            )
        )

    def _add_compiler_diagnostic(self, diag: CompilerDiagnostic) -> None:
        """
        Add a rich compiler diagnostic as an LSP diagnostic.

        Args:
            diag: The compiler diagnostic
        """
        severity_map = {DiagnosticLevel.ERROR: types.DiagnosticSeverity.Error}
        severity = severity_map.get(diag.level, types.DiagnosticSeverity.Error)

        line = 0
        character = 0
        end_line = 0
        end_character = 1

        label = diag.primary_label
        if label is not None:
            span = label.span
            line = max(0, span.start_line - 1)
            character = max(0, span.start_col - 1)
            end_line = max(0, span.end_line - 1)
            end_character = max(0, span.end_col - 1)

        message_parts = [diag.message]
        for note in diag.notes:
            message_parts.append(f"note: {note}")
        for help_msg in diag.helps:
            message_parts.append(f"help: {help_msg}")

        self._diagnostics.append(
            types.Diagnostic(
                range=types.Range(
                    start=types.Position(line=line, character=character),
                    end=types.Position(line=end_line, character=end_character),
                ),
                message="\n".join(message_parts),
                severity=severity,
                source=DIAGNOSTIC_SOURCE,
                code=diag.code,
            )
        )


def get_diagnostics_for_document(source: str, uri: str) -> list[types.Diagnostic]:
    """
    Convenience function to get diagnostics for a document.

    Args:
        source: The objlang source code
        uri: The document URI

    Returns:
        List of LSP diagnostics
    """
    provider = DiagnosticProvider(source, uri)
    return provider.get_diagnostics()
