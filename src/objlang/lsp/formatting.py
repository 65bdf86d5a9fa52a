"""
Code formatting for objlang LSP.

Wraps the canonical printer to produce LSP text edits.
"""

from lsprotocol import types

from objlang.compiler.printer import format_source
from objlang.utils.errors import ParserError


def _end_position(source: str) -> types.Position:
    """Position just past the last character of ``source``."""
    line = source.count("\n")
    character = len(source) - (source.rfind("\n") + 1)
    return types.Position(line=line, character=character)


class LSPFormatter:
    """
    Provides whole-document formatting for the objlang LSP server.

    Usage:
        edits = LSPFormatter().format_document(source)
    """

    def __init__(self, max_depth: int | None = None) -> None:
        self.max_depth = max_depth

    def format_document(self, source: str) -> list[types.TextEdit]:
        """
        Format an entire document.

        Returns:
            A single edit replacing the whole document, or no edits when the
            document is already canonical or does not parse (the parse error
            is reported as a diagnostic instead).
        """
        try:
            formatted = format_source(source, max_depth=self.max_depth)
        except ParserError:
            return []

        if source == formatted:
            return []

        return [
            types.TextEdit(
                range=types.Range(
                    start=types.Position(line=0, character=0),
                    end=_end_position(source),
                ),
                new_text=formatted,
            )
        ]
