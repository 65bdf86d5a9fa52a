"""
objlang Language Server.

Publishes parse diagnostics, an outline of object-literal fields and
whole-document formatting to LSP clients.
"""

from objlang.lsp.analyzer import DocumentAnalyzer
from objlang.lsp.diagnostics import get_diagnostics_for_document

__all__ = ["DocumentAnalyzer", "get_diagnostics_for_document"]
