"""
objlang Language Server Protocol (LSP) Server.

This module implements an LSP server for objlang using pygls. It provides:

- Document synchronization (open, change, save, close)
- Diagnostics for the first syntax error
- Document symbols (outline of object literals and their fields)
- Document formatting

Usage:
    # Start the server in stdio mode (for IDE integration)
    objlang-lsp

    # Start in TCP mode (for debugging)
    objlang-lsp --tcp --port 2087
"""

import argparse
import logging
from typing import Optional

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from objlang import __version__
from objlang.lsp.analyzer import DocumentAnalyzer
from objlang.lsp.formatting import LSPFormatter

SERVER_NAME = "objlang-lsp"

logger = logging.getLogger(SERVER_NAME)


class ObjLangLanguageServer(LanguageServer):
    """
    Language Server Protocol implementation for objlang.

    Keeps one analyzer per open document and re-analyzes the full text on
    every change.
    """

    def __init__(self) -> None:
        super().__init__(
            name=SERVER_NAME,
            version=f"v{__version__}",
        )

        # Document analyzers cache (uri -> analyzer)
        self._analyzers: dict[str, DocumentAnalyzer] = {}

        self._formatter = LSPFormatter()

        self._register_handlers()

    def _register_handlers(self) -> None:
        """Register all LSP request and notification handlers."""
        # Document synchronization
        self.feature(types.TEXT_DOCUMENT_DID_OPEN)(self._on_did_open)
        self.feature(types.TEXT_DOCUMENT_DID_CHANGE)(self._on_did_change)
        self.feature(types.TEXT_DOCUMENT_DID_SAVE)(self._on_did_save)
        self.feature(types.TEXT_DOCUMENT_DID_CLOSE)(self._on_did_close)

        # Document symbols (outline)
        self.feature(types.TEXT_DOCUMENT_DOCUMENT_SYMBOL)(self._on_document_symbol)

        # Formatting
        self.feature(types.TEXT_DOCUMENT_FORMATTING)(self._on_formatting)

    def _get_analyzer(self, uri: str) -> Optional[DocumentAnalyzer]:
        return self._analyzers.get(uri)

    def _analyze_document(self, uri: str, text: str) -> DocumentAnalyzer:
        """Analyze a document and cache the result."""
        analyzer = DocumentAnalyzer(text, uri)
        analyzer.analyze()
        self._analyzers[uri] = analyzer
        return analyzer

    def _publish_diagnostics(self, uri: str, diagnostics: list[types.Diagnostic]) -> None:
        """Publish diagnostics to the client."""
        self.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )

    # =========================================================================
    # Document Synchronization
    # =========================================================================

    def _on_did_open(self, params: types.DidOpenTextDocumentParams) -> None:
        """Handle document open notification."""
        document = params.text_document
        logger.info("Document opened: %s", document.uri)

        analyzer = self._analyze_document(document.uri, document.text)
        self._publish_diagnostics(document.uri, analyzer.diagnostics)

    def _on_did_change(self, params: types.DidChangeTextDocumentParams) -> None:
        """Handle document change notification."""
        uri = params.text_document.uri
        doc = self.workspace.get_text_document(uri)
        if doc is None:
            return

        logger.debug("Document changed: %s", uri)
        analyzer = self._analyze_document(uri, doc.source)
        self._publish_diagnostics(uri, analyzer.diagnostics)

    def _on_did_save(self, params: types.DidSaveTextDocumentParams) -> None:
        """Handle document save notification."""
        uri = params.text_document.uri
        logger.info("Document saved: %s", uri)

        doc = self.workspace.get_text_document(uri)
        if doc:
            analyzer = self._analyze_document(uri, doc.source)
            self._publish_diagnostics(uri, analyzer.diagnostics)

    def _on_did_close(self, params: types.DidCloseTextDocumentParams) -> None:
        """Handle document close notification."""
        uri = params.text_document.uri
        logger.info("Document closed: %s", uri)

        self._analyzers.pop(uri, None)
        self._publish_diagnostics(uri, [])

    # =========================================================================
    # Document Symbols
    # =========================================================================

    def _on_document_symbol(
        self, params: types.DocumentSymbolParams
    ) -> Optional[list[types.DocumentSymbol]]:
        """Handle document symbols request (for outline view)."""
        uri = params.text_document.uri
        analyzer = self._get_analyzer(uri)
        if analyzer is None:
            doc = self.workspace.get_text_document(uri)
            if doc is None:
                return None
            analyzer = self._analyze_document(uri, doc.source)
        return analyzer.get_document_symbols()

    # =========================================================================
    # Formatting
    # =========================================================================

    def _on_formatting(
        self, params: types.DocumentFormattingParams
    ) -> Optional[list[types.TextEdit]]:
        """Handle document formatting request."""
        doc = self.workspace.get_text_document(params.text_document.uri)
        if doc is None:
            return None
        return self._formatter.format_document(doc.source)


# =============================================================================
# Server Creation and Main Entry Point
# =============================================================================


def create_server() -> ObjLangLanguageServer:
    """Create and configure the objlang language server."""
    server = ObjLangLanguageServer()

    @server.feature(types.INITIALIZED)
    def on_initialized(
        params: types.InitializedParams,  # noqa: ARG001
    ) -> None:
        """Handle initialized notification."""
        logger.info("objlang Language Server initialized successfully")

    @server.feature(types.SHUTDOWN)
    def on_shutdown(
        params: None,  # noqa: ARG001
    ) -> None:
        """Handle shutdown request."""
        logger.info("Shutting down objlang Language Server")

    return server


def create_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="objlang Language Server",
        prog=SERVER_NAME,
    )
    parser.add_argument(
        "--tcp",
        action="store_true",
        help="Start server in TCP mode instead of stdio",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to in TCP mode (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=2087,
        help="Port to listen on in TCP mode (default: 2087)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging level (default: info)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """
    Main entry point for the objlang language server.

    Starts the server in stdio mode unless ``--tcp`` is given.
    """
    args = create_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.setLevel(getattr(logging, args.log_level.upper()))

    server = create_server()

    if args.tcp:
        logger.info("Starting objlang LSP in TCP mode on %s:%s", args.host, args.port)
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting objlang LSP in stdio mode")
        server.start_io()


if __name__ == "__main__":
    main()
