"""
Entry point for running the objlang LSP server as a module.

Usage:
    python -m objlang.lsp
    python -m objlang.lsp --tcp --port 2087
"""

from objlang.lsp.server import main

if __name__ == "__main__":
    main()
