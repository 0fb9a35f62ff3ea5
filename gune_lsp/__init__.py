"""gune Language Server and REPL integration package.

This package provides:
- A pygls-based Language Server for the gune expression language.
- A static indexer that lexes and parses documents without evaluating them.
- A simple TCP REPL server to evaluate code via the existing Interpreter.

Note: The LSP does not evaluate user buffers; it builds a static index from text.
"""

__all__ = [
    "server",
    "indexer",
    "repl_server",
]
