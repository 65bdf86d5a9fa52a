"""
objlang Utilities Package.

Common utilities for error handling, source locations, and diagnostics.
"""

from objlang.utils.diagnostics import (
    ERROR_DESCRIPTIONS,
    Diagnostic,
    DiagnosticBuilder,
    DiagnosticEmitter,
    DiagnosticLabel,
    DiagnosticLevel,
    ErrorCode,
    SourceSpan,
)
from objlang.utils.errors import (
    ObjLangError,
    ParseErrorKind,
    ParserError,
    SourceLocation,
    StackDisciplineError,
)

__all__ = [
    "ERROR_DESCRIPTIONS",
    "Diagnostic",
    "DiagnosticBuilder",
    "DiagnosticEmitter",
    "DiagnosticLabel",
    "DiagnosticLevel",
    "ErrorCode",
    "SourceSpan",
    "ObjLangError",
    "ParseErrorKind",
    "ParserError",
    "SourceLocation",
    "StackDisciplineError",
]
