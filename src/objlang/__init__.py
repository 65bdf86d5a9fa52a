"""
objlang - a minimal object-expression language front end.

objlang parses expressions made of names, integers, object literals and
postfix field/method chains, then lifts every object literal and its methods
into flat top-level definitions.
"""

from objlang.compiler import compile_file, compile_source
from objlang.compiler.lexer import Lexer
from objlang.compiler.lifter import Lifter, lift
from objlang.compiler.parser import Parser, parse

__version__ = "0.1.0"
__all__ = [
    "compile_source",
    "compile_file",
    "Lexer",
    "Parser",
    "parse",
    "Lifter",
    "lift",
]
