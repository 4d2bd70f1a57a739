"""adasyn syntax analyser and its diagnostics."""

from adasyn.parser.errors import CompilationError, Diagnostic, report, wrap
from adasyn.parser.parser import SyntaxAnalyser, TokenSource

__all__ = ["SyntaxAnalyser", "TokenSource", "CompilationError", "Diagnostic", "report", "wrap"]
