"""Function discovery and code-block matching over tree-sitter syntax trees."""

from .errors import AnalyzerError, InvalidPatternError, UnsupportedLanguageError
from .function_analyzer import FunctionAnalyzer
from .matcher import CodePattern, has_pattern
from .models import (
    Diagnostic,
    DiagnosticKind,
    FileResult,
    FunctionCategory,
    MatchPolarity,
    RunResult,
)

__all__ = [
    "AnalyzerError",
    "CodePattern",
    "Diagnostic",
    "DiagnosticKind",
    "FileResult",
    "FunctionAnalyzer",
    "FunctionCategory",
    "InvalidPatternError",
    "MatchPolarity",
    "RunResult",
    "UnsupportedLanguageError",
    "has_pattern",
]
