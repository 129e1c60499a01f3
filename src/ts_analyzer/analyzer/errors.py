"""Exceptions raised by the function analyzer."""


class AnalyzerError(Exception):
    """Base class for analyzer errors."""


class InvalidPatternError(AnalyzerError):
    """Raised when a code-block regular expression cannot be compiled."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Error compiling regex pattern {pattern!r}: {reason}")


class UnsupportedLanguageError(AnalyzerError):
    """Raised when no parser is available for a file's language."""
