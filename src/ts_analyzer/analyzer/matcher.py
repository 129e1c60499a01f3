"""Comment-aware search for a code block inside a function's source."""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .errors import InvalidPatternError
from .models import MatchPolarity

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("//", "/*")


@dataclass(frozen=True)
class CodePattern:
    """A literal code block or a compiled regular expression."""

    text: str
    is_regex: bool = False
    regex: Optional[re.Pattern] = None

    @classmethod
    def compile(cls, text: str, is_regex: bool = False) -> "CodePattern":
        """Build a pattern, compiling it when in regex mode.

        Args:
            text: Code block or regular expression source
            is_regex: Treat ``text`` as a regular expression

        Returns:
            CodePattern ready for matching

        Raises:
            InvalidPatternError: If the regular expression does not compile
        """
        if not is_regex:
            return cls(text=text)

        try:
            regex = re.compile(text)
        except re.error as e:
            raise InvalidPatternError(text, str(e)) from e
        return cls(text=text, is_regex=True, regex=regex)

    def search(self, text: str) -> bool:
        """Check whether the pattern occurs anywhere in ``text``."""
        if self.regex is not None:
            return self.regex.search(text) is not None
        return self.text in text


def is_comment_line(line: str, prefixes: Sequence[str] = COMMENT_PREFIXES) -> bool:
    """Check if a line opens a comment.

    Only the line itself is inspected, so the continuation lines of a
    multi-line block comment are treated as code.
    """
    stripped = line.strip()
    return any(stripped.startswith(prefix) for prefix in prefixes)


def has_pattern(
    function_source: str,
    pattern: Union[CodePattern, str],
    is_regex: bool = False,
    comment_prefixes: Sequence[str] = COMMENT_PREFIXES,
) -> bool:
    """Check if a code block is used on a non-comment line of a function.

    Args:
        function_source: Exact source text of the function
        pattern: CodePattern, or the raw code block / regex source
        is_regex: Compile a raw string pattern as a regular expression
        comment_prefixes: Line prefixes that mark a comment line

    Returns:
        True if some non-comment line contains the pattern

    Raises:
        InvalidPatternError: If a raw regex string does not compile
    """
    if not isinstance(pattern, CodePattern):
        pattern = CodePattern.compile(pattern, is_regex)

    # Cheap exit before looking at individual lines
    if not pattern.search(function_source):
        logger.debug("Code block not found in function")
        return False

    for line in function_source.split("\n"):
        if not line.strip():
            continue
        if is_comment_line(line, comment_prefixes):
            continue
        if pattern.search(line):
            logger.debug(f"Found code block in non-comment line: {line}")
            return True

    logger.debug("Code block only found in comments")
    return False


def passes(present: bool, polarity: MatchPolarity) -> bool:
    """Apply match polarity: require wants the block, forbid wants it absent."""
    if polarity is MatchPolarity.REQUIRE:
        return present
    return not present
