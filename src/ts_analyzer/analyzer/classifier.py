"""Category classification, deduplication and ignore-comment filtering."""

import logging
from typing import Any, Iterable, Iterator, Optional, Set

from .models import FunctionCandidate, FunctionCategory, SourceFile
from .queries import NodeKind, QueryMatch

logger = logging.getLogger(__name__)

IGNORE_MARKER = "@ts-analyzer-ignore"


def _is_kind(node: Optional[Any], kind: NodeKind) -> bool:
    return node is not None and node.type == kind.value


def is_exported(node: Any) -> bool:
    """Check if a function node is exported.

    A function is exported when its parent is an export statement, or when it
    is an arrow function / function expression assigned in a declaration that
    is itself exported (``export const foo = () => {}``).

    Args:
        node: Tree-sitter function node

    Returns:
        True if exported; False if the ancestor chain ends first
    """
    if _is_kind(node.parent, NodeKind.EXPORT_STATEMENT):
        return True

    if node.type in (NodeKind.FUNCTION_EXPRESSION.value, NodeKind.ARROW_FUNCTION.value):
        declarator = node.parent
        if _is_kind(declarator, NodeKind.VARIABLE_DECLARATOR):
            declaration = declarator.parent
            if declaration is not None and _is_kind(declaration.parent, NodeKind.EXPORT_STATEMENT):
                return True

    return False


def extract_function_name(node: Any) -> Optional[str]:
    """Extract the identifier a function is declared or assigned under.

    Args:
        node: Tree-sitter function node

    Returns:
        Name string or None for anonymous functions
    """
    name_node = node.child_by_field_name("name")
    if name_node is None and _is_kind(node.parent, NodeKind.VARIABLE_DECLARATOR):
        name_node = node.parent.child_by_field_name("name")
    return name_node.text.decode("utf-8") if name_node is not None else None


def is_ignored(source: SourceFile, candidate: FunctionCandidate) -> bool:
    """Check whether the line above a function carries the ignore marker.

    Args:
        source: File the candidate belongs to
        candidate: Function candidate

    Returns:
        True if the previous line contains ``@ts-analyzer-ignore``
    """
    line = candidate.start_line
    # A function on the first line has no line above it
    if line <= 1:
        return False

    previous = source.lines[line - 2].strip()
    return IGNORE_MARKER in previous


class FunctionClassifier:
    """Turn raw query matches into deduplicated, categorized candidates.

    One classifier is used per analysis pass over a single file; it remembers
    the identity keys it has already handed out.
    """

    def __init__(self):
        self.seen: Set[int] = set()

    def belongs(self, match: QueryMatch, exported: bool) -> bool:
        """Check a match against the category whose query produced it."""
        if match.category is FunctionCategory.EXPORTED:
            return exported
        if match.category is FunctionCategory.INTERNAL:
            return not exported
        return True  # callbacks are callbacks whatever their export status

    def classify(self, matches: Iterable[QueryMatch]) -> Iterator[FunctionCandidate]:
        """Yield each in-scope function once.

        Args:
            matches: Query matches, possibly overlapping

        Yields:
            FunctionCandidate for every not-yet-seen function in its category
        """
        for match in matches:
            exported = is_exported(match.node)
            if not self.belongs(match, exported):
                continue

            key = match.node.start_byte
            if key in self.seen:
                logger.debug(f"Skipping duplicate match at byte {key}")
                continue
            self.seen.add(key)

            yield FunctionCandidate(
                node=match.node,
                shape=match.shape,
                category=match.category,
                exported=exported,
                name=extract_function_name(match.node),
            )
