"""Structural queries that select function-like nodes by category.

Each category has its own query class that knows which node shapes belong to
it. A shape is the captured node kind plus a fixed chain of ancestors it must
hang under, mirroring a tree-sitter pattern such as::

    (export_statement
        (lexical_declaration
            (variable_declarator
                value: (arrow_function) @func)))

Matching walks the tree in document order and yields matches lazily.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .models import FunctionCategory, FunctionShape

logger = logging.getLogger(__name__)


class NodeKind(str, Enum):
    """Tree-sitter node types the queries care about."""

    FUNCTION_DECLARATION = "function_declaration"
    FUNCTION_EXPRESSION = "function_expression"
    ARROW_FUNCTION = "arrow_function"
    METHOD_DEFINITION = "method_definition"
    EXPORT_STATEMENT = "export_statement"
    LEXICAL_DECLARATION = "lexical_declaration"
    VARIABLE_DECLARATION = "variable_declaration"
    VARIABLE_DECLARATOR = "variable_declarator"
    CALL_EXPRESSION = "call_expression"
    ARGUMENTS = "arguments"
    IDENTIFIER = "identifier"


# `let`/`const` and `var` declarations wrap declarators the same way
DECLARATION_KINDS = (NodeKind.LEXICAL_DECLARATION, NodeKind.VARIABLE_DECLARATION)


@dataclass(frozen=True)
class AncestorStep:
    """One step up the parent chain.

    ``field`` names the field of this ancestor that must hold the node one
    step below it, e.g. ``value`` for ``variable_declarator``.
    """

    kind: NodeKind
    field: Optional[str] = None
    name_kind: Optional[NodeKind] = None  # required type of the ancestor's ``name`` field


@dataclass(frozen=True)
class QueryShape:
    """A captured node kind and the ancestors it must sit under, nearest first."""

    capture: NodeKind
    shape: FunctionShape
    ancestors: Tuple[AncestorStep, ...] = ()

    def matches(self, node: Any) -> bool:
        """Check whether a node has this shape.

        Args:
            node: Tree-sitter node

        Returns:
            True if the node kind and its ancestor chain fit the shape
        """
        if node.type != self.capture.value:
            return False

        child = node
        for step in self.ancestors:
            ancestor = child.parent
            if ancestor is None or ancestor.type != step.kind.value:
                return False
            if step.field and not _same_node(ancestor.child_by_field_name(step.field), child):
                return False
            if step.name_kind:
                name_node = ancestor.child_by_field_name("name")
                if name_node is None or name_node.type != step.name_kind.value:
                    return False
            child = ancestor

        return True


@dataclass(frozen=True)
class QueryMatch:
    """A node captured by a category query."""

    node: Any
    shape: FunctionShape
    category: FunctionCategory


def _same_node(left: Optional[Any], right: Any) -> bool:
    if left is None:
        return False
    return (left.start_byte, left.end_byte, left.type) == (right.start_byte, right.end_byte, right.type)


def _assigned_shapes(
    capture: NodeKind, shape: FunctionShape, outer: Tuple[AncestorStep, ...] = (), name_kind: Optional[NodeKind] = None
) -> List[QueryShape]:
    """Shapes for a function assigned to a declared variable, one per declaration kind."""
    return [
        QueryShape(
            capture=capture,
            shape=shape,
            ancestors=(
                AncestorStep(NodeKind.VARIABLE_DECLARATOR, field="value", name_kind=name_kind),
                AncestorStep(declaration),
            )
            + outer,
        )
        for declaration in DECLARATION_KINDS
    ]


class FunctionQuery(ABC):
    """Base class for category-specific function queries."""

    def __init__(self, category: FunctionCategory):
        self.category = category
        self._by_kind: Dict[str, List[QueryShape]] = {}
        for shape in self.get_shapes():
            self._by_kind.setdefault(shape.capture.value, []).append(shape)

    @abstractmethod
    def get_shapes(self) -> List[QueryShape]:
        """Return the node shapes that belong to this category."""
        pass

    def match(self, node: Any) -> Optional[QueryShape]:
        """Return the first shape matching a node, if any."""
        for shape in self._by_kind.get(node.type, ()):
            if shape.matches(node):
                return shape
        return None

    def run(self, root_node: Any) -> Iterator[QueryMatch]:
        """Yield matches for this query in document order.

        Args:
            root_node: Root of the tree to search

        Yields:
            One QueryMatch per captured node
        """
        for node in walk(root_node):
            shape = self.match(node)
            if shape is not None:
                yield QueryMatch(node=node, shape=shape.shape, category=self.category)


class ExportedFunctionQuery(FunctionQuery):
    """Functions that are the direct payload of an export statement."""

    def __init__(self):
        super().__init__(FunctionCategory.EXPORTED)

    def get_shapes(self) -> List[QueryShape]:
        export = (AncestorStep(NodeKind.EXPORT_STATEMENT),)
        return [
            QueryShape(NodeKind.FUNCTION_DECLARATION, FunctionShape.PLAIN, export),
            *_assigned_shapes(NodeKind.ARROW_FUNCTION, FunctionShape.ARROW_ASSIGNED, export),
            *_assigned_shapes(NodeKind.FUNCTION_EXPRESSION, FunctionShape.EXPRESSION_ASSIGNED, export),
            # export default () => {} / export default function () {}
            QueryShape(NodeKind.ARROW_FUNCTION, FunctionShape.EXPORTED_EXPRESSION, export),
            QueryShape(NodeKind.FUNCTION_EXPRESSION, FunctionShape.EXPORTED_EXPRESSION, export),
        ]


class InternalFunctionQuery(FunctionQuery):
    """Declarations, methods and named function assignments.

    Exported matches are removed later by the classifier.
    """

    def __init__(self):
        super().__init__(FunctionCategory.INTERNAL)

    def get_shapes(self) -> List[QueryShape]:
        return [
            QueryShape(NodeKind.FUNCTION_DECLARATION, FunctionShape.PLAIN),
            QueryShape(NodeKind.METHOD_DEFINITION, FunctionShape.METHOD),
            *_assigned_shapes(
                NodeKind.FUNCTION_EXPRESSION, FunctionShape.EXPRESSION_ASSIGNED, name_kind=NodeKind.IDENTIFIER
            ),
            *_assigned_shapes(NodeKind.ARROW_FUNCTION, FunctionShape.ARROW_ASSIGNED, name_kind=NodeKind.IDENTIFIER),
        ]


class CallbackFunctionQuery(FunctionQuery):
    """Arrow functions and function expressions passed directly as call arguments."""

    def __init__(self):
        super().__init__(FunctionCategory.CALLBACK)

    def get_shapes(self) -> List[QueryShape]:
        in_call = (
            AncestorStep(NodeKind.ARGUMENTS),
            AncestorStep(NodeKind.CALL_EXPRESSION, field="arguments"),
        )
        return [
            QueryShape(NodeKind.ARROW_FUNCTION, FunctionShape.CALLBACK_ARGUMENT, in_call),
            QueryShape(NodeKind.FUNCTION_EXPRESSION, FunctionShape.CALLBACK_ARGUMENT, in_call),
        ]


class QueryRegistry:
    """Registry of category queries."""

    _queries: Dict[FunctionCategory, FunctionQuery] = {
        FunctionCategory.EXPORTED: ExportedFunctionQuery(),
        FunctionCategory.INTERNAL: InternalFunctionQuery(),
        FunctionCategory.CALLBACK: CallbackFunctionQuery(),
    }

    @classmethod
    def get_query(cls, category: FunctionCategory) -> FunctionQuery:
        """Get the query for a category.

        Args:
            category: Function category

        Returns:
            FunctionQuery instance
        """
        return cls._queries[category]

    @classmethod
    def register_query(cls, query: FunctionQuery) -> None:
        """Register a custom query, replacing the one for its category."""
        cls._queries[query.category] = query


def walk(root_node: Any) -> Iterator[Any]:
    """Yield every node under ``root_node`` in pre-order (document order)."""
    stack = [root_node]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def run_queries(root_node: Any, categories: Iterable[FunctionCategory]) -> Iterator[QueryMatch]:
    """Run the queries for each requested category, one after another.

    Categories are visited in declaration order (exported, internal, callback)
    regardless of the order requested, so output is deterministic.

    Args:
        root_node: Root of the parsed tree
        categories: Requested categories

    Yields:
        QueryMatch for every structural match, duplicates included
    """
    if root_node is None:
        raise ValueError("run_queries() needs a syntax tree root, got None")

    requested = set(categories)
    for category in FunctionCategory:
        if category in requested:
            logger.debug(f"Running {category.value} function query")
            yield from QueryRegistry.get_query(category).run(root_node)
