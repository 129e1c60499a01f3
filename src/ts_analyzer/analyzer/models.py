"""Data models for function analysis."""

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Any, Dict, List, Optional


class FunctionCategory(str, Enum):
    """Category of functions a run checks."""

    EXPORTED = "exported"
    INTERNAL = "internal"
    CALLBACK = "callback"


class MatchPolarity(str, Enum):
    """Whether the code block must be present or absent."""

    REQUIRE = "require"
    FORBID = "forbid"


class FunctionShape(str, Enum):
    """Structural shape a function candidate was matched under."""

    PLAIN = "plain"  # function foo() {}
    ARROW_ASSIGNED = "arrow_assigned"  # const foo = () => {}
    EXPRESSION_ASSIGNED = "expression_assigned"  # const foo = function () {}
    METHOD = "method"  # class members
    CALLBACK_ARGUMENT = "callback_argument"  # run(() => {})
    EXPORTED_EXPRESSION = "exported_expression"  # export default () => {}


class DiagnosticKind(str, Enum):
    """Kind of issue reported for a failing function."""

    MISSING = "missing"
    FORBIDDEN = "forbidden"

    @property
    def message(self) -> str:
        if self is DiagnosticKind.MISSING:
            return "Missing required code block"
        return "Contains forbidden code block"


@dataclass(frozen=True)
class SourceFile:
    """A file's raw content together with its parsed syntax tree."""

    path: str
    content: bytes
    tree: Any  # tree_sitter.Tree
    language: str

    @property
    def root_node(self) -> Any:
        return self.tree.root_node

    @cached_property
    def lines(self) -> List[str]:
        return self.content.decode("utf-8", errors="replace").split("\n")

    def text_of(self, node: Any) -> str:
        """Return the exact source text spanned by a node."""
        return self.content[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


@dataclass
class FunctionCandidate:
    """A function-like node selected by a structural query."""

    node: Any  # tree_sitter.Node
    shape: FunctionShape
    category: FunctionCategory  # category whose query matched
    exported: bool
    name: Optional[str] = None

    @property
    def identity_key(self) -> int:
        """Start byte offset; unique per function span within a file."""
        return self.node.start_byte

    @property
    def start_line(self) -> int:
        return self.node.start_point[0] + 1  # Tree-sitter uses 0-based rows


@dataclass(frozen=True)
class Diagnostic:
    """One failing function in a file."""

    file_path: str
    line: int
    kind: DiagnosticKind
    category: FunctionCategory
    name: Optional[str] = None

    @property
    def message(self) -> str:
        return self.kind.message

    def format(self) -> str:
        return f"{self.file_path}:{self.line} - {self.message}"


@dataclass
class FileResult:
    """Verdict for a single file."""

    file_path: str
    functions_found: int = 0  # includes ignored candidates
    functions_checked: int = 0
    functions_ignored: int = 0
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error: Optional[str] = None  # set when the file could not be read or matched

    @property
    def issue_count(self) -> int:
        return len(self.diagnostics)

    @property
    def passed(self) -> bool:
        return self.error is None and not self.diagnostics


@dataclass
class RunResult:
    """Verdicts for every file analyzed in one run."""

    files: Dict[str, FileResult] = field(default_factory=dict)

    def add(self, result: FileResult) -> None:
        self.files[result.file_path] = result

    @property
    def failed_files(self) -> List[FileResult]:
        """Failing files sorted by path."""
        return [self.files[path] for path in sorted(self.files) if not self.files[path].passed]

    @property
    def total_issues(self) -> int:
        return sum(result.issue_count for result in self.files.values())

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.files.values())
