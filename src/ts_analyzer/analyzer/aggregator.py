"""Fold per-function outcomes into a file verdict."""

import logging

from .models import Diagnostic, DiagnosticKind, FileResult, FunctionCandidate, MatchPolarity

logger = logging.getLogger(__name__)


class ResultAggregator:
    """Collect function outcomes for one file."""

    def __init__(self, file_path: str, polarity: MatchPolarity):
        self.polarity = polarity
        self.result = FileResult(file_path=file_path)

    @property
    def failure_kind(self) -> DiagnosticKind:
        if self.polarity is MatchPolarity.FORBID:
            return DiagnosticKind.FORBIDDEN
        return DiagnosticKind.MISSING

    def record_ignored(self, candidate: FunctionCandidate) -> None:
        self.result.functions_found += 1
        self.result.functions_ignored += 1
        logger.info(
            f"{self.result.file_path}:{candidate.start_line} - "
            "Skipping function due to @ts-analyzer-ignore comment"
        )

    def record(self, candidate: FunctionCandidate, passed: bool) -> None:
        """Record a checked function; a failure adds one diagnostic."""
        self.result.functions_found += 1
        self.result.functions_checked += 1
        if passed:
            return

        self.result.diagnostics.append(
            Diagnostic(
                file_path=self.result.file_path,
                line=candidate.start_line,
                kind=self.failure_kind,
                category=candidate.category,
                name=candidate.name,
            )
        )

    def fail(self, message: str) -> FileResult:
        """Mark the file as failed without issues, e.g. when it cannot be read."""
        self.result.error = message
        return self.result
