"""Shared fixtures for analyzer tests."""

from typing import Iterable

import pytest

from ts_analyzer.analyzer import CodePattern, FunctionAnalyzer, FunctionCategory, MatchPolarity


@pytest.fixture
def make_analyzer():
    """Build a FunctionAnalyzer from plain option values."""

    def _make(
        code_block: str = "requiredCode = true",
        fn_types: Iterable[str] = ("exported",),
        invert: bool = False,
        is_regex: bool = False,
    ) -> FunctionAnalyzer:
        return FunctionAnalyzer(
            CodePattern.compile(code_block, is_regex),
            [FunctionCategory(name) for name in fn_types],
            MatchPolarity.FORBID if invert else MatchPolarity.REQUIRE,
        )

    return _make


@pytest.fixture
def analyze(make_analyzer):
    """Analyze a TypeScript snippet and return its FileResult."""

    def _analyze(source: str, file_path: str = "test.ts", **options):
        return make_analyzer(**options).analyze_source(source.encode("utf-8"), file_path)

    return _analyze


@pytest.fixture
def parse(make_analyzer):
    """Parse a TypeScript snippet into a SourceFile."""
    analyzer = make_analyzer()

    def _parse(source: str, file_path: str = "test.ts"):
        return analyzer.parse(source.encode("utf-8"), file_path)

    return _parse
