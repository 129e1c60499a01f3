"""Tests for the ts-analyzer command line."""

import re
from pathlib import Path

import pytest
from click.testing import CliRunner

from ts_analyzer.analyzer import FunctionCategory
from ts_analyzer.cli import main, parse_function_types

FILES = {
    "file1.ts": """
export function func1() {
    using ctx = getContext();
    return true;
}

export function func2() {
    using _ = getContext();
    return true;
}
""",
    "file2.ts": """
export function func3() {
    using myContext = getContext();
    return true;
}

export function func4() {
    const ctx = getContext(); // Not using the "using" keyword
    return true;
}
""",
}


@pytest.fixture
def project(tmp_path: Path) -> Path:
    for name, content in FILES.items():
        (tmp_path / name).write_text(content)
    return tmp_path


def _run(*args: str):
    return CliRunner().invoke(main, list(args))


def _files_with_issues(output: str) -> int:
    match = re.search(r"Total: (\d+) file\(s\) with issues", output)
    return int(match.group(1)) if match else 0


def test_parse_function_types():
    assert parse_function_types("exported") == [FunctionCategory.EXPORTED]
    assert parse_function_types(" internal , callback,internal") == [
        FunctionCategory.INTERNAL,
        FunctionCategory.CALLBACK,
    ]
    assert parse_function_types("exported,bogus") == [FunctionCategory.EXPORTED]
    assert parse_function_types("bogus") == []


def test_exact_match_reports_both_files(project):
    result = _run("--code-block", "using ctx = getContext()", "--dir", str(project), "--file-glob", "*.ts")

    assert result.exit_code == 1
    assert _files_with_issues(result.output) == 2
    assert "function(s) missing required code block" in result.output


def test_regex_match(project):
    result = _run(
        "--code-block", r"using [a-z_]+ = getContext\(\)",
        "--regex",
        "--dir", str(project),
        "--file-glob", "*.ts",
    )

    assert result.exit_code == 1
    assert _files_with_issues(result.output) == 1
    file2 = str((project / "file2.ts").resolve())
    # myContext has an upper-case letter, func4 uses const
    assert f"{file2}:2 - Missing required code block" in result.output
    assert f"{file2}:7 - Missing required code block" in result.output
    assert f"{file2}: 2 function(s) missing required code block" in result.output


def test_regex_match_inverted(project):
    result = _run(
        "--code-block", r"using [a-z_]+ = getContext\(\)",
        "--regex",
        "--invert",
        "--dir", str(project),
        "--file-glob", "*.ts",
    )

    assert result.exit_code == 1
    assert _files_with_issues(result.output) == 1
    assert "function(s) containing forbidden code block" in result.output
    assert "Contains forbidden code block" in result.output


def test_all_functions_pass(tmp_path):
    (tmp_path / "ok.ts").write_text("\nexport function ok() {\n    const requiredCode = true;\n}\n")

    result = _run("--code-block", "requiredCode = true", "--dir", str(tmp_path), "--verbose")

    assert result.exit_code == 0
    assert "Found 1 files to check" in result.output
    assert "All functions contain the required code block" in result.output


def test_ignore_comment_end_to_end(tmp_path):
    (tmp_path / "file1.ts").write_text(
        "\nexport function func1() {\n    using ctx = getContext();\n}\n"
        "\n// @ts-analyzer-ignore\nexport function func2() {\n    return true;\n}\n"
    )
    (tmp_path / "file2.ts").write_text(
        "\nexport function func3() {\n    return true;\n}\n"
        "\n// @ts-analyzer-ignore\nexport const func4 = () => {\n    return true;\n};\n"
    )

    result = _run("--code-block", "using", "--dir", str(tmp_path))

    assert result.exit_code == 1
    assert _files_with_issues(result.output) == 1
    assert f"{(tmp_path / 'file2.ts').resolve()}: 1 function(s)" in result.output


def test_missing_code_block(project):
    result = _run("--dir", str(project))

    assert result.exit_code == 1
    assert "Error: code-block is required" in result.output


def test_invalid_function_types(project):
    result = _run("--code-block", "x", "--fn-types", "public", "--dir", str(project))

    assert result.exit_code == 1
    assert "Error: Invalid function types" in result.output


def test_invalid_regex_aborts_run(project):
    result = _run("--code-block", "getContext(", "--regex", "--dir", str(project))

    assert result.exit_code == 1
    assert "Error compiling regex pattern" in result.output
    assert "Summary of files with issues" not in result.output


def test_no_files_found(tmp_path):
    result = _run("--code-block", "x", "--dir", str(tmp_path))

    assert result.exit_code == 1
    assert "No files found matching pattern: **/*.ts" in result.output


def test_missing_directory(tmp_path):
    result = _run("--code-block", "x", "--dir", str(tmp_path / "nope"))

    assert result.exit_code == 1


def test_fn_types_from_environment(tmp_path, monkeypatch):
    (tmp_path / "internal.ts").write_text("\nfunction helper() {\n    return 1;\n}\n")
    monkeypatch.setenv("TS_ANALYZER_FN_TYPES", "internal")

    result = _run("--code-block", "requiredCode", "--dir", str(tmp_path))

    assert result.exit_code == 1
    assert "internal.ts:2 - Missing required code block" in result.output


def test_unknown_log_level_does_not_abort(tmp_path, monkeypatch):
    (tmp_path / "ok.ts").write_text("\nexport function ok() {\n    const requiredCode = true;\n}\n")
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    result = _run("--code-block", "requiredCode", "--dir", str(tmp_path))

    assert result.exit_code == 0
    assert result.exception is None
