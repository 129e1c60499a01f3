"""CLI entry point for ts-analyzer."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import click

from ts_analyzer import __version__
from ts_analyzer.analyzer import (
    CodePattern,
    FunctionAnalyzer,
    FunctionCategory,
    InvalidPatternError,
    MatchPolarity,
    RunResult,
)
from ts_analyzer.analyzer.grammars import LanguageRegistry, get_language_registry
from ts_analyzer.config import configure_logging, get_env_config
from ts_analyzer.discovery import find_files

logger = logging.getLogger(__name__)


def parse_function_types(fn_types: str) -> List[FunctionCategory]:
    """Parse a comma-separated list of function categories.

    Unknown names are dropped; an empty result means the value was invalid.

    Args:
        fn_types: e.g. "exported,internal"

    Returns:
        Requested categories in the order given, without duplicates
    """
    known = {category.value: category for category in FunctionCategory}
    categories: List[FunctionCategory] = []
    for name in fn_types.split(","):
        name = name.strip()
        if name not in known:
            if name:
                logger.warning(f"Ignoring unknown function type: {name}")
            continue
        if known[name] not in categories:
            categories.append(known[name])
    return categories


def _usage_error(ctx: click.Context, message: str) -> None:
    click.echo(f"Error: {message}")
    click.echo(ctx.get_help())
    ctx.exit(1)


@click.command()
@click.option("--code-block", default="", help="Code block to check for.")
@click.option("--regex", "is_regex", is_flag=True, default=False, help="Treat code-block as a regular expression.")
@click.option(
    "--invert", is_flag=True, default=False,
    help="Invert the check (report functions that DO contain the code block).",
)
@click.option("--file-glob", default=None, help="File glob pattern to search (default: **/*.ts).")
@click.option("--dir", "directory", default=".", help="Directory to search in.")
@click.option(
    "--fn-types", default=None,
    help="Function types to check: 'exported', 'internal', 'callback', or a comma-separated combination.",
)
@click.option("--exclude", multiple=True, help="Glob pattern of files to skip (repeatable).")
@click.option("--no-gitignore", is_flag=True, default=False, help="Do not honour the directory's .gitignore.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable verbose output.")
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context,
    code_block: str,
    is_regex: bool,
    invert: bool,
    file_glob: Optional[str],
    directory: str,
    fn_types: Optional[str],
    exclude: Tuple[str, ...],
    no_gitignore: bool,
    verbose: bool,
) -> None:
    """Check that functions in TypeScript files contain a required code block."""
    settings = get_env_config()
    configure_logging(settings["log_level"], verbose)

    file_glob = file_glob or settings["file_glob"]
    fn_types = fn_types or settings["fn_types"]

    categories = parse_function_types(fn_types)
    if not categories:
        _usage_error(
            ctx,
            "Invalid function types. Use 'exported', 'internal', 'callback', or a comma-separated combination",
        )

    if not code_block:
        _usage_error(ctx, "code-block is required")

    try:
        pattern = CodePattern.compile(code_block, is_regex)
    except InvalidPatternError as e:
        click.echo(f"Error: {e}")
        ctx.exit(1)

    if not Path(directory).is_dir():
        click.echo(f"Error changing to directory {directory}: not a directory")
        ctx.exit(1)

    if settings["languages_config"]:
        registry = LanguageRegistry(settings["languages_config"])
    else:
        registry = get_language_registry()

    files = find_files(
        file_glob,
        directory,
        registry=registry,
        exclude_patterns=list(exclude),
        follow_gitignore=not no_gitignore,
    )
    if not files:
        click.echo(f"No files found matching pattern: {file_glob}")
        ctx.exit(1)

    if verbose:
        click.echo(f"Found {len(files)} files to check")

    polarity = MatchPolarity.FORBID if invert else MatchPolarity.REQUIRE
    analyzer = FunctionAnalyzer(pattern, categories, polarity, registry=registry)

    run = RunResult()
    for file_path in files:
        if verbose:
            click.echo(f"Checking file: {file_path}")

        result = analyzer.analyze_file(str(file_path))
        for diagnostic in result.diagnostics:
            click.echo(diagnostic.format())
        if result.error:
            click.echo(result.error)
        run.add(result)

    if not run.passed:
        _print_summary(run, polarity)
        ctx.exit(1)

    if verbose:
        if polarity is MatchPolarity.FORBID:
            click.echo("No functions contain the forbidden code block")
        else:
            click.echo("All functions contain the required code block")


def _print_summary(run: RunResult, polarity: MatchPolarity) -> None:
    click.echo("\nSummary of files with issues:")

    for result in run.failed_files:
        if polarity is MatchPolarity.FORBID:
            click.echo(f"{result.file_path}: {result.issue_count} function(s) containing forbidden code block")
        else:
            click.echo(f"{result.file_path}: {result.issue_count} function(s) missing required code block")

    click.echo(f"\nTotal: {len(run.failed_files)} file(s) with issues")


if __name__ == "__main__":
    main()
