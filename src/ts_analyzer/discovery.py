"""Locate source files to analyze."""

import logging
from pathlib import Path
from typing import List, Optional

from gitignore_parser import parse_gitignore

from .analyzer.grammars import LanguageRegistry, get_language_registry

logger = logging.getLogger(__name__)

# Directory names never analyzed
DEFAULT_EXCLUDES = {
    "node_modules",
    ".git",
    "dist",
    "build",
    ".next",
    ".nuxt",
    "coverage",
    "vendor",
}


def _glob(pattern: str, directory: Path) -> List[Path]:
    """Expand a ``**``-aware glob, relative to ``directory`` unless absolute."""
    if Path(pattern).is_absolute():
        anchor = Path(Path(pattern).anchor)
        return list(anchor.glob(pattern[len(anchor.as_posix()):]))
    return list(directory.glob(pattern))


def find_files(
    pattern: str,
    directory: str = ".",
    registry: Optional[LanguageRegistry] = None,
    exclude_patterns: Optional[List[str]] = None,
    follow_gitignore: bool = True,
) -> List[Path]:
    """Find supported source files matching a glob pattern.

    Args:
        pattern: Glob pattern such as ``**/*.ts``
        directory: Directory relative patterns are resolved against
        registry: Language registry used to filter by extension
        exclude_patterns: Extra glob patterns to exclude (e.g. "*.test.ts")
        follow_gitignore: Whether to respect the directory's .gitignore

    Returns:
        Sorted absolute paths of matching files
    """
    registry = registry or get_language_registry()
    dir_path = Path(directory).resolve()

    gitignore_matcher = None
    if follow_gitignore:
        gitignore_path = dir_path / ".gitignore"
        if gitignore_path.exists():
            try:
                gitignore_matcher = parse_gitignore(gitignore_path)
                logger.info(f"Loaded .gitignore from {gitignore_path}")
            except Exception as e:
                logger.warning(f"Error parsing .gitignore: {e}")

    files = set()
    for file_path in _glob(pattern, dir_path):
        if not file_path.is_file():
            continue

        if not registry.is_supported_file(str(file_path)):
            continue

        try:
            parts = file_path.relative_to(dir_path).parts
        except ValueError:
            parts = file_path.parts
        if any(excluded in parts for excluded in DEFAULT_EXCLUDES):
            continue

        if gitignore_matcher and gitignore_matcher(str(file_path.resolve())):
            logger.debug(f"Ignored by .gitignore: {file_path}")
            continue

        if exclude_patterns and any(file_path.match(excluded) for excluded in exclude_patterns):
            continue

        files.add(file_path.resolve())

    logger.info(f"Found {len(files)} files matching {pattern} in {dir_path}")
    return sorted(files)
