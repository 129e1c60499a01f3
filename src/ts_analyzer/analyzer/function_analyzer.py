"""Check functions for a required or forbidden code block using tree-sitter."""

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, Mapping, Optional, Union

import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Parser

from .aggregator import ResultAggregator
from .classifier import FunctionClassifier, is_ignored
from .errors import UnsupportedLanguageError
from .grammars import LanguageRegistry, get_language_registry
from .matcher import COMMENT_PREFIXES, CodePattern, has_pattern, passes
from .models import FileResult, FunctionCandidate, FunctionCategory, MatchPolarity, RunResult, SourceFile
from .queries import run_queries

logger = logging.getLogger(__name__)


class FunctionAnalyzer:
    """Find functions of the requested categories and check their contents."""

    # Language module mapping
    LANGUAGE_MODULES = {
        "typescript": tstypescript,
        "tsx": tstypescript,
        "javascript": tsjavascript,
    }

    # Modules that use non-standard language function names
    LANGUAGE_FUNCTION_OVERRIDES = {
        "typescript": "language_typescript",
        "tsx": "language_tsx",
    }

    def __init__(
        self,
        pattern: Union[CodePattern, str],
        categories: Iterable[FunctionCategory] = (FunctionCategory.EXPORTED,),
        polarity: MatchPolarity = MatchPolarity.REQUIRE,
        is_regex: bool = False,
        registry: Optional[LanguageRegistry] = None,
    ):
        """Initialize the analyzer.

        Args:
            pattern: CodePattern, or the raw code block / regex source
            categories: Function categories to check
            polarity: Require or forbid the code block
            is_regex: Compile a raw string pattern as a regular expression
            registry: Language registry (defaults to the global one)

        Raises:
            InvalidPatternError: If a raw regex string does not compile
        """
        if not isinstance(pattern, CodePattern):
            pattern = CodePattern.compile(pattern, is_regex)

        self.pattern = pattern
        self.categories = frozenset(categories)
        self.polarity = polarity
        self.registry = registry or get_language_registry()
        self.parsers: Dict[str, Parser] = {}
        self.languages: Dict[str, Language] = {}
        self._init_languages()

    def _init_languages(self) -> None:
        """Initialize tree-sitter languages."""
        for lang_name in self.registry.get_supported_languages():
            lang_config = self.registry.get_language_config(lang_name)
            if not lang_config:
                continue

            ts_lang_name = lang_config.tree_sitter_language

            # Get the language module
            module = self.LANGUAGE_MODULES.get(ts_lang_name)
            if not module:
                logger.warning(f"No module found for language: {ts_lang_name}")
                continue

            # Get the language function (either standard or override)
            lang_func_name = self.LANGUAGE_FUNCTION_OVERRIDES.get(ts_lang_name, "language")
            lang_func = getattr(module, lang_func_name, None)

            if not lang_func:
                logger.warning(f"Module {ts_lang_name} has no function '{lang_func_name}'")
                continue

            language = Language(lang_func())
            self.languages[lang_name] = language

            parser = Parser()
            parser.language = language
            self.parsers[lang_name] = parser

            logger.debug(f"Initialized parser for {lang_name}")

    def parse(self, content: bytes, file_path: str, language: Optional[str] = None) -> SourceFile:
        """Parse source bytes into a SourceFile.

        Args:
            content: Raw file content
            file_path: Path used for language detection and reporting
            language: Language name, detected from the extension when omitted

        Returns:
            Parsed source file

        Raises:
            UnsupportedLanguageError: If no parser handles the file
        """
        language = language or self.registry.detect_language(file_path)
        if not language or language not in self.parsers:
            raise UnsupportedLanguageError(f"No parser available for {file_path}")

        tree = self.parsers[language].parse(content)
        if tree.root_node.has_error:
            logger.warning(f"Parse errors in {file_path}")

        return SourceFile(path=file_path, content=content, tree=tree, language=language)

    def find_functions(self, source: SourceFile) -> Iterator[FunctionCandidate]:
        """Yield each in-scope function of a parsed file once."""
        classifier = FunctionClassifier()
        yield from classifier.classify(run_queries(source.root_node, self.categories))

    def check_function(self, source: SourceFile, candidate: FunctionCandidate) -> bool:
        """Check one function against the pattern and polarity.

        Returns:
            True if the function passes
        """
        lang_config = self.registry.get_language_config(source.language)
        prefixes = lang_config.comment_prefixes if lang_config else COMMENT_PREFIXES

        function_source = source.text_of(candidate.node)
        logger.debug(f"Checking function content:\n{function_source}")
        logger.debug(f"Looking for code block: {self.pattern.text}")

        present = has_pattern(function_source, self.pattern, comment_prefixes=prefixes)
        return passes(present, self.polarity)

    def analyze_source(self, content: bytes, file_path: str, language: Optional[str] = None) -> FileResult:
        """Analyze one file's content.

        Args:
            content: Raw file content
            file_path: Path used for language detection and reporting
            language: Language name, detected from the extension when omitted

        Returns:
            FileResult with one diagnostic per failing function
        """
        aggregator = ResultAggregator(file_path, self.polarity)

        try:
            source = self.parse(content, file_path, language)
        except UnsupportedLanguageError:
            raise
        except Exception as e:
            logger.error(f"Error parsing {file_path}: {e}")
            return aggregator.result

        for candidate in self.find_functions(source):
            if is_ignored(source, candidate):
                aggregator.record_ignored(candidate)
                continue
            aggregator.record(candidate, self.check_function(source, candidate))

        result = aggregator.result
        if not result.functions_found:
            logger.debug(f"No functions found in {file_path}")
        logger.info(
            f"Checked {result.functions_checked} functions in {file_path}, "
            f"{result.issue_count} issue(s)"
        )
        return result

    def analyze_file(self, file_path: str) -> FileResult:
        """Read and analyze a file from disk.

        A file that cannot be read or has no parser fails with no issues counted.
        """
        try:
            with open(file_path, "rb") as f:
                content = f.read()
        except OSError as e:
            logger.error(f"Error reading file {file_path}: {e}")
            return ResultAggregator(file_path, self.polarity).fail(f"Error reading file {file_path}: {e}")

        try:
            return self.analyze_source(content, file_path)
        except UnsupportedLanguageError as e:
            logger.error(str(e))
            return ResultAggregator(file_path, self.polarity).fail(str(e))

    def analyze_files(self, files: Union[Mapping[str, bytes], Iterable[str]]) -> RunResult:
        """Analyze several files.

        Args:
            files: Mapping of path to content, or paths to read from disk

        An unsupported file fails on its own without stopping the others.

        Returns:
            RunResult keyed by file path
        """
        run = RunResult()
        if isinstance(files, Mapping):
            for file_path, content in files.items():
                try:
                    run.add(self.analyze_source(content, file_path))
                except UnsupportedLanguageError as e:
                    logger.error(str(e))
                    run.add(ResultAggregator(file_path, self.polarity).fail(str(e)))
        else:
            for file_path in files:
                run.add(self.analyze_file(str(Path(file_path))))
        return run
