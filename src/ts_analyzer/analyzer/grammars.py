"""Language grammar configuration and detection for tree-sitter."""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# Built-in languages; a JSON config file with the same shape may override them
DEFAULT_LANGUAGES: Dict[str, Dict] = {
    "typescript": {
        "extensions": [".ts", ".mts", ".cts"],
        "tree_sitter_language": "typescript",
        "comment_prefixes": ["//", "/*"],
    },
    "tsx": {
        "extensions": [".tsx"],
        "tree_sitter_language": "tsx",
        "comment_prefixes": ["//", "/*"],
    },
    "javascript": {
        "extensions": [".js", ".jsx", ".mjs", ".cjs"],
        "tree_sitter_language": "javascript",
        "comment_prefixes": ["//", "/*"],
    },
}


class LanguageConfig:
    """Configuration for a C-family scripting language."""

    def __init__(
        self,
        name: str,
        extensions: List[str],
        tree_sitter_language: str,
        comment_prefixes: List[str],
    ):
        """Initialize language configuration.

        Args:
            name: Language name (typescript, tsx, javascript)
            extensions: List of file extensions
            tree_sitter_language: Tree-sitter language identifier
            comment_prefixes: Line prefixes that start a comment
        """
        self.name = name
        self.extensions = extensions
        self.tree_sitter_language = tree_sitter_language
        self.comment_prefixes = comment_prefixes


class LanguageRegistry:
    """Registry of language configurations."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize language registry.

        Args:
            config_path: Optional path to a languages JSON file merged over the defaults
        """
        self.config_path = config_path
        self.languages: Dict[str, LanguageConfig] = {}
        self.extension_map: Dict[str, str] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load built-in language configurations, then the optional JSON file."""
        config_data = dict(DEFAULT_LANGUAGES)

        if self.config_path is not None:
            try:
                with open(self.config_path, "r") as f:
                    config_data.update(json.load(f))
            except Exception as e:
                logger.error(f"Error loading language config from {self.config_path}: {e}")
                raise

        for lang_name, lang_config in config_data.items():
            language = LanguageConfig(
                name=lang_name,
                extensions=lang_config["extensions"],
                tree_sitter_language=lang_config["tree_sitter_language"],
                comment_prefixes=lang_config.get("comment_prefixes", ["//", "/*"]),
            )
            self.languages[lang_name] = language

            # Build extension to language mapping
            for ext in language.extensions:
                self.extension_map[ext] = lang_name

        logger.debug(f"Loaded {len(self.languages)} language configurations")

    def detect_language(self, file_path: str) -> Optional[str]:
        """Detect language from file extension.

        Args:
            file_path: Path to the file

        Returns:
            Language name or None if not recognized
        """
        extension = Path(file_path).suffix.lower()

        if extension in self.extension_map:
            return self.extension_map[extension]

        logger.debug(f"Unknown file extension: {extension}")
        return None

    def get_language_config(self, language: str) -> Optional[LanguageConfig]:
        """Get configuration for a specific language."""
        return self.languages.get(language)

    def get_supported_languages(self) -> List[str]:
        """Get list of supported language names."""
        return list(self.languages.keys())

    def get_supported_extensions(self) -> List[str]:
        """Get list of all supported file extensions."""
        return list(self.extension_map.keys())

    def is_supported_file(self, file_path: str) -> bool:
        """Check if a file is supported for parsing."""
        return self.detect_language(file_path) is not None


# Global registry instance
_registry: Optional[LanguageRegistry] = None


def get_language_registry(config_path: Optional[Path] = None) -> LanguageRegistry:
    """Get the global language registry instance.

    Args:
        config_path: Path to config file (only used on first call)

    Returns:
        Language registry instance
    """
    global _registry
    if _registry is None:
        _registry = LanguageRegistry(config_path)
    return _registry
