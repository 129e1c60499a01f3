"""Static checker for required (or forbidden) code blocks in TypeScript functions."""

__version__ = "0.1.0"
