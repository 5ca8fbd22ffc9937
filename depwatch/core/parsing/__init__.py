"""
Parsing module — Source to syntax tree via tree-sitter.

This module provides the parsing front end for usage detection:
- LanguageConfig: Per-language grammar and extensions
- ParserRegistry: Extension-based routing
- TreeSitterParser: Lazy-loaded parsers, "parse source -> tree"
- IgnoreMatcher: Simplified glob matching for ignored paths

Usage:
    from depwatch.core.parsing import ParserRegistry, TreeSitterParser
    from depwatch.core.parsing.languages import JAVASCRIPT_CONFIG

    registry = ParserRegistry()
    registry.register(JAVASCRIPT_CONFIG)

    parser = TreeSitterParser(registry)
    tree = parser.parse(Path("src/app.jsx"), content)
"""

from .config import LanguageConfig
from .registry import ParserRegistry, default_registry
from .parser import TreeSitterParser
from .exclusions import IgnoreMatcher, compile_pattern

__all__ = [
    'LanguageConfig',
    'ParserRegistry',
    'default_registry',
    'TreeSitterParser',
    'IgnoreMatcher',
    'compile_pattern',
]
