"""
TypeScript language configurations.

Two grammars: "typescript" rejects JSX (angle-bracket casts conflict with
tags), "tsx" accepts it. Routing is by extension, as the compiler does.
"""

from ..config import LanguageConfig


TYPESCRIPT_CONFIG = LanguageConfig(
    name="TypeScript",
    tree_sitter_name="typescript",
    extensions=frozenset({'.ts', '.mts', '.cts'}),
)

TSX_CONFIG = LanguageConfig(
    name="TSX",
    tree_sitter_name="tsx",
    extensions=frozenset({'.tsx'}),
)
