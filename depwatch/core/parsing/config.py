"""
Parsing configuration data structures.

Defines LanguageConfig: which tree-sitter grammar handles which file
extensions. New languages are added via config, not code changes.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LanguageConfig:
    """
    Configuration for parsing a specific language dialect.

    Attributes:
        name: Human-readable name (e.g., "JavaScript", "TSX")
        tree_sitter_name: Grammar name for tree-sitter (e.g., "javascript", "tsx")
        extensions: File extensions this config handles (e.g., {'.js', '.jsx'})
        fallback_grammars: Grammars tried in order when the primary one
            reports syntax errors (e.g., type annotations in a .js file)
        max_file_size: Skip files larger than this (bytes, default 1MB)
    """
    name: str
    tree_sitter_name: str
    extensions: frozenset
    fallback_grammars: tuple = ()
    max_file_size: int = 1_000_000

    @property
    def grammars(self) -> tuple:
        """Primary grammar first, then the fallbacks."""
        return (self.tree_sitter_name,) + tuple(self.fallback_grammars)

    def matches_extension(self, ext: str) -> bool:
        """Check if this config handles the given extension."""
        return ext.lower() in self.extensions
