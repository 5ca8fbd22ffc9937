"""
JavaScript language configuration.

The tree-sitter javascript grammar parses JSX and decorators, so one
config covers plain modules, CommonJS and React component files.

Plain .js files often carry TypeScript or Flow style annotations that a
build step strips. When the javascript grammar reports errors, the tsx
grammar (annotations plus JSX) is tried, then typescript (angle-bracket
casts, which tsx reads as tags).
"""

from ..config import LanguageConfig


JAVASCRIPT_CONFIG = LanguageConfig(
    name="JavaScript",
    tree_sitter_name="javascript",
    extensions=frozenset({'.js', '.jsx', '.mjs', '.cjs'}),
    fallback_grammars=("tsx", "typescript"),
)
