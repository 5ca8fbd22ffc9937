"""
TreeSitterParser — "parse source -> tree" for every registered dialect.

Uses tree-sitter-language-pack to obtain grammars. Parsers are created
lazily, once per grammar, and reused for every file of a cycle.

Usage:
    from depwatch.core.parsing import TreeSitterParser, default_registry

    parser = TreeSitterParser(default_registry())
    tree = parser.parse(Path("src/App.tsx"), content)
    root = tree.root_node
"""

from pathlib import Path
from typing import Dict, TYPE_CHECKING

from loguru import logger

from ...errors import ParseError
from .registry import ParserRegistry

if TYPE_CHECKING:
    from tree_sitter import Parser, Tree


class TreeSitterParser:
    """
    Parses JavaScript/TypeScript source into tree-sitter syntax trees.

    A tree that contains ERROR or MISSING nodes is rejected: the analyzer
    only trusts files one of its grammars fully understands.
    """

    def __init__(self, registry: ParserRegistry):
        self.registry = registry
        self._parsers: Dict[str, 'Parser'] = {}  # Lazy-loaded parsers

    def _get_parser(self, tree_sitter_name: str) -> 'Parser':
        """Get tree-sitter parser for a grammar (lazy-loaded)."""
        parser = self._parsers.get(tree_sitter_name)
        if parser is None:
            from tree_sitter_language_pack import get_parser
            parser = get_parser(tree_sitter_name)
            self._parsers[tree_sitter_name] = parser
        return parser

    def parse(self, file_path: Path, content: str) -> 'Tree':
        """
        Parse file content with the grammars registered for its extension.

        The primary grammar is tried first, then each fallback grammar. The
        first tree without ERROR/MISSING nodes wins.

        Raises:
            ParseError: Unsupported extension, oversized file, or no
                grammar could parse the source cleanly (the reason given
                is the primary grammar's)
        """
        config = self.registry.get_config(file_path)
        if config is None:
            raise ParseError(file_path, "unsupported file type")

        source = content.encode('utf-8')
        if len(source) > config.max_file_size:
            raise ParseError(file_path, f"file larger than {config.max_file_size} bytes")

        first_reason = None
        for grammar in config.grammars:
            try:
                tree = self._get_parser(grammar).parse(source)
            except Exception as e:
                reason = f"{grammar} parser failed: {e}"
            else:
                if not tree.root_node.has_error:
                    if grammar != config.tree_sitter_name:
                        logger.debug("{}: parsed with the {} grammar", file_path, grammar)
                    return tree
                line = _first_error_line(tree.root_node)
                reason = f"syntax error near line {line}" if line else "syntax error"
            if first_reason is None:
                first_reason = reason

        raise ParseError(file_path, first_reason)


def _first_error_line(root) -> int:
    """1-based line of the first ERROR/MISSING node, 0 if none is found."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == 'ERROR' or node.is_missing:
            return node.start_point[0] + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return 0
