"""
SourceAnalyzer — Which external packages does one file really use?

Detection is syntactic and scope-blind. A package counts as used when any
of its bindings is referenced anywhere in the file, or when a heuristic
fires:

- any JSX element in the file uses ``react`` (the classic JSX transform
  needs it even when nothing imports it)
- a tagged template on ``styled.<tag>`` uses ``styled-components``

Any identifier with a bound name counts, even an unrelated local variable
that shadows the import. A kept-but-unused dependency is cheap; removing
one that is used breaks the build.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from loguru import logger

from ..errors import ParseError
from .imports import (
    BindingTable,
    ImportBinding,
    build_binding_table,
    node_text,
    require_specifier,
)
from .parsing import TreeSitterParser, default_registry

if TYPE_CHECKING:
    from tree_sitter import Node


IMPLICIT_MARKUP_PACKAGE = 'react'
STYLED_TAG = 'styled'
STYLED_PACKAGE = 'styled-components'

MARKUP_ELEMENTS = frozenset({'jsx_element', 'jsx_self_closing_element'})
MARKUP_TAGS = frozenset({'jsx_opening_element', 'jsx_self_closing_element'})
REFERENCE_NODES = frozenset({'identifier', 'type_identifier', 'shorthand_property_identifier'})


@dataclass
class FileAnalysis:
    """Usage result for one file."""
    path: str
    bindings: List[ImportBinding] = field(default_factory=list)
    used: Tuple[str, ...] = ()
    heuristics: Tuple[str, ...] = ()
    has_markup: bool = False

    @property
    def used_packages(self) -> Tuple[str, ...]:
        return self.used

    @property
    def unused_packages(self) -> Tuple[str, ...]:
        """Imported packages with no usage signal in this file."""
        seen: Dict[str, None] = {}
        for binding in self.bindings:
            if binding.package not in self.used:
                seen[binding.package] = None
        return tuple(seen)

    def usage_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for binding in self.bindings:
            counts[binding.package] = counts.get(binding.package, 0) + binding.usage_count
        return counts


class _UsageWalker:
    """Single pass over a tree, marking bindings and recording heuristic hits."""

    def __init__(self, table: BindingTable):
        self.table = table
        self.heuristics: Dict[str, None] = {}
        self.has_markup = False

    def walk(self, root: 'Node') -> None:
        stack = [root]
        while stack:
            node = stack.pop()
            children = self._visit(node)
            if children:
                stack.extend(reversed(children))

    def _visit(self, node: 'Node') -> List['Node']:
        """Handle one node; return the children still to be visited."""
        kind = node.type

        if kind == 'import_statement':
            return []

        if kind in MARKUP_ELEMENTS:
            self.has_markup = True

        if kind in MARKUP_TAGS:
            name = node.child_by_field_name('name')
            if name is None:
                # <> fragment
                return node.children
            tag = _leftmost_identifier(name)
            if tag:
                self.table.mark(tag)
            return _without(node.children, name)

        if kind == 'jsx_closing_element':
            return []

        if kind == 'variable_declarator':
            value = node.child_by_field_name('value')
            if require_specifier(value) is not None:
                # Left side is the binding itself, not a reference
                return [value]
            return node.children

        if kind == 'call_expression':
            self._check_styled(node)
            return node.children

        if kind == 'member_expression':
            obj = node.child_by_field_name('object')
            if obj is not None and obj.type == 'identifier':
                self.table.mark(node_text(obj))
                return _without(node.children, obj)
            return node.children

        if kind in REFERENCE_NODES:
            self.table.mark(node_text(node))
            return []

        return node.children

    def _check_styled(self, node: 'Node') -> None:
        # styled.button`...` parses as a call whose arguments are a template
        arguments = node.child_by_field_name('arguments')
        if arguments is None or arguments.type != 'template_string':
            return
        tag = node.child_by_field_name('function')
        if tag is None or tag.type != 'member_expression':
            return
        obj = tag.child_by_field_name('object')
        if obj is not None and obj.type == 'identifier' and node_text(obj) == STYLED_TAG:
            self.heuristics[STYLED_PACKAGE] = None


def _without(children, skip: 'Node') -> List['Node']:
    """Children minus one node, compared by position."""
    return [
        child for child in children
        if (child.start_byte, child.end_byte, child.type) != (skip.start_byte, skip.end_byte, skip.type)
    ]


def _leftmost_identifier(node: 'Node') -> Optional[str]:
    """``Foo`` for ``<Foo>``, ``Motion`` for ``<Motion.div>``."""
    while node is not None:
        if node.type == 'identifier':
            return node_text(node)
        if node.type in ('member_expression', 'nested_identifier'):
            node = node.child_by_field_name('object') or (
                node.named_children[0] if node.named_children else None
            )
            continue
        return None
    return None


class SourceAnalyzer:
    """
    Classifies each imported package of a file as used or unused.

    Usage:
        analyzer = SourceAnalyzer()
        result = analyzer.analyze("src/App.jsx", content)
        result.used_packages     # ('react', 'axios')
        result.unused_packages   # ('lodash',)
    """

    def __init__(self, parser: Optional[TreeSitterParser] = None, debug: bool = False):
        self.parser = parser or TreeSitterParser(default_registry())
        self.debug = debug

    def analyze(self, path, content: str) -> FileAnalysis:
        """
        Analyze one file's content.

        Raises:
            ParseError: If the content cannot be parsed
        """
        tree = self.parser.parse(Path(path), content)
        root = tree.root_node

        table = build_binding_table(root)
        walker = _UsageWalker(table)
        walker.walk(root)

        used: Dict[str, None] = {}
        for package in table.packages:
            if table.is_used(package):
                used[package] = None
        if walker.has_markup:
            used[IMPLICIT_MARKUP_PACKAGE] = None
        for package in walker.heuristics:
            used[package] = None

        heuristics = tuple(walker.heuristics)
        if walker.has_markup:
            heuristics = (IMPLICIT_MARKUP_PACKAGE,) + heuristics

        result = FileAnalysis(
            path=str(path),
            bindings=table.bindings(),
            used=tuple(used),
            heuristics=heuristics,
            has_markup=walker.has_markup,
        )
        if self.debug:
            self._report(result)
        return result

    def analyze_file(self, root_dir: Path, rel_path: str) -> FileAnalysis:
        """
        Read and analyze a file relative to the project root.

        Raises:
            ParseError: If the file cannot be read or parsed
        """
        try:
            content = (Path(root_dir) / rel_path).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(rel_path, f"cannot read file: {e}") from e
        return self.analyze(rel_path, content)

    def _report(self, result: FileAnalysis) -> None:
        if not result.bindings and not result.heuristics:
            return
        counts = result.usage_counts()
        if result.used:
            detail = ", ".join(f"{pkg} ({counts.get(pkg, 0)})" for pkg in result.used)
            logger.debug("{}: {} used: {}", result.path, len(result.used), detail)
        if result.unused_packages:
            logger.debug(
                "{}: {} unused: {}",
                result.path, len(result.unused_packages), ", ".join(result.unused_packages),
            )
