"""
Import bindings — Which local names a file binds to external packages.

Two declaration forms introduce bindings:

    import React, { useState as useS } from 'react'   # default, named, alias
    import * as _ from 'lodash/fp'                     # namespace
    const axios = require('axios')                     # identifier
    const { get, post: send } = require('axios')       # destructured
    import fs = require('fs-extra')                    # TypeScript

Each locally-bound name becomes one ImportBinding. Relative, absolute and
protocol specifiers ('./x', '/x', 'node:fs') never bind.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Iterator, TYPE_CHECKING

if TYPE_CHECKING:
    from tree_sitter import Node


REQUIRE = 'require'

# Bare names of Node.js built-in modules (module.builtinModules, minus the
# internal underscore-prefixed ones). Subpaths such as fs/promises resolve
# to their top-level name first.
NODE_BUILTINS = frozenset({
    'assert', 'async_hooks', 'buffer', 'child_process', 'cluster', 'console',
    'constants', 'crypto', 'dgram', 'diagnostics_channel', 'dns', 'domain',
    'events', 'fs', 'http', 'http2', 'https', 'inspector', 'module', 'net',
    'os', 'path', 'perf_hooks', 'process', 'punycode', 'querystring',
    'readline', 'repl', 'stream', 'string_decoder', 'sys', 'timers', 'tls',
    'trace_events', 'tty', 'url', 'util', 'v8', 'vm', 'wasi',
    'worker_threads', 'zlib',
})


def resolve_package_identity(specifier: str) -> Optional[str]:
    """
    Package identity of a module specifier, or None if it names no package.

    Examples:
        lodash/fp           -> lodash
        @babel/core/lib/x   -> @babel/core
        @babel/core         -> @babel/core
        ./util, /abs/path   -> None
        node:fs             -> None
    """
    if not specifier or specifier.startswith(('.', '/')):
        return None

    parts = specifier.split('/')
    if ':' in parts[0]:
        return None

    if specifier.startswith('@'):
        if len(parts) < 2 or not parts[1] or parts[0] == '@':
            return None
        return f"{parts[0]}/{parts[1]}"
    return parts[0]


@dataclass
class ImportBinding:
    """One local name bound to an external package within one file."""
    package: str
    local_name: str
    used: bool = False
    usage_count: int = 0

    def mark_used(self) -> None:
        self.used = True
        self.usage_count += 1


class BindingTable:
    """
    All import bindings of one file, indexed by local name.

    The same local name may be bound more than once (e.g. re-declared in
    two scopes); a reference marks every binding with that name.
    """

    def __init__(self):
        self._by_name: Dict[str, List[ImportBinding]] = {}
        self._by_package: Dict[str, List[ImportBinding]] = {}

    def add(self, package: str, local_name: str) -> ImportBinding:
        binding = ImportBinding(package=package, local_name=local_name)
        self._by_name.setdefault(local_name, []).append(binding)
        self._by_package.setdefault(package, []).append(binding)
        return binding

    def mark(self, name: str) -> bool:
        """Mark every binding called ``name`` as used. True if any matched."""
        bindings = self._by_name.get(name)
        if not bindings:
            return False
        for binding in bindings:
            binding.mark_used()
        return True

    @property
    def packages(self) -> List[str]:
        """Package identities in first-bound order."""
        return list(self._by_package)

    def bindings(self) -> List[ImportBinding]:
        return [b for bindings in self._by_package.values() for b in bindings]

    def bindings_for(self, package: str) -> List[ImportBinding]:
        return list(self._by_package.get(package, []))

    def is_used(self, package: str) -> bool:
        return any(b.used for b in self._by_package.get(package, []))

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return sum(len(b) for b in self._by_package.values())


# =============================================================================
# Tree walking
# =============================================================================

def node_text(node: 'Node') -> str:
    return node.text.decode('utf-8', errors='replace')


def string_value(node: Optional['Node']) -> Optional[str]:
    """Value of a string literal node, None for anything else (templates, calls)."""
    if node is None or node.type != 'string':
        return None
    return node_text(node)[1:-1]


def require_specifier(value: Optional['Node']) -> Optional[str]:
    """Module specifier of ``require('<literal>')``, None for any other expression."""
    if value is None or value.type != 'call_expression':
        return None
    callee = value.child_by_field_name('function')
    if callee is None or callee.type != 'identifier' or node_text(callee) != REQUIRE:
        return None
    arguments = value.child_by_field_name('arguments')
    if arguments is None or arguments.type != 'arguments' or not arguments.named_children:
        return None
    return string_value(arguments.named_children[0])


def import_statement_bindings(node: 'Node') -> Iterator[tuple]:
    """Yield (specifier, local_name) for every name an import statement binds."""
    specifier = string_value(node.child_by_field_name('source'))

    for child in node.named_children:
        if child.type == 'import_clause':
            for local_name in _import_clause_names(child):
                yield specifier, local_name
        elif child.type == 'import_require_clause':
            # import fs = require('fs-extra')
            required = string_value(child.child_by_field_name('source'))
            for sub in child.named_children:
                if sub.type == 'identifier':
                    yield required, node_text(sub)
                    break


def _import_clause_names(clause: 'Node') -> Iterator[str]:
    for child in clause.named_children:
        if child.type == 'identifier':
            yield node_text(child)
        elif child.type == 'namespace_import':
            for sub in child.named_children:
                if sub.type == 'identifier':
                    yield node_text(sub)
        elif child.type == 'named_imports':
            for spec in child.named_children:
                if spec.type != 'import_specifier':
                    continue
                local = spec.child_by_field_name('alias') or spec.child_by_field_name('name')
                if local is not None and local.type == 'identifier':
                    yield node_text(local)


def pattern_names(pattern: 'Node') -> Iterator[str]:
    """Local names bound by a declarator's left-hand side."""
    if pattern.type == 'identifier':
        yield node_text(pattern)
    elif pattern.type == 'object_pattern':
        for prop in pattern.named_children:
            if prop.type == 'shorthand_property_identifier_pattern':
                yield node_text(prop)
            elif prop.type == 'pair_pattern':
                value = prop.child_by_field_name('value')
                if value is not None:
                    yield from pattern_names(value)
            elif prop.type == 'object_assignment_pattern':
                left = prop.child_by_field_name('left')
                if left is not None and left.type == 'shorthand_property_identifier_pattern':
                    yield node_text(left)
                elif left is not None:
                    yield from pattern_names(left)
            elif prop.type == 'rest_pattern':
                for sub in prop.named_children:
                    yield from pattern_names(sub)
    elif pattern.type == 'assignment_pattern':
        left = pattern.child_by_field_name('left')
        if left is not None:
            yield from pattern_names(left)


def build_binding_table(root: 'Node') -> BindingTable:
    """Collect every import/require binding in the tree."""
    table = BindingTable()
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == 'import_statement':
            for specifier, local_name in import_statement_bindings(node):
                package = resolve_package_identity(specifier) if specifier else None
                if package:
                    table.add(package, local_name)
            continue

        if node.type == 'variable_declarator':
            package = None
            specifier = require_specifier(node.child_by_field_name('value'))
            if specifier:
                package = resolve_package_identity(specifier)
            name = node.child_by_field_name('name')
            if package and name is not None:
                for local_name in pattern_names(name):
                    table.add(package, local_name)

        stack.extend(reversed(node.children))
    return table
