"""
Tests for import bindings — package identity and binding extraction.

Identity resolution is pure Python. Binding extraction needs a real
syntax tree and is skipped without tree-sitter-language-pack.
"""

import pytest
from pathlib import Path

from depwatch.core.imports import (
    BindingTable,
    ImportBinding,
    build_binding_table,
    resolve_package_identity,
)

try:
    import tree_sitter_language_pack  # noqa: F401
    TREE_SITTER_AVAILABLE = True
except ImportError:
    TREE_SITTER_AVAILABLE = False

requires_tree_sitter = pytest.mark.skipif(
    not TREE_SITTER_AVAILABLE,
    reason="tree-sitter-language-pack not installed"
)


class TestResolvePackageIdentity:
    """Module specifier -> package identity."""

    @pytest.mark.parametrize("specifier,expected", [
        ("lodash", "lodash"),
        ("lodash/fp", "lodash"),
        ("react-dom/client", "react-dom"),
        ("@scope/name", "@scope/name"),
        ("@scope/name/subpath", "@scope/name"),
        ("@babel/core/lib/parse.js", "@babel/core"),
    ])
    def test_package_specifiers(self, specifier, expected):
        assert resolve_package_identity(specifier) == expected

    @pytest.mark.parametrize("specifier", [
        "./utils",
        "../lib/api",
        ".",
        "/abs/module",
        "node:fs",
        "https://cdn.example.com/x.js",
        "",
        "@scope",
        "@scope/",
    ])
    def test_non_package_specifiers(self, specifier):
        assert resolve_package_identity(specifier) is None

    def test_scoped_subpath_and_root_agree(self):
        """@scope/name/subpath and @scope/name are one package."""
        assert resolve_package_identity("@scope/name/subpath") == resolve_package_identity("@scope/name")


class TestBindingTable:
    """Marking bindings by local name."""

    def test_mark_matching_name(self):
        table = BindingTable()
        table.add("lodash", "_")
        assert table.mark("_") is True
        assert table.is_used("lodash") is True
        assert table.bindings_for("lodash")[0].usage_count == 1

    def test_mark_unknown_name(self):
        table = BindingTable()
        table.add("lodash", "_")
        assert table.mark("map") is False
        assert table.is_used("lodash") is False

    def test_same_name_bound_twice_marks_both(self):
        table = BindingTable()
        table.add("axios", "client")
        table.add("got", "client")
        table.mark("client")
        assert table.is_used("axios") and table.is_used("got")

    def test_package_order_is_first_bound(self):
        table = BindingTable()
        table.add("zod", "z")
        table.add("axios", "axios")
        table.add("zod", "ZodError")
        assert table.packages == ["zod", "axios"]
        assert len(table) == 3

    def test_binding_counts_usages(self):
        binding = ImportBinding(package="react", local_name="React")
        binding.mark_used()
        binding.mark_used()
        assert binding.used is True
        assert binding.usage_count == 2


def _bindings(source: str, filename: str = "app.js"):
    from depwatch.core.parsing import TreeSitterParser, default_registry
    tree = TreeSitterParser(default_registry()).parse(Path(filename), source)
    table = build_binding_table(tree.root_node)
    return [(b.package, b.local_name) for b in table.bindings()]


@requires_tree_sitter
class TestBuildBindingTable:
    """Bindings introduced by import and require declarations."""

    def test_default_import(self):
        assert _bindings("import _ from 'lodash';") == [("lodash", "_")]

    def test_named_imports_use_local_alias(self):
        bindings = _bindings("import { useState, useEffect as useFx } from 'react';")
        assert bindings == [("react", "useState"), ("react", "useFx")]

    def test_namespace_import(self):
        assert _bindings("import * as fp from 'lodash/fp';") == [("lodash", "fp")]

    def test_default_and_named_together(self):
        bindings = _bindings("import React, { Component } from 'react';")
        assert bindings == [("react", "React"), ("react", "Component")]

    def test_scoped_import(self):
        assert _bindings("import { render } from '@testing-library/react';") == [
            ("@testing-library/react", "render"),
        ]

    def test_side_effect_import_binds_nothing(self):
        assert _bindings("import 'normalize.css';") == []

    def test_relative_import_binds_nothing(self):
        assert _bindings("import util from './util';\nimport cfg from '/etc/cfg';") == []

    def test_require_identifier(self):
        assert _bindings("const axios = require('axios');") == [("axios", "axios")]

    def test_require_destructured(self):
        bindings = _bindings("const { get, post: send } = require('axios');")
        assert bindings == [("axios", "get"), ("axios", "send")]

    def test_require_relative_binds_nothing(self):
        assert _bindings("const helpers = require('./helpers');") == []

    def test_require_non_literal_binds_nothing(self):
        assert _bindings("const name = 'axios';\nconst lib = require(name);") == []

    def test_plain_call_is_not_require(self):
        assert _bindings("const data = load('axios');") == []

    def test_nested_require(self):
        source = "function f() {\n  const chalk = require('chalk');\n  return chalk;\n}\n"
        assert _bindings(source) == [("chalk", "chalk")]

    def test_typescript_import(self):
        source = "import type { AxiosResponse } from 'axios';\nlet r: AxiosResponse;\n"
        assert _bindings(source, "api.ts") == [("axios", "AxiosResponse")]
