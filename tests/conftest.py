"""
Shared pytest fixtures for the depwatch test suite.

Usage in tests:
    def test_something(project):
        project.write_manifest({"axios": "^1.0.0"})
        project.write("src/api.js", "const axios = require('axios'); axios.get('/');")
        result = project.create_engine().plan()
"""

import pytest

from tests.factories import ProjectFactory, make_config


@pytest.fixture
def project(tmp_path):
    """An empty project directory (no package.json yet)."""
    return ProjectFactory(tmp_path)


@pytest.fixture
def config():
    """Default test configuration."""
    return make_config()
