"""
BaseCommand — Shared foundation for all CLI commands

Commands receive the CLI instance and access its resources through
properties instead of rebuilding them.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..cli import DepwatchCLI


class BaseCommand:
    """Base class for CLI commands with access to shared resources."""

    def __init__(self, cli: 'DepwatchCLI'):
        self._cli = cli

    @property
    def project_dir(self):
        """Project root directory."""
        return self._cli.project_dir

    @property
    def config(self):
        """Resolved configuration (loaded once)."""
        return self._cli.config

    @property
    def symbols(self):
        """Symbol set for display (Unicode/ASCII)."""
        return self._cli.symbols

    @property
    def engine(self):
        """Sync engine for the project (built on first use)."""
        return self._cli.engine
