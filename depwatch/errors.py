"""
Errors — Exception taxonomy for depwatch

Only WatchStartError ends a run. Everything else is caught at the
boundary that owns it (one file, one package, one cycle) and logged.
"""

from typing import Optional


class DepwatchError(Exception):
    """Base class for all depwatch errors."""


class ConfigLoadError(DepwatchError):
    """Project config could not be read or failed validation."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ParseError(DepwatchError):
    """A source file could not be parsed into a syntax tree."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ManifestError(DepwatchError):
    """Base for package.json failures. Aborts the current cycle only."""


class ManifestReadError(ManifestError):
    """package.json is missing, unreadable, or not a JSON object."""


class ManifestWriteError(ManifestError):
    """package.json could not be written back."""


class ExternalCommandError(DepwatchError):
    """A package manager command exited unsuccessfully."""

    def __init__(self, package: str, command, output: Optional[str] = None):
        self.package = package
        self.command = list(command)
        self.output = output or ""
        detail = f": {self.output}" if self.output else ""
        super().__init__(f"{' '.join(self.command)} failed for {package}{detail}")


class WatchStartError(DepwatchError):
    """The watcher could not start (missing or unreadable project root)."""
