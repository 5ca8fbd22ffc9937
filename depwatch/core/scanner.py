"""
FileScanner — Which files a sync cycle analyzes.

Walks the project depth-first with entries in lexicographic order, so two
scans of an unchanged tree list files in the same order. Ignored
directories are pruned: nothing beneath them is visited.
"""

import os
from pathlib import Path
from typing import Iterable, List, Optional

from loguru import logger

from .parsing import IgnoreMatcher


class FileScanner:
    """
    Enumerates candidate source files under a project root.

    Usage:
        scanner = FileScanner(root, ['.js', '.tsx'], ['node_modules', '*.test.*'])
        for rel_path in scanner.scan():
            ...
    """

    def __init__(
        self,
        root: Path,
        extensions: Iterable[str],
        ignored_paths: Iterable[str] = (),
        matcher: Optional[IgnoreMatcher] = None,
    ):
        self.root = Path(root)
        self.extensions = frozenset(ext.lower() for ext in extensions)
        self.matcher = matcher or IgnoreMatcher(ignored_paths)

    def accepts(self, rel_path: str) -> bool:
        """True if a (file) path has an allowed extension and is not ignored."""
        if Path(rel_path).suffix.lower() not in self.extensions:
            return False
        return not self.matcher.is_ignored(rel_path)

    def scan(self) -> List[str]:
        """Relative POSIX paths of every file to analyze, in stable order."""
        files: List[str] = []
        self._walk(self.root, "", files)
        logger.debug("Scanning {} file(s) under {}", len(files), self.root)
        return files

    def _walk(self, directory: Path, prefix: str, files: List[str]) -> None:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.warning("Cannot read directory {}: {}", directory, e)
            return

        for entry in entries:
            rel_path = f"{prefix}{entry.name}"
            if self.matcher.is_ignored(rel_path):
                continue
            try:
                if entry.is_dir(follow_symlinks=False):
                    self._walk(Path(entry.path), f"{rel_path}/", files)
                elif entry.is_file() and Path(entry.name).suffix.lower() in self.extensions:
                    files.append(rel_path)
            except OSError as e:
                logger.warning("Cannot stat {}: {}", rel_path, e)
