"""UsageAggregator — project-wide union of per-file used packages."""

from typing import Dict, Iterable, Tuple

from .analyzer import FileAnalysis


class UsageAggregator:
    """
    Accumulates used package identities across files.

    A package is used project-wide if any single file uses it. Order is
    first-seen across the files added, which follows scan order.
    """

    def __init__(self):
        self._used: Dict[str, None] = {}
        self.files_analyzed = 0

    def add(self, analysis: FileAnalysis) -> None:
        self.add_packages(analysis.used_packages)
        self.files_analyzed += 1

    def add_packages(self, packages: Iterable[str]) -> None:
        for package in packages:
            self._used[package] = None

    @property
    def used(self) -> Tuple[str, ...]:
        return tuple(self._used)

    def __contains__(self, package: str) -> bool:
        return package in self._used

    def __len__(self) -> int:
        return len(self._used)
