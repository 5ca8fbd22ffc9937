"""
Ignore-pattern matching for scanning and watching.

Patterns come from ``watch.ignoredPaths``. Each pattern is a simplified
glob with these exact semantics:

- ``*`` matches any run of characters, including none and including ``/``
- every other character is literal (``.`` is a dot, ``?`` is a question mark)
- matching is case-insensitive and anchored at both ends
- a pattern matches a relative path if it matches the whole path
  (POSIX separators) or any single segment of it

Examples:
    node_modules   matches  node_modules, src/node_modules/x.js
    *.test.*       matches  src/app.test.js, not src/latest.js
    src/legacy*    matches  src/legacy-api.js, src/legacy/old.js
    legacy         matches  src/legacy/old.js, not src/legacy-api.js
"""

import re
from pathlib import PurePosixPath
from typing import Iterable, List, Pattern


def compile_pattern(pattern: str) -> Pattern:
    """Translate one simplified glob into an anchored, case-insensitive regex."""
    parts = [re.escape(piece) for piece in pattern.split('*')]
    return re.compile('.*'.join(parts), re.IGNORECASE | re.DOTALL)


class IgnoreMatcher:
    """Decides whether a relative path is excluded."""

    def __init__(self, patterns: Iterable[str] = ()):
        self.patterns: List[str] = [p for p in patterns if p]
        self._compiled = [compile_pattern(p) for p in self.patterns]

    def is_ignored(self, rel_path: str) -> bool:
        """True if any configured pattern matches the path or one of its segments."""
        path = _normalize(rel_path)
        if not path:
            return False
        candidates = [path] + [seg for seg in path.split('/') if seg]
        return any(
            regex.fullmatch(candidate)
            for regex in self._compiled
            for candidate in candidates
        )


def _normalize(rel_path: str) -> str:
    text = str(rel_path).replace('\\', '/')
    if not text or text == '.':
        return ''
    return str(PurePosixPath(text))
