"""
Language configurations for usage detection.

- javascript.py: JavaScript with JSX (.js, .jsx, .mjs, .cjs)
- typescript.py: TypeScript (.ts, .mts, .cts) and TSX (.tsx)
"""

from .javascript import JAVASCRIPT_CONFIG
from .typescript import TYPESCRIPT_CONFIG, TSX_CONFIG

ALL_CONFIGS = (JAVASCRIPT_CONFIG, TYPESCRIPT_CONFIG, TSX_CONFIG)

__all__ = [
    'JAVASCRIPT_CONFIG',
    'TYPESCRIPT_CONFIG',
    'TSX_CONFIG',
    'ALL_CONFIGS',
]
