"""Presentation — console symbols and plan formatting."""

from .symbols import get_symbols, safe_print, SymbolSet, UNICODE, ASCII
from .formatters import format_plan, format_report, plan_to_dict

__all__ = [
    'get_symbols', 'safe_print', 'SymbolSet', 'UNICODE', 'ASCII',
    'format_plan', 'format_report', 'plan_to_dict',
]
