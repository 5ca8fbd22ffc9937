"""
Commands — CLI command implementations with self-registration

Each command module:
1. Defines XxxCommand class (handler implementation)
2. Exports register_parser(subparsers) to configure its argparse
3. Exports handle(cli, args) to dispatch to handler methods
"""

import importlib
from typing import Dict, Callable

from .base import BaseCommand

# Order determines help display order
COMMAND_MODULES = [
    'init_cmd',
    'check_cmd',
    'watch_cmd',
]

# Handler registry: command_name -> handle function
_handlers: Dict[str, Callable] = {}


def register_all(subparsers) -> None:
    """
    Import each module in COMMAND_MODULES, register its parser and remember
    its handle() under every command name it added.
    """
    _handlers.clear()

    for module_name in COMMAND_MODULES:
        module = importlib.import_module(f'.{module_name}', __package__)
        before = set(subparsers.choices)
        module.register_parser(subparsers)
        for command in set(subparsers.choices) - before:
            _handlers[command] = module.handle


def dispatch(command: str, cli, args) -> int:
    """
    Route a parsed command to its handler.

    Raises:
        KeyError: If no handler is registered for the command
    """
    if command not in _handlers:
        raise KeyError(f"Unknown command: {command}")
    return _handlers[command](cli, args)


__all__ = ['BaseCommand', 'register_all', 'dispatch', 'COMMAND_MODULES']
