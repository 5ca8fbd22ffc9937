"""
CLI -- Command interface

    depwatch init      scaffold package.json script and depwatch.yaml
    depwatch check     one analysis pass, print the plan
    depwatch [watch]   sync now, then on every change (default)
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

from .config import ConfigManager
from .engine import SyncEngine
from .log import setup_logging
from .presentation.symbols import get_symbols
from . import __version__


DEFAULT_COMMAND = 'watch'


class DepwatchCLI:
    """Resources shared by every command of one invocation."""

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir).resolve()
        self.config_manager = ConfigManager(self.project_dir)
        self.config = self.config_manager.load()
        self.symbols = get_symbols()
        self._engine: Optional[SyncEngine] = None

    @property
    def engine(self) -> SyncEngine:
        if self._engine is None:
            self._engine = SyncEngine(self.project_dir, self.config)
        return self._engine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='depwatch',
        description="depwatch -- Keep package.json in step with your imports",
    )
    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("DEPWATCH_PROJECT_PATH", "."),
        help='Project directory (default: DEPWATCH_PROJECT_PATH or current)'
    )
    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'depwatch {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    from .commands import register_all
    register_all(subparsers)
    return parser


def main(argv=None) -> int:
    """
    Main entry point for the depwatch CLI.

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or DEFAULT_COMMAND

    # Console logging before config exists, so config warnings are visible
    setup_logging()
    cli = DepwatchCLI(Path(args.project))
    setup_logging(debug=cli.config.debug)

    from .commands import dispatch
    return dispatch(command, cli, args)


if __name__ == '__main__':
    sys.exit(main())
