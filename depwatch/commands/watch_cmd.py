"""
WatchCommand — Keep dependencies in sync until interrupted

Runs one cycle at startup, then re-runs after every debounced burst of
file changes. Ctrl-C stops the watcher.
"""

import asyncio

from loguru import logger

from ..commands.base import BaseCommand
from ..errors import WatchStartError
from ..presentation.formatters import format_report
from ..presentation.symbols import safe_print
from ..services.watcher import WatchSession


class WatchCommand(BaseCommand):
    """Long-running watch loop."""

    def watch(self) -> int:
        session = WatchSession(self.project_dir, self.config, self._cycle)
        safe_print(f"{self.symbols.watching} Starting depwatch in {self.project_dir}")
        try:
            asyncio.run(session.run_forever())
        except WatchStartError as e:
            logger.error("{}", e)
            return 1
        except KeyboardInterrupt:
            safe_print("depwatch stopped")
        return 0

    async def _cycle(self):
        result = await self.engine.run_cycle()
        if result.report is not None:
            summary = format_report(result.report, self.symbols)
            if summary:
                safe_print(summary)
        return result


def register_parser(subparsers):
    """Register watch command parser."""
    subparsers.add_parser('watch', help='Watch the project and sync dependencies (default)')


def handle(cli, args):
    """Handle watch command dispatch."""
    return WatchCommand(cli).watch()
