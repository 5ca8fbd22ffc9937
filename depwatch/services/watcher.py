"""
WatchSession — File events in, debounced sync cycles out.

    IDLE --event--> DEBOUNCING --quiet period--> ANALYZING --done--> IDLE
                        ^   |                        |
                        +---+ event restarts timer   | event: back to DEBOUNCING

A burst of saves collapses into one cycle after ``watch.debounceMs`` of
quiet. Cycles are not locked against each other: if the timer fires while
an earlier cycle still waits on npm/yarn, a second cycle starts anyway.

watchdog delivers events on its observer thread; they are handed to the
asyncio loop with ``call_soon_threadsafe`` so all session state is only
touched from the loop.
"""

import asyncio
import os
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Optional, Set

from loguru import logger
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from ..config import Config
from ..core.scanner import FileScanner
from ..errors import WatchStartError


WATCHED_EVENTS = frozenset({'created', 'modified', 'deleted', 'moved'})


class WatchState(Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    ANALYZING = "analyzing"


class _ChangeHandler(FileSystemEventHandler):
    """Forwards file events from the observer thread to the session's loop."""

    def __init__(self, session: 'WatchSession', loop: asyncio.AbstractEventLoop):
        super().__init__()
        self.session = session
        self.loop = loop

    def on_any_event(self, event):
        if event.is_directory or event.event_type not in WATCHED_EVENTS:
            return
        paths = [event.src_path]
        dest = getattr(event, 'dest_path', None)
        if dest:
            paths.append(dest)
        for path in paths:
            self.loop.call_soon_threadsafe(self.session.notify, os.fsdecode(path))


class WatchSession:
    """
    Owns one watch subscription and its debounce timer.

    Usage:
        session = WatchSession(project_dir, config, engine.run_cycle)
        await session.start()      # initial cycle, then subscribe
        ...
        await session.stop()       # release subscription
    """

    def __init__(
        self,
        project_dir: Path,
        config: Config,
        run_cycle: Callable[[], Awaitable],
        observer_factory: Optional[Callable[[], Observer]] = None,
    ):
        self.project_dir = Path(project_dir)
        self.config = config
        self.run_cycle = run_cycle
        self.observer_factory = observer_factory or Observer
        self.state = WatchState.IDLE
        self.cycles_started = 0

        self._filter = FileScanner(
            self.project_dir,
            config.watch.file_extensions,
            config.watch.ignored_paths,
        )
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._observer = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()
        self._stopped: Optional[asyncio.Event] = None

    @property
    def is_watching(self) -> bool:
        return self._observer is not None

    async def start(self) -> None:
        """
        Run the initial cycle, then subscribe to file changes (watch.onSave).

        Raises:
            WatchStartError: Project root missing or unreadable
        """
        root = self.project_dir
        if not root.is_dir() or not os.access(root, os.R_OK | os.X_OK):
            raise WatchStartError(f"Project directory {root} does not exist or is not readable")

        self._loop = asyncio.get_running_loop()
        self._stopped = asyncio.Event()

        self.state = WatchState.ANALYZING
        await self._run()

        if not self.config.watch.on_save:
            logger.info("watch.onSave is off; not watching for changes")
            return

        observer = self.observer_factory()
        try:
            observer.schedule(_ChangeHandler(self, self._loop), str(root), recursive=True)
            observer.start()
        except OSError as e:
            raise WatchStartError(f"Cannot watch {root}: {e}") from e
        self._observer = observer
        logger.info("Watching {} for changes", root)

    def notify(self, path: str) -> bool:
        """
        Handle one file event (called on the loop thread).

        Returns:
            True if the event (re)started the debounce timer
        """
        rel_path = self._relative(path)
        if rel_path is None or not self._filter.accepts(rel_path):
            return False
        logger.info("File changed: {}", rel_path)
        self._restart_timer()
        return True

    def _relative(self, path: str) -> Optional[str]:
        try:
            rel = Path(path).resolve().relative_to(self.project_dir.resolve())
        except ValueError:
            return None
        return rel.as_posix()

    def _restart_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self.state = WatchState.DEBOUNCING
        self._timer = loop.call_later(self.config.watch.debounce_seconds, self._fire)

    def _fire(self) -> None:
        self._timer = None
        self.state = WatchState.ANALYZING
        task = asyncio.ensure_future(self._run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self) -> None:
        self.cycles_started += 1
        try:
            await self.run_cycle()
        except Exception:
            logger.exception("Analysis cycle failed")
        finally:
            current = asyncio.current_task()
            others = [t for t in self._tasks if t is not current and not t.done()]
            if self._timer is None and not others and self.state is WatchState.ANALYZING:
                self.state = WatchState.IDLE

    async def wait_idle(self) -> None:
        """Wait for cycles already running (does not wait for a pending timer)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def stop(self) -> None:
        """Release the subscription. Running package manager commands continue."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        observer, self._observer = self._observer, None
        if observer is not None:
            observer.stop()
            await asyncio.to_thread(observer.join)
            logger.info("Stopped watching {}", self.project_dir)
        if self.state is WatchState.DEBOUNCING:
            self.state = WatchState.IDLE
        if self._stopped is not None:
            self._stopped.set()

    async def run_forever(self) -> None:
        """
        Start, then block until stop() is called or the task is cancelled.

        Returns right after the initial cycle when watch.onSave is off.
        """
        await self.start()
        if not self.is_watching:
            return
        try:
            await self._stopped.wait()
        finally:
            await self.stop()
