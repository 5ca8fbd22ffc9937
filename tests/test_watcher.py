"""
Tests for WatchSession — debounced cycles driven by file events.

The watchdog observer is replaced by a recording fake; events are fed to
the session directly (notify) or through the watchdog handler.
"""

import asyncio

import pytest
from watchdog.events import DirModifiedEvent, FileClosedEvent, FileModifiedEvent, FileMovedEvent

from depwatch.errors import WatchStartError
from depwatch.services.watcher import WatchSession, WatchState, _ChangeHandler

from tests.factories import make_config


class FakeObserver:
    """Stands in for watchdog.observers.Observer."""

    def __init__(self):
        self.scheduled = []
        self.started = False
        self.stopped = False
        self.joined = False

    def schedule(self, handler, path, recursive=False):
        self.scheduled.append((handler, path, recursive))

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def join(self, timeout=None):
        self.joined = True


class Recorder:
    """run_cycle stand-in counting invocations."""

    def __init__(self):
        self.calls = 0

    async def __call__(self):
        self.calls += 1


@pytest.fixture
def fast_config():
    return make_config(watch={"debounceMs": 20})


def make_session(project, config, run_cycle, observers=None):
    observers = observers if observers is not None else []

    def factory():
        observer = FakeObserver()
        observers.append(observer)
        return observer

    return WatchSession(project.root, config, run_cycle, observer_factory=factory)


class TestStart:

    def test_initial_cycle_then_subscribe(self, project, fast_config):
        recorder = Recorder()
        observers = []
        session = make_session(project, fast_config, recorder, observers)

        async def scenario():
            await session.start()
            assert recorder.calls == 1
            assert session.state is WatchState.IDLE
            assert session.is_watching
            await session.stop()

        asyncio.run(scenario())
        observer = observers[0]
        assert observer.started
        assert observer.scheduled[0][1] == str(project.root)
        assert observer.scheduled[0][2] is True

    def test_on_save_off_runs_once_without_subscribing(self, project):
        config = make_config(watch={"onSave": False})
        recorder = Recorder()
        observers = []
        session = make_session(project, config, recorder, observers)

        asyncio.run(session.run_forever())
        assert recorder.calls == 1
        assert observers == []
        assert not session.is_watching

    def test_missing_root_fails(self, tmp_path, fast_config):
        session = WatchSession(tmp_path / "nope", fast_config, Recorder(), observer_factory=FakeObserver)
        with pytest.raises(WatchStartError):
            asyncio.run(session.start())

    def test_failing_cycle_does_not_stop_session(self, project, fast_config):
        async def broken():
            raise RuntimeError("boom")

        session = make_session(project, fast_config, broken)

        async def scenario():
            await session.start()
            assert session.is_watching
            assert session.state is WatchState.IDLE
            await session.stop()

        asyncio.run(scenario())


class TestNotify:
    """Event filtering."""

    @pytest.fixture
    def session(self, project, fast_config):
        return make_session(project, fast_config, Recorder())

    def test_source_file_starts_timer(self, project, session):
        async def scenario():
            assert session.notify(str(project.root / "src" / "app.js")) is True
            assert session.state is WatchState.DEBOUNCING
            await session.stop()
            assert session.state is WatchState.IDLE

        asyncio.run(scenario())

    @pytest.mark.parametrize("rel_path", [
        "src/styles.css",
        "node_modules/react/index.js",
        "src/app.test.js",
        "package.json",
        "depwatch.yaml",
    ])
    def test_filtered_paths_ignored(self, project, session, rel_path):
        assert session.notify(str(project.root / rel_path)) is False
        assert session.state is WatchState.IDLE

    def test_path_outside_project_ignored(self, tmp_path, session):
        assert session.notify(str(tmp_path / "elsewhere.js")) is False


class TestDebounce:
    """Bursts collapse into one cycle."""

    def test_burst_triggers_single_cycle(self, project, fast_config):
        recorder = Recorder()
        session = make_session(project, fast_config, recorder)
        changed = str(project.root / "src" / "app.js")

        async def scenario():
            await session.start()
            for _ in range(5):
                session.notify(changed)
            assert recorder.calls == 1
            await asyncio.sleep(0.2)
            await session.wait_idle()
            assert recorder.calls == 2
            assert session.state is WatchState.IDLE
            await session.stop()

        asyncio.run(scenario())
        assert session.cycles_started == 2

    def test_stop_cancels_pending_timer(self, project, fast_config):
        recorder = Recorder()
        session = make_session(project, fast_config, recorder)

        async def scenario():
            await session.start()
            session.notify(str(project.root / "src" / "app.js"))
            await session.stop()
            await asyncio.sleep(0.1)

        asyncio.run(scenario())
        assert recorder.calls == 1

    def test_cycles_are_not_mutually_excluded(self, project, fast_config):
        state = {"gate": None, "calls": 0}

        async def slow_cycle():
            state["calls"] += 1
            if state["calls"] > 1:
                await state["gate"].wait()

        session = make_session(project, fast_config, slow_cycle)
        changed = str(project.root / "src" / "app.js")

        async def scenario():
            state["gate"] = asyncio.Event()
            await session.start()
            session.notify(changed)
            await asyncio.sleep(0.1)
            session.notify(changed)
            await asyncio.sleep(0.1)
            # Second cycle still waiting when the third starts
            assert session.cycles_started == 3
            assert session.state is WatchState.ANALYZING
            state["gate"].set()
            await session.wait_idle()
            assert session.state is WatchState.IDLE
            await session.stop()

        asyncio.run(scenario())


class TestChangeHandler:
    """watchdog events reach the session through the loop."""

    def test_file_events_forwarded(self, project, fast_config):
        session = make_session(project, fast_config, Recorder())

        async def scenario():
            handler = _ChangeHandler(session, asyncio.get_running_loop())
            handler.on_any_event(FileModifiedEvent(str(project.root / "src" / "app.js")))
            await asyncio.sleep(0)
            assert session.state is WatchState.DEBOUNCING
            await session.stop()

        asyncio.run(scenario())

    def test_move_notifies_destination(self, project, fast_config):
        session = make_session(project, fast_config, Recorder())

        async def scenario():
            handler = _ChangeHandler(session, asyncio.get_running_loop())
            event = FileMovedEvent(str(project.root / "notes.txt"), str(project.root / "src" / "app.ts"))
            handler.on_any_event(event)
            await asyncio.sleep(0)
            assert session.state is WatchState.DEBOUNCING
            await session.stop()

        asyncio.run(scenario())

    def test_directory_and_close_events_ignored(self, project, fast_config):
        session = make_session(project, fast_config, Recorder())

        async def scenario():
            handler = _ChangeHandler(session, asyncio.get_running_loop())
            handler.on_any_event(DirModifiedEvent(str(project.root / "src")))
            handler.on_any_event(FileClosedEvent(str(project.root / "src" / "app.js")))
            await asyncio.sleep(0)
            assert session.state is WatchState.IDLE

        asyncio.run(scenario())
