import pytest

from conftest import FakeRunner, failed, ok
from prockiller.config import ConfigManager
from prockiller.errors import CommandTimeoutError
from prockiller.process import Terminator, UnixPlatform
from prockiller.session import PortScanSession
from prockiller.types import ProcessRecord, SessionState
from prockiller.ui import ProcKillerApp
from prockiller.ui.widgets import ProcessTable

pytestmark = pytest.mark.asyncio


class ListResolver:
    def __init__(self, processes):
        self.processes = processes
        self.calls: list[int] = []

    async def resolve(self, port):
        self.calls.append(port)
        return list(self.processes)


class FlakyResolver(ListResolver):
    """Times out on the first scan."""

    async def resolve(self, port):
        self.calls.append(port)
        if len(self.calls) == 1:
            raise CommandTimeoutError("lsof", 10)
        return list(self.processes)


def record(pid: int, name: str) -> ProcessRecord:
    return ProcessRecord(pid=pid, name=name, port=3000, protocol="TCP", local_address="*:3000")


@pytest.fixture
def config(tmp_path):
    path = tmp_path / "prockiller.toml"
    path.write_text("[default]\ncheck_updates = false\n")
    return ConfigManager(path)


def make_app(config, resolver, kill_responses=None, initial_port=None):
    terminator = Terminator(UnixPlatform(), FakeRunner(kill_responses or {}))
    session = PortScanSession(resolver, terminator)
    return ProcKillerApp(initial_port=initial_port, config=config, session=session)


async def test_type_port_and_kill_all(config):
    resolver = ListResolver([record(10, "node"), record(20, "nginx")])
    app = make_app(config, resolver, {"kill -9 10": ok(), "kill -9 20": failed("Operation not permitted")})

    async with app.run_test() as pilot:
        await pilot.press("3", "0", "0", "0", "enter")
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert resolver.calls == [3000]
        assert app.session.state == SessionState.RESOLVED
        assert app.screen.query_one(ProcessTable).row_count == 2

        await pilot.press("a")
        assert app.session.state == SessionState.CONFIRMING_ALL

        await pilot.press("y")
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert app.session.state == SessionState.SHOWING_RESULT
        assert [p.pid for p in app.session.processes] == [20]

        await pilot.press("escape")
        await pilot.pause()
        assert app.session.state == SessionState.RESOLVED
        assert app.screen.query_one(ProcessTable).row_count == 1


async def test_initial_port_scans_on_start(config):
    resolver = ListResolver([record(10, "node")])
    app = make_app(config, resolver, initial_port=8080)

    async with app.run_test() as pilot:
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert resolver.calls == [8080]
        assert app.session.state == SessionState.RESOLVED


async def test_invalid_port_does_not_scan(config):
    resolver = ListResolver([])
    app = make_app(config, resolver)

    async with app.run_test() as pilot:
        await pilot.press("9", "9", "9", "9", "9", "enter")
        await pilot.pause()

        assert resolver.calls == []
        assert app.session.state == SessionState.IDLE


async def test_kill_all_disabled_for_single_process(config):
    app = make_app(config, ListResolver([record(10, "node")]))

    async with app.run_test() as pilot:
        await pilot.press("1", "enter")
        await app.workers.wait_for_complete()
        await pilot.pause()

        await pilot.press("a")
        assert app.session.state == SessionState.RESOLVED

        await pilot.press("k")
        assert app.session.state == SessionState.CONFIRMING_SINGLE

        await pilot.press("escape")
        assert app.session.state == SessionState.RESOLVED


async def test_enter_twice_does_not_kill(config):
    app = make_app(config, ListResolver([record(10, "node"), record(20, "nginx")]), {"kill -9 10": ok()})

    async with app.run_test() as pilot:
        await pilot.press("3", "0", "0", "0", "enter")
        await app.workers.wait_for_complete()
        await pilot.pause()

        await pilot.press("enter")
        assert app.session.state == SessionState.CONFIRMING_SINGLE

        await pilot.press("enter")
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert app.session.state == SessionState.CONFIRMING_SINGLE
        assert app.session.terminator.runner.commands == []

        await pilot.press("y")
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert app.session.state == SessionState.SHOWING_RESULT
        assert app.session.terminator.runner.commands == ["kill -9 10"]


async def test_n_cancels_confirmation(config):
    app = make_app(config, ListResolver([record(10, "node"), record(20, "nginx")]))

    async with app.run_test() as pilot:
        await pilot.press("1", "enter")
        await app.workers.wait_for_complete()
        await pilot.pause()

        await pilot.press("n")
        assert app.session.state == SessionState.RESOLVED

        await pilot.press("k")
        assert app.session.state == SessionState.CONFIRMING_SINGLE
        await pilot.press("n")
        assert app.session.state == SessionState.RESOLVED

        await pilot.press("a")
        assert app.session.state == SessionState.CONFIRMING_ALL
        await pilot.press("n")
        assert app.session.state == SessionState.RESOLVED
        assert app.session.terminator.runner.commands == []


async def test_r_retries_failed_scan_then_rescans(config):
    resolver = FlakyResolver([record(10, "node")])
    app = make_app(config, resolver)

    async with app.run_test() as pilot:
        await pilot.press("5", "0", "0", "0", "enter")
        await app.workers.wait_for_complete()
        await pilot.pause()
        assert app.session.state == SessionState.FAILED

        await pilot.press("r")
        await app.workers.wait_for_complete()
        await pilot.pause()
        assert app.session.state == SessionState.RESOLVED

        await pilot.press("r")
        await app.workers.wait_for_complete()
        await pilot.pause()
        assert app.session.state == SessionState.RESOLVED
        assert resolver.calls == [5000, 5000, 5000]
