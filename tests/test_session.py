import asyncio

import pytest

from conftest import FakeRunner, failed, ok
from prockiller.errors import CommandTimeoutError
from prockiller.process import Terminator, UnixPlatform
from prockiller.session import PortScanSession
from prockiller.types import ProcessRecord, SessionState


def record(pid: int, name: str = "node") -> ProcessRecord:
    return ProcessRecord(pid=pid, name=name, port=3000, protocol="TCP", local_address="*:3000")


class StubResolver:
    """Resolver returning canned results, optionally blocking until released."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls: list[int] = []
        self.gate: asyncio.Event | None = None

    async def resolve(self, port: int) -> list[ProcessRecord]:
        self.calls.append(port)
        if self.gate:
            await self.gate.wait()
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return list(result)


def make_session(resolver, kill_responses=None):
    terminator = Terminator(UnixPlatform(), FakeRunner(kill_responses or {}))
    changes: list[SessionState] = []
    session = PortScanSession(resolver, terminator, on_change=lambda s: changes.append(s.state))
    return session, changes


@pytest.mark.asyncio
class TestScan:
    async def test_idle_to_resolved(self):
        session, changes = make_session(StubResolver([record(1), record(2)]))

        assert await session.scan(3000)

        assert session.state == SessionState.RESOLVED
        assert session.port == 3000
        assert [p.pid for p in session.processes] == [1, 2]
        assert session.selected_index == 0
        assert changes == [SessionState.SCANNING, SessionState.RESOLVED]

    async def test_empty_result_is_resolved_not_failed(self):
        session, _ = make_session(StubResolver([]))

        await session.scan(3000)

        assert session.state == SessionState.RESOLVED
        assert session.processes == []
        assert session.error is None

    async def test_timeout_fails_with_message(self):
        session, _ = make_session(StubResolver(CommandTimeoutError("lsof -i :3000 -P -n", 10)))

        await session.scan(3000)

        assert session.state == SessionState.FAILED
        assert "timed out" in session.error

    async def test_scan_while_scanning_is_ignored(self):
        resolver = StubResolver([record(1)], [record(2)])
        resolver.gate = asyncio.Event()
        session, _ = make_session(resolver)

        first = asyncio.create_task(session.scan(3000))
        await asyncio.sleep(0)
        assert session.state == SessionState.SCANNING
        assert session.busy

        assert not await session.scan(4000)

        resolver.gate.set()
        await first
        assert resolver.calls == [3000]
        assert session.port == 3000
        assert [p.pid for p in session.processes] == [1]

    async def test_rescan_replaces_list(self):
        session, _ = make_session(StubResolver([record(1), record(2)], [record(3)]))
        await session.scan(3000)
        session.select_index(1)

        assert await session.rescan()

        assert [p.pid for p in session.processes] == [3]
        assert session.selected_index == 0

    async def test_retry_after_failure_uses_same_port(self):
        resolver = StubResolver(CommandTimeoutError("lsof", 10), [record(7)])
        session, _ = make_session(resolver)
        await session.scan(8080)

        assert await session.retry()

        assert resolver.calls == [8080, 8080]
        assert session.state == SessionState.RESOLVED
        assert session.error is None

    async def test_retry_only_from_failed(self):
        session, _ = make_session(StubResolver([record(1)]))
        await session.scan(3000)
        assert not await session.retry()

    async def test_dismiss_failure_returns_to_idle(self):
        session, _ = make_session(StubResolver(CommandTimeoutError("lsof", 10)))
        await session.scan(3000)

        assert session.dismiss_result()

        assert session.state == SessionState.IDLE
        assert session.error is None


@pytest.mark.asyncio
class TestSelection:
    async def test_select_index_clamped(self):
        session, _ = make_session(StubResolver([record(1), record(2), record(3)]))
        await session.scan(3000)

        session.select_index(10)
        assert session.selected_index == 2
        session.select_index(-4)
        assert session.selected_index == 0

    async def test_select_ignored_outside_resolved(self):
        session, _ = make_session(StubResolver([record(1), record(2)]))
        await session.scan(3000)
        session.request_kill_selected()

        session.select_index(1)

        assert session.selected_index == 0


@pytest.mark.asyncio
class TestKillSingle:
    async def test_confirm_success_removes_and_reclamps(self):
        session, _ = make_session(
            StubResolver([record(1), record(2)]),
            {"kill -9 2": ok()},
        )
        await session.scan(3000)
        session.select_index(1)

        assert session.request_kill_selected()
        assert session.state == SessionState.CONFIRMING_SINGLE
        assert await session.confirm()

        assert session.state == SessionState.SHOWING_RESULT
        assert session.result.success
        assert [p.pid for p in session.processes] == [1]
        assert session.selected_index == 0

        session.dismiss_result()
        assert session.state == SessionState.RESOLVED

    async def test_failed_kill_keeps_process(self):
        session, _ = make_session(
            StubResolver([record(1)]),
            {"kill -9 1": failed("kill: (1) - Operation not permitted")},
        )
        await session.scan(3000)
        session.request_kill_selected()

        await session.confirm()

        assert not session.result.success
        assert "Permission denied" in session.result.message
        assert [p.pid for p in session.processes] == [1]

    async def test_cancel_returns_to_resolved(self):
        session, _ = make_session(StubResolver([record(1)]))
        await session.scan(3000)
        session.request_kill_selected()

        assert session.cancel()

        assert session.state == SessionState.RESOLVED
        assert [p.pid for p in session.processes] == [1]

    async def test_request_needs_non_empty_list(self):
        session, _ = make_session(StubResolver([]))
        await session.scan(3000)

        assert not session.request_kill_selected()
        assert session.state == SessionState.RESOLVED

    async def test_killing_last_process_returns_to_idle(self):
        session, _ = make_session(StubResolver([record(1)]), {"kill -9 1": ok()})
        await session.scan(3000)
        session.request_kill_selected()
        await session.confirm()

        session.dismiss_result()

        assert session.state == SessionState.IDLE
        assert session.processes == []

    async def test_confirm_outside_dialog_does_nothing(self):
        session, _ = make_session(StubResolver([record(1)]))
        await session.scan(3000)
        assert not await session.confirm()
        assert session.state == SessionState.RESOLVED


@pytest.mark.asyncio
class TestKillAll:
    async def test_needs_more_than_one_process(self):
        session, _ = make_session(StubResolver([record(1)]))
        await session.scan(3000)

        assert not session.request_kill_all()
        assert session.state == SessionState.RESOLVED

    async def test_partial_failure_keeps_only_failed(self):
        session, _ = make_session(
            StubResolver([record(10, "a"), record(20, "b")]),
            {"kill -9 10": ok(), "kill -9 20": failed("kill: (20) - Operation not permitted")},
        )
        await session.scan(3000)
        session.select_index(1)

        assert session.request_kill_all()
        await session.confirm()

        assert session.state == SessionState.SHOWING_RESULT
        assert session.result.success
        assert "Killed 1, failed 1" in session.result.message
        assert [p.pid for p in session.processes] == [20]
        assert session.selected_index == 0

        session.dismiss_result()
        assert session.state == SessionState.RESOLVED

    async def test_all_killed_then_dismiss_goes_idle(self):
        session, _ = make_session(
            StubResolver([record(1), record(2)]),
            {"kill -9 1": ok(), "kill -9 2": ok()},
        )
        await session.scan(3000)
        session.request_kill_all()
        await session.confirm()

        assert session.result.message == "Killed all 2 processes"
        session.dismiss_result()
        assert session.state == SessionState.IDLE

    async def test_second_confirm_while_killing_is_ignored(self):
        session, _ = make_session(StubResolver([record(1), record(2)]))
        gate = asyncio.Event()

        async def slow_runner(command, timeout):
            await gate.wait()
            return ok()

        session.terminator = Terminator(UnixPlatform(), slow_runner)
        await session.scan(3000)
        session.request_kill_all()

        first = asyncio.create_task(session.confirm())
        await asyncio.sleep(0)
        assert session.busy
        assert not await session.confirm()
        assert not session.cancel()
        assert not session.reset()

        gate.set()
        assert await first
        assert session.processes == []


@pytest.mark.asyncio
async def test_reset_clears_everything():
    session, changes = make_session(StubResolver([record(1), record(2)]))
    await session.scan(3000)
    session.select_index(1)

    assert session.reset()

    assert session.state == SessionState.IDLE
    assert session.processes == []
    assert session.selected_index == 0
    assert changes[-1] == SessionState.IDLE
