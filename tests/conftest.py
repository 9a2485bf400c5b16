import asyncio
from typing import Any

import pytest

from prockiller.errors import CommandError
from prockiller.process import UnixPlatform, WindowsPlatform
from prockiller.types import CommandResult


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(returncode=0, stdout=stdout, stderr="")


def failed(stderr: str, returncode: int = 1, stdout: str = "") -> CommandResult:
    return CommandResult(returncode=returncode, stdout=stdout, stderr=stderr)


class FakeRunner:
    """Command runner answering exact command strings from a table.

    Values are CommandResults to return or exceptions to raise. Unknown
    commands raise CommandError like a missing binary would.
    """

    def __init__(self, responses: dict[str, Any] | None = None, delays: dict[str, float] | None = None):
        self.responses = dict(responses or {})
        self.delays = dict(delays or {})
        self.calls: list[tuple[str, float]] = []

    async def __call__(self, command: str, timeout: float) -> CommandResult:
        self.calls.append((command, timeout))
        if command in self.delays:
            await asyncio.sleep(self.delays[command])
        response = self.responses.get(command)
        if response is None:
            raise CommandError(f"not found: {command}")
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def commands(self) -> list[str]:
        return [command for command, _ in self.calls]


@pytest.fixture
def unix():
    return UnixPlatform()


@pytest.fixture
def windows():
    return WindowsPlatform()
