# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures: fakes for the collaborators the gate talks to."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from commitgate.config import GateConfig
from commitgate.console import get_console_manager
from commitgate.git import StagedChange


@dataclass
class FakeChanges:
    """Staged-change source returning a fixed list."""

    changes: list[StagedChange] = field(default_factory=list)
    calls: int = 0

    def staged_changes(self) -> list[StagedChange]:
        self.calls += 1
        return list(self.changes)


@dataclass
class FakeLocator:
    """Tool locator that only knows about ``available`` names."""

    available: set[str] = field(default_factory=set)
    queries: list[str] = field(default_factory=list)

    def resolve(self, name: str) -> str | None:
        self.queries.append(name)
        return f"/usr/bin/{name}" if name in self.available else None


@dataclass
class FakeRunner:
    """Command runner recording invocations and replaying scripted exit codes.

    ``returncodes`` maps a command prefix (joined by spaces) to its exit
    status; unmatched commands succeed. ``missing`` lists executables that
    raise :class:`FileNotFoundError`.
    """

    returncodes: Mapping[str, int] = field(default_factory=dict)
    missing: set[str] = field(default_factory=set)
    stdout: str = ""
    calls: list[tuple[str, ...]] = field(default_factory=list)
    cwds: list[Path] = field(default_factory=list)

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> subprocess.CompletedProcess[str]:
        command = tuple(args)
        self.calls.append(command)
        self.cwds.append(cwd)
        if command[0] in self.missing:
            raise FileNotFoundError(f"Executable '{command[0]}' was not found on PATH")
        joined = " ".join(command)
        returncode = 0
        for prefix, code in self.returncodes.items():
            if joined.startswith(prefix):
                returncode = code
                break
        return subprocess.CompletedProcess(args=list(command), returncode=returncode, stdout=self.stdout, stderr="")

    def invoked(self, executable: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] == executable]


def staged(*entries: tuple[str, str]) -> list[StagedChange]:
    return [StagedChange(status=status, path=path) for status, path in entries]


@pytest.fixture(autouse=True)
def _reset_consoles() -> Iterable[None]:
    """Drop cached Rich consoles so each test sees its own captured stdout."""

    get_console_manager().reset()
    yield
    get_console_manager().reset()


@pytest.fixture
def make_changes() -> Callable[..., FakeChanges]:
    def _factory(*entries: tuple[str, str]) -> FakeChanges:
        return FakeChanges(changes=staged(*entries))

    return _factory


@pytest.fixture
def all_tools() -> FakeLocator:
    return FakeLocator(available={"cargo", "rustfmt"})


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def runner_factory() -> Callable[..., FakeRunner]:
    return FakeRunner


@pytest.fixture
def locator_factory() -> Callable[..., FakeLocator]:
    return FakeLocator


@pytest.fixture
def config() -> GateConfig:
    return GateConfig(emoji=False, color=False)
