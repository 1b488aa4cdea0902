# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for tool resolution and availability probes."""

from __future__ import annotations

import os
import stat
from pathlib import Path

from commitgate.config import GateConfig
from commitgate.interfaces import CommandRunner, ToolLocator
from commitgate.tools import PathToolLocator, ProbeLocator, check_tools


def _executable(directory: Path, name: str) -> Path:
    path = directory / name
    path.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


def test_path_locator_searches_explicit_path(tmp_path: Path) -> None:
    binary = _executable(tmp_path, "rustfmt")
    locator = PathToolLocator(path=str(tmp_path))

    assert isinstance(locator, ToolLocator)
    assert locator.resolve("rustfmt") == str(binary)
    assert locator.resolve("cargo") is None


def test_path_locator_with_empty_path_finds_nothing(tmp_path: Path) -> None:
    locator = PathToolLocator(path=os.pathsep.join([str(tmp_path / "missing")]))

    assert locator.resolve("git") is None


def test_probe_locator_reports_exit_status(runner_factory, tmp_path: Path) -> None:
    healthy = runner_factory()
    broken = runner_factory(returncodes={"cargo clippy": 101})

    assert isinstance(healthy, CommandRunner)
    assert ProbeLocator(("cargo", "clippy", "--version"), root=tmp_path, runner=healthy).available()
    assert not ProbeLocator(("cargo", "clippy", "--version"), root=tmp_path, runner=broken).available()
    assert healthy.calls == [("cargo", "clippy", "--version")]


def test_probe_locator_treats_missing_executable_as_unavailable(runner_factory, tmp_path: Path) -> None:
    runner = runner_factory(missing={"cargo"})

    assert not ProbeLocator(("cargo", "clippy", "--version"), root=tmp_path, runner=runner).available()


def test_check_tools_reports_rows_in_pipeline_order(locator_factory, runner_factory, tmp_path: Path) -> None:
    locator = locator_factory(available={"cargo"})
    runner = runner_factory(returncodes={"cargo clippy --version": 1})

    rows = check_tools(GateConfig(), root=tmp_path, locator=locator, runner=runner)

    assert [(row.role, row.name, row.found) for row in rows] == [
        ("toolchain", "cargo", True),
        ("formatter", "rustfmt", False),
        ("linter", "cargo clippy", False),
    ]
    assert rows[1].detail == "not on PATH"
    assert rows[2].detail == "cargo clippy --version failed"
