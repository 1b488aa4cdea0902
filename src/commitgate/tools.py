# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool resolution and availability probes."""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .config import GateConfig
from .interfaces import CommandRunner, ToolLocator


class PathToolLocator:
    """Resolve executables with :func:`shutil.which`."""

    def __init__(self, path: str | None = None) -> None:
        """Create a locator searching ``path`` (defaults to the process ``PATH``)."""

        self._path = path

    def resolve(self, name: str) -> str | None:
        """Return the absolute location of ``name`` or ``None`` when absent."""

        return shutil.which(name, path=self._path)


class ProbeLocator:
    """Check that a sub-command plugin is installed by running a cheap probe.

    Plugins such as ``cargo clippy`` are not standalone executables on every
    platform, so existence is established by running ``probe`` and checking
    that it exits cleanly.
    """

    def __init__(self, probe: Sequence[str], *, root: Path, runner: CommandRunner) -> None:
        self._probe = tuple(probe)
        self._root = root
        self._runner = runner

    def available(self) -> bool:
        """Return ``True`` when the probe command exits with status 0."""

        try:
            completed = self._runner(self._probe, cwd=self._root, capture_output=True)
        except FileNotFoundError:
            return False
        return completed.returncode == 0

    def describe(self) -> str:
        """Return the probe command as a display string."""

        return " ".join(self._probe)


@dataclass(slots=True)
class ToolCheck:
    """Availability of one tool required by the gate."""

    role: str
    name: str
    found: bool
    detail: str


def check_tools(
    config: GateConfig,
    *,
    root: Path,
    locator: ToolLocator,
    runner: CommandRunner,
) -> list[ToolCheck]:
    """Return availability rows for the toolchain, formatter and linter plugin.

    Args:
        config: Gate configuration naming the tools.
        root: Repository root used as working directory for the probe.
        locator: Locator used for plain executables.
        runner: Runner used for the plugin probe.

    Returns:
        list[ToolCheck]: One row per required tool, in pipeline order.
    """

    rows: list[ToolCheck] = []
    for role, name in (("toolchain", config.toolchain), ("formatter", config.formatter_executable)):
        location = locator.resolve(name)
        rows.append(ToolCheck(role=role, name=name, found=location is not None, detail=location or "not on PATH"))

    probe = ProbeLocator(config.linter_probe, root=root, runner=runner)
    found = probe.available()
    rows.append(
        ToolCheck(
            role="linter",
            name=" ".join(config.linter[:2]) if len(config.linter) > 1 else config.linter[0],
            found=found,
            detail=f"{probe.describe()} {'succeeded' if found else 'failed'}",
        )
    )
    return rows


__all__ = ["PathToolLocator", "ProbeLocator", "ToolCheck", "check_tools"]
