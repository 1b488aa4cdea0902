# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Collaborator interfaces injected into the commit gate."""

# pylint: disable=too-few-public-methods -- Protocol definitions intentionally expose minimal method surfaces.

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from subprocess import CompletedProcess
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..git import StagedChange


@runtime_checkable
class StagedChangeSource(Protocol):
    """Report the files staged in the index relative to ``HEAD``."""

    def staged_changes(self) -> Sequence[StagedChange]:
        """Return staged ``(status, path)`` pairs in the order git reports them."""

        raise NotImplementedError


@runtime_checkable
class ToolLocator(Protocol):
    """Resolve an executable name to its location."""

    def resolve(self, name: str) -> str | None:
        """Return the resolved location of ``name`` or ``None`` when it is absent."""

        raise NotImplementedError


@runtime_checkable
class CommandRunner(Protocol):
    """Execute an external command and report its exit status."""

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> CompletedProcess[str]:
        """Run ``args`` in ``cwd`` and return the completed process."""

        raise NotImplementedError


__all__ = ["CommandRunner", "StagedChangeSource", "ToolLocator"]
