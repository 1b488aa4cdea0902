# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy raised while evaluating the commit gate."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

EXIT_OK: Final[int] = 0
EXIT_BLOCKED: Final[int] = 1
EXIT_CONFIG: Final[int] = 2


class GateError(RuntimeError):
    """Base error carrying the exit status that blocks the commit."""

    def __init__(self, message: str, *, exit_code: int = EXIT_BLOCKED, guidance: str | None = None) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable description of the failure.
            exit_code: Exit status reported to git.
            guidance: Optional hint telling the user how to fix the problem.
        """

        super().__init__(message)
        self.exit_code = exit_code
        self.guidance = guidance


class ToolNotFoundError(GateError):
    """Raised when a required toolchain, binary or plugin is not installed."""

    def __init__(
        self,
        tool: str,
        *,
        exit_code: int = EXIT_BLOCKED,
        guidance: str | None = None,
    ) -> None:
        super().__init__(f"'{tool}' is not installed", exit_code=exit_code, guidance=guidance)
        self.tool = tool


class ToolExecutionError(GateError):
    """Raised when the formatter or linter runs and reports failure."""

    def __init__(self, command: Sequence[str], returncode: int, *, label: str) -> None:
        super().__init__(f"{label} failed with exit status {returncode}")
        self.command = tuple(command)
        self.returncode = returncode
        self.label = label


class GitQueryError(GateError):
    """Raised when git cannot report the staged changes."""


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


__all__ = [
    "EXIT_BLOCKED",
    "EXIT_CONFIG",
    "EXIT_OK",
    "ConfigError",
    "GateError",
    "GitQueryError",
    "ToolExecutionError",
    "ToolNotFoundError",
]
