# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors, common options)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..config import GateConfig, load_config
from ..errors import EXIT_CONFIG, ConfigError
from ..logging import fail as core_fail
from ..logging import ok as core_ok
from ..logging import warn as core_warn

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Repository root.", file_okay=False),
]
CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Explicit configuration file.", dir_okay=False),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI emoji and colour settings."""

    use_emoji: bool
    use_color: bool

    def fail(self, message: str) -> None:
        """Log a failure message honouring output preferences."""

        core_fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        """Log a warning message honouring output preferences."""

        core_warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def ok(self, message: str) -> None:
        """Log a success message honouring output preferences."""

        core_ok(message, use_emoji=self.use_emoji, use_color=self.use_color)


def build_cli_logger(*, emoji: bool, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided preferences.

    Args:
        emoji: Whether log output may include emoji glyphs.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger forwarding to the shared console helpers.
    """

    return CLILogger(use_emoji=emoji, use_color=not no_color)


def resolve_config(
    root: Path,
    config_path: Path | None,
    *,
    logger: CLILogger,
    overrides: dict[str, object] | None = None,
) -> GateConfig:
    """Load configuration for ``root``, converting failures into :class:`CLIError`.

    Raises:
        CLIError: When the configuration cannot be loaded; exits with status 2.
    """

    try:
        return load_config(root, path=config_path, overrides=overrides)
    except ConfigError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc), exit_code=EXIT_CONFIG) from exc


__all__ = [
    "CLIError",
    "CLILogger",
    "CONFIG_OPTION",
    "EMOJI_OPTION",
    "ROOT_OPTION",
    "build_cli_logger",
    "resolve_config",
]
