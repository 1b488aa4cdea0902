# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command for installing the git hook."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..hooks import InstallResult, install_hook
from .shared import EMOJI_OPTION, ROOT_OPTION, CLIError, CLILogger, build_cli_logger

HOOKS_DIR_OPTION = Annotated[
    Path | None,
    typer.Option("--hooks-dir", help="Overrides the hooks directory.", file_okay=False),
]
DRY_RUN_OPTION = Annotated[
    bool,
    typer.Option("--dry-run", help="Show actions without modifying files."),
]


def perform_installation(
    root: Path,
    hooks_dir: Path | None,
    *,
    dry_run: bool,
    logger: CLILogger,
) -> InstallResult:
    """Install the hook, converting a missing repository into :class:`CLIError`.

    Raises:
        CLIError: Raised when the target repository cannot be located.
    """

    try:
        return install_hook(
            root,
            hooks_dir=hooks_dir.resolve() if hooks_dir is not None else None,
            dry_run=dry_run,
            use_emoji=logger.use_emoji,
        )
    except FileNotFoundError as exc:
        logger.fail(str(exc))
        raise CLIError(str(exc)) from exc


def main(
    root: ROOT_OPTION = Path("."),
    hooks_dir: HOOKS_DIR_OPTION = None,
    dry_run: DRY_RUN_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Install commit-gate as the repository's pre-commit hook."""

    logger = build_cli_logger(emoji=emoji)
    try:
        result = perform_installation(root.resolve(), hooks_dir, dry_run=dry_run, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    if result.backups:
        logger.warn("Backed up existing hooks: " + ", ".join(str(path) for path in result.backups))
    if dry_run and result.installed:
        logger.warn("DRY RUN: would install " + ", ".join(str(path) for path in result.installed))
    raise typer.Exit(code=0)


def register(app: typer.Typer) -> None:
    """Register the ``install-hook`` command on ``app``."""

    app.command(name="install-hook")(main)


__all__ = ["main", "perform_installation", "register"]
