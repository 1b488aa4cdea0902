# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command executed by the ``pre-commit`` hook."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import GateConfig, MissingToolchainPolicy
from ..gate import CommitGate, GateResult
from ..git import GitStagedChanges
from ..interfaces import CommandRunner, StagedChangeSource, ToolLocator
from ..process import SubprocessRunner
from ..tools import PathToolLocator
from .shared import CONFIG_OPTION, EMOJI_OPTION, ROOT_OPTION, CLIError, build_cli_logger, resolve_config

EXTENSION_OPTION = Annotated[
    str | None,
    typer.Option("--extension", "-e", help="Override the target source extension (e.g. .rs)."),
]
RESTAGE_OPTION = Annotated[
    bool,
    typer.Option("--restage", help="Re-add formatted files to the index after formatting."),
]
ALLOW_MISSING_OPTION = Annotated[
    bool,
    typer.Option(
        "--allow-missing-toolchain",
        help="Let the commit through when the toolchain is not installed.",
    ),
]
COLOR_OPTION = Annotated[
    bool,
    typer.Option("--color/--no-color", help="Toggle coloured output."),
]


def run_gate(
    root: Path,
    *,
    config: GateConfig,
    runner: CommandRunner | None = None,
    locator: ToolLocator | None = None,
    changes: StagedChangeSource | None = None,
) -> GateResult:
    """Build a :class:`CommitGate` with default collaborators and run it.

    Args:
        root: Repository root.
        config: Loaded gate configuration.
        runner: Optional command runner override.
        locator: Optional tool locator override.
        changes: Optional staged-change source override.

    Returns:
        GateResult: Outcome of the gate.
    """

    command_runner = runner or SubprocessRunner(timeout=config.timeout)
    gate = CommitGate(
        config,
        root=root,
        changes=changes or GitStagedChanges(root, runner=command_runner),
        locator=locator or PathToolLocator(),
        runner=command_runner,
    )
    return gate.run()


def main(
    root: ROOT_OPTION = Path("."),
    config_path: CONFIG_OPTION = None,
    extension: EXTENSION_OPTION = None,
    restage: RESTAGE_OPTION = False,
    allow_missing_toolchain: ALLOW_MISSING_OPTION = False,
    emoji: EMOJI_OPTION = True,
    color: COLOR_OPTION = True,
) -> None:
    """Format staged sources and lint the project; exit non-zero to block the commit."""

    resolved_root = root.resolve()
    logger = build_cli_logger(emoji=emoji, no_color=not color)
    overrides: dict[str, object] = {"extension": extension}
    if restage:
        overrides["restage"] = True
    if allow_missing_toolchain:
        overrides["missing_toolchain"] = MissingToolchainPolicy.ALLOW
    if not emoji:
        overrides["emoji"] = False
    if not color:
        overrides["color"] = False
    try:
        config = resolve_config(resolved_root, config_path, logger=logger, overrides=overrides)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    result = run_gate(resolved_root, config=config)
    raise typer.Exit(code=result.exit_code)


def register(app: typer.Typer) -> None:
    """Register the ``run`` command on ``app``."""

    app.command(name="run")(main)


__all__ = ["main", "register", "run_gate"]
