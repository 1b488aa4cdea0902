# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Report whether the tools the gate depends on are installed."""

from __future__ import annotations

from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from ..errors import EXIT_BLOCKED, EXIT_OK
from ..process import SubprocessRunner
from ..tools import PathToolLocator, ToolCheck, check_tools
from .shared import CONFIG_OPTION, EMOJI_OPTION, ROOT_OPTION, CLIError, build_cli_logger, resolve_config


def render_checks(checks: list[ToolCheck], console: Console) -> None:
    """Print ``checks`` as a table."""

    table = Table(title="Commit gate tools", box=box.SIMPLE, expand=True)
    table.add_column("Role", style="bold")
    table.add_column("Tool")
    table.add_column("Status", style="bold")
    table.add_column("Details", overflow="fold")
    for check in checks:
        style = "green" if check.found else "red"
        state = "found" if check.found else "missing"
        table.add_row(check.role, check.name, f"[{style}]{state}[/]", check.detail)
    console.print(table)


def main(
    root: ROOT_OPTION = Path("."),
    config_path: CONFIG_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Check the toolchain, formatter and linter plugin; exit 1 when any is missing."""

    resolved_root = root.resolve()
    logger = build_cli_logger(emoji=emoji)
    try:
        config = resolve_config(resolved_root, config_path, logger=logger)
    except CLIError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    runner = SubprocessRunner(timeout=config.timeout)
    checks = check_tools(config, root=resolved_root, locator=PathToolLocator(), runner=runner)
    render_checks(checks, Console(highlight=False))
    missing = [check.name for check in checks if not check.found]
    if missing:
        logger.fail("Missing: " + ", ".join(missing))
        raise typer.Exit(code=EXIT_BLOCKED)
    logger.ok("All tools available")
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    """Register the ``check-tools`` command on ``app``."""

    app.command(name="check-tools")(main)


__all__ = ["main", "register", "render_checks"]
