# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

import typer

from . import check, hooks, run

app = typer.Typer(
    name="commit-gate",
    help="Format staged sources and lint the project before each commit.",
    no_args_is_help=True,
    add_completion=False,
)

run.register(app)
hooks.register(app)
check.register(app)

__all__ = ["app"]
