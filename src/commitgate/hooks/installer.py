# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Install the commit gate as the repository's ``pre-commit`` hook."""

from __future__ import annotations

import shlex
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Final

from ..errors import GitQueryError
from ..git import hooks_path
from ..interfaces import CommandRunner
from ..logging import info, ok
from ..process import SubprocessRunner
from .models import InstallResult

HOOK_NAME: Final[str] = "pre-commit"
HOOK_MARKER: Final[str] = "# managed-by: commit-gate"
_HOOK_TEMPLATE: Final[str] = """#!/bin/sh
{marker}
# Formats staged sources and lints the project before each commit.
exec {python} -m commitgate run "$@"
"""


def render_hook_script(python: str | None = None) -> str:
    """Return the ``pre-commit`` script body.

    Args:
        python: Interpreter used to run the gate; defaults to the current one.

    Returns:
        str: Shell script invoking ``python -m commitgate run``.
    """

    interpreter = python or sys.executable
    return _HOOK_TEMPLATE.format(marker=HOOK_MARKER, python=shlex.quote(interpreter))


def install_hook(
    root: Path,
    *,
    hooks_dir: Path | None = None,
    dry_run: bool = False,
    use_emoji: bool = True,
    runner: CommandRunner | None = None,
) -> InstallResult:
    """Write the ``pre-commit`` hook into the directory git runs hooks from.

    A foreign hook already present at the destination is renamed with a
    timestamped ``.backup`` suffix. A hook previously written by this tool is
    replaced in place.

    Args:
        root: Repository root whose hook should be installed.
        hooks_dir: Optional override for the target hooks directory.
        dry_run: When ``True`` avoid filesystem mutations while reporting actions.
        use_emoji: Whether progress messages include emoji.
        runner: Command runner used to ask git for the hooks directory.

    Returns:
        InstallResult: Installed and backed-up paths.

    Raises:
        FileNotFoundError: Raised when ``root`` is not a git repository.
    """

    target_dir = _resolve_hooks_dir(root, hooks_dir, runner=runner or SubprocessRunner(), dry_run=dry_run)
    destination = target_dir / HOOK_NAME
    result = InstallResult(installed=[], backups=[])

    if destination.exists() and not destination.is_symlink() and _is_managed(destination):
        info(f"Replacing existing {HOOK_NAME} hook", use_emoji=use_emoji)
    elif destination.exists() or destination.is_symlink():
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        backup_path = destination.with_name(f"{destination.name}.backup.{timestamp}")
        info(f"Backing up existing {HOOK_NAME} hook to {backup_path}", use_emoji=use_emoji)
        if not dry_run:
            destination.rename(backup_path)
        result.backups.append(backup_path)

    info(f"Installing {HOOK_NAME} hook", use_emoji=use_emoji)
    if dry_run:
        result.installed.append(destination)
        ok(f"Dry run complete: would install {destination}", use_emoji=use_emoji)
        return result

    destination.write_text(render_hook_script(), encoding="utf-8")
    destination.chmod(0o755)
    result.installed.append(destination)
    ok(f"Installed {HOOK_NAME} hook at {destination}", use_emoji=use_emoji)
    return result


def _is_managed(path: Path) -> bool:
    try:
        return HOOK_MARKER in path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return False


def _resolve_hooks_dir(root: Path, hooks_dir: Path | None, *, runner: CommandRunner, dry_run: bool) -> Path:
    """Return the hooks directory for ``root``, creating it unless ``dry_run``.

    Raises:
        FileNotFoundError: Raised when git does not recognise ``root`` as a repository.
    """

    project_root = root.resolve()
    try:
        default_dir = hooks_path(project_root, runner=runner)
    except GitQueryError as exc:
        raise FileNotFoundError(f"Not a git repository: {project_root} ({exc})") from exc

    target_dir = hooks_dir or default_dir.resolve()
    if not dry_run:
        target_dir.mkdir(parents=True, exist_ok=True)
    return target_dir


__all__ = ["HOOK_MARKER", "HOOK_NAME", "install_hook", "render_hook_script"]
