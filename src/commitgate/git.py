# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git queries used to discover and restage the files a commit touches."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from itertools import islice
from pathlib import Path
from typing import Final

from .errors import GitQueryError
from .interfaces import CommandRunner
from .process import SubprocessRunner

GIT_EXECUTABLE: Final[str] = "git"
STATUS_DELETED: Final[str] = "D"
NUL: Final[str] = "\0"
_RENAME_OR_COPY: Final[frozenset[str]] = frozenset({"R", "C"})
# ``-z`` keeps paths verbatim; without it git quotes names containing
# ``"``, ``\`` or control characters even when ``core.quotepath`` is off.
STAGED_NAME_STATUS_CMD: Final[tuple[str, ...]] = (
    GIT_EXECUTABLE,
    "diff",
    "--cached",
    "--name-status",
    "-z",
)
_LITERAL_PATHSPECS: Final[tuple[str, ...]] = (GIT_EXECUTABLE, "--literal-pathspecs")
HOOKS_PATH_CMD: Final[tuple[str, ...]] = (GIT_EXECUTABLE, "rev-parse", "--git-path", "hooks")


@dataclass(frozen=True, slots=True)
class StagedChange:
    """A single ``(status, path)`` entry reported for the index."""

    status: str
    path: str

    @property
    def deleted(self) -> bool:
        """Return ``True`` when the change removes the file."""

        return self.status == STATUS_DELETED


def parse_name_status(output: str) -> list[StagedChange]:
    """Parse ``git diff --name-status -z`` output into staged changes.

    Each record is a status field followed by one path, or by a source and a
    destination path for renames and copies (``R100``). The score is dropped
    and the destination path is kept.

    Args:
        output: Raw NUL separated output produced by git.

    Returns:
        list[StagedChange]: Entries in the order git reported them.

    Raises:
        GitQueryError: If a record is truncated or its status field is malformed.
    """

    changes: list[StagedChange] = []
    fields = iter(output.split(NUL))
    for status_field in fields:
        if not status_field.strip():
            continue
        status = status_field[0]
        if not status.isalpha() or not status.isupper():
            raise GitQueryError(f"Unexpected git status field: {status_field!r}")
        expected = 2 if status in _RENAME_OR_COPY else 1
        paths = list(islice(fields, expected))
        if len(paths) != expected or not all(paths):
            raise GitQueryError(f"Truncated git status record for {status_field!r}")
        changes.append(StagedChange(status=status, path=paths[-1]))
    return changes


def filter_staged(changes: Iterable[StagedChange], extension: str) -> list[str]:
    """Return paths of non-deleted changes ending with ``extension``.

    Args:
        changes: Staged changes in git order.
        extension: Target suffix including the leading dot.

    Returns:
        list[str]: Matching paths, order preserved.
    """

    return [change.path for change in changes if not change.deleted and change.path.endswith(extension)]


def _query(runner: CommandRunner, command: Sequence[str], *, root: Path, action: str) -> str:
    try:
        completed = runner(command, cwd=root, capture_output=True)
    except FileNotFoundError as exc:
        raise GitQueryError("git executable not found on PATH") from exc
    if completed.returncode != 0:
        detail = (completed.stderr or "").strip() or f"exit status {completed.returncode}"
        raise GitQueryError(f"Unable to {action}: {detail}")
    return completed.stdout or ""


class GitStagedChanges:
    """Collect staged changes by asking git for the index vs. ``HEAD``."""

    def __init__(self, root: Path, *, runner: CommandRunner | None = None) -> None:
        """Create a staged-change source rooted at ``root``.

        Args:
            root: Repository root used as the git working directory.
            runner: Optional command runner; defaults to :class:`SubprocessRunner`.
        """

        self._root = root
        self._runner = runner or SubprocessRunner()

    def staged_changes(self) -> list[StagedChange]:
        """Return the staged changes reported by git.

        Returns:
            list[StagedChange]: Parsed ``--name-status`` entries.

        Raises:
            GitQueryError: When git is unavailable or the query fails.
        """

        output = _query(self._runner, STAGED_NAME_STATUS_CMD, root=self._root, action="list staged changes")
        return parse_name_status(output)


def hooks_path(root: Path, *, runner: CommandRunner) -> Path:
    """Return the directory git runs hooks from.

    Worktrees, submodules and ``core.hooksPath`` are resolved by git itself.

    Raises:
        GitQueryError: When ``root`` is not inside a repository or git is unavailable.
    """

    output = _query(runner, HOOKS_PATH_CMD, root=root, action="locate the hooks directory").rstrip("\r\n")
    if not output:
        raise GitQueryError("git did not report a hooks directory")
    return root / output


def unstaged_paths(paths: Sequence[str], *, root: Path, runner: CommandRunner) -> set[str]:
    """Return the members of ``paths`` whose working-tree copy differs from the index.

    Raises:
        GitQueryError: When git is unavailable or the query fails.
    """

    if not paths:
        return set()
    command = [*_LITERAL_PATHSPECS, "diff", "--name-only", "-z", "--", *paths]
    output = _query(runner, command, root=root, action="list unstaged changes")
    return {entry for entry in output.split(NUL) if entry}


def stage_paths(paths: Sequence[str], *, root: Path, runner: CommandRunner) -> int:
    """Add ``paths`` back to the index after they were rewritten in place.

    Returns:
        int: Exit status reported by ``git add``.
    """

    completed = runner([*_LITERAL_PATHSPECS, "add", "--", *paths], cwd=root)
    return completed.returncode


__all__ = [
    "STAGED_NAME_STATUS_CMD",
    "STATUS_DELETED",
    "GitStagedChanges",
    "HOOKS_PATH_CMD",
    "StagedChange",
    "filter_staged",
    "hooks_path",
    "parse_name_status",
    "stage_paths",
    "unstaged_paths",
]
