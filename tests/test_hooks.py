# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for hook installation utilities."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

from commitgate.git import HOOKS_PATH_CMD
from commitgate.hooks import HOOK_MARKER, HOOK_NAME, install_hook, render_hook_script

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


@pytest.fixture
def git_runner(runner_factory):
    """Runner answering the hooks-directory query like a plain repository."""

    return runner_factory(stdout=".git/hooks\n")


def _hooks_dir(root: Path) -> Path:
    return root.resolve() / ".git" / "hooks"


def _git(root: Path, *args: str) -> str:
    completed = subprocess.run(["git", *args], cwd=root, check=True, capture_output=True, text=True)
    return completed.stdout


def test_render_hook_script_runs_gate_module() -> None:
    script = render_hook_script("/opt/py/bin/python")

    assert script.startswith("#!/bin/sh\n")
    assert HOOK_MARKER in script
    assert "exec /opt/py/bin/python -m commitgate run" in script


def test_install_hook_writes_executable_script(tmp_path: Path, git_runner) -> None:
    result = install_hook(tmp_path, use_emoji=False, runner=git_runner)

    destination = _hooks_dir(tmp_path) / HOOK_NAME
    assert git_runner.calls == [HOOKS_PATH_CMD]
    assert result.installed == [destination]
    assert result.backups == []
    assert os.access(destination, os.X_OK)
    assert sys.executable in destination.read_text(encoding="utf-8")


def test_install_hook_backs_up_foreign_hook(tmp_path: Path, git_runner) -> None:
    hooks_dir = _hooks_dir(tmp_path)
    hooks_dir.mkdir(parents=True)
    existing = hooks_dir / HOOK_NAME
    existing.write_text("#!/bin/sh\necho custom\n", encoding="utf-8")

    result = install_hook(tmp_path, use_emoji=False, runner=git_runner)

    assert len(result.backups) == 1
    backup = result.backups[0]
    assert backup.name.startswith(f"{HOOK_NAME}.backup.")
    assert backup.read_text(encoding="utf-8") == "#!/bin/sh\necho custom\n"
    assert HOOK_MARKER in existing.read_text(encoding="utf-8")


def test_install_hook_replaces_its_own_hook_without_backup(tmp_path: Path, git_runner) -> None:
    install_hook(tmp_path, use_emoji=False, runner=git_runner)

    result = install_hook(tmp_path, use_emoji=False, runner=git_runner)

    assert result.backups == []
    assert len(result.installed) == 1


def test_install_hook_dry_run_leaves_filesystem_untouched(tmp_path: Path, git_runner) -> None:
    hooks_dir = _hooks_dir(tmp_path)
    hooks_dir.mkdir(parents=True)
    existing = hooks_dir / HOOK_NAME
    existing.write_text("#!/bin/sh\n", encoding="utf-8")

    result = install_hook(tmp_path, dry_run=True, use_emoji=False, runner=git_runner)

    assert result.installed == [existing]
    assert len(result.backups) == 1
    assert existing.read_text(encoding="utf-8") == "#!/bin/sh\n"
    assert not result.backups[0].exists()


def test_install_hook_dry_run_does_not_create_hooks_directory(tmp_path: Path, git_runner) -> None:
    install_hook(tmp_path, dry_run=True, use_emoji=False, runner=git_runner)

    assert not _hooks_dir(tmp_path).exists()


def test_install_hook_honours_custom_directory(tmp_path: Path, git_runner) -> None:
    custom = tmp_path / "githooks"

    result = install_hook(tmp_path, hooks_dir=custom, use_emoji=False, runner=git_runner)

    assert result.installed == [custom / HOOK_NAME]
    assert (custom / HOOK_NAME).exists()


def test_install_hook_requires_git_repository(tmp_path: Path, runner_factory) -> None:
    runner = runner_factory(returncodes={"git rev-parse": 128})

    with pytest.raises(FileNotFoundError, match="Not a git repository"):
        install_hook(tmp_path, use_emoji=False, runner=runner)


def test_install_hook_requires_git_executable(tmp_path: Path, runner_factory) -> None:
    runner = runner_factory(missing={"git"})

    with pytest.raises(FileNotFoundError, match="Not a git repository"):
        install_hook(tmp_path, use_emoji=False, runner=runner)


@requires_git
def test_install_hook_follows_gitdir_file(tmp_path: Path) -> None:
    work = tmp_path / "work"
    store = tmp_path / "store.git"
    subprocess.run(
        ["git", "init", "-q", f"--separate-git-dir={store}", str(work)],
        check=True,
        capture_output=True,
    )
    assert (work / ".git").is_file()

    result = install_hook(work, use_emoji=False)

    assert result.installed == [store.resolve() / "hooks" / HOOK_NAME]
    assert HOOK_MARKER in (store / "hooks" / HOOK_NAME).read_text(encoding="utf-8")


@requires_git
def test_install_hook_honours_core_hooks_path(tmp_path: Path) -> None:
    _git(tmp_path, "init", "-q")
    _git(tmp_path, "config", "core.hooksPath", "shared-hooks")

    result = install_hook(tmp_path, use_emoji=False)

    assert result.installed == [tmp_path.resolve() / "shared-hooks" / HOOK_NAME]
    assert not (tmp_path / ".git" / "hooks" / HOOK_NAME).exists()


@requires_git
def test_install_hook_rejects_plain_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))

    with pytest.raises(FileNotFoundError, match="Not a git repository"):
        install_hook(tmp_path, use_emoji=False)
