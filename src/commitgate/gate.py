# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Commit gate pipeline: format staged sources, lint the project, report status.

The gate is invoked by git before a commit is finalised. It runs strictly in
sequence and stops at the first failure:

1. collect the staged changes and keep non-deleted files with the target
   extension (nothing to do when the list is empty),
2. check that the toolchain and the formatter are installed,
3. format exactly the staged files in place,
4. check that the linter plugin is installed and lint the whole project with
   warnings treated as errors.

The exit code of :meth:`CommitGate.run` is what git sees: ``0`` lets the commit
through, anything else blocks it.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final

from .config import GateConfig, MissingToolchainPolicy
from .errors import EXIT_OK, GateError, ToolExecutionError, ToolNotFoundError
from .git import filter_staged, stage_paths, unstaged_paths
from .interfaces import CommandRunner, StagedChangeSource, ToolLocator
from .logging import fail, info, ok, section, warn
from .tools import ProbeLocator

TOOLCHAIN_GUIDANCE: Final[str] = "Install the '{tool}' toolchain (Rust: https://rustup.rs) and commit again."
FORMATTER_GUIDANCE: Final[str] = "Install '{tool}' (Rust: rustup component add rustfmt) and commit again."
LINTER_GUIDANCE: Final[str] = "Install the linter plugin (Rust: rustup component add clippy); probe '{tool}' failed."


class GateStep(str, Enum):
    """Pipeline stage at which a gate run terminated."""

    DISCOVER = "discover"
    TOOLCHAIN = "toolchain"
    FORMATTER_CHECK = "formatter-check"
    FORMAT = "format"
    RESTAGE = "restage"
    LINTER_CHECK = "linter-check"
    LINT = "lint"
    COMPLETE = "complete"


@dataclass(slots=True)
class GateResult:
    """Terminal outcome of a single gate invocation."""

    exit_code: int
    step: GateStep
    files: list[str] = field(default_factory=list)
    message: str = ""

    @property
    def passed(self) -> bool:
        """Return ``True`` when the commit may proceed."""

        return self.exit_code == EXIT_OK


class CommitGate:
    """Run the formatter and linter over a commit and decide whether it may proceed."""

    def __init__(
        self,
        config: GateConfig,
        *,
        root: Path,
        changes: StagedChangeSource,
        locator: ToolLocator,
        runner: CommandRunner,
    ) -> None:
        """Bind the gate to its configuration and collaborators.

        Args:
            config: Extension and tool commands to use.
            root: Repository root; tools run with this working directory.
            changes: Source of staged ``(status, path)`` pairs.
            locator: Resolver used to check that executables exist.
            runner: Executor for the formatter, linter and probes.
        """

        self._config = config
        self._root = root
        self._changes = changes
        self._locator = locator
        self._runner = runner

    def run(self) -> GateResult:
        """Execute the pipeline and return its outcome.

        Returns:
            GateResult: Exit code and the step at which the run ended.
        """

        step = GateStep.DISCOVER
        files: list[str] = []
        try:
            files = self.discover()
            if not files:
                message = f"No staged {self._config.extension} files; nothing to check."
                self._info(message)
                return GateResult(exit_code=EXIT_OK, step=step, message=message)
            self.report(files)

            step = GateStep.TOOLCHAIN
            if not self.verify_toolchain():
                message = f"Skipped checks: '{self._config.toolchain}' is not installed."
                return GateResult(exit_code=EXIT_OK, step=step, files=files, message=message)

            step = GateStep.FORMATTER_CHECK
            self.verify_formatter()
            step = GateStep.FORMAT
            held_back = self.partially_staged(files) if self._config.restage else set()
            self.format(files)
            if self._config.restage:
                step = GateStep.RESTAGE
                self.restage(files, held_back=held_back)

            step = GateStep.LINTER_CHECK
            self.verify_linter()
            step = GateStep.LINT
            self.lint()
        except GateError as exc:
            fail(str(exc), use_emoji=self._config.emoji, use_color=self._config.color)
            if exc.guidance:
                self._info(exc.guidance)
            return GateResult(exit_code=exc.exit_code, step=step, files=files, message=str(exc))

        message = f"Formatted {len(files)} file(s) and lint passed."
        ok(message, use_emoji=self._config.emoji, use_color=self._config.color)
        return GateResult(exit_code=EXIT_OK, step=GateStep.COMPLETE, files=files, message=message)

    def discover(self) -> list[str]:
        """Return staged, non-deleted paths ending with the configured extension."""

        return filter_staged(self._changes.staged_changes(), self._config.extension)

    def report(self, files: Sequence[str]) -> None:
        """Print the files that are about to be formatted."""

        section(f"Staged {self._config.extension} files", use_color=self._config.color)
        for path in files:
            self._info(path)

    def verify_toolchain(self) -> bool:
        """Return whether the toolchain is installed.

        Returns:
            bool: ``False`` only when the toolchain is missing and the policy
            allows the commit through anyway.

        Raises:
            ToolNotFoundError: When the toolchain is missing under the ``fail`` policy.
        """

        tool = self._config.toolchain
        if self._locator.resolve(tool) is not None:
            return True
        guidance = TOOLCHAIN_GUIDANCE.format(tool=tool)
        if self._config.missing_toolchain is MissingToolchainPolicy.ALLOW:
            warn(
                f"'{tool}' is not installed; skipping format and lint.",
                use_emoji=self._config.emoji,
                use_color=self._config.color,
            )
            self._info(guidance)
            return False
        raise ToolNotFoundError(tool, guidance=guidance)

    def verify_formatter(self) -> None:
        """Raise :class:`ToolNotFoundError` when the formatter binary is absent."""

        tool = self._config.formatter_executable
        if self._locator.resolve(tool) is None:
            raise ToolNotFoundError(tool, guidance=FORMATTER_GUIDANCE.format(tool=tool))

    def format(self, files: Sequence[str]) -> None:
        """Rewrite ``files`` in place with the formatter.

        Raises:
            ToolExecutionError: When the formatter exits with a non-zero status.
        """

        self._execute([*self._config.formatter, *files], label="Formatter")

    def partially_staged(self, files: Sequence[str]) -> set[str]:
        """Return the staged files that also carry unstaged edits.

        Must run before formatting; afterwards every formatted file differs
        from the index.
        """

        return unstaged_paths(files, root=self._root, runner=self._runner)

    def restage(self, files: Sequence[str], *, held_back: Collection[str] = ()) -> None:
        """Add the formatted files back to the index.

        Files in ``held_back`` are left alone: ``git add`` would pull their
        unstaged hunks into the commit.

        Raises:
            ToolExecutionError: When ``git add`` fails.
        """

        skipped = [path for path in files if path in held_back]
        if skipped:
            warn(
                "Not restaging partially staged file(s): " + ", ".join(skipped),
                use_emoji=self._config.emoji,
                use_color=self._config.color,
            )
        targets = [path for path in files if path not in held_back]
        if not targets:
            return
        returncode = stage_paths(targets, root=self._root, runner=self._runner)
        if returncode != 0:
            raise ToolExecutionError(["git", "add", *targets], returncode, label="Restaging formatted files")

    def verify_linter(self) -> None:
        """Raise :class:`ToolNotFoundError` when the linter plugin probe fails."""

        probe = ProbeLocator(self._config.linter_probe, root=self._root, runner=self._runner)
        if not probe.available():
            raise ToolNotFoundError(
                " ".join(self._config.linter[:2]),
                guidance=LINTER_GUIDANCE.format(tool=probe.describe()),
            )

    def lint(self) -> None:
        """Lint the whole project with warnings escalated to errors.

        Raises:
            ToolExecutionError: When the linter reports failure.
        """

        self._execute(self._config.linter, label="Linter")

    def _execute(self, command: Sequence[str], *, label: str) -> None:
        try:
            completed = self._runner(command, cwd=self._root)
        except FileNotFoundError as exc:
            raise ToolNotFoundError(command[0]) from exc
        if completed.returncode != 0:
            raise ToolExecutionError(command, completed.returncode, label=label)

    def _info(self, message: str) -> None:
        info(message, use_emoji=self._config.emoji, use_color=self._config.color)


__all__ = ["CommitGate", "GateResult", "GateStep"]
