# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; arguments are passed as a list and
# ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

TIMEOUT_EXIT_CODE: Final[int] = 124


@dataclass(slots=True)
class CommandOptions:
    """Command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    capture_output: bool = False
    timeout: float | None = None
    discard_stdin: bool = False


def _ensure_text(value: str | bytes | None) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def _normalize_args(args: Sequence[str], path: str | None = None) -> list[str]:
    """Normalise the subprocess argument sequence.

    Args:
        args: Raw command arguments supplied by the caller.
        path: Optional ``PATH`` value used when resolving the executable.

    Returns:
        list[str]: Validated argument list suitable for subprocess execution.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head, path=path)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    A non-zero exit status is reported through the returned object, never raised.

    Args:
        args: Command and argument sequence to execute.
        options: Options configuring execution semantics.

    Returns:
        CompletedProcess: Subprocess execution metadata.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    resolved_options = options or CommandOptions()
    search_path = resolved_options.env.get("PATH") if resolved_options.env is not None else None
    normalized = _normalize_args(args, search_path)

    try:
        completed: CompletedProcess[str] = subprocess.run(  # nosec B603 - argument list, no shell
            normalized,
            cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
            env=dict(resolved_options.env) if resolved_options.env is not None else None,
            check=False,
            capture_output=resolved_options.capture_output,
            text=True,
            timeout=resolved_options.timeout,
            stdin=subprocess.DEVNULL if resolved_options.discard_stdin else None,
        )
    except subprocess.TimeoutExpired as exc:
        stdout = _ensure_text(exc.stdout) or ""
        stderr = _ensure_text(exc.stderr)
        timeout_msg = f"Command timed out after {resolved_options.timeout:.1f}s"
        combined_stderr = f"{stderr}\n{timeout_msg}" if stderr else timeout_msg
        completed = subprocess.CompletedProcess(
            args=list(normalized),
            returncode=TIMEOUT_EXIT_CODE,
            stdout=stdout,
            stderr=combined_stderr,
        )

    return completed


class SubprocessRunner:
    """Default :class:`~commitgate.interfaces.CommandRunner` backed by :func:`run_command`."""

    def __init__(self, *, env: Mapping[str, str] | None = None, timeout: float | None = None) -> None:
        self._env = env
        self._timeout = timeout

    def __call__(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        capture_output: bool = False,
    ) -> CompletedProcess[str]:
        """Run ``args`` in ``cwd`` without raising on a non-zero exit status."""

        options = CommandOptions(
            cwd=cwd,
            env=self._env,
            capture_output=capture_output,
            timeout=self._timeout,
            discard_stdin=True,
        )
        return run_command(args, options=options)


__all__ = [
    "CommandOptions",
    "SubprocessRunner",
    "TIMEOUT_EXIT_CODE",
    "run_command",
]
