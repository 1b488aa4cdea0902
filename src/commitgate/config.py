# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and TOML loading for the commit gate."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

CONFIG_FILENAME: Final[str] = ".commit-gate.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "commit-gate"

_ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$(?:\{([^}]+)\}|([A-Za-z_][A-Za-z0-9_]*))")


class MissingToolchainPolicy(str, Enum):
    """Exit behaviour when the toolchain command cannot be found."""

    FAIL = "fail"
    ALLOW = "allow"


class GateConfig(BaseModel):
    """Settings describing which files to gate and which tools to run."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    extension: str = ".rs"
    toolchain: str = "cargo"
    formatter: tuple[str, ...] = ("rustfmt", "--edition", "2021")
    linter: tuple[str, ...] = ("cargo", "clippy", "--all", "--", "-D", "warnings")
    linter_probe: tuple[str, ...] = ("cargo", "clippy", "--version")
    missing_toolchain: MissingToolchainPolicy = MissingToolchainPolicy.FAIL
    restage: bool = False
    emoji: bool = True
    color: bool = True
    timeout: float | None = Field(default=None, ge=0)

    @field_validator("extension")
    @classmethod
    def _normalise_extension(cls, value: str) -> str:
        """Return ``value`` with a single leading dot.

        Raises:
            ValueError: If the extension is blank.
        """

        stripped = value.strip()
        if not stripped.lstrip("."):
            raise ValueError("extension must not be empty")
        return stripped if stripped.startswith(".") else f".{stripped}"

    @field_validator("toolchain")
    @classmethod
    def _require_toolchain(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("toolchain must not be empty")
        return value.strip()

    @field_validator("formatter", "linter", "linter_probe", mode="before")
    @classmethod
    def _coerce_command(cls, value: Sequence[str] | str) -> tuple[str, ...]:
        """Return ``value`` coerced into a non-empty tuple of argument strings.

        Args:
            value: Sequence of arguments, or a whitespace separated string.

        Returns:
            tuple[str, ...]: Normalised command arguments.

        Raises:
            ValueError: If *value* is not a string or sequence, or is empty.
        """

        if isinstance(value, str):
            args = tuple(value.split())
        elif isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
            args = tuple(str(entry) for entry in value)
        else:
            raise ValueError("commands must be a string or a sequence of strings")
        if not args:
            raise ValueError("commands must contain at least the executable")
        return args

    @property
    def formatter_executable(self) -> str:
        """Return the executable that performs formatting."""

        return self.formatter[0]


def _expand_env_string(value: str, env: Mapping[str, str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        key = match.group(1) or match.group(2)
        return env.get(key, match.group(0))

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _expand_env_value(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _expand_env_string(value, env)
    if isinstance(value, list):
        return [_expand_env_value(item, env) for item in value]
    return value


def normalise_payload(data: Mapping[str, Any], env: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Return ``data`` with dashed keys converted and ``$VARS`` expanded.

    Args:
        data: Raw table read from TOML.
        env: Environment used for variable expansion; defaults to ``os.environ``.

    Returns:
        dict[str, Any]: Payload suitable for :class:`GateConfig`.
    """

    environment = os.environ if env is None else env
    return {key.replace("-", "_"): _expand_env_value(value, environment) for key, value in data.items()}


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def find_config_source(root: Path) -> Path | None:
    """Return the configuration file that applies to ``root``, if any.

    ``.commit-gate.toml`` wins over a ``[tool.commit-gate]`` table in
    ``pyproject.toml``.
    """

    dedicated = root / CONFIG_FILENAME
    if dedicated.is_file():
        return dedicated
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.is_file():
        return pyproject
    return None


def load_config(
    root: Path,
    *,
    path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> GateConfig:
    """Load the gate configuration for ``root``.

    Args:
        root: Repository root searched for configuration files.
        path: Explicit configuration file; bypasses discovery when supplied.
        overrides: Values applied on top of the file contents (CLI flags).
        env: Environment used for ``$VAR`` expansion.

    Returns:
        GateConfig: Validated configuration.

    Raises:
        ConfigError: If the file is missing, malformed, or fails validation.
    """

    source = path if path is not None else find_config_source(root)
    payload: dict[str, Any] = {}
    if path is not None and not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")
    if source is not None:
        document = _read_toml(source)
        if source.name == PYPROJECT_FILENAME:
            tool_section = document.get(PYPROJECT_TOOL_KEY, {})
            section = tool_section.get(PYPROJECT_SECTION_KEY, {}) if isinstance(tool_section, Mapping) else {}
            if not isinstance(section, Mapping):
                raise ConfigError(f"[{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] in {source} must be a table")
            document = dict(section)
        payload = normalise_payload(document, env)
    if overrides:
        payload.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return GateConfig.model_validate(payload)
    except ValidationError as exc:
        origin = source or "defaults"
        raise ConfigError(f"Invalid configuration ({origin}): {exc}") from exc


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GateConfig",
    "MissingToolchainPolicy",
    "find_config_source",
    "load_config",
    "normalise_payload",
]
