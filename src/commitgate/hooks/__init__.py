# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Git hook installation services."""

from __future__ import annotations

from .installer import HOOK_MARKER, HOOK_NAME, install_hook, render_hook_script
from .models import InstallResult

__all__ = ["HOOK_MARKER", "HOOK_NAME", "InstallResult", "install_hook", "render_hook_script"]
