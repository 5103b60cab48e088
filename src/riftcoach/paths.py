# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Filesystem paths for tip rule documents."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir

ENV_TIPS_DIR = "RIFTCOACH_TIPS_DIR"


def default_tips_dir() -> Path:
    """Get the default directory holding tip rule documents."""
    env_root = os.getenv(ENV_TIPS_DIR)
    if env_root:
        return Path(env_root)
    return Path(user_config_dir("riftcoach", "riftcoach")) / "tips"
