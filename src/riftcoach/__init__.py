# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Live game state aggregation and timed tips for the League live client."""

from __future__ import annotations

__version__ = "0.1.0"
