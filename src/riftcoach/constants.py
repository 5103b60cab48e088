# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Shared constants for riftcoach."""

from __future__ import annotations

# Live client (local game process, self-signed TLS)
LIVE_CLIENT_BASE_URL = "https://127.0.0.1:2999/liveclientdata"
DEFAULT_LIVE_CLIENT_TIMEOUT_S = 2.0

# Data Dragon static asset catalog
DDRAGON_BASE_URL = "https://ddragon.leagueoflegends.com"
DEFAULT_ASSET_TTL_S = 3600.0
DEFAULT_ASSET_TIMEOUT_S = 5.0
DEFAULT_ASSET_LANGUAGE = "en_US"

# Snapshot polling
DEFAULT_POLL_INTERVAL_MS = 1000
MIN_POLL_INTERVAL_MS = 250
MAX_POLL_INTERVAL_MS = 10000

# Equipment slots; the last slot holds the trinket
ITEM_SLOT_COUNT = 7

# Tips engine
DEFAULT_TICK_INTERVAL_S = 1.0
DEFAULT_RULE_RELOAD_DEBOUNCE_S = 0.25
DEFAULT_MAX_TRACKED_KEYS = 4096
WINDOW_SLACK_S = 2.1

# Minion waves on Summoner's Rift: every third wave carries a cannon minion
FIRST_WAVE_S = 90.0
WAVE_CADENCE_S = 30.0
CANNON_WAVE_EVERY = 3
CANNON_WAVE_CUTOFF_S = 1200.0
CANNON_WAVE_LOOKAHEAD = 5

# Watch broker
DEFAULT_WATCH_HOST = "127.0.0.1"
DEFAULT_WATCH_PORT = 8766
