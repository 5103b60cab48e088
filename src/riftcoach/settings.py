# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from riftcoach.constants import (
    DDRAGON_BASE_URL,
    DEFAULT_ASSET_LANGUAGE,
    DEFAULT_ASSET_TIMEOUT_S,
    DEFAULT_ASSET_TTL_S,
    DEFAULT_LIVE_CLIENT_TIMEOUT_S,
    DEFAULT_MAX_TRACKED_KEYS,
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_RULE_RELOAD_DEBOUNCE_S,
    DEFAULT_TICK_INTERVAL_S,
    DEFAULT_WATCH_HOST,
    DEFAULT_WATCH_PORT,
    LIVE_CLIENT_BASE_URL,
)
from riftcoach.paths import default_tips_dir


class LiveClientConfig(BaseModel):
    """Connection settings for the local live client API."""

    base_url: str = LIVE_CLIENT_BASE_URL
    timeout_seconds: float = DEFAULT_LIVE_CLIENT_TIMEOUT_S
    verify_tls: bool = False


class AssetsConfig(BaseModel):
    """Data Dragon lookups used for icon URLs."""

    enabled: bool = True
    cdn_base: str = DDRAGON_BASE_URL
    language: str = DEFAULT_ASSET_LANGUAGE
    cache_ttl_seconds: float = DEFAULT_ASSET_TTL_S
    timeout_seconds: float = DEFAULT_ASSET_TIMEOUT_S


class TipsConfig(BaseModel):
    enabled: bool = True
    rules_dir: Path = Field(default_factory=default_tips_dir)
    tick_interval_s: float = DEFAULT_TICK_INTERVAL_S
    reload_debounce_s: float = DEFAULT_RULE_RELOAD_DEBOUNCE_S
    max_tracked_keys: int = DEFAULT_MAX_TRACKED_KEYS


class WatchConfig(BaseModel):
    enabled: bool = False
    host: str = DEFAULT_WATCH_HOST
    port: int = DEFAULT_WATCH_PORT


class Settings(BaseSettings):
    log_level: str = "WARNING"
    log_format: Literal["console", "json"] = "console"
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    live_client: LiveClientConfig = Field(default_factory=LiveClientConfig)
    assets: AssetsConfig = Field(default_factory=AssetsConfig)
    tips: TipsConfig = Field(default_factory=TipsConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)

    model_config = SettingsConfigDict(
        env_prefix="RIFTCOACH_",
        env_nested_delimiter="__",
        extra="ignore",
    )
