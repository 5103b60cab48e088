# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Data Dragon catalog client.

Versions, the champion index and the rune index are cached in an injected
AssetCache; all of them expire together after the configured TTL.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from riftcoach.assets.cache import AssetCache
from riftcoach.logging import get_logger
from riftcoach.settings import AssetsConfig

logger = get_logger(__name__)

VERSION_KEY = "version"


class AssetLookupError(Exception):
    """Catalog lookup failed (network, status or payload shape)."""

    pass


class DataDragonCatalog:
    """Resolves champion, item and rune ids to CDN icon URLs."""

    def __init__(
        self,
        config: AssetsConfig | None = None,
        cache: AssetCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or AssetsConfig()
        self.cache = cache or AssetCache(ttl_seconds=self.config.cache_ttl_seconds)
        self._client = httpx.AsyncClient(
            base_url=self.config.cdn_base,
            timeout=httpx.Timeout(self.config.timeout_seconds),
            follow_redirects=True,
            transport=transport,
        )

    async def _get_json(self, path: str) -> Any:
        try:
            response = await self._client.get(path)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AssetLookupError(f"HTTP {e.response.status_code} from {path}") from e
        except httpx.HTTPError as e:
            raise AssetLookupError(f"Request to {path} failed: {e}") from e
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            content_type = response.headers.get("content-type", "")
            raise AssetLookupError(f"Non-JSON response ({content_type}) from {path}") from e

    async def latest_version(self) -> str:
        cached = self.cache.get(VERSION_KEY)
        if cached is not None:
            return cached
        versions = await self._get_json("/api/versions.json")
        if not isinstance(versions, list) or not versions or not isinstance(versions[0], str):
            raise AssetLookupError("versions.json did not contain a version list")
        self.cache.set(VERSION_KEY, versions[0])
        logger.debug("ddragon_version_refreshed", version=versions[0])
        return versions[0]

    async def champion_index(self) -> dict[str, str]:
        version = await self.latest_version()
        key = f"champions:{version}:{self.config.language}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        payload = await self._get_json(f"/cdn/{version}/data/{self.config.language}/champion.json")
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise AssetLookupError("champion.json has no data table")
        try:
            index = {
                champ["name"]: champ["id"]
                for champ in data.values()
                if isinstance(champ, dict) and "name" in champ and "id" in champ
            }
        except TypeError as e:
            raise AssetLookupError(f"Malformed champion table: {e}") from e
        self.cache.set(key, index)
        return index

    async def rune_index(self) -> dict[int, str]:
        version = await self.latest_version()
        key = f"runes:{version}:{self.config.language}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        trees = await self._get_json(f"/cdn/{version}/data/{self.config.language}/runesReforged.json")
        if not isinstance(trees, list):
            raise AssetLookupError("runesReforged.json is not a list of trees")
        index: dict[int, str] = {}
        try:
            for tree in trees:
                index[tree["id"]] = tree["icon"]
                for slot in tree.get("slots", []):
                    for rune in slot.get("runes", []):
                        index[rune["id"]] = rune["icon"]
        except (KeyError, TypeError, AttributeError) as e:
            raise AssetLookupError(f"Malformed rune tree: {e}") from e
        self.cache.set(key, index)
        return index

    def champion_square_url(self, version: str, champion_id: str) -> str:
        return f"{self.config.cdn_base}/cdn/{version}/img/champion/{champion_id}.png"

    def item_icon_url(self, version: str, item_id: int) -> str:
        return f"{self.config.cdn_base}/cdn/{version}/img/item/{item_id}.png"

    def rune_icon_url(self, icon_path: str) -> str:
        # Rune icons are not versioned.
        return f"{self.config.cdn_base}/cdn/img/{icon_path}"

    async def close(self) -> None:
        """Cleanup HTTP client."""
        await self._client.aclose()
