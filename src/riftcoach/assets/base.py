# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Protocol for static asset catalogs."""

from typing import Protocol


class AssetCatalog(Protocol):
    """Lookup service resolving snapshot ids to icon URLs.

    Every method may raise AssetLookupError; callers treat that as "no icon".
    """

    async def latest_version(self) -> str:
        """Current catalog version string."""
        ...

    async def champion_index(self) -> dict[str, str]:
        """Champion display name -> catalog champion id."""
        ...

    async def rune_index(self) -> dict[int, str]:
        """Rune or rune tree id -> icon path."""
        ...

    def champion_square_url(self, version: str, champion_id: str) -> str: ...

    def item_icon_url(self, version: str, item_id: int) -> str: ...

    def rune_icon_url(self, icon_path: str) -> str: ...
