# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Static asset lookups (Data Dragon)."""

from riftcoach.assets.base import AssetCatalog
from riftcoach.assets.cache import AssetCache
from riftcoach.assets.datadragon import AssetLookupError, DataDragonCatalog

__all__ = ["AssetCache", "AssetCatalog", "AssetLookupError", "DataDragonCatalog"]
