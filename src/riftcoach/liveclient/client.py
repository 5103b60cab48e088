# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client for the live client data API.

The API is served by the game process on localhost with a self-signed
certificate and only answers while a match is loaded.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from riftcoach.liveclient.exceptions import (
    LiveClientConnectionError,
    LiveClientHTTPError,
    LiveClientInvalidResponseError,
    LiveClientTimeoutError,
)
from riftcoach.logging import get_logger
from riftcoach.settings import LiveClientConfig

logger = get_logger(__name__)


class LiveClient:
    """Thin async wrapper over the live client endpoints."""

    def __init__(
        self,
        config: LiveClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Connection settings
            transport: Optional httpx transport (tests inject a mock transport)
        """
        self.config = config or LiveClientConfig()
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=httpx.Timeout(self.config.timeout_seconds),
            verify=self.config.verify_tls,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET a path and decode its JSON body.

        Raises:
            LiveClientError: On transport, status or decoding failures
        """
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.ConnectError as e:
            raise LiveClientConnectionError(
                f"Failed to connect to live client at {self.config.base_url}"
            ) from e
        except httpx.TimeoutException as e:
            raise LiveClientTimeoutError(
                f"{path} timed out after {self.config.timeout_seconds}s"
            ) from e
        except httpx.HTTPStatusError as e:
            raise LiveClientHTTPError(
                f"HTTP {e.response.status_code} from {path}", e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise LiveClientConnectionError(f"Request to {path} failed: {e}") from e

        logger.debug("live_client_response", path=path, status=response.status_code)

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise LiveClientInvalidResponseError(f"Failed to parse JSON from {path}: {e}") from e

    async def game_stats(self) -> Any:
        return await self.get_json("/gamestats")

    async def events(self) -> list[Any]:
        """Return the event log, coerced to a list."""
        data = await self.get_json("/eventdata")
        events = data.get("Events") if isinstance(data, dict) else None
        return events if isinstance(events, list) else []

    async def active_player_name(self) -> Any:
        return await self.get_json("/activeplayername")

    async def player_list(self) -> list[Any]:
        """Return the roster, coerced to a list (the API answers oddly between matches)."""
        data = await self.get_json("/playerlist")
        return data if isinstance(data, list) else []

    async def active_player(self) -> Any:
        return await self.get_json("/activeplayer")

    async def active_player_abilities(self) -> Any:
        return await self.get_json("/activeplayerabilities")

    async def all_game_data(self) -> Any:
        return await self.get_json("/allgamedata")

    async def player_scores(self, riot_id: str) -> Any:
        return await self.get_json("/playerscores", params={"riotId": riot_id})

    async def player_items(self, riot_id: str) -> Any:
        return await self.get_json("/playeritems", params={"riotId": riot_id})

    async def player_summoner_spells(self, riot_id: str) -> Any:
        return await self.get_json("/playersummonerspells", params={"riotId": riot_id})

    async def player_main_runes(self, riot_id: str) -> Any:
        return await self.get_json("/playermainrunes", params={"riotId": riot_id})

    async def close(self) -> None:
        """Cleanup HTTP client."""
        await self._client.aclose()
