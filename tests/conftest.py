# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pytest configuration and fixtures."""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterable
from typing import Any

import httpx
import pytest

from riftcoach.assets.datadragon import AssetLookupError
from riftcoach.liveclient import LiveClient

API_PREFIX = "/liveclientdata"
IDENTITY_ENDPOINTS = {"/playerscores", "/playeritems", "/playersummonerspells", "/playermainrunes"}

ME = {
    "riotId": "Hide on bush#KR1",
    "riotIdGameName": "Hide on bush",
    "riotIdTagLine": "KR1",
    "summonerName": "Hide on bush",
    "championName": "Ahri",
    "team": "ORDER",
    "level": 9,
}
ALLY = {
    "riotIdGameName": "Ally",
    "riotIdTagLine": "NA1",
    "summonerName": "Ally",
    "championName": "Lee Sin",
    "team": "ORDER",
    "level": 8,
}
RIVAL = {
    "riotIdGameName": "Rival",
    "riotIdTagLine": "EUW",
    "summonerName": "Rival",
    "championName": "Zed",
    "team": "CHAOS",
    "level": 10,
}

LIVE_GAME: dict[str, Any] = {
    "/gamestats": {"gameMode": "CLASSIC", "gameTime": 600.0},
    "/eventdata": {
        "Events": [
            {"EventName": "GameStart", "EventTime": 0.0},
            {"EventName": "ChampionKill", "EventTime": 250.0, "KillerName": "Hide on bush", "VictimName": "Rival"},
            {"EventName": "ChampionKill", "EventTime": 310.0, "KillerName": "Rival", "VictimName": "Ally"},
            {"EventName": "ChampionKill", "EventTime": 320.0, "KillerName": "Minion_T200L0S01N0003"},
            {"EventName": "TurretKilled", "EventTime": 380.0, "KillerName": "Ally", "TurretKilled": "Turret_T2_L_03_A"},
            {"EventName": "DragonKill", "EventTime": 400.0, "KillerName": "Hide on bush", "DragonType": "Fire"},
        ]
    },
    "/activeplayername": "Hide on bush#KR1",
    "/playerlist": [ME, ALLY, RIVAL],
    "/playerscores": {"kills": 3, "deaths": 1, "assists": 5, "creepScore": 120, "wardScore": 12.5},
    "/playeritems": [
        {"slot": 0, "displayName": "Luden's Companion", "itemID": 6655},
        {"slot": 6, "displayName": "Stealth Ward", "itemID": 3340},
    ],
    "/playersummonerspells": {
        "summonerSpellOne": {"displayName": "Flash"},
        "summonerSpellTwo": {"displayName": "Ignite"},
    },
    "/playermainrunes": {
        "keystone": {"displayName": "Electrocute", "id": 8112},
        "primaryRuneTree": {"displayName": "Domination", "id": 8100},
        "secondaryRuneTree": {"displayName": "Sorcery", "id": 8200},
    },
    "/activeplayer": {"level": 9},
    "/activeplayerabilities": {
        "Q": {"displayName": "Orb of Deception"},
        "W": {"displayName": "Fox-Fire"},
        "E": {"displayName": "Charm"},
        "R": {"displayName": "Spirit Rush"},
    },
    "/allgamedata": {"gameData": {"gameMode": "CLASSIC", "gameTime": 600.0}},
}


class LiveClientServer:
    """Routes requests to canned payloads; an int payload is an HTTP status."""

    def __init__(self, responses: dict[str, Any], accepted_ids: Iterable[str] | None = None) -> None:
        self.responses = responses
        self.accepted_ids = set(accepted_ids) if accepted_ids is not None else None
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(API_PREFIX)
        if path not in self.responses:
            return httpx.Response(404, json={"errorCode": "RESOURCE_NOT_FOUND"})
        if path in IDENTITY_ENDPOINTS and self.accepted_ids is not None:
            if request.url.params.get("riotId") not in self.accepted_ids:
                return httpx.Response(400, json={"errorCode": "INVALID_PARAMETER"})
        payload = self.responses[path]
        if isinstance(payload, int) and not isinstance(payload, bool):
            return httpx.Response(payload)
        return httpx.Response(200, json=payload)

    def paths(self) -> list[str]:
        return [r.url.path.removeprefix(API_PREFIX) for r in self.requests]


@pytest.fixture
def live_game() -> dict[str, Any]:
    """A mid-game set of endpoint payloads (deep copy, safe to mutate)."""
    return copy.deepcopy(LIVE_GAME)


@pytest.fixture
def make_client() -> Callable[..., tuple[LiveClient, LiveClientServer]]:
    """Factory for a LiveClient backed by an in-memory server."""

    def _make(responses: dict[str, Any], accepted_ids: Iterable[str] | None = None):
        server = LiveClientServer(responses, accepted_ids)
        return LiveClient(transport=httpx.MockTransport(server)), server

    return _make


class FakeCatalog:
    """In-memory asset catalog; any piece can be made to fail."""

    def __init__(
        self,
        version: str | None = "14.1.1",
        champions: dict[str, str] | None = None,
        runes: dict[int, str] | None = None,
    ) -> None:
        self.version = version
        self.champions = champions
        self.runes = runes

    async def latest_version(self) -> str:
        if self.version is None:
            raise AssetLookupError("versions unavailable")
        return self.version

    async def champion_index(self) -> dict[str, str]:
        if self.champions is None:
            raise AssetLookupError("champions unavailable")
        return self.champions

    async def rune_index(self) -> dict[int, str]:
        if self.runes is None:
            raise AssetLookupError("runes unavailable")
        return self.runes

    def champion_square_url(self, version: str, champion_id: str) -> str:
        return f"cdn/{version}/champion/{champion_id}.png"

    def item_icon_url(self, version: str, item_id: int) -> str:
        return f"cdn/{version}/item/{item_id}.png"

    def rune_icon_url(self, icon_path: str) -> str:
        return f"cdn/img/{icon_path}"


@pytest.fixture
def roster() -> list[dict[str, Any]]:
    """Local player, one ally and one enemy."""
    return copy.deepcopy([ME, ALLY, RIVAL])


@pytest.fixture
def fake_catalog() -> type[FakeCatalog]:
    return FakeCatalog
