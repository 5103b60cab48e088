# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Snapshot aggregation over the live client endpoints.

One call to :meth:`SnapshotAggregator.aggregate` fans out to every endpoint,
merges the partial answers and returns a :class:`Snapshot`. Only the four core
datasets (game stats, event log, active player name, roster) are fatal; every
other dataset degrades to an empty field when it cannot be fetched.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from riftcoach.assets.base import AssetCatalog
from riftcoach.assets.datadragon import AssetLookupError
from riftcoach.constants import ITEM_SLOT_COUNT
from riftcoach.game_modes import resolve_game_mode_name
from riftcoach.identity import IdentityResolution, full_riot_id, parse_active_identity, resolve_identity
from riftcoach.liveclient.client import LiveClient
from riftcoach.liveclient.exceptions import LiveClientError, LiveClientInvalidResponseError
from riftcoach.logging import get_logger
from riftcoach.objectives import DEFAULT_SCHEDULE, ObjectiveSchedule, compute_objective_timers
from riftcoach.snapshot import (
    AbilityInfo,
    AbilityName,
    AssetUrls,
    DerivedStats,
    GameInfo,
    PlayerInfo,
    RawData,
    RuneIcons,
    RuneInfo,
    Snapshot,
    SpellInfo,
    StatsInfo,
    TeamInfo,
    TeamSplit,
)

logger = get_logger(__name__)

STRUCTURE_EVENTS = {"TurretKilled": "turrets", "InhibKilled": "inhibs"}


@dataclass
class CandidateFetch:
    """Outcome of trying an identity-keyed endpoint with every candidate."""

    data: Any = None
    used_id: str | None = None
    attempted: list[str] = field(default_factory=list)

    @property
    def used_url(self) -> str | None:
        return self.attempted[-1] if self.used_id is not None else None


async def fetch_with_candidates(
    fetch: Callable[[str], Awaitable[Any]],
    endpoint: str,
    candidates: Sequence[str],
) -> CandidateFetch:
    """Try ``fetch`` with each candidate in order; first success wins.

    Exhausting every candidate is not an error: the result simply has no data.
    """
    result = CandidateFetch()
    for candidate in candidates:
        result.attempted.append(f"/{endpoint}?riotId={quote(candidate, safe='')}")
        try:
            result.data = await fetch(candidate)
        except LiveClientError as e:
            logger.debug("identity_candidate_rejected", endpoint=endpoint, candidate=candidate, error=str(e))
            continue
        result.used_id = candidate
        return result
    logger.info("identity_endpoint_unavailable", endpoint=endpoint, attempted=len(result.attempted))
    return result


async def _optional(awaitable: Awaitable[Any], endpoint: str) -> Any:
    try:
        return await awaitable
    except LiveClientError as e:
        logger.info("optional_endpoint_unavailable", endpoint=endpoint, error=str(e))
        return None


async def _capture(awaitable: Awaitable[Any]) -> Any:
    try:
        return await awaitable
    except LiveClientError as e:
        return {"error": str(e)}


async def _enrichment(piece: str, awaitable: Awaitable[Any]) -> Any:
    # Icon lookups never fail a poll; cancellation still propagates.
    try:
        return await awaitable
    except Exception as e:
        logger.warning("asset_piece_unavailable", piece=piece, error=str(e))
        return None


def _number(value: Any, default: float = 0) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _display_name(value: Any) -> str:
    return _text(_mapping(value).get("displayName"))


def _slot(item: Mapping[str, Any]) -> int | None:
    slot = item.get("slot")
    if isinstance(slot, bool) or not isinstance(slot, int):
        return None
    return slot if 0 <= slot < ITEM_SLOT_COUNT else None


def item_list(raw: Any) -> list[Mapping[str, Any]]:
    """Item entries from a bare list or a ``{"data": [...]}`` wrapper."""
    if isinstance(raw, Mapping) and isinstance(raw.get("data"), list):
        raw = raw["data"]
    if not isinstance(raw, list):
        return []
    entries = [item for item in raw if isinstance(item, Mapping)]
    return sorted(entries, key=lambda item: _slot(item) or 0)


def normalize_items(raw: Any) -> list[str | None]:
    """Seven display names indexed by slot; empty slots stay ``None``."""
    slots: list[str | None] = [None] * ITEM_SLOT_COUNT
    for item in item_list(raw):
        slot = _slot(item)
        name = _text(item.get("displayName"))
        if slot is not None and name:
            slots[slot] = name
    return slots


def normalize_abilities(raw: Any) -> AbilityInfo:
    abilities = _mapping(raw)

    def _ability(key: str) -> AbilityName | None:
        entry = abilities.get(key)
        if not entry:
            return None
        return AbilityName(name=_display_name(entry) or key)

    return AbilityInfo(q=_ability("Q"), w=_ability("W"), e=_ability("E"), r=_ability("R"))


def tally_team_events(events: Sequence[Any], roster: Sequence[Any], my_team: str) -> TeamInfo:
    """Team kill and structure counts, attributed through the killer's name."""
    name_to_team: dict[str, str] = {}
    enemy_team: str | None = None
    for entry in roster:
        if not isinstance(entry, Mapping):
            continue
        team = _text(entry.get("team"))
        for key in ("riotIdGameName", "summonerName"):
            name = _text(entry.get(key))
            if name:
                name_to_team[name] = team
        if enemy_team is None and team and team != my_team:
            enemy_team = team

    kills = {"mine": 0, "enemy": 0}
    structures = {"turrets": {"mine": 0, "enemy": 0}, "inhibs": {"mine": 0, "enemy": 0}}
    for event in events:
        if not isinstance(event, Mapping):
            continue
        name = event.get("EventName")
        if name == "ChampionKill":
            counter = kills
        elif name in STRUCTURE_EVENTS:
            counter = structures[STRUCTURE_EVENTS[name]]
        else:
            continue
        killer = _text(event.get("KillerName"))
        killer_team = name_to_team.get(killer, "") if killer else ""
        # Uncredited when the killer (minion, unknown name) has no team.
        if not killer_team:
            continue
        if killer_team == my_team:
            counter["mine"] += 1
        elif killer_team == enemy_team:
            counter["enemy"] += 1

    return TeamInfo(
        my_team=my_team,
        enemy_team=enemy_team,
        kills=kills["mine"],
        enemy_kills=kills["enemy"],
        turrets=TeamSplit(my_team=structures["turrets"]["mine"], enemy_team=structures["turrets"]["enemy"]),
        inhibs=TeamSplit(my_team=structures["inhibs"]["mine"], enemy_team=structures["inhibs"]["enemy"]),
    )


def derive_stats(stats: StatsInfo, game_time: float) -> DerivedStats:
    minutes = max(1 / 60, game_time / 60)
    return DerivedStats(
        kda=f"{stats.kills}/{stats.deaths}/{stats.assists}",
        cs_per_min=round(stats.cs / minutes, 2),
        vision_per_min=round(stats.vision / minutes, 2),
    )


class SnapshotAggregator:
    """Builds one Snapshot per call from the live client."""

    def __init__(
        self,
        client: LiveClient,
        assets: AssetCatalog | None = None,
        schedule: ObjectiveSchedule = DEFAULT_SCHEDULE,
        game_modes: dict[str, str] | None = None,
    ) -> None:
        self.client = client
        self.assets = assets
        self.schedule = schedule
        self.game_modes = game_modes

    async def aggregate(self) -> Snapshot:
        """Fetch and merge every dataset into a Snapshot.

        Raises:
            LiveClientError: When one of the core datasets is unavailable
        """
        game_stats, events, active_raw, roster = await asyncio.gather(
            self.client.game_stats(),
            self.client.events(),
            self.client.active_player_name(),
            self.client.player_list(),
        )
        if not isinstance(game_stats, Mapping):
            raise LiveClientInvalidResponseError("gamestats payload is not an object")

        game_time = float(_number(game_stats.get("gameTime")))
        active = parse_active_identity(active_raw)
        identity = resolve_identity(active, roster)
        me = _mapping(identity.entry)
        candidates = identity.candidates

        scores, items, spells, runes, active_player, abilities = await asyncio.gather(
            fetch_with_candidates(self.client.player_scores, "playerscores", candidates),
            fetch_with_candidates(self.client.player_items, "playeritems", candidates),
            fetch_with_candidates(self.client.player_summoner_spells, "playersummonerspells", candidates),
            fetch_with_candidates(self.client.player_main_runes, "playermainrunes", candidates),
            _optional(self.client.active_player(), "activeplayer"),
            _optional(self.client.active_player_abilities(), "activeplayerabilities"),
        )

        score_data = _mapping(scores.data)
        stats = StatsInfo(
            kills=int(_number(score_data.get("kills"))),
            deaths=int(_number(score_data.get("deaths"))),
            assists=int(_number(score_data.get("assists"))),
            cs=int(_number(score_data.get("creepScore"))),
            vision=float(_number(score_data.get("wardScore"))),
        )
        rune_data = _mapping(runes.data)
        spell_data = _mapping(spells.data)
        champion = _text(me.get("championName"))
        level = int(_number(me.get("level")) or _number(_mapping(active_player).get("level")))
        mode = _text(game_stats.get("gameMode"))

        return Snapshot(
            game=GameInfo(
                mode=mode,
                mode_name=resolve_game_mode_name(mode, self.game_modes),
                time=game_time,
            ),
            player=PlayerInfo(
                name=active.full_riot_id or active.raw or active.game_name,
                riot_id=items.used_id or scores.used_id or spells.used_id,
                champion=champion,
                team=_text(me.get("team")),
                level=level,
            ),
            runes=RuneInfo(
                keystone=_display_name(rune_data.get("keystone")),
                primary_tree=_display_name(rune_data.get("primaryRuneTree")),
                secondary_tree=_display_name(rune_data.get("secondaryRuneTree")),
            ),
            stats=stats,
            items=normalize_items(items.data),
            spells=SpellInfo(
                d=_display_name(spell_data.get("summonerSpellOne")),
                f=_display_name(spell_data.get("summonerSpellTwo")),
            ),
            abilities=normalize_abilities(abilities),
            derived=derive_stats(stats, game_time),
            team=tally_team_events(events, roster, _text(me.get("team"))),
            objectives=compute_objective_timers(game_time, events, self.schedule),
            assets=await self._build_assets(champion, items.data, rune_data),
            raw=RawData(game_stats=dict(game_stats), events=list(events)),
        )

    async def _build_assets(
        self, champion: str, items_raw: Any, runes: Mapping[str, Any]
    ) -> AssetUrls | None:
        """Icon URLs; every piece degrades to None on its own."""
        if self.assets is None:
            return None
        try:
            version = await self.assets.latest_version()
        except Exception as e:
            logger.warning("asset_version_unavailable", error=str(e))
            return None

        champion_url = await _enrichment("champion", self._champion_url(version, champion))
        item_urls = await _enrichment("items", self._item_urls(version, items_raw))
        rune_icons = await _enrichment("runes", self._rune_icons(runes))
        return AssetUrls(
            version=version,
            champion_icon_url=champion_url,
            item_icon_urls=item_urls or [],
            rune_icons=rune_icons or RuneIcons(),
        )

    async def _champion_url(self, version: str, champion: str) -> str | None:
        if not champion:
            return None
        try:
            index = await self.assets.champion_index()
        except AssetLookupError as e:
            logger.warning("champion_index_unavailable", error=str(e))
            index = {}
        champion_id = index.get(champion) or re.sub(r"[^A-Za-z]", "", champion)
        return self.assets.champion_square_url(version, champion_id) if champion_id else None

    async def _item_urls(self, version: str, items_raw: Any) -> list[str | None]:
        item_urls: list[str | None] = [None] * ITEM_SLOT_COUNT
        for item in item_list(items_raw):
            slot = _slot(item)
            item_id = item.get("itemID")
            if slot is not None and isinstance(item_id, int) and item_id:
                item_urls[slot] = self.assets.item_icon_url(version, item_id)
        return item_urls

    async def _rune_icons(self, runes: Mapping[str, Any]) -> RuneIcons:
        rune_index = await self.assets.rune_index()

        def _rune_url(key: str) -> str | None:
            icon = rune_index.get(_mapping(runes.get(key)).get("id"))
            return self.assets.rune_icon_url(icon) if icon else None

        return RuneIcons(
            keystone=_rune_url("keystone"),
            primary_tree=_rune_url("primaryRuneTree"),
            secondary_tree=_rune_url("secondaryRuneTree"),
        )

    async def raw_dump(self) -> dict[str, Any]:
        """Every endpoint's raw answer plus how the identity candidates fared.

        Transport errors are reported inline as ``{"error": ...}`` instead of
        raised, so the dump is useful precisely when aggregation fails.
        """
        game_stats, events, active_raw, roster_raw, all_game_data = await asyncio.gather(
            _capture(self.client.game_stats()),
            _capture(self.client.events()),
            _capture(self.client.active_player_name()),
            _capture(self.client.player_list()),
            _capture(self.client.all_game_data()),
        )
        roster = roster_raw if isinstance(roster_raw, list) else []
        identity: IdentityResolution = resolve_identity(active_raw, roster)
        candidates = identity.candidates

        active_player, abilities, scores, items, spells, runes = await asyncio.gather(
            _capture(self.client.active_player()),
            _capture(self.client.active_player_abilities()),
            fetch_with_candidates(self.client.player_scores, "playerscores", candidates),
            fetch_with_candidates(self.client.player_items, "playeritems", candidates),
            fetch_with_candidates(self.client.player_summoner_spells, "playersummonerspells", candidates),
            fetch_with_candidates(self.client.player_main_runes, "playermainrunes", candidates),
        )

        def _logged(result: CandidateFetch) -> dict[str, Any]:
            return {"used_url": result.used_url, "attempted": result.attempted, "data": result.data}

        return {
            "meta": {
                "resolved_riot_id": full_riot_id(identity.entry) or None,
                "resolved_player": identity.entry,
                "riot_id_candidates": list(candidates),
            },
            "endpoints": {
                "allgamedata": {"url": "/allgamedata", "data": all_game_data},
                "gamestats": {"url": "/gamestats", "data": game_stats},
                "eventdata": {"url": "/eventdata", "data": events},
                "activeplayername": {"url": "/activeplayername", "data": active_raw},
                "playerlist": {"url": "/playerlist", "data": roster_raw},
                "activeplayer": {"url": "/activeplayer", "data": active_player},
                "activeplayerabilities": {"url": "/activeplayerabilities", "data": abilities},
                "playerscores": _logged(scores),
                "playeritems": _logged(items),
                "playersummonerspells": _logged(spells),
                "playermainrunes": _logged(runes),
            },
        }
