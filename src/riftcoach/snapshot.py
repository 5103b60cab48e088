# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Normalized, point-in-time view of the live session."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from riftcoach.constants import ITEM_SLOT_COUNT
from riftcoach.objectives import ObjectiveTimers


def _empty_slots() -> list[str | None]:
    return [None] * ITEM_SLOT_COUNT


def _pad_slots(value: list[Any]) -> list[Any]:
    slots = list(value)[:ITEM_SLOT_COUNT]
    return slots + [None] * (ITEM_SLOT_COUNT - len(slots))


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class GameInfo(_Frozen):
    mode: str = ""
    mode_name: str = ""
    time: float = 0.0


class PlayerInfo(_Frozen):
    name: str = ""
    # Candidate identity the identity-keyed endpoints accepted.
    riot_id: str | None = None
    champion: str = ""
    team: str = ""
    level: int = 0


class RuneInfo(_Frozen):
    keystone: str = ""
    primary_tree: str = ""
    secondary_tree: str = ""


class StatsInfo(_Frozen):
    kills: int = 0
    deaths: int = 0
    assists: int = 0
    cs: int = 0
    vision: float = 0.0


class SpellInfo(_Frozen):
    d: str = ""
    f: str = ""


class AbilityName(_Frozen):
    name: str


class AbilityInfo(_Frozen):
    q: AbilityName | None = None
    w: AbilityName | None = None
    e: AbilityName | None = None
    r: AbilityName | None = None


class DerivedStats(_Frozen):
    kda: str = "0/0/0"
    cs_per_min: float = 0.0
    vision_per_min: float = 0.0


class TeamSplit(_Frozen):
    my_team: int = 0
    enemy_team: int = 0


class TeamInfo(_Frozen):
    my_team: str = ""
    enemy_team: str | None = None
    kills: int = 0
    enemy_kills: int = 0
    turrets: TeamSplit = Field(default_factory=TeamSplit)
    inhibs: TeamSplit = Field(default_factory=TeamSplit)


class RuneIcons(_Frozen):
    keystone: str | None = None
    primary_tree: str | None = None
    secondary_tree: str | None = None


class AssetUrls(_Frozen):
    version: str
    champion_icon_url: str | None = None
    item_icon_urls: list[str | None] = Field(default_factory=_empty_slots)
    rune_icons: RuneIcons = Field(default_factory=RuneIcons)

    @field_validator("item_icon_urls", mode="before")
    @classmethod
    def seven_slots(cls, value: Any) -> list[Any]:
        return _pad_slots(value or [])


class RawData(_Frozen):
    game_stats: dict[str, Any] = Field(default_factory=dict)
    events: list[Any] = Field(default_factory=list)


class Snapshot(_Frozen):
    """One aggregated view of the session.

    ``error`` is only set when the core datasets could not be fetched; in that
    case the remaining fields carry the previous good snapshot, if any.
    """

    error: bool = False
    message: str | None = None
    game: GameInfo = Field(default_factory=GameInfo)
    player: PlayerInfo = Field(default_factory=PlayerInfo)
    runes: RuneInfo = Field(default_factory=RuneInfo)
    stats: StatsInfo = Field(default_factory=StatsInfo)
    items: list[str | None] = Field(default_factory=_empty_slots)
    spells: SpellInfo = Field(default_factory=SpellInfo)
    abilities: AbilityInfo = Field(default_factory=AbilityInfo)
    derived: DerivedStats = Field(default_factory=DerivedStats)
    team: TeamInfo = Field(default_factory=TeamInfo)
    objectives: ObjectiveTimers = Field(default_factory=ObjectiveTimers)
    assets: AssetUrls | None = None
    raw: RawData = Field(default_factory=RawData)

    @field_validator("items", mode="before")
    @classmethod
    def seven_slots(cls, value: Any) -> list[Any]:
        return _pad_slots(value or [])

    @classmethod
    def failed(cls, previous: Snapshot | None, message: str) -> Snapshot:
        """Error-flagged snapshot that keeps the previous data when there is one."""
        base = previous if previous is not None else cls()
        return base.model_copy(update={"error": True, "message": message})
