# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Spawn timers for the recurring neutral objectives.

Pure functions over the current game time and the event log. No state is kept
between calls: the most recent kill of each objective is found by scanning the
log, which the live client returns in chronological order.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ObjectiveSpec(BaseModel):
    """Spawn schedule of one objective."""

    first_spawn: float
    respawn: float
    kill_event: str
    # Deadline after which the objective is gone for the rest of the match.
    despawn_at: float | None = None

    model_config = ConfigDict(frozen=True)


class ObjectiveSchedule(BaseModel):
    dragon: ObjectiveSpec = ObjectiveSpec(first_spawn=300, respawn=300, kill_event="DragonKill")
    herald: ObjectiveSpec = ObjectiveSpec(first_spawn=480, respawn=360, kill_event="HeraldKill", despawn_at=1200)
    baron: ObjectiveSpec = ObjectiveSpec(first_spawn=1200, respawn=360, kill_event="BaronKill")

    model_config = ConfigDict(frozen=True)


DEFAULT_SCHEDULE = ObjectiveSchedule()


class DragonTimer(BaseModel):
    next_spawn_time: float
    time_to_spawn: str
    last_kill_type: str | None = None

    model_config = ConfigDict(frozen=True)


class HeraldTimer(BaseModel):
    next_spawn_time: float
    time_to_spawn: str
    despawns_at: float
    despawns_in: str

    model_config = ConfigDict(frozen=True)


class BaronTimer(BaseModel):
    next_spawn_time: float
    time_to_spawn: str

    model_config = ConfigDict(frozen=True)


class ObjectiveTimers(BaseModel):
    dragon: DragonTimer = Field(default_factory=lambda: DragonTimer(next_spawn_time=0, time_to_spawn="0:00"))
    herald: HeraldTimer = Field(
        default_factory=lambda: HeraldTimer(
            next_spawn_time=0, time_to_spawn="0:00", despawns_at=0, despawns_in="0:00"
        )
    )
    baron: BaronTimer = Field(default_factory=lambda: BaronTimer(next_spawn_time=0, time_to_spawn="0:00"))

    model_config = ConfigDict(frozen=True)

    def next_spawn(self, objective: str) -> float | None:
        timer = getattr(self, objective, None)
        return timer.next_spawn_time if timer is not None else None


def format_clock(seconds: float) -> str:
    """Render signed ``m:ss``; negative values keep their minus sign."""
    sign = "-" if seconds < 0 else ""
    total = abs(math.floor(seconds))
    return f"{sign}{total // 60}:{total % 60:02d}"


def last_kills(events: Iterable[Any], event_names: Iterable[str]) -> dict[str, Mapping[str, Any]]:
    """Most recent event of each requested name (last one in log order wins)."""
    wanted = set(event_names)
    found: dict[str, Mapping[str, Any]] = {}
    for event in events or ():
        if isinstance(event, Mapping) and event.get("EventName") in wanted:
            found[event["EventName"]] = event
    return found


def _event_time(event: Mapping[str, Any] | None) -> float | None:
    if event is None:
        return None
    value = event.get("EventTime")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def next_spawn_time(spec: ObjectiveSpec, game_time: float, last_kill_at: float | None) -> float:
    """Next spawn of one objective.

    Before the first spawn the answer is the first spawn. After it, a recorded
    kill schedules the respawn; without a kill the first spawn time is kept
    even though it lies in the past.
    """
    if game_time < spec.first_spawn:
        next_at = spec.first_spawn
    elif last_kill_at is not None:
        next_at = last_kill_at + spec.respawn
    else:
        next_at = spec.first_spawn
    if spec.despawn_at is not None:
        next_at = min(spec.despawn_at, next_at)
    return next_at


def compute_objective_timers(
    game_time: float,
    events: Iterable[Any],
    schedule: ObjectiveSchedule = DEFAULT_SCHEDULE,
) -> ObjectiveTimers:
    """Compute next spawn and countdown for dragon, herald and baron."""
    kills = last_kills(
        events,
        (schedule.dragon.kill_event, schedule.herald.kill_event, schedule.baron.kill_event),
    )
    dragon_kill = kills.get(schedule.dragon.kill_event)
    herald_kill = kills.get(schedule.herald.kill_event)
    baron_kill = kills.get(schedule.baron.kill_event)

    dragon_at = next_spawn_time(schedule.dragon, game_time, _event_time(dragon_kill))
    herald_at = next_spawn_time(schedule.herald, game_time, _event_time(herald_kill))
    baron_at = next_spawn_time(schedule.baron, game_time, _event_time(baron_kill))
    herald_end = schedule.herald.despawn_at if schedule.herald.despawn_at is not None else schedule.baron.first_spawn

    dragon_type = dragon_kill.get("DragonType") if dragon_kill is not None else None
    return ObjectiveTimers(
        dragon=DragonTimer(
            next_spawn_time=dragon_at,
            time_to_spawn=format_clock(dragon_at - game_time),
            last_kill_type=dragon_type if isinstance(dragon_type, str) else None,
        ),
        herald=HeraldTimer(
            next_spawn_time=herald_at,
            time_to_spawn=format_clock(herald_at - game_time),
            despawns_at=herald_end,
            despawns_in=format_clock(herald_end - game_time),
        ),
        baron=BaronTimer(
            next_spawn_time=baron_at,
            time_to_spawn=format_clock(baron_at - game_time),
        ),
    )
