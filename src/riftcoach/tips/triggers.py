# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Trigger evaluation: which (rule, occurrence, lead) windows are open now.

Each trigger variant produces zero or more ``Firing`` values for a snapshot.
A firing carries the deduplication key for its occurrence; the engine decides
whether to emit it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from riftcoach.constants import (
    CANNON_WAVE_CUTOFF_S,
    CANNON_WAVE_EVERY,
    CANNON_WAVE_LOOKAHEAD,
    FIRST_WAVE_S,
    WAVE_CADENCE_S,
    WINDOW_SLACK_S,
)
from riftcoach.snapshot import Snapshot
from riftcoach.tips.rules import CannonWaveTrigger, ObjectiveSpawnTrigger, OverlayChannel, TipRule

OBJECTIVE_LABELS = {"dragon": "Dragon", "herald": "Herald", "baron": "Baron"}

CANNON_WAVE_DEFAULTS = OverlayChannel(
    title="Cannon wave in {lead}s",
    body="Prepare to secure the cannon minion.",
    icon="🛡️",
    severity="info",
    sticky_ms=4000,
)

OBJECTIVE_DEFAULTS = OverlayChannel(
    title="Prepare {objective} in {lead}s",
    body="Group and secure vision for {objective}.",
    icon="⚑",
    severity="warning",
    sticky_ms=5000,
)


@dataclass(frozen=True)
class Firing:
    key: str
    lead: float
    spawn_time: float
    defaults: OverlayChannel
    variables: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)


def format_lead(lead: float) -> str:
    return f"{lead:g}"


def in_window(time_to_spawn: float, lead: float, slack: float = WINDOW_SLACK_S) -> bool:
    """True while ``time_to_spawn`` is positive, at most ``lead`` and within ``slack`` of it."""
    return 0 < time_to_spawn <= lead and time_to_spawn > lead - slack


def upcoming_cannon_waves(
    now: float,
    count: int = CANNON_WAVE_LOOKAHEAD,
    cutoff: float = CANNON_WAVE_CUTOFF_S,
) -> list[tuple[int, float]]:
    """Next ``count`` cannon waves as ``(wave_number, spawn_time)``.

    Wave ``w`` (counted from 1) spawns at ``FIRST_WAVE_S + WAVE_CADENCE_S * (w - 1)``;
    every third wave (3, 6, 9, ...) carries a cannon. Nothing is returned once ``now``
    reaches the cutoff.
    """
    if now >= cutoff:
        return []
    waves: list[tuple[int, float]] = []
    n = max(0, int((now - FIRST_WAVE_S) // WAVE_CADENCE_S))
    while len(waves) < count:
        spawn = FIRST_WAVE_S + WAVE_CADENCE_S * n
        if spawn >= cutoff:
            break
        if (n + 1) % CANNON_WAVE_EVERY == 0 and spawn >= now:
            waves.append((n + 1, spawn))
        n += 1
    return waves


def _cannon_firings(rule: TipRule, trigger: CannonWaveTrigger, now: float) -> list[Firing]:
    firings: list[Firing] = []
    for index, spawn in upcoming_cannon_waves(now):
        time_to_spawn = spawn - now
        for lead in trigger.lead_seconds:
            if not in_window(time_to_spawn, lead):
                continue
            firings.append(
                Firing(
                    key=f"{rule.id}:{format_lead(lead)}:{index}",
                    lead=lead,
                    spawn_time=spawn,
                    defaults=CANNON_WAVE_DEFAULTS,
                    variables={"lead": format_lead(lead)},
                    metadata={"lead": lead, "wave_index": index, "spawn_time": spawn},
                )
            )
    return firings


def _objective_firings(rule: TipRule, trigger: ObjectiveSpawnTrigger, snapshot: Snapshot, now: float) -> list[Firing]:
    spawn = snapshot.objectives.next_spawn(trigger.objective)
    if spawn is None or spawn <= 0 or spawn <= now:
        return []
    time_to_spawn = spawn - now
    label = OBJECTIVE_LABELS[trigger.objective]
    firings: list[Firing] = []
    for lead in trigger.lead_seconds:
        if not in_window(time_to_spawn, lead):
            continue
        firings.append(
            Firing(
                key=f"{rule.id}:{trigger.objective}:{format_lead(lead)}:{round(spawn)}",
                lead=lead,
                spawn_time=spawn,
                defaults=OBJECTIVE_DEFAULTS,
                variables={"lead": format_lead(lead), "objective": label},
                metadata={"lead": lead, "objective": trigger.objective, "next_spawn_time": spawn},
            )
        )
    return firings


def evaluate_trigger(rule: TipRule, snapshot: Snapshot) -> list[Firing]:
    """Open windows for ``rule`` at the snapshot's game time."""
    now = snapshot.game.time
    match rule.trigger:
        case CannonWaveTrigger() as trigger:
            return _cannon_firings(rule, trigger, now)
        case ObjectiveSpawnTrigger() as trigger:
            return _objective_firings(rule, trigger, snapshot, now)
    raise TypeError(f"Unsupported trigger: {type(rule.trigger).__name__}")
