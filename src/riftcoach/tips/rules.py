# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Rule schema for tip documents.

Documents are YAML files shaped like::

    version: 1
    modules:
      - id: objectives
        rules:
          - id: dragon_prep_30
            when: {phase: {maxGameTimeSec: 2400}, modes: [CLASSIC]}
            trigger: {type: objective_spawn, objective: dragon, leadSeconds: 30}
            notify:
              throttleSec: 10
              channels:
                - {type: overlay, title: "Dragon in {lead}s", severity: warning}
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Severity = Literal["info", "warning", "critical"]
ObjectiveName = Literal["dragon", "herald", "baron"]


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class PhaseCondition(_Schema):
    min_game_time_sec: float | None = Field(default=None, alias="minGameTimeSec")
    max_game_time_sec: float | None = Field(default=None, alias="maxGameTimeSec")

    def contains(self, game_time: float) -> bool:
        if self.min_game_time_sec is not None and game_time < self.min_game_time_sec:
            return False
        if self.max_game_time_sec is not None and game_time > self.max_game_time_sec:
            return False
        return True


class RuleWhen(_Schema):
    phase: PhaseCondition | None = None
    modes: tuple[str, ...] = ()

    def matches(self, game_time: float, mode: str) -> bool:
        if self.phase is not None and not self.phase.contains(game_time):
            return False
        if self.modes and mode not in self.modes:
            return False
        return True


def _lead_list(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (value,)
    if isinstance(value, (list, tuple)):
        try:
            return tuple(sorted(value))
        except TypeError:
            # Mixed types; let field validation report it.
            return value
    return value


class CannonWaveTrigger(_Schema):
    type: Literal["cannon_wave"]
    lead_seconds: tuple[float, ...] = Field(alias="leadSeconds")

    @field_validator("lead_seconds", mode="before")
    @classmethod
    def normalize_leads(cls, value: Any) -> Any:
        return _lead_list(value)


class ObjectiveSpawnTrigger(_Schema):
    type: Literal["objective_spawn"]
    objective: ObjectiveName
    lead_seconds: tuple[float, ...] = Field(alias="leadSeconds")

    @field_validator("lead_seconds", mode="before")
    @classmethod
    def normalize_leads(cls, value: Any) -> Any:
        return _lead_list(value)


Trigger = Annotated[CannonWaveTrigger | ObjectiveSpawnTrigger, Field(discriminator="type")]


class OverlayChannel(_Schema):
    type: Literal["overlay"] = "overlay"
    severity: Severity | None = None
    icon: str | None = None
    title: str | None = None
    body: str | None = None
    sticky_ms: int | None = Field(default=None, alias="stickyMs")
    sound: str | None = None


class NotifySpec(_Schema):
    throttle_sec: float = Field(default=0.0, alias="throttleSec")
    channels: tuple[OverlayChannel, ...] = ()

    @field_validator("channels", mode="before")
    @classmethod
    def overlay_only(cls, value: Any) -> Any:
        # Other channel types belong to other consumers; skip them here.
        if isinstance(value, (list, tuple)):
            return tuple(c for c in value if not isinstance(c, dict) or c.get("type", "overlay") == "overlay")
        return value

    def overlay(self) -> OverlayChannel | None:
        return self.channels[0] if self.channels else None


class TipRule(_Schema):
    id: str
    name: str | None = None
    description: str | None = None
    enabled: bool = True
    when: RuleWhen | None = None
    trigger: Trigger
    notify: NotifySpec = Field(default_factory=NotifySpec)

    def applies(self, game_time: float, mode: str) -> bool:
        return self.when is None or self.when.matches(game_time, mode)


class TipModule(_Schema):
    id: str
    enabled: bool = True
    rules: tuple[TipRule, ...] = ()


class TipsDocument(_Schema):
    version: Literal[1] = 1
    modules: tuple[TipModule, ...] = ()


class RuleSet(_Schema):
    """Merged, immutable set of modules from every rule document."""

    modules: tuple[TipModule, ...] = ()

    @classmethod
    def empty(cls) -> RuleSet:
        return cls()

    def active_rules(self) -> Iterator[TipRule]:
        """Enabled rules of enabled modules, in document order."""
        for module in self.modules:
            if not module.enabled:
                continue
            for rule in module.rules:
                if rule.enabled:
                    yield rule

    @property
    def rule_count(self) -> int:
        return sum(len(module.rules) for module in self.modules)
