# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for the tips engine."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from riftcoach.hub import EventHub
from riftcoach.objectives import ObjectiveSchedule, ObjectiveSpec, compute_objective_timers
from riftcoach.snapshot import GameInfo, Snapshot
from riftcoach.tips import TEST_TIP, RuleSet, Tip, TipsEngine, TipsDocument

# Dragon first spawn at 20:00 so a 30s lead opens at 19:30.
LATE_DRAGON = ObjectiveSchedule(dragon=ObjectiveSpec(first_spawn=1200, respawn=300, kill_event="DragonKill"))


def snap(now: float, mode: str = "CLASSIC", error: bool = False) -> Snapshot:
    return Snapshot(
        error=error,
        game=GameInfo(mode=mode, time=now),
        objectives=compute_objective_timers(now, [], LATE_DRAGON),
    )


def rules(*rule_dicts: dict[str, Any], enabled: bool = True) -> RuleSet:
    document = TipsDocument.model_validate({"version": 1, "modules": [{"id": "test", "enabled": enabled, "rules": list(rule_dicts)}]})
    return RuleSet(modules=document.modules)


DRAGON_PREP = {
    "id": "dragon_prep_30",
    "trigger": {"type": "objective_spawn", "objective": "dragon", "leadSeconds": 30},
    "notify": {"channels": [{"type": "overlay", "title": "Dragon in {lead}s", "severity": "warning"}]},
}

CANNON = {
    "id": "cannon",
    "trigger": {"type": "cannon_wave", "leadSeconds": 10},
}


class FakeWallClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def engine_for(rule_set: RuleSet, **kwargs) -> TipsEngine:
    return TipsEngine(lambda: None, rules=rule_set, **kwargs)


def run_series(engine: TipsEngine, times) -> list[Tip]:
    fired: list[Tip] = []
    for now in times:
        fired.extend(engine.evaluate(snap(now)))
    return fired


class TestObjectiveTrigger:
    def test_end_to_end_dragon_prep(self):
        engine = engine_for(rules(DRAGON_PREP))

        tips = engine.evaluate(snap(1170))
        assert [t.title for t in tips] == ["Dragon in 30s"]
        assert tips[0].id == "dragon_prep_30"
        assert tips[0].severity == "warning"
        assert tips[0].metadata["objective"] == "dragon"
        assert tips[0].metadata["lead"] == 30

        later = snap(1185)
        assert later.objectives.dragon.time_to_spawn == "0:15"
        assert engine.evaluate(later) == []

    def test_fires_once_across_window(self):
        engine = engine_for(rules(DRAGON_PREP))
        times = [1100 + i * 0.5 for i in range(200)]
        assert len(run_series(engine, times)) == 1

    def test_window_closes_after_slack(self):
        engine = engine_for(rules(DRAGON_PREP))
        # 27.5s to spawn is past the 2.1s slack of a 30s lead.
        assert engine.evaluate(snap(1172.5)) == []

    def test_defaults_without_channel(self):
        rule = {"id": "baron_60", "trigger": {"type": "objective_spawn", "objective": "baron", "leadSeconds": 60}}
        engine = engine_for(rules(rule))
        [tip] = engine.evaluate(snap(1140))
        assert tip.title == "Prepare Baron in 60s"
        assert tip.body == "Group and secure vision for Baron."
        assert tip.icon == "⚑"
        assert tip.sticky_ms == 5000

    def test_multiple_leads(self):
        rule = {**DRAGON_PREP, "trigger": {"type": "objective_spawn", "objective": "dragon", "leadSeconds": [30, 60]}}
        engine = engine_for(rules(rule))
        tips = run_series(engine, [1130, 1140, 1150, 1160, 1170, 1180])
        assert [t.metadata["lead"] for t in tips] == [60, 30]
        assert [t.title for t in tips] == ["Dragon in 60s", "Dragon in 30s"]

    def test_past_spawn_is_skipped(self):
        rule = {"id": "herald", "trigger": {"type": "objective_spawn", "objective": "herald", "leadSeconds": 30}}
        engine = engine_for(rules(rule))
        # Herald spawned at 8:00 and was never killed; its next spawn lies in the past.
        assert run_series(engine, range(600, 700)) == []


class TestCannonWaveTrigger:
    def test_fires_before_cannon_wave(self):
        engine = engine_for(rules(CANNON))
        tips = run_series(engine, range(130, 160))
        assert len(tips) == 1
        assert tips[0].title == "Cannon wave in 10s"
        assert tips[0].icon == "🛡️"
        assert tips[0].metadata["wave_index"] == 3
        assert tips[0].metadata["spawn_time"] == 150

    def test_each_wave_fires(self):
        engine = engine_for(rules(CANNON))
        tips = run_series(engine, range(100, 400))
        assert [t.metadata["wave_index"] for t in tips] == [3, 6, 9]

    def test_inert_after_cutoff(self):
        engine = engine_for(rules(CANNON))
        assert run_series(engine, range(1200, 1500)) == []


class TestDeduplication:
    def test_clock_regression_rearms_keys(self):
        engine = engine_for(rules(DRAGON_PREP))
        assert len(engine.evaluate(snap(1170))) == 1
        assert engine.fired_keys

        assert engine.evaluate(snap(5)) == []
        assert not engine.fired_keys
        assert len(run_series(engine, [1169, 1170.5])) == 1

    def test_throttle_suppresses_refire(self):
        wall = FakeWallClock()
        rule = {**DRAGON_PREP, "notify": {**DRAGON_PREP["notify"], "throttleSec": 10}}
        engine = engine_for(rules(rule), wall_clock=wall)

        assert len(engine.evaluate(snap(1170))) == 1

        wall.now = 5
        engine.evaluate(snap(10))
        assert engine.evaluate(snap(1170)) == []

        # Suppression did not mark the key fired, so it fires once the interval passes.
        wall.now = 12
        assert len(engine.evaluate(snap(1171))) == 1

    def test_tracked_keys_are_capped(self):
        engine = engine_for(rules(CANNON), max_tracked_keys=2)
        run_series(engine, range(100, 400))
        assert len(engine.fired_keys) == 2
        assert engine.fired_keys == {"cannon:10:6", "cannon:10:9"}


class TestApplicability:
    def test_mode_filter(self):
        rule = {**DRAGON_PREP, "when": {"modes": ["CLASSIC"]}}
        engine = engine_for(rules(rule))
        assert engine.evaluate(snap(1170, mode="ARAM")) == []
        assert len(engine.evaluate(snap(1170.5, mode="CLASSIC"))) == 1

    def test_phase_filter(self):
        rule = {**CANNON, "when": {"phase": {"minGameTimeSec": 200, "maxGameTimeSec": 300}}}
        engine = engine_for(rules(rule))
        tips = run_series(engine, range(100, 400))
        assert [t.metadata["wave_index"] for t in tips] == [6]

    def test_disabled_rule(self):
        engine = engine_for(rules({**DRAGON_PREP, "enabled": False}))
        assert engine.evaluate(snap(1170)) == []

    def test_disabled_module(self):
        engine = engine_for(rules(DRAGON_PREP, enabled=False))
        assert engine.evaluate(snap(1170)) == []

    def test_error_snapshot_skipped(self):
        engine = engine_for(rules(DRAGON_PREP))
        assert engine.evaluate(snap(1170, error=True)) == []
        assert engine.evaluate(None) == []
        assert len(engine.evaluate(snap(1170))) == 1


class TestIsolation:
    def test_failing_rule_does_not_block_others(self, monkeypatch):
        from riftcoach.tips import engine as engine_module

        real = engine_module.evaluate_trigger

        def flaky(rule, snapshot):
            if rule.id == "cannon":
                raise RuntimeError("bad rule")
            return real(rule, snapshot)

        monkeypatch.setattr(engine_module, "evaluate_trigger", flaky)
        engine = engine_for(rules(CANNON, DRAGON_PREP))

        tips = engine.evaluate(snap(1170))
        assert [t.id for t in tips] == ["dragon_prep_30"]

    def test_swap_rules(self):
        engine = engine_for(rules(CANNON))
        assert engine.evaluate(snap(1170)) == []
        engine.swap_rules(rules(DRAGON_PREP))
        assert engine.rules.rule_count == 1
        assert len(engine.evaluate(snap(1170.5))) == 1


class TestPublishing:
    @pytest.mark.asyncio
    async def test_tick_publishes_tips(self):
        hub = EventHub()
        seen: list[Tip] = []
        hub.subscribe("tip", seen.append)
        current = {"snapshot": snap(1170)}
        engine = TipsEngine(lambda: current["snapshot"], hub=hub, rules=rules(DRAGON_PREP))

        tips = await engine.tick()

        assert seen == tips
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_async_snapshot_provider(self):
        async def provider() -> Snapshot:
            return snap(1170)

        engine = TipsEngine(provider, rules=rules(DRAGON_PREP))
        assert len(await engine.tick()) == 1

    @pytest.mark.asyncio
    async def test_emit_test_tip(self):
        hub = EventHub()
        seen: list[Tip] = []
        hub.subscribe("tip", seen.append)
        engine = TipsEngine(lambda: None, hub=hub)

        await engine.emit_test_tip()

        assert seen == [TEST_TIP]
        assert not engine.fired_keys

    @pytest.mark.asyncio
    async def test_loop_start_stop(self):
        hub = EventHub()
        seen: list[Tip] = []
        hub.subscribe("tip", seen.append)
        engine = TipsEngine(lambda: snap(1170), hub=hub, rules=rules(DRAGON_PREP), tick_interval_s=0.01)

        engine.start()
        await asyncio.sleep(0.05)
        await engine.stop()

        assert not engine.running
        assert len(seen) == 1
