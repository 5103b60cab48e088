# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tips engine: evaluates rules against the latest snapshot and emits tips."""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable

from riftcoach.constants import DEFAULT_MAX_TRACKED_KEYS, DEFAULT_TICK_INTERVAL_S
from riftcoach.hub import EventHub
from riftcoach.logging import get_logger
from riftcoach.snapshot import Snapshot
from riftcoach.tips.models import TEST_TIP, Tip
from riftcoach.tips.rules import RuleSet, TipRule
from riftcoach.tips.triggers import Firing, evaluate_trigger

logger = get_logger(__name__)

SnapshotProvider = Callable[[], Snapshot | None | Awaitable[Snapshot | None]]


def _render(template: str | None, variables: dict[str, str]) -> str | None:
    if template is None:
        return None
    for name, value in variables.items():
        template = template.replace("{" + name + "}", value)
    return template


def build_tip(rule: TipRule, firing: Firing) -> Tip:
    """Merge the rule's overlay channel over the trigger defaults."""
    channel = rule.notify.overlay()
    defaults = firing.defaults

    def pick(attr: str):
        value = getattr(channel, attr) if channel is not None else None
        return value if value is not None else getattr(defaults, attr)

    return Tip(
        id=rule.id,
        title=_render(pick("title"), firing.variables) or rule.id,
        body=_render(pick("body"), firing.variables),
        icon=pick("icon"),
        severity=pick("severity") or "info",
        sticky_ms=pick("sticky_ms") or 4000,
        metadata=dict(firing.metadata),
    )


class TipsEngine:
    """Fires each (rule, occurrence, lead) at most once per game.

    Fired keys are forgotten when the game clock goes backwards, which is
    how a new game is detected. Throttling is measured in wall-clock time.
    """

    def __init__(
        self,
        snapshot_provider: SnapshotProvider,
        hub: EventHub | None = None,
        rules: RuleSet | None = None,
        tick_interval_s: float = DEFAULT_TICK_INTERVAL_S,
        max_tracked_keys: int = DEFAULT_MAX_TRACKED_KEYS,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self._snapshot_provider = snapshot_provider
        self._hub = hub or EventHub()
        self._rules = rules or RuleSet.empty()
        self._tick_interval_s = tick_interval_s
        self._max_tracked_keys = max_tracked_keys
        self._wall_clock = wall_clock
        self._fired: OrderedDict[str, None] = OrderedDict()
        self._last_fired_at: OrderedDict[str, float] = OrderedDict()
        self._last_game_time: float | None = None
        self._task: asyncio.Task | None = None

    @property
    def rules(self) -> RuleSet:
        return self._rules

    @property
    def fired_keys(self) -> frozenset[str]:
        return frozenset(self._fired)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def swap_rules(self, rules: RuleSet) -> None:
        """Replace the active rule set; evaluations in flight keep the old one."""
        self._rules = rules
        logger.info("tip_rules_swapped", modules=len(rules.modules), rules=rules.rule_count)

    def evaluate(self, snapshot: Snapshot | None) -> list[Tip]:
        """Tips due for ``snapshot``. Error-flagged snapshots produce none."""
        if snapshot is None or snapshot.error:
            return []

        now = snapshot.game.time
        if self._last_game_time is not None and now < self._last_game_time:
            logger.info("game_clock_regressed", previous=self._last_game_time, now=now)
            self._fired.clear()
        self._last_game_time = now

        rules = self._rules
        tips: list[Tip] = []
        for rule in rules.active_rules():
            if not rule.applies(now, snapshot.game.mode):
                continue
            try:
                tips.extend(self._evaluate_rule(rule, snapshot))
            except Exception as e:
                logger.warning("tip_rule_failed", rule=rule.id, error=str(e))
        self._prune()
        return tips

    def _evaluate_rule(self, rule: TipRule, snapshot: Snapshot) -> list[Tip]:
        tips: list[Tip] = []
        for firing in evaluate_trigger(rule, snapshot):
            if firing.key in self._fired:
                continue
            wall = self._wall_clock()
            throttle = rule.notify.throttle_sec
            previous = self._last_fired_at.get(firing.key)
            if throttle > 0 and previous is not None and wall - previous < throttle:
                logger.debug("tip_throttled", rule=rule.id, key=firing.key)
                continue
            tip = build_tip(rule, firing)
            self._fired[firing.key] = None
            self._last_fired_at[firing.key] = wall
            tips.append(tip)
        return tips

    def _prune(self) -> None:
        while len(self._fired) > self._max_tracked_keys:
            self._fired.popitem(last=False)
        while len(self._last_fired_at) > self._max_tracked_keys:
            self._last_fired_at.popitem(last=False)

    async def _current_snapshot(self) -> Snapshot | None:
        result = self._snapshot_provider()
        if inspect.isawaitable(result):
            result = await result
        return result

    async def tick(self) -> list[Tip]:
        """Evaluate the latest snapshot and publish whatever fired."""
        snapshot = await self._current_snapshot()
        tips = self.evaluate(snapshot)
        for tip in tips:
            logger.info("tip_emitted", tip_id=tip.id, title=tip.title)
            await self._hub.publish("tip", tip)
        return tips

    async def emit_test_tip(self, tip: Tip | None = None) -> Tip:
        """Publish a fixed tip without touching rule state."""
        tip = tip or TEST_TIP
        await self._hub.publish("tip", tip)
        return tip

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        self._task = None

    async def _loop(self) -> None:
        while True:
            try:
                await self.tick()
            except Exception as e:
                logger.error("tips_tick_failed", error=str(e))
            await asyncio.sleep(self._tick_interval_s)
