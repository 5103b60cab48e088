# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Wires the live client, aggregator, poller, tips engine and views together."""

from __future__ import annotations

import asyncio
import contextlib

from riftcoach.aggregator import SnapshotAggregator
from riftcoach.assets import DataDragonCatalog
from riftcoach.hub import EventHub
from riftcoach.liveclient import LiveClient
from riftcoach.logging import get_logger
from riftcoach.poller import SnapshotPoller
from riftcoach.settings import Settings
from riftcoach.tips import DirectoryRuleSource, TipsEngine
from riftcoach.watch import WatchBroker

logger = get_logger(__name__)


def _report_watch_exit(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error("tip_rules_watch_stopped", error=str(error))


class RiftCoachApp:
    def __init__(
        self,
        settings: Settings | None = None,
        client: LiveClient | None = None,
        catalog: DataDragonCatalog | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.hub = EventHub()
        self.client = client or LiveClient(self.settings.live_client)
        if catalog is None and self.settings.assets.enabled:
            catalog = DataDragonCatalog(self.settings.assets)
        self.catalog = catalog
        self.aggregator = SnapshotAggregator(self.client, assets=self.catalog)
        self.poller = SnapshotPoller(self.aggregator, hub=self.hub, interval_ms=self.settings.poll_interval_ms)

        tips = self.settings.tips
        self.rule_source = DirectoryRuleSource(tips.rules_dir)
        self.tips = TipsEngine(
            lambda: self.poller.latest,
            hub=self.hub,
            tick_interval_s=tips.tick_interval_s,
            max_tracked_keys=tips.max_tracked_keys,
        )
        self.broker: WatchBroker | None = WatchBroker() if self.settings.watch.enabled else None
        self._rule_watch: asyncio.Task | None = None

    def load_rules(self) -> None:
        result = self.rule_source.load()
        for error in result.errors:
            logger.warning("tip_rule_error", error=error)
        self.tips.swap_rules(result.rule_set)

    async def start(self) -> None:
        if self.broker is not None:
            await self.broker.start(self.settings.watch.host, self.settings.watch.port)
            self.broker.attach(self.hub)
        self.poller.start()
        if self.settings.tips.enabled:
            self.load_rules()
            self.tips.start()
            self._rule_watch = asyncio.create_task(
                self.rule_source.watch(self.tips.swap_rules, self.settings.tips.reload_debounce_s)
            )
            self._rule_watch.add_done_callback(_report_watch_exit)
        logger.info("riftcoach_started", interval_ms=self.poller.interval_ms, tips=self.settings.tips.enabled)

    async def stop(self) -> None:
        if self._rule_watch is not None and not self._rule_watch.done():
            self._rule_watch.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._rule_watch
        self._rule_watch = None
        if self.poller.running:
            logger.info("riftcoach_stopping", **self.poller.status())
        await self.tips.stop()
        await self.poller.stop()
        if self.broker is not None:
            await self.broker.stop()

    async def close(self) -> None:
        await self.stop()
        await self.client.close()
        if self.catalog is not None:
            await self.catalog.close()

    async def run(self) -> None:
        """Run until cancelled."""
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.close()


__all__ = ["RiftCoachApp"]
