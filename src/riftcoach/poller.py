# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Periodic snapshot polling.

At most one polling loop runs at a time; changing the interval stops the
current loop before starting the next one. Each cycle waits for the previous
one to finish, so aggregation cycles never overlap.
"""

from __future__ import annotations

import asyncio
import contextlib
import math
from typing import Any

from pydantic import BaseModel

from riftcoach.aggregator import SnapshotAggregator
from riftcoach.constants import DEFAULT_POLL_INTERVAL_MS, MAX_POLL_INTERVAL_MS, MIN_POLL_INTERVAL_MS
from riftcoach.hub import EventHub
from riftcoach.liveclient.exceptions import LiveClientError
from riftcoach.logging import get_logger
from riftcoach.snapshot import Snapshot

logger = get_logger(__name__)


def clamp_poll_interval_ms(value: Any) -> int:
    """Clamp a requested interval to the supported range.

    Unparseable, NaN or zero values fall back to the default interval.
    """
    try:
        ms = float(value)
    except (TypeError, ValueError):
        ms = math.nan
    if math.isnan(ms) or ms == 0:
        ms = DEFAULT_POLL_INTERVAL_MS
    return int(max(MIN_POLL_INTERVAL_MS, min(MAX_POLL_INTERVAL_MS, ms)))


class PollerStatus(BaseModel):
    interval_ms: int
    running: bool
    has_snapshot: bool
    last_error: str | None


class SnapshotPoller:
    def __init__(
        self,
        aggregator: SnapshotAggregator,
        hub: EventHub | None = None,
        interval_ms: Any = DEFAULT_POLL_INTERVAL_MS,
    ) -> None:
        self._aggregator = aggregator
        self._hub = hub or EventHub()
        self._interval_ms = clamp_poll_interval_ms(interval_ms)
        self._latest: Snapshot | None = None
        self._last_good: Snapshot | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def latest(self) -> Snapshot | None:
        """Most recent snapshot, error-flagged or not."""
        return self._latest

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def status(self) -> dict[str, Any]:
        last_error = self._latest.message if self._latest is not None and self._latest.error else None
        return PollerStatus(
            interval_ms=self._interval_ms,
            running=self.running,
            has_snapshot=self._latest is not None,
            last_error=last_error,
        ).model_dump()

    async def poll_once(self) -> Snapshot:
        """Run one aggregation cycle and publish its result.

        A failed cycle yields the previous good snapshot flagged with the error,
        so views can tell "no game running" apart from stale data.
        """
        try:
            snapshot = await self._aggregator.aggregate()
        except LiveClientError as e:
            logger.info("snapshot_unavailable", error=str(e))
            snapshot = Snapshot.failed(self._last_good, str(e))
        except Exception as e:
            logger.error("snapshot_aggregation_failed", error=str(e), exc_info=True)
            snapshot = Snapshot.failed(self._last_good, f"Aggregation failed: {e}")
        else:
            self._last_good = snapshot

        self._latest = snapshot
        await self._hub.publish("snapshot", snapshot)
        return snapshot

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

    async def set_interval_ms(self, interval_ms: Any) -> int:
        """Change the polling interval, restarting the loop."""
        self._interval_ms = clamp_poll_interval_ms(interval_ms)
        await self.stop()
        self.start()
        logger.info("poll_interval_changed", interval_ms=self._interval_ms)
        return self._interval_ms

    async def _loop(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self._interval_ms / 1000)
