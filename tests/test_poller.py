# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for the snapshot poller."""

from __future__ import annotations

import asyncio

import pytest

from riftcoach.hub import EventHub
from riftcoach.liveclient import LiveClientConnectionError
from riftcoach.poller import SnapshotPoller, clamp_poll_interval_ms
from riftcoach.snapshot import GameInfo, Snapshot


class ScriptedAggregator:
    """Returns (or raises) the queued results in order, repeating the last."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    async def aggregate(self) -> Snapshot:
        result = self.results[min(self.calls, len(self.results) - 1)]
        self.calls += 1
        if isinstance(result, Exception):
            raise result
        return result


def _snapshot(time: float) -> Snapshot:
    return Snapshot(game=GameInfo(mode="CLASSIC", time=time))


class TestClamp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1000, 1000),
            (100, 250),
            (-5, 250),
            (60000, 10000),
            ("500", 500),
            ("fast", 1000),
            (None, 1000),
            (float("nan"), 1000),
            (0, 1000),
            (333.7, 333),
        ],
    )
    def test_clamp(self, value, expected):
        assert clamp_poll_interval_ms(value) == expected


class TestPollOnce:
    @pytest.mark.asyncio
    async def test_publishes_snapshot(self):
        hub = EventHub()
        received: list[Snapshot] = []
        hub.subscribe("snapshot", received.append)
        poller = SnapshotPoller(ScriptedAggregator(_snapshot(10.0)), hub=hub)

        snapshot = await poller.poll_once()

        assert snapshot.game.time == 10.0
        assert received == [snapshot]
        assert poller.latest is snapshot

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_data(self):
        poller = SnapshotPoller(
            ScriptedAggregator(_snapshot(42.0), LiveClientConnectionError("no game"))
        )
        await poller.poll_once()
        failed = await poller.poll_once()

        assert failed.error is True
        assert failed.message == "no game"
        assert failed.game.time == 42.0
        assert poller.status()["last_error"] == "no game"

    @pytest.mark.asyncio
    async def test_failure_without_previous(self):
        poller = SnapshotPoller(ScriptedAggregator(LiveClientConnectionError("no game")))
        failed = await poller.poll_once()

        assert failed.error is True
        assert failed.game.time == 0.0
        assert failed.items == [None] * 7

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self):
        poller = SnapshotPoller(ScriptedAggregator(ValueError("boom")))
        failed = await poller.poll_once()
        assert failed.error is True
        assert "boom" in failed.message

    @pytest.mark.asyncio
    async def test_recovers_after_failure(self):
        poller = SnapshotPoller(
            ScriptedAggregator(LiveClientConnectionError("no game"), _snapshot(5.0))
        )
        await poller.poll_once()
        snapshot = await poller.poll_once()
        assert snapshot.error is False
        assert poller.status()["last_error"] is None


class TestLoop:
    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        aggregator = ScriptedAggregator(_snapshot(1.0))
        poller = SnapshotPoller(aggregator, interval_ms=250)

        poller.start()
        poller.start()
        await asyncio.sleep(0.05)
        assert poller.running
        await poller.stop()

        assert not poller.running
        assert aggregator.calls == 1

    @pytest.mark.asyncio
    async def test_set_interval_restarts(self):
        poller = SnapshotPoller(ScriptedAggregator(_snapshot(1.0)), interval_ms=5000)
        poller.start()
        await asyncio.sleep(0)

        result = await poller.set_interval_ms(50)

        assert result == 250
        assert poller.interval_ms == 250
        assert poller.running
        status = poller.status()
        assert status["interval_ms"] == 250
        assert status["running"] is True
        await poller.stop()
