# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import asyncio
import contextlib
import json
from typing import Any

import structlog

from riftcoach.hub import EventHub

log = structlog.get_logger()


class WatchBroker:
    """Broadcast snapshot and tip events as JSON lines to TCP watchers."""

    def __init__(self) -> None:
        self._server: asyncio.AbstractServer | None = None
        self._clients: set[asyncio.StreamWriter] = set()
        self._lock = asyncio.Lock()
        self._unsubscribers: list[Any] = []

    @property
    def client_count(self) -> int:
        return len(self._clients)

    @property
    def address(self) -> tuple[str, int] | None:
        """Bound (host, port) while serving."""
        if self._server is None or not self._server.sockets:
            return None
        host, port = self._server.sockets[0].getsockname()[:2]
        return host, port

    async def start(self, host: str = "127.0.0.1", port: int = 8766) -> None:
        if self._server is not None:
            return
        self._server = await asyncio.start_server(self._on_client, host=host, port=port)
        log.info("watch_broker_started", host=host, port=port)

    def attach(self, hub: EventHub) -> None:
        """Forward every hub event to connected watchers."""

        async def _snapshot(payload: Any) -> None:
            await self.broadcast_event("snapshot", _dump(payload))

        async def _tip(payload: Any) -> None:
            await self.broadcast_event("tip", _dump(payload))

        self._unsubscribers.append(hub.subscribe("snapshot", _snapshot))
        self._unsubscribers.append(hub.subscribe("tip", _tip))

    async def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        self._server = None
        async with self._lock:
            for writer in list(self._clients):
                await _close_writer(writer)
            self._clients.clear()
        log.info("watch_broker_stopped")

    async def _on_client(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        async with self._lock:
            self._clients.add(writer)
        addr = writer.get_extra_info("peername")
        log.info("watch_client_connected", peer=str(addr))
        try:
            while True:
                data = await reader.read(1024)
                if not data:
                    break
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            async with self._lock:
                self._clients.discard(writer)
            await _close_writer(writer)
            log.info("watch_client_disconnected", peer=str(addr))

    async def broadcast_raw(self, data: bytes) -> None:
        if not data:
            return
        async with self._lock:
            writers = list(self._clients)
        for writer in writers:
            try:
                writer.write(data)
                await writer.drain()
            except (ConnectionError, RuntimeError):
                async with self._lock:
                    self._clients.discard(writer)
                await _close_writer(writer)

    async def broadcast_event(self, event: str, payload: dict[str, Any]) -> None:
        message = json.dumps({"event": event, "data": payload}) + "\n"
        await self.broadcast_raw(message.encode("utf-8"))


def _dump(payload: Any) -> dict[str, Any]:
    if hasattr(payload, "model_dump"):
        return payload.model_dump(mode="json")
    return dict(payload)


async def _close_writer(writer: asyncio.StreamWriter) -> None:
    writer.close()
    with contextlib.suppress(ConnectionError, RuntimeError):
        await writer.wait_closed()
