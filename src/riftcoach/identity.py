# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Player identity reconciliation.

The live client reports the local player in several shapes depending on the
client version: a legacy summoner name, a ``name#tag`` Riot ID string, or an
object with separate game name and tag line fields. Roster entries carry any
subset of the same fields. This module picks the roster entry that belongs to
the local player and lists every textual identity worth trying against the
``?riotId=`` endpoints.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict

RIOT_ID_SEPARATOR = "#"


class ActiveIdentity(BaseModel):
    """Normalized form of the ``/activeplayername`` payload."""

    raw: str = ""
    game_name: str = ""
    tag_line: str = ""
    full_riot_id: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def raw_is_composite(self) -> bool:
        return RIOT_ID_SEPARATOR in self.raw


class IdentityResolution(BaseModel):
    """Matched roster entry plus the ordered candidate identities."""

    entry: dict[str, Any] | None = None
    candidates: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


def _norm(value: Any) -> str:
    return value.strip().lower() if isinstance(value, str) else ""


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_active_identity(raw: Any) -> ActiveIdentity:
    """Normalize whatever ``/activeplayername`` returned."""
    if isinstance(raw, str):
        if RIOT_ID_SEPARATOR in raw:
            game_name, _, tag_line = raw.partition(RIOT_ID_SEPARATOR)
        else:
            game_name, tag_line = raw, ""
        full = f"{game_name}{RIOT_ID_SEPARATOR}{tag_line}" if game_name and tag_line else ""
        return ActiveIdentity(raw=raw, game_name=game_name, tag_line=tag_line, full_riot_id=full)

    if isinstance(raw, Mapping):
        game_name = _text(raw.get("riotIdGameName"))
        tag_line = _text(raw.get("riotIdTagLine"))
        full = _text(raw.get("riotId"))
        if not full and game_name and tag_line:
            full = f"{game_name}{RIOT_ID_SEPARATOR}{tag_line}"
        return ActiveIdentity(game_name=game_name, tag_line=tag_line, full_riot_id=full)

    return ActiveIdentity()


def full_riot_id(entry: Mapping[str, Any] | None) -> str:
    """Best composite identity for a roster entry.

    Explicit ``riotId`` wins when it contains a tag, then ``gameName#tag``
    built from the structured fields, then the legacy summoner name.
    """
    if not isinstance(entry, Mapping):
        return ""
    riot_id = _text(entry.get("riotId"))
    if RIOT_ID_SEPARATOR in riot_id:
        return riot_id
    composed = _composite(entry)
    if composed:
        return composed
    return _text(entry.get("summonerName"))


def _composite(entry: Mapping[str, Any]) -> str:
    game_name = _text(entry.get("riotIdGameName"))
    tag_line = _text(entry.get("riotIdTagLine"))
    if game_name and tag_line:
        return f"{game_name}{RIOT_ID_SEPARATOR}{tag_line}"
    return ""


def match_roster_entry(
    active: ActiveIdentity, roster: Sequence[Any]
) -> dict[str, Any] | None:
    """Find the roster entry for the local player.

    Precedence, first match wins across the whole roster:
    1. full Riot ID equality
    2. game name and tag line equality
    3. game name only (may collide when tags are unavailable)
    4. legacy summoner name against a raw, non-composite active string

    Falls back to the first roster entry.
    """
    entries = [entry for entry in roster if isinstance(entry, Mapping)]
    if not entries:
        return None

    full = _norm(active.full_riot_id)
    name = _norm(active.game_name)
    tag = _norm(active.tag_line)
    legacy = _norm(active.raw) if active.raw and not active.raw_is_composite else ""

    matchers = []
    if full:
        matchers.append(lambda e: _norm(full_riot_id(e)) == full)
    if name and tag:
        matchers.append(
            lambda e: _norm(e.get("riotIdGameName")) == name and _norm(e.get("riotIdTagLine")) == tag
        )
    if name:
        matchers.append(lambda e: _norm(e.get("riotIdGameName")) == name)
    if legacy:
        matchers.append(lambda e: _norm(e.get("summonerName")) == legacy)

    for matcher in matchers:
        for entry in entries:
            if matcher(entry):
                return dict(entry)
    return dict(entries[0])


def build_candidates(active: ActiveIdentity, entry: Mapping[str, Any] | None) -> tuple[str, ...]:
    """Ordered, de-duplicated identity strings to try against ``?riotId=`` endpoints."""
    entry = entry or {}
    ordered = [
        active.full_riot_id,
        full_riot_id(entry),
        _composite(entry),
        _text(entry.get("riotIdGameName")),
        _text(entry.get("summonerName")),
        active.raw,
    ]
    seen: dict[str, None] = {}
    for value in ordered:
        value = value.strip()
        if value:
            seen.setdefault(value, None)
    return tuple(seen)


def resolve_identity(active_raw: Any, roster: Sequence[Any]) -> IdentityResolution:
    """Resolve the local player against the roster.

    Args:
        active_raw: Payload of ``/activeplayername`` (string or mapping)
        roster: Payload of ``/playerlist``

    Returns:
        The matched entry (or ``None`` for an empty roster) and candidates
    """
    active = active_raw if isinstance(active_raw, ActiveIdentity) else parse_active_identity(active_raw)
    entry = match_roster_entry(active, roster)
    return IdentityResolution(entry=entry, candidates=build_candidates(active, entry))
