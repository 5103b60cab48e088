# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Friendly names for live client game mode identifiers."""

from __future__ import annotations

# From Riot's static gameModes.json.
GAME_MODE_NAMES: dict[str, str] = {
    "CLASSIC": "Classic Summoner's Rift and Twisted Treeline games",
    "ODIN": "Dominion/Crystal Scar games",
    "ARAM": "ARAM games",
    "TUTORIAL": "Tutorial games",
    "URF": "URF games",
    "DOOMBOTSTEEMO": "Doom Bot games",
    "ONEFORALL": "One for All games",
    "ASCENSION": "Ascension games",
    "FIRSTBLOOD": "Snowdown Showdown games",
    "KINGPORO": "Legend of the Poro King games",
    "SIEGE": "Nexus Siege games",
    "ASSASSINATE": "Blood Hunt Assassin games",
    "ARSR": "All Random Summoner's Rift games",
    "DARKSTAR": "Dark Star: Singularity games",
    "STARGUARDIAN": "Star Guardian Invasion games",
    "PROJECT": "PROJECT: Hunters games",
    "GAMEMODEX": "Nexus Blitz games",
    "ODYSSEY": "Odyssey: Extraction games",
    "NEXUSBLITZ": "Nexus Blitz games",
    "ULTBOOK": "Ultimate Spellbook games",
    "CHERRY": "Arena games",
    "PRACTICETOOL": "Practice Tool games",
    "STRAWBERRY": "Swarm games",
}


def resolve_game_mode_name(mode: str | None, names: dict[str, str] | None = None) -> str:
    """Friendly name for a mode; unknown modes pass through verbatim."""
    if not mode:
        return ""
    table = GAME_MODE_NAMES if names is None else names
    return table.get(mode.strip(), mode)
