# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Tests for trigger windows and rule applicability."""

from __future__ import annotations

import pytest

from riftcoach.tips import PhaseCondition, RuleWhen, upcoming_cannon_waves
from riftcoach.tips.triggers import format_lead, in_window


class TestUpcomingCannonWaves:
    def test_from_game_start(self):
        assert upcoming_cannon_waves(0) == [(3, 150.0), (6, 240.0), (9, 330.0), (12, 420.0), (15, 510.0)]

    def test_mid_game(self):
        waves = upcoming_cannon_waves(155)
        assert waves[0] == (6, 240.0)
        assert len(waves) == 5

    def test_wave_spawning_now_is_included(self):
        assert upcoming_cannon_waves(150)[0] == (3, 150.0)

    def test_stops_at_cutoff(self):
        waves = upcoming_cannon_waves(1100)
        assert waves == [(36, 1140.0)]
        assert upcoming_cannon_waves(1200) == []


class TestWindow:
    @pytest.mark.parametrize(
        ("time_to_spawn", "lead", "expected"),
        [
            (30, 30, True),
            (28, 30, True),
            (27.8, 30, False),
            (30.1, 30, False),
            (0, 1, False),
            (0.5, 1, True),
        ],
    )
    def test_in_window(self, time_to_spawn, lead, expected):
        assert in_window(time_to_spawn, lead) is expected

    def test_format_lead(self):
        assert format_lead(30.0) == "30"
        assert format_lead(7.5) == "7.5"


class TestRuleWhen:
    def test_phase_bounds_inclusive(self):
        phase = PhaseCondition(min_game_time_sec=60, max_game_time_sec=120)
        assert phase.contains(60)
        assert phase.contains(120)
        assert not phase.contains(59.9)
        assert not phase.contains(120.1)

    def test_modes(self):
        when = RuleWhen(modes=("CLASSIC",))
        assert when.matches(10, "CLASSIC")
        assert not when.matches(10, "ARAM")

    def test_empty_when_matches_everything(self):
        assert RuleWhen().matches(0, "")
