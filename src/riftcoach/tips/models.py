# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Notification events emitted by the tips engine."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from riftcoach.tips.rules import Severity


class Tip(BaseModel):
    """One rule firing.

    ``id`` is the rule id, so it repeats across occurrences; ``metadata``
    carries the lead time and occurrence identifiers.
    """

    id: str
    title: str
    body: str | None = None
    icon: str | None = None
    severity: Severity = "info"
    sticky_ms: int = 4000
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


TEST_TIP = Tip(
    id="test_tip",
    title="Test Notification",
    body="This is a test tip to verify the pipeline.",
    icon="🔔",
    severity="warning",
    sticky_ms=5000,
)
