# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Rule-driven tips: schema, loading, trigger evaluation and the engine."""

from riftcoach.tips.engine import TipsEngine, build_tip
from riftcoach.tips.models import TEST_TIP, Tip
from riftcoach.tips.rules import (
    CannonWaveTrigger,
    NotifySpec,
    ObjectiveSpawnTrigger,
    OverlayChannel,
    PhaseCondition,
    RuleSet,
    RuleWhen,
    TipModule,
    TipRule,
    TipsDocument,
)
from riftcoach.tips.source import (
    DirectoryRuleSource,
    RuleDocumentError,
    RuleLoadResult,
    load_rule_documents,
    parse_rule_document,
)
from riftcoach.tips.triggers import evaluate_trigger, upcoming_cannon_waves

__all__ = [
    "TEST_TIP",
    "CannonWaveTrigger",
    "DirectoryRuleSource",
    "NotifySpec",
    "ObjectiveSpawnTrigger",
    "OverlayChannel",
    "PhaseCondition",
    "RuleDocumentError",
    "RuleLoadResult",
    "RuleSet",
    "RuleWhen",
    "Tip",
    "TipModule",
    "TipRule",
    "TipsDocument",
    "TipsEngine",
    "build_tip",
    "evaluate_trigger",
    "load_rule_documents",
    "parse_rule_document",
    "upcoming_cannon_waves",
]
