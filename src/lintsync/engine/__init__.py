# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Rule evaluation engine built on tree-sitter syntax trees."""

from lintsync.engine.ignore import IgnoreRules
from lintsync.engine.linter import EngineError, Linter, apply_fixes, validate_rule_config
from lintsync.engine.rule import Rule, RuleContext, StructuralRule, ThresholdRule

__all__ = [
    "EngineError",
    "IgnoreRules",
    "Linter",
    "Rule",
    "RuleContext",
    "StructuralRule",
    "ThresholdRule",
    "apply_fixes",
    "validate_rule_config",
]
