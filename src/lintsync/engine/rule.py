# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Rule contracts and the per-pass reporting context."""

import logging
from typing import Any, ClassVar, Mapping

from tree_sitter import Node

from lintsync.config import ConfigurationError
from lintsync.engine.parsing import ParsedSource
from lintsync.model import EngineMessage, Fix

logger = logging.getLogger(__name__)

Position = tuple[int, int]


class RuleContext:
    """Collect messages reported by one rule during one lint pass."""

    def __init__(
        self,
        rule_id: str,
        severity: int,
        options: Mapping[str, Any],
        source: ParsedSource,
        sink: list[EngineMessage],
        fixable: bool = False,
    ) -> None:
        """Initialize context.

        Args:
            rule_id: Id of the rule owning this context.
            severity: Engine severity level for reported messages.
            options: Configured rule options.
            source: Parsed source under analysis.
            sink: Shared message list for the pass.
            fixable: Whether the rule may attach fixes to its messages.
        """
        self.rule_id = rule_id
        self.severity = severity
        self.options = options
        self.source = source
        self.fixable = fixable
        self._sink = sink

    def report(
        self,
        message: str,
        *,
        node: Node | None = None,
        start: Position | None = None,
        end: Position | None = None,
        fix: Fix | None = None,
    ) -> None:
        """Record one message.

        Positions are character based; the recorded message carries UTF-16
        columns.

        Args:
            message: Message text.
            node: Node whose range locates the message.
            start: Explicit 1-based start, overriding the node start.
            end: Explicit 1-based exclusive end, overriding the node end.
            fix: Optional fix for the reported problem.

        Raises:
            ValueError: If no position is given, or a fix comes from a rule
                that is not fixable.
        """
        if node is not None:
            start = start or self.source.start(node)
            end = end or self.source.end(node)
        if start is None:
            raise ValueError("report() needs a node or a start position")
        if fix is not None and not self.fixable:
            raise ValueError(f"Rule '{self.rule_id}' reported a fix but is not fixable.")
        self._sink.append(
            EngineMessage(
                rule_id=self.rule_id,
                severity=self.severity,
                message=message,
                line=start[0],
                column=self.source.utf16_column(*start),
                end_line=end[0] if end else None,
                end_column=self.source.utf16_column(*end) if end else None,
                fix=fix,
            )
        )


class Rule:
    """Base class for rules evaluated during a single traversal.

    A rule instance lives for exactly one lint pass. The linter calls
    ``enter``/``leave`` for nodes whose type is listed in ``node_types`` and
    ``finish`` once the traversal is complete.
    """

    node_types: ClassVar[frozenset[str]] = frozenset()
    fixable: ClassVar[bool] = False
    option_types: ClassVar[Mapping[str, type | tuple[type, ...]]] = {}
    option_choices: ClassVar[Mapping[str, frozenset[str]]] = {}

    def __init__(self, context: RuleContext) -> None:
        self.context = context
        self.source = context.source

    @classmethod
    def validate_options(cls, rule_id: str, options: Mapping[str, Any]) -> None:
        """Check configured options against the rule's option schema.

        Raises:
            ConfigurationError: If an option is unknown or has a bad value.
        """
        for key, value in options.items():
            expected = cls.option_types.get(key)
            if expected is None:
                raise ConfigurationError(f"Rule '{rule_id}' has no option '{key}'.")
            if isinstance(value, bool) and expected is int:
                raise ConfigurationError(
                    f"Rule '{rule_id}' option '{key}' must be an integer."
                )
            if not isinstance(value, expected):
                raise ConfigurationError(
                    f"Rule '{rule_id}' option '{key}' has invalid value {value!r}."
                )
            if expected is int and value <= 0:
                raise ConfigurationError(
                    f"Rule '{rule_id}' option '{key}' must be greater than zero."
                )
            choices = cls.option_choices.get(key)
            if choices is not None and value not in choices:
                raise ConfigurationError(
                    f"Rule '{rule_id}' option '{key}' must be one of {sorted(choices)}."
                )

    def enter(self, node: Node) -> None:
        """Handle a node before its children are visited."""

    def leave(self, node: Node) -> None:
        """Handle a node after its children are visited."""

    def finish(self) -> None:
        """Handle the end of the pass."""


class ThresholdRule(Rule):
    """Declarative rule driven by options such as numeric limits."""


class StructuralRule(Rule):
    """Rule that accumulates state across nodes of one file pass."""
