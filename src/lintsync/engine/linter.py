# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Single-pass rule evaluation over one source text."""

import logging
from typing import Callable, Mapping

from tree_sitter import Node

from lintsync.config import ConfigurationError, RuleConfig
from lintsync.engine.ignore import IgnoreRules
from lintsync.engine.parsing import ParsedSource, parse_source
from lintsync.engine.rule import Rule, RuleContext
from lintsync.engine.rules import BUILTIN_RULES
from lintsync.model import EngineMessage, Fix, LintResult

logger = logging.getLogger(__name__)

_Handler = Callable[[Node], None]


class EngineError(RuntimeError):
    """Represent a failure raised while evaluating rules for one file."""


def validate_rule_config(
    config: RuleConfig, definitions: Mapping[str, type[Rule]]
) -> None:
    """Check a rule configuration against the available rule definitions.

    Args:
        config: Rule id to setting mapping.
        definitions: Available rule classes by id.

    Raises:
        ConfigurationError: If a rule is unknown or its setting is invalid.
    """
    for rule_id, setting in config.items():
        rule_class = definitions.get(rule_id)
        if rule_class is None:
            raise ConfigurationError(f"Definition for rule '{rule_id}' was not found.")
        level = setting.level
        if level == 0:
            continue
        rule_class.validate_options(rule_id, setting.options)


def apply_fixes(text: str, fixes: list[Fix]) -> str | None:
    """Apply non-overlapping fixes in ascending order.

    Args:
        text: Original text.
        fixes: Candidate fixes.

    Returns:
        Fixed text, or ``None`` when nothing changed.
    """
    if not fixes:
        return None
    parts: list[str] = []
    cursor = 0
    for fix in sorted(fixes, key=lambda item: (item.start, item.end)):
        if fix.start < cursor:
            logger.debug(f"Skipping overlapping fix (start={fix.start} end={fix.end})")
            continue
        parts.append(text[cursor : fix.start])
        parts.append(fix.text)
        cursor = fix.end
    parts.append(text[cursor:])
    output = "".join(parts)
    return None if output == text else output


class Linter:
    """Evaluate configured rules over source text."""

    def __init__(
        self,
        config: RuleConfig,
        plugin_rules: Mapping[str, type[Rule]] | None = None,
        ignore_rules: IgnoreRules | None = None,
    ) -> None:
        """Initialize linter.

        Args:
            config: Rule id to setting mapping.
            plugin_rules: Additional rule classes keyed by their namespaced id.
            ignore_rules: Optional path ignore rules.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        self._definitions: dict[str, type[Rule]] = dict(BUILTIN_RULES)
        self._definitions.update(plugin_rules or {})
        validate_rule_config(config, self._definitions)
        self._config = config
        self._ignore_rules = ignore_rules

    def lint_text(self, text: str, file_path: str) -> LintResult:
        """Lint one source text.

        Args:
            text: Source text to lint.
            file_path: Path used for grammar selection and ignore matching.

        Returns:
            Lint result with sorted messages and optional fixed output.

        Raises:
            EngineError: If a rule fails while evaluating the text.
        """
        if self._ignore_rules is not None and self._ignore_rules.is_ignored(file_path):
            logger.debug(f"Skipping ignored file (file_path={file_path})")
            return LintResult(file_path=file_path, messages=(), source=text)

        source = parse_source(text, file_path)
        problem = source.find_problem()
        if problem is not None:
            logger.debug(f"Parse failure (file_path={file_path} detail={problem.detail})")
            fatal = EngineMessage(
                rule_id=None,
                severity=2,
                message=f"Parsing error: {problem.detail}",
                line=problem.line,
                column=source.utf16_column(problem.line, problem.column),
                fatal=True,
            )
            return LintResult(file_path=file_path, messages=(fatal,), source=text)

        messages: list[EngineMessage] = []
        try:
            rules = self._create_rules(source, messages)
            self._traverse(source, rules)
            for rule in rules:
                rule.finish()
        except Exception as exc:
            logger.warning(f"Rule evaluation failed (file_path={file_path} error={exc})")
            raise EngineError(f"{exc}\nOccurred while linting {file_path}") from exc

        messages.sort(key=lambda item: (item.line, item.column))
        output = apply_fixes(text, [item.fix for item in messages if item.fix is not None])
        return LintResult(
            file_path=file_path,
            messages=tuple(messages),
            source=text,
            output=output,
        )

    def _create_rules(
        self, source: ParsedSource, sink: list[EngineMessage]
    ) -> list[Rule]:
        rules: list[Rule] = []
        for rule_id, setting in self._config.items():
            level = setting.level
            if level == 0:
                continue
            context = RuleContext(
                rule_id=rule_id,
                severity=level,
                options=setting.options,
                source=source,
                sink=sink,
                fixable=self._definitions[rule_id].fixable,
            )
            rules.append(self._definitions[rule_id](context))
        return rules

    def _traverse(self, source: ParsedSource, rules: list[Rule]) -> None:
        enter: dict[str, list[_Handler]] = {}
        leave: dict[str, list[_Handler]] = {}
        for rule in rules:
            for node_type in rule.node_types:
                enter.setdefault(node_type, []).append(rule.enter)
                leave.setdefault(node_type, []).append(rule.leave)

        stack: list[tuple[Node, bool]] = [(source.root, False)]
        while stack:
            node, exiting = stack.pop()
            if exiting:
                for handler in leave.get(node.type, ()):
                    handler(node)
                continue
            for handler in enter.get(node.type, ()):
                handler(node)
            stack.append((node, True))
            stack.extend(
                (child, False) for child in reversed(node.children) if child.is_named
            )
