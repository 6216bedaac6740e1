# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Size and nesting limits measured per function."""

import logging

from tree_sitter import Node

from lintsync.engine.nodes import (
    FUNCTION_TYPES,
    function_body,
    function_display_name,
    is_function,
    node_text,
    parameter_count,
    statements,
)
from lintsync.engine.rule import Position, RuleContext, ThresholdRule

logger = logging.getLogger(__name__)

_BRANCH_TYPES = frozenset(
    {
        "if_statement",
        "ternary_expression",
        "for_statement",
        "for_in_statement",
        "while_statement",
        "do_statement",
        "catch_clause",
        "switch_case",
    }
)
_LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})
_LOGICAL_ASSIGNMENTS = frozenset({"&&=", "||=", "??="})
_NESTING_TYPES = frozenset(
    {
        "if_statement",
        "switch_statement",
        "try_statement",
        "do_statement",
        "while_statement",
        "with_statement",
        "for_statement",
        "for_in_statement",
    }
)


class _FunctionLimitRule(ThresholdRule):
    option_types = {"max": int}
    default_max = 1

    @property
    def maximum(self) -> int:
        return int(self.context.options.get("max", self.default_max))

    def head(self, node: Node) -> tuple[Position, Position]:
        """Return the range from a function's start to its body."""
        body = function_body(node)
        start = self.source.start(node)
        end = self.source.start(body) if body is not None else self.source.end(node)
        return start, end


class ComplexityRule(_FunctionLimitRule):
    """Limit the cyclomatic complexity of each function."""

    node_types = FUNCTION_TYPES | _BRANCH_TYPES | {
        "binary_expression",
        "augmented_assignment_expression",
    }
    default_max = 20

    def __init__(self, context: RuleContext) -> None:
        super().__init__(context)
        self._stack: list[int] = []

    def enter(self, node: Node) -> None:
        if is_function(node):
            self._stack.append(1)
            return
        if not self._stack:
            return
        if node.type in _BRANCH_TYPES:
            self._stack[-1] += 1
        elif node.type == "binary_expression":
            if node_text(node.child_by_field_name("operator")) in _LOGICAL_OPERATORS:
                self._stack[-1] += 1
        elif node.type == "augmented_assignment_expression":
            if node_text(node.child_by_field_name("operator")) in _LOGICAL_ASSIGNMENTS:
                self._stack[-1] += 1

    def leave(self, node: Node) -> None:
        if not is_function(node):
            return
        complexity = self._stack.pop()
        if complexity > self.maximum:
            start, end = self.head(node)
            self.context.report(
                f"{function_display_name(node)} has a complexity of {complexity}. "
                f"Maximum allowed is {self.maximum}.",
                start=start,
                end=end,
            )


class MaxDepthRule(_FunctionLimitRule):
    """Limit how deeply control-flow blocks nest inside a function."""

    node_types = FUNCTION_TYPES | _NESTING_TYPES | {"program"}
    default_max = 4

    def __init__(self, context: RuleContext) -> None:
        super().__init__(context)
        self._stack: list[int] = []

    @staticmethod
    def _counts(node: Node) -> bool:
        if node.type != "if_statement":
            return True
        return node.parent is None or node.parent.type != "else_clause"

    def enter(self, node: Node) -> None:
        if node.type == "program" or is_function(node):
            self._stack.append(0)
            return
        if not self._stack or not self._counts(node):
            return
        self._stack[-1] += 1
        depth = self._stack[-1]
        if depth > self.maximum:
            self.context.report(
                f"Blocks are nested too deeply ({depth}). Maximum allowed is {self.maximum}.",
                node=node,
            )

    def leave(self, node: Node) -> None:
        if node.type == "program" or is_function(node):
            self._stack.pop()
            return
        if self._stack and self._counts(node):
            self._stack[-1] -= 1


class MaxParamsRule(_FunctionLimitRule):
    """Limit the number of parameters a function declares."""

    node_types = FUNCTION_TYPES
    default_max = 3

    def enter(self, node: Node) -> None:
        count = parameter_count(node)
        if count > self.maximum:
            start, end = self.head(node)
            self.context.report(
                f"{function_display_name(node)} has too many parameters ({count}). "
                f"Maximum allowed is {self.maximum}.",
                start=start,
                end=end,
            )


class MaxStatementsRule(_FunctionLimitRule):
    """Limit the number of statements in a function body."""

    node_types = FUNCTION_TYPES | {"statement_block"}
    default_max = 10

    def __init__(self, context: RuleContext) -> None:
        super().__init__(context)
        self._stack: list[int] = []

    def enter(self, node: Node) -> None:
        if is_function(node):
            self._stack.append(0)
        elif self._stack:
            self._stack[-1] += len(statements(node))

    def leave(self, node: Node) -> None:
        if not is_function(node):
            return
        count = self._stack.pop()
        if count > self.maximum:
            start, end = self.head(node)
            self.context.report(
                f"{function_display_name(node)} has too many statements ({count}). "
                f"Maximum allowed is {self.maximum}.",
                start=start,
                end=end,
            )
