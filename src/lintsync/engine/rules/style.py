# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Naming, quoting, line length and blank line rules."""

import logging
import re

from tree_sitter import Node

from lintsync.engine.nodes import node_text, pattern_identifiers, statements
from lintsync.engine.rule import RuleContext, ThresholdRule
from lintsync.model import Fix

logger = logging.getLogger(__name__)

_URL_PATTERN = re.compile(r"[^:/?#]:\/\/[^?#]")
_QUOTE_SWAP_PATTERN = re.compile(r"\\(\$\{|\r\n?|\n|.)|[\"'`]|\$\{|(\r\n?|\n)")
_QUOTES = {"single": "'", "double": '"'}
_PADDING_CONTAINERS = frozenset(
    {"program", "statement_block", "switch_case", "switch_default", "class_static_block"}
)


def is_underscored(name: str) -> bool:
    """Return whether a name uses underscores outside leading/trailing runs."""
    body = name.strip("_")
    return "_" in body and body != body.upper()


class CamelcaseRule(ThresholdRule):
    """Require camelCase for declared names and written properties."""

    node_types = frozenset(
        {
            "variable_declarator",
            "function_declaration",
            "function_expression",
            "function",
            "generator_function_declaration",
            "generator_function",
            "class_declaration",
            "class",
            "formal_parameters",
            "arrow_function",
            "catch_clause",
            "import_specifier",
            "import_clause",
            "namespace_import",
            "pair",
            "assignment_expression",
            "method_definition",
            "field_definition",
            "public_field_definition",
        }
    )
    option_types = {"properties": str}
    option_choices = {"properties": frozenset({"always", "never"})}

    def __init__(self, context: RuleContext) -> None:
        super().__init__(context)
        self._reported: set[tuple[int, int]] = set()

    @property
    def _check_properties(self) -> bool:
        return self.context.options.get("properties", "always") == "always"

    def _check(self, node: Node | None) -> None:
        if node is None:
            return
        key = (node.start_byte, node.end_byte)
        name = node_text(node)
        if key in self._reported or not is_underscored(name):
            return
        self._reported.add(key)
        self.context.report(f"Identifier '{name}' is not in camel case.", node=node)

    def enter(self, node: Node) -> None:
        kind = node.type
        if kind == "variable_declarator":
            for identifier in pattern_identifiers(node.child_by_field_name("name")):
                self._check(identifier)
        elif kind == "formal_parameters":
            for child in node.named_children:
                for identifier in pattern_identifiers(child):
                    self._check(identifier)
        elif kind == "arrow_function":
            for identifier in pattern_identifiers(node.child_by_field_name("parameter")):
                self._check(identifier)
        elif kind == "catch_clause":
            for identifier in pattern_identifiers(node.child_by_field_name("parameter")):
                self._check(identifier)
        elif kind == "import_specifier":
            self._check(node.child_by_field_name("alias") or node.child_by_field_name("name"))
        elif kind in {"import_clause", "namespace_import"}:
            for child in node.named_children:
                if child.type == "identifier":
                    self._check(child)
        elif kind in {"pair", "method_definition", "field_definition", "public_field_definition"}:
            if self._check_properties:
                key = (
                    node.child_by_field_name("key")
                    or node.child_by_field_name("name")
                    or node.child_by_field_name("property")
                )
                if key is not None and key.type in {"property_identifier", "identifier"}:
                    self._check(key)
        elif kind == "assignment_expression":
            left = node.child_by_field_name("left")
            if self._check_properties and left is not None and left.type == "member_expression":
                self._check(left.child_by_field_name("property"))
        else:
            name = node.child_by_field_name("name")
            if name is not None and name.type in {"identifier", "type_identifier"}:
                self._check(name)


def convert_quotes(raw: str, quote: str) -> str:
    """Rewrite a string or template literal to use another quote character."""
    old = raw[0]
    content = raw[1:-1]

    def _swap(match: re.Match[str]) -> str:
        escaped, newline = match.group(1), match.group(2)
        whole = match.group(0)
        if escaped is not None and (escaped == old or (old == "`" and escaped == "${")):
            return escaped
        if whole == quote:
            return "\\" + whole
        if newline is not None and old == "`":
            return "\\n"
        return whole

    return quote + _QUOTE_SWAP_PATTERN.sub(_swap, content) + quote


class QuotesRule(ThresholdRule):
    """Enforce one quote style for string literals."""

    node_types = frozenset({"string", "template_string"})
    fixable = True
    option_types = {"style": str}
    option_choices = {"style": frozenset(_QUOTES)}

    def enter(self, node: Node) -> None:
        style = self.context.options.get("style", "double")
        quote = _QUOTES[style]
        parent = node.parent
        if parent is not None and parent.type == "jsx_attribute":
            return
        if node.type == "template_string" and self._uses_template_features(node):
            return
        raw = self.source.node_text(node)
        if len(raw) < 2 or raw[0] == quote:
            return
        start, end = self.source.span(node)
        self.context.report(
            f"Strings must use {style}quote.",
            node=node,
            fix=Fix(start=start, end=end, text=convert_quotes(raw, quote)),
        )

    def _uses_template_features(self, node: Node) -> bool:
        parent = node.parent
        if parent is not None and parent.type == "call_expression":
            return True
        if any(child.type == "template_substitution" for child in node.named_children):
            return True
        return "\n" in self.source.node_text(node)


def _line_length(line: str, tab_width: int) -> int:
    extra = 0
    for index, char in enumerate(line):
        if char == "\t":
            extra += tab_width - ((index + extra) % tab_width) - 1
    return len(line) + extra


class MaxLenRule(ThresholdRule):
    """Limit the length of source lines."""

    option_types = {
        "code": int,
        "tab_width": int,
        "ignore_urls": bool,
        "ignore_template_literals": bool,
        "ignore_strings": bool,
        "ignore_comments": bool,
        "ignore_regexp_literals": bool,
    }

    def finish(self) -> None:
        options = self.context.options
        maximum = int(options.get("code", 80))
        tab_width = int(options.get("tab_width", 4))
        skipped = self._skipped_lines()
        comments_by_line = self._comments_by_line()
        for index, line in enumerate(self.source.lines):
            number = index + 1
            if not self.source.is_linted_line(index) or number in skipped:
                continue
            if options.get("ignore_urls") and _URL_PATTERN.search(line):
                continue
            measured = line
            if options.get("ignore_comments") and number in comments_by_line:
                comment = comments_by_line[number]
                start_line, start_column = self.source.start(comment)
                end_line, end_column = self.source.end(comment)
                starts_before = start_line < number or not line[: start_column - 1].strip()
                ends_after = end_line > number or not line[end_column - 1 :].strip()
                if starts_before and ends_after:
                    continue
                if start_line == number and ends_after:
                    measured = line[: start_column - 1].rstrip()
            length = _line_length(measured, tab_width)
            if length > maximum:
                self.context.report(
                    f"This line has a length of {length}. Maximum allowed is {maximum}.",
                    start=(number, 1),
                    end=(number, len(measured) + 1),
                )

    def _skipped_lines(self) -> set[int]:
        options = self.context.options
        types: set[str] = set()
        if options.get("ignore_template_literals"):
            types.add("template_string")
        if options.get("ignore_regexp_literals"):
            types.add("regex")
        if options.get("ignore_strings"):
            types.add("string")
        lines: set[int] = set()
        if not types:
            return lines
        for node in self.source.walk():
            if node.type in types:
                first, _ = self.source.start(node)
                last, _ = self.source.end(node)
                lines.update(range(first, last + 1))
        return lines

    def _comments_by_line(self) -> dict[int, Node]:
        by_line: dict[int, Node] = {}
        for comment in self.source.comments():
            first, _ = self.source.start(comment)
            last, _ = self.source.end(comment)
            for number in range(first, last + 1):
                by_line[number] = comment
        return by_line


def _statement_matches(statement: Node, kind: str) -> bool:
    if kind == "*":
        return True
    if kind == "function":
        return statement.type in {"function_declaration", "generator_function_declaration"}
    if kind == "class":
        return statement.type == "class_declaration"
    if kind == "var":
        return statement.type == "variable_declaration"
    if kind in {"let", "const"}:
        return (
            statement.type == "lexical_declaration"
            and node_text(statement.child_by_field_name("kind")) == kind
        )
    if kind == "return":
        return statement.type == "return_statement"
    if kind == "expression":
        return statement.type == "expression_statement"
    if kind == "block":
        return statement.type == "statement_block"
    return False


class PaddingLineBetweenStatementsRule(ThresholdRule):
    """Require or forbid blank lines between configured statement pairs."""

    node_types = _PADDING_CONTAINERS
    fixable = True
    option_types = {"blank_line": str, "pairs": tuple}
    option_choices = {"blank_line": frozenset({"always", "never"})}

    def enter(self, node: Node) -> None:
        pairs = self.context.options.get("pairs", ())
        blank_line = self.context.options.get("blank_line", "always")
        body = statements(node)
        for previous, current in zip(body, body[1:]):
            if not any(
                _statement_matches(previous, prev_kind)
                and _statement_matches(current, next_kind)
                for prev_kind, next_kind in pairs
            ):
                continue
            has_blank = self._has_blank_line(previous, current)
            if blank_line == "always" and not has_blank:
                self.context.report(
                    "Expected blank line before this statement.",
                    node=current,
                    fix=self._insert_blank_line(previous, current),
                )
            elif blank_line == "never" and has_blank:
                self.context.report("Unexpected blank line before this statement.", node=current)

    def _has_blank_line(self, previous: Node, current: Node) -> bool:
        prev_end, _ = self.source.end(previous)
        next_start, _ = self.source.start(current)
        return any(
            not self.source.lines[number - 1].strip()
            for number in range(prev_end + 1, next_start)
        )

    def _insert_blank_line(self, previous: Node, current: Node) -> Fix:
        prev_end, _ = self.source.end(previous)
        next_start, _ = self.source.start(current)
        newline = "\r\n" if "\r\n" in self.source.text else "\n"
        if prev_end == next_start:
            _, end = self.source.span(previous)
            return Fix(start=end, end=end, text=newline * 2)
        offset = self.source.offset(prev_end + 1, 1)
        return Fix(start=offset, end=offset, text=newline)
