# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Best-practice and correctness rules."""

import logging
import re
from collections import Counter

from tree_sitter import Node

from lintsync.engine.nodes import (
    node_text,
    parameter_groups,
    pattern_identifiers,
    is_function,
)
from lintsync.engine.rule import ThresholdRule

logger = logging.getLogger(__name__)

_NO_DEFAULT_COMMENT = re.compile(r"^no default$", re.IGNORECASE)
_DECLARATION_PARENTS = frozenset({"variable_declaration", "lexical_declaration"})


class NoConsoleRule(ThresholdRule):
    """Disallow member access on the global ``console`` object."""

    node_types = frozenset({"member_expression"})

    def enter(self, node: Node) -> None:
        target = node.child_by_field_name("object")
        if target is not None and target.type == "identifier" and node_text(target) == "console":
            self.context.report("Unexpected console statement.", node=node)


class EqeqeqRule(ThresholdRule):
    """Require strict equality operators."""

    node_types = frozenset({"binary_expression"})

    def enter(self, node: Node) -> None:
        operator = node.child_by_field_name("operator")
        text = node_text(operator)
        if text in {"==", "!="}:
            self.context.report(
                f"Expected '{text}=' and instead saw '{text}'.", node=operator
            )


class NoDebuggerRule(ThresholdRule):
    """Disallow ``debugger`` statements."""

    node_types = frozenset({"debugger_statement"})

    def enter(self, node: Node) -> None:
        self.context.report("Unexpected 'debugger' statement.", node=node)


class NoVarRule(ThresholdRule):
    """Disallow ``var`` declarations."""

    node_types = frozenset({"variable_declaration"})

    def enter(self, node: Node) -> None:
        self.context.report("Unexpected var, use let or const instead.", node=node)


class InitDeclarationsRule(ThresholdRule):
    """Require (or forbid) initialization in variable declarations."""

    node_types = frozenset({"variable_declarator"})
    option_types = {"mode": str}
    option_choices = {"mode": frozenset({"always", "never"})}

    def enter(self, node: Node) -> None:
        declaration = node.parent
        if declaration is None or declaration.type not in _DECLARATION_PARENTS:
            return
        if declaration.parent is not None and declaration.parent.type == "ambient_declaration":
            return
        mode = self.context.options.get("mode", "always")
        name = node_text(node.child_by_field_name("name"))
        initialized = node.child_by_field_name("value") is not None
        if mode == "always" and not initialized:
            self.context.report(
                f"Variable '{name}' should be initialized on declaration.", node=node
            )
            return
        is_const = node_text(declaration.child_by_field_name("kind")) == "const"
        if mode == "never" and initialized and not is_const:
            self.context.report(
                f"Variable '{name}' should not be initialized on declaration.",
                node=node,
            )


def _switch_clauses(node: Node) -> list[Node]:
    body = node.child_by_field_name("body")
    if body is None:
        return []
    return [
        child for child in body.named_children if child.type in {"switch_case", "switch_default"}
    ]


def _comment_value(comment: Node) -> str:
    text = node_text(comment)
    if text.startswith("//"):
        return text[2:].strip()
    if text.startswith("/*") and text.endswith("*/"):
        return text[2:-2].strip()
    return text.strip()


class DefaultCaseRule(ThresholdRule):
    """Require a ``default`` clause in switch statements."""

    node_types = frozenset({"switch_statement"})

    def enter(self, node: Node) -> None:
        clauses = _switch_clauses(node)
        if not clauses or any(clause.type == "switch_default" for clause in clauses):
            return
        last_case = clauses[-1]
        trailing: list[Node] = []
        for child in reversed(last_case.named_children):
            if child.type != "comment":
                break
            trailing.insert(0, child)
        body = node.child_by_field_name("body")
        if body is not None:
            after_last = False
            for child in body.named_children:
                if child.id == last_case.id:
                    after_last = True
                    continue
                if after_last and child.type == "comment":
                    trailing.append(child)
        if trailing and _NO_DEFAULT_COMMENT.match(_comment_value(trailing[-1])):
            return
        self.context.report("Expected a default case.", node=node)


class DefaultCaseLastRule(ThresholdRule):
    """Require the ``default`` clause to be the last switch clause."""

    node_types = frozenset({"switch_statement"})

    def enter(self, node: Node) -> None:
        clauses = _switch_clauses(node)
        for clause in clauses[:-1]:
            if clause.type == "switch_default":
                self.context.report("Default clause should be the last clause.", node=clause)


def _key(node: Node) -> tuple[int, int]:
    return node.start_byte, node.end_byte


def _is_exported(node: Node) -> bool:
    parent = node.parent
    while parent is not None and parent.type in _DECLARATION_PARENTS:
        parent = parent.parent
    return parent is not None and parent.type in {"export_statement", "ambient_declaration"}


class NoUnusedVarsRule(ThresholdRule):
    """Report declared names that are never read.

    Scope resolution is name based within the file. Parameters are checked
    within their own function with the ``after-used`` policy: only parameters
    after the last used one are reported.
    """

    def finish(self) -> None:
        declarations: list[tuple[Node, bool]] = []
        bindings: set[tuple[int, int]] = set()
        assigned: set[str] = set()
        functions: list[Node] = []

        for node in self.source.walk():
            if node.type == "variable_declarator" and node.parent is not None:
                if node.parent.type not in _DECLARATION_PARENTS:
                    continue
                has_value = node.child_by_field_name("value") is not None
                for identifier in pattern_identifiers(node.child_by_field_name("name")):
                    bindings.add(_key(identifier))
                    if not _is_exported(node):
                        declarations.append((identifier, has_value))
            elif node.type == "for_in_statement" and node.child_by_field_name("kind"):
                for identifier in pattern_identifiers(node.child_by_field_name("left")):
                    bindings.add(_key(identifier))
                    declarations.append((identifier, True))
            elif node.type in {
                "function_declaration",
                "generator_function_declaration",
                "class_declaration",
            }:
                name = node.child_by_field_name("name")
                if name is not None:
                    bindings.add(_key(name))
                    if not _is_exported(node):
                        declarations.append((name, False))
            elif node.type == "import_specifier":
                local = node.child_by_field_name("alias") or node.child_by_field_name("name")
                if local is not None:
                    bindings.add(_key(local))
                    declarations.append((local, False))
                name = node.child_by_field_name("name")
                if name is not None:
                    bindings.add(_key(name))
            elif node.type in {"import_clause", "namespace_import"}:
                for child in node.named_children:
                    if child.type == "identifier":
                        bindings.add(_key(child))
                        declarations.append((child, False))
            elif node.type in {"function_expression", "function", "generator_function"}:
                name = node.child_by_field_name("name")
                if name is not None:
                    bindings.add(_key(name))
            elif node.type == "catch_clause":
                for identifier in pattern_identifiers(node.child_by_field_name("parameter")):
                    bindings.add(_key(identifier))
            if is_function(node):
                functions.append(node)
                for group in parameter_groups(node):
                    bindings.update(_key(identifier) for identifier in group)
            if node.type == "assignment_expression":
                left = node.child_by_field_name("left")
                if left is not None and left.type == "identifier":
                    assigned.add(node_text(left))

        reads = self._collect_reads(self.source.root, bindings)
        for identifier, has_value in declarations:
            name = node_text(identifier)
            if reads[name]:
                continue
            if has_value or name in assigned:
                message = f"'{name}' is assigned a value but never used."
            else:
                message = f"'{name}' is defined but never used."
            self.context.report(message, node=identifier)

        for function in functions:
            self._check_parameters(function, bindings)

    def _check_parameters(self, function: Node, bindings: set[tuple[int, int]]) -> None:
        groups = [
            group
            for group in parameter_groups(function)
            if not any(
                child.type == "accessibility_modifier"
                for identifier in group
                for child in (identifier.parent.children if identifier.parent else [])
            )
        ]
        if not groups:
            return
        body = function.child_by_field_name("body")
        reads = self._collect_reads(body, bindings) if body is not None else Counter()
        last_used = -1
        for index, group in enumerate(groups):
            if any(reads[node_text(identifier)] for identifier in group):
                last_used = index
        for group in groups[last_used + 1 :]:
            for identifier in group:
                name = node_text(identifier)
                if name == "this" or reads[name]:
                    continue
                self.context.report(f"'{name}' is defined but never used.", node=identifier)

    def _collect_reads(
        self, root: Node, bindings: set[tuple[int, int]]
    ) -> Counter[str]:
        reads: Counter[str] = Counter()
        for node in self.source.walk(root):
            if node.type not in {"identifier", "shorthand_property_identifier", "type_identifier"}:
                continue
            if _key(node) in bindings or _is_write_only(node):
                continue
            reads[node_text(node)] += 1
        return reads


def _is_write_only(node: Node) -> bool:
    parent = node.parent
    if parent is None:
        return False
    if parent.type == "assignment_expression":
        left = parent.child_by_field_name("left")
        return left is not None and left.id == node.id
    if parent.type == "augmented_assignment_expression":
        target = parent.child_by_field_name("left")
    elif parent.type == "update_expression":
        target = parent.child_by_field_name("argument")
    else:
        return False
    if target is None or target.id != node.id:
        return False
    grand = parent.parent
    return grand is not None and grand.type == "expression_statement"
