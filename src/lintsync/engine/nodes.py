# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Syntax tree helpers shared by rules."""

from tree_sitter import Node

FUNCTION_TYPES: frozenset[str] = frozenset(
    {
        "function_declaration",
        "function_expression",
        "function",
        "generator_function_declaration",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)

_NAMED_PROPERTY_PARENTS: frozenset[str] = frozenset(
    {"pair", "field_definition", "public_field_definition"}
)


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def is_function(node: Node) -> bool:
    return node.type in FUNCTION_TYPES


def function_body(node: Node) -> Node | None:
    return node.child_by_field_name("body")


def _is_async(node: Node) -> bool:
    return any(child.type == "async" for child in node.children)


def function_display_name(node: Node) -> str:
    """Describe a function the way lint messages name it.

    Examples: ``Function 'load'``, ``Method 'render'``, ``Arrow function``.
    """
    prefix = "async " if _is_async(node) else ""
    if node.type == "method_definition":
        name = node_text(node.child_by_field_name("name"))
        kind = "constructor" if name == "constructor" else "method"
        if kind == "constructor":
            return "Constructor"
        return f"{(prefix + kind).capitalize()} '{name}'"
    if node.type == "arrow_function":
        kind = f"{prefix}arrow function"
    elif node.type.startswith("generator_function"):
        kind = f"{prefix}generator function"
    else:
        kind = f"{prefix}function"
    name_node = node.child_by_field_name("name")
    if name_node is None and node.parent is not None:
        if node.parent.type in _NAMED_PROPERTY_PARENTS:
            name_node = node.parent.child_by_field_name(
                "key"
            ) or node.parent.child_by_field_name("property")
            if node.parent.type == "pair":
                kind = f"{prefix}method"
    kind = kind[0].upper() + kind[1:]
    if name_node is None:
        return kind
    return f"{kind} '{node_text(name_node)}'"


def pattern_identifiers(node: Node | None) -> list[Node]:
    """Return identifier nodes bound by a declaration pattern."""
    if node is None:
        return []
    if node.type in {"identifier", "shorthand_property_identifier_pattern"}:
        return [node]
    if node.type == "assignment_pattern" or node.type == "object_assignment_pattern":
        return pattern_identifiers(node.child_by_field_name("left"))
    if node.type == "pair_pattern":
        return pattern_identifiers(node.child_by_field_name("value"))
    if node.type in {"required_parameter", "optional_parameter"}:
        return pattern_identifiers(node.child_by_field_name("pattern"))
    if node.type in {"object_pattern", "array_pattern", "rest_pattern"}:
        found: list[Node] = []
        for child in node.named_children:
            found.extend(pattern_identifiers(child))
        return found
    return []


def parameter_groups(function_node: Node) -> list[list[Node]]:
    """Return the bound identifiers of each parameter, in order."""
    single = function_node.child_by_field_name("parameter")
    if single is not None:
        return [pattern_identifiers(single)]
    params = function_node.child_by_field_name("parameters")
    if params is None:
        return []
    return [
        pattern_identifiers(child)
        for child in params.named_children
        if child.type != "comment"
    ]


def parameter_count(function_node: Node) -> int:
    single = function_node.child_by_field_name("parameter")
    if single is not None:
        return 1
    params = function_node.child_by_field_name("parameters")
    if params is None:
        return 0
    return sum(1 for child in params.named_children if child.type != "comment")


def statements(block: Node) -> list[Node]:
    """Return the statement children of a block, program or switch clause."""
    if block.type in {"switch_case", "switch_default"}:
        return [
            child
            for child in block.children_by_field_name("body")
            if child.type != "comment"
        ]
    return [child for child in block.named_children if child.type != "comment"]
