# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Tree-sitter parsing and position bookkeeping for linted sources."""

import functools
import logging
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Callable, Iterator

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)

_GRAMMARS: dict[str, Callable[[], object]] = {
    "javascript": tree_sitter_javascript.language,
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}

_GRAMMAR_BY_SUFFIX: dict[str, str] = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

_VUE_SCRIPT_PATTERN = re.compile(
    r"<script\b(?P<attrs>[^>]*)>(?P<body>.*?)</script\s*>",
    re.IGNORECASE | re.DOTALL,
)
_VUE_TS_LANG_PATTERN = re.compile(r"""\blang\s*=\s*["']?(ts|typescript)\b""", re.IGNORECASE)
_VUE_TSX_LANG_PATTERN = re.compile(r"""\blang\s*=\s*["']?tsx\b""", re.IGNORECASE)


@functools.cache
def _language(grammar: str) -> Language:
    return Language(_GRAMMARS[grammar]())


@dataclass(frozen=True)
class ParseProblem:
    """Describe the first syntax problem found in a tree."""

    line: int
    column: int
    detail: str


class ParsedSource:
    """Hold a syntax tree with the text it was parsed from.

    Positions reported by tree-sitter are byte based; this class converts them
    to 1-based lines and character columns of the original text. Text outside
    the linted region (for example Vue templates) is blanked character by
    character before parsing, so rows and character columns stay aligned with
    the original file. Reported message columns are converted to UTF-16 code
    units with ``utf16_column``.
    """

    def __init__(
        self,
        text: str,
        parsed_text: str,
        tree: Tree,
        grammar: str,
        linted_lines: frozenset[int] | None = None,
    ) -> None:
        self.text = text
        self.parsed_text = parsed_text
        self.tree = tree
        self.grammar = grammar
        self.lines = [line.rstrip("\r") for line in text.split("\n")]
        self._parsed_line_bytes = parsed_text.encode("utf-8").split(b"\n")
        self._line_offsets: list[int] = []
        offset = 0
        for raw_line in text.split("\n"):
            self._line_offsets.append(offset)
            offset += len(raw_line) + 1
        self._linted_lines = linted_lines

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def is_linted_line(self, index: int) -> bool:
        """Return whether a 0-based line index belongs to the linted region."""
        return self._linted_lines is None or index in self._linted_lines

    def _char_column(self, row: int, byte_column: int) -> int:
        if row >= len(self._parsed_line_bytes):
            return byte_column
        prefix = self._parsed_line_bytes[row][:byte_column]
        return len(prefix.decode("utf-8", errors="ignore"))

    def start(self, node: Node) -> tuple[int, int]:
        """Return the 1-based (line, column) where a node starts."""
        row, column = node.start_point
        return row + 1, self._char_column(row, column) + 1

    def end(self, node: Node) -> tuple[int, int]:
        """Return the 1-based exclusive (line, column) where a node ends."""
        row, column = node.end_point
        return row + 1, self._char_column(row, column) + 1

    def utf16_column(self, line: int, column: int) -> int:
        """Convert a 1-based character column to a 1-based UTF-16 column."""
        if not 0 < line <= len(self.lines):
            return column
        prefix = self.lines[line - 1][: column - 1]
        overflow = column - 1 - len(prefix)
        return len(prefix.encode("utf-16-le")) // 2 + overflow + 1

    def offset(self, line: int, column: int) -> int:
        """Return the character offset of a 1-based position."""
        return self._line_offsets[line - 1] + column - 1

    def span(self, node: Node) -> tuple[int, int]:
        """Return the character offsets ``[start, end)`` of a node."""
        return self.offset(*self.start(node)), self.offset(*self.end(node))

    def node_text(self, node: Node) -> str:
        start, end = self.span(node)
        return self.text[start:end]

    def walk(self, node: Node | None = None) -> Iterator[Node]:
        """Yield named nodes in document order."""
        stack = [node or self.root]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed([child for child in current.children if child.is_named]))

    def comments(self) -> list[Node]:
        return [node for node in self.walk() if node.type == "comment"]

    def find_problem(self) -> ParseProblem | None:
        """Return the first error or missing node, if the tree has one."""
        if not self.root.has_error:
            return None
        stack = [self.root]
        while stack:
            current = stack.pop()
            if current.is_missing:
                line, column = self.start(current)
                return ParseProblem(line, column, f"'{current.type}' expected.")
            if current.type == "ERROR":
                line, column = self.start(current)
                token = self.node_text(current).strip().split()
                snippet = token[0][:20] if token else "end of input"
                return ParseProblem(line, column, f"Unexpected token {snippet}")
            if current.has_error:
                stack.extend(reversed(current.children))
        line, column = self.start(self.root)
        return ParseProblem(line, column, "Unexpected token")


def grammar_for_path(file_path: str) -> str:
    """Return the grammar key for a file path."""
    return _GRAMMAR_BY_SUFFIX.get(PurePath(file_path).suffix.lower(), "javascript")


def _extract_vue_script(text: str) -> tuple[str, str, frozenset[int]]:
    """Blank everything outside ``<script>`` blocks of a Vue component.

    Returns:
        The blanked text, the grammar for the script language and the
        0-based indexes of lines that carry script content.
    """
    keep = [False] * len(text)
    grammar = "javascript"
    for match in _VUE_SCRIPT_PATTERN.finditer(text):
        attrs = match.group("attrs")
        if _VUE_TSX_LANG_PATTERN.search(attrs):
            grammar = "tsx"
        elif _VUE_TS_LANG_PATTERN.search(attrs):
            grammar = "typescript"
        for index in range(match.start("body"), match.end("body")):
            keep[index] = True
    blanked = "".join(
        char if keep[index] or char in "\r\n" else " "
        for index, char in enumerate(text)
    )
    lines: set[int] = set()
    row = 0
    for index, char in enumerate(text):
        if char == "\n":
            row += 1
            continue
        if keep[index] and not char.isspace():
            lines.add(row)
    return blanked, grammar, frozenset(lines)


def parse_source(text: str, file_path: str) -> ParsedSource:
    """Parse source text with the grammar matching its file path.

    Args:
        text: Source text.
        file_path: Path used to choose the grammar.

    Returns:
        Parsed source with position helpers.
    """
    linted_lines: frozenset[int] | None = None
    parsed_text = text
    if PurePath(file_path).suffix.lower() == ".vue":
        parsed_text, grammar, linted_lines = _extract_vue_script(text)
    else:
        grammar = grammar_for_path(file_path)
    parser = Parser(_language(grammar))
    tree = parser.parse(parsed_text.encode("utf-8"))
    logger.debug(f"Parsed source (file_path={file_path} grammar={grammar})")
    return ParsedSource(
        text=text,
        parsed_text=parsed_text,
        tree=tree,
        grammar=grammar,
        linted_lines=linted_lines,
    )
