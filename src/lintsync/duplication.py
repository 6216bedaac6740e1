# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Duplicate-block detection by content fingerprint."""

import hashlib
import logging

from tree_sitter import Node

from lintsync.engine.rule import RuleContext, StructuralRule

logger = logging.getLogger(__name__)


def fingerprint(text: str) -> str:
    """Return a stable content hash of ``text``.

    Args:
        text: Source text.

    Returns:
        Hex digest of the UTF-8 encoded text.
    """
    return hashlib.md5(text.encode("utf-8")).hexdigest()  # noqa: S324


class BlockFingerprintTable:
    """Map fingerprints to the block start lines where they were observed.

    A table lives for one lint pass of one file and is then discarded.
    """

    def __init__(self) -> None:
        self._lines: dict[str, list[int]] = {}

    def record(self, digest: str, line: int) -> list[int] | None:
        """Record one block visit.

        Args:
            digest: Fingerprint of the visited block.
            line: Block start line (1-based).

        Returns:
            All recorded lines for ``digest``, including ``line``, when the
            fingerprint was already present; otherwise ``None``.
        """
        lines = self._lines.get(digest)
        if lines is None:
            self._lines[digest] = [line]
            return None
        lines.append(line)
        return list(lines)

    def __len__(self) -> int:
        return len(self._lines)


class DuplicateBlockRule(StructuralRule):
    """Report statement blocks whose fingerprint was already seen in the pass.

    The fingerprint is computed over the whole file text on every block
    visit, so every block after the first in a file reports.
    """

    node_types = frozenset({"statement_block"})

    def __init__(self, context: RuleContext) -> None:
        super().__init__(context)
        self.table = BlockFingerprintTable()

    def enter(self, node: Node) -> None:
        line, _ = self.source.start(node)
        digest = fingerprint(self.source.text)
        seen = self.table.record(digest, line)
        if seen is None:
            return
        logger.debug(f"Duplicate block (line={line} occurrences={len(seen)})")
        self.context.report(
            "Duplicate code detected. Similar code found at: "
            + ", ".join(str(number) for number in seen),
            node=node,
        )
