# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Current diagnostics per file."""

import logging
from typing import Iterable, Iterator

from lintsync.model import Diagnostic

logger = logging.getLogger(__name__)


class DiagnosticsStore:
    """Map file paths to the diagnostics of their latest completed analysis.

    Entries are replaced wholesale; diagnostics are never merged.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[Diagnostic, ...]] = {}

    def set(self, path: str, diagnostics: Iterable[Diagnostic]) -> None:
        """Replace the entry for ``path``."""
        self._entries[path] = tuple(diagnostics)
        logger.debug(f"Stored diagnostics (path={path} count={len(self._entries[path])})")

    def get(self, path: str) -> tuple[Diagnostic, ...]:
        return self._entries.get(path, ())

    def retain(self, paths: Iterable[str]) -> list[str]:
        """Drop entries whose path is not in ``paths``.

        Returns:
            Removed paths.
        """
        keep = set(paths)
        removed = [path for path in self._entries if path not in keep]
        for path in removed:
            del self._entries[path]
        if removed:
            logger.debug(f"Pruned diagnostics (removed={len(removed)})")
        return removed

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
