# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Workspace roots, file enumeration and document reading."""

import asyncio
import logging
import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Sequence

from lintsync.config import WorkspaceSettings
from lintsync.model import Document, detect_language

logger = logging.getLogger(__name__)


def _raise_walk_error(exc: OSError) -> None:
    raise exc


class Workspace:
    """Represent the project roots eligible for analysis."""

    def __init__(
        self, roots: Sequence[Path], settings: WorkspaceSettings | None = None
    ) -> None:
        """Initialize workspace.

        Args:
            roots: Project root directories; the first one holds the report.
            settings: File patterns and report location settings.
        """
        self.settings = settings or WorkspaceSettings()
        self._roots = [Path(root).resolve() for root in roots]

    @property
    def roots(self) -> list[Path]:
        return list(self._roots)

    @property
    def primary_root(self) -> Path | None:
        """Return the first root, or ``None`` for an empty workspace."""
        return self._roots[0] if self._roots else None

    def set_roots(self, roots: Sequence[Path]) -> None:
        self._roots = [Path(root).resolve() for root in roots]
        logger.info(f"Workspace roots changed (count={len(self._roots)})")

    def matches(self, path: Path) -> bool:
        """Return whether a path is a workspace file eligible for scanning."""
        resolved = Path(path).resolve()
        if not any(fnmatchcase(resolved.name, pattern) for pattern in self.settings.file_patterns):
            return False
        for root in self._roots:
            try:
                relative = resolved.relative_to(root)
            except ValueError:
                continue
            return not any(part in self.settings.excluded_dirs for part in relative.parts[:-1])
        return False

    def find_files(self) -> list[Path]:
        """Enumerate eligible files under every root.

        Returns:
            Matching file paths, sorted per root, roots in configured order.

        Raises:
            OSError: If a root directory cannot be listed.
        """
        found: list[Path] = []
        seen: set[Path] = set()
        for root in self._roots:
            root_files: list[Path] = []
            for current, dir_names, file_names in os.walk(root, onerror=_raise_walk_error):
                dir_names[:] = sorted(
                    name for name in dir_names if name not in self.settings.excluded_dirs
                )
                for file_name in file_names:
                    if any(fnmatchcase(file_name, pattern) for pattern in self.settings.file_patterns):
                        root_files.append(Path(current) / file_name)
            for file_path in sorted(root_files):
                if file_path not in seen:
                    seen.add(file_path)
                    found.append(file_path)
        logger.debug(f"Enumerated workspace files (roots={len(self._roots)} files={len(found)})")
        return found

    async def open_document(self, path: Path) -> Document:
        """Read the current text of a file as a document.

        Raises:
            OSError: If the file cannot be read.
            UnicodeDecodeError: If the file is not valid UTF-8.
        """
        resolved = Path(path).resolve()
        text = await asyncio.to_thread(resolved.read_text, encoding="utf-8")
        return Document(path=resolved, language_id=detect_language(resolved), text=text)
