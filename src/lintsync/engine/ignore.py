# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Ignore-file matching for linted paths."""

import logging
import os
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS: tuple[str, ...] = ("node_modules/",)


class IgnoreRules:
    """Match paths under a root against ignore-file patterns."""

    def __init__(self, root: Path, spec: pathspec.GitIgnoreSpec) -> None:
        """Initialize rules.

        Args:
            root: Directory the patterns are relative to.
            spec: Compiled gitignore matcher.
        """
        self._root = root.resolve()
        self._spec = spec

    @classmethod
    def load(cls, root: Path, file_name: str) -> "IgnoreRules":
        """Build rules from the default patterns and the ignore file in ``root``.

        Args:
            root: Directory the patterns are relative to.
            file_name: Ignore file name.

        Returns:
            Configured rules; a missing ignore file only yields the defaults.

        Raises:
            OSError: If the ignore file exists but cannot be read.
            UnicodeDecodeError: If the ignore file contains invalid UTF-8.
        """
        lines = list(DEFAULT_PATTERNS)
        ignore_path = root / file_name
        if ignore_path.is_file():
            lines.extend(ignore_path.read_text(encoding="utf-8").splitlines())
            logger.debug(f"Loaded ignore file (path={ignore_path})")
        return cls(root=root, spec=pathspec.GitIgnoreSpec.from_lines(lines))

    def matches(self, relative_path: str, is_dir: bool) -> bool:
        """Check whether a root-relative path matches the patterns.

        Args:
            relative_path: Root-relative POSIX path.
            is_dir: Whether the path is a directory.

        Returns:
            True when path should be ignored.
        """
        normalized = relative_path.replace(os.sep, "/").strip("/")
        if not normalized:
            return False
        if self._spec.match_file(normalized):
            return True
        return is_dir and self._spec.match_file(f"{normalized}/")

    def is_ignored(self, path: str | Path) -> bool:
        """Return whether ``path`` or one of its parent directories is ignored.

        Paths outside the root are never ignored.
        """
        try:
            relative = Path(path).resolve().relative_to(self._root)
        except ValueError:
            return False
        parts = relative.parts
        for depth in range(1, len(parts)):
            if self.matches("/".join(parts[:depth]), is_dir=True):
                return True
        return self.matches(relative.as_posix(), is_dir=False)
