# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Report rendering and persistence."""

import asyncio
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from lintsync.adapter import RuleEngineAdapter
from lintsync.config import ConfigurationError
from lintsync.engine import EngineError
from lintsync.model import Diagnostic
from lintsync.notifier import Notifier
from lintsync.workspace import Workspace

logger = logging.getLogger(__name__)

REPORT_HEADER = "ESLint Report\n\n"


def group_by_file(diagnostics: Iterable[Diagnostic]) -> dict[str, list[Diagnostic]]:
    """Group diagnostics by path, keeping first-seen path order."""
    grouped: dict[str, list[Diagnostic]] = {}
    for diagnostic in diagnostics:
        grouped.setdefault(diagnostic.path, []).append(diagnostic)
    return grouped


def render_report(diagnostics_by_file: Mapping[str, Sequence[Diagnostic]]) -> str:
    """Render the textual report.

    Files without diagnostics are omitted. A missing rule id renders as
    ``null``.

    Args:
        diagnostics_by_file: Path to diagnostics mapping.

    Returns:
        Report text.
    """
    parts = [REPORT_HEADER]
    for path, diagnostics in diagnostics_by_file.items():
        if not diagnostics:
            continue
        parts.append(f"File: {path}\n")
        for diagnostic in diagnostics:
            rule_id = diagnostic.rule_id if diagnostic.rule_id is not None else "null"
            parts.append(
                f"  [{diagnostic.start_line}, {diagnostic.start_column}] "
                f"{diagnostic.message} ({rule_id})\n"
            )
        parts.append("\n")
    return "".join(parts)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# os.umask can only be read by setting it, so it is read once at import.
_DEFAULT_FILE_MODE = 0o666 & ~_current_umask()


def _write_atomic(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        mode = stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        mode = _DEFAULT_FILE_MODE
    handle, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(handle, "w", encoding="utf-8") as temp_file:
            temp_file.write(text)
        os.chmod(temp_name, mode)
        os.replace(temp_name, path)
    except OSError:
        Path(temp_name).unlink(missing_ok=True)
        raise


class ReportSynchronizer:
    """Render diagnostics into the report file and notify the user."""

    def __init__(
        self, workspace: Workspace, adapter: RuleEngineAdapter, notifier: Notifier
    ) -> None:
        """Initialize synchronizer.

        Args:
            workspace: Workspace whose primary root holds the report.
            adapter: Engine adapter used for full report updates.
            notifier: User notification surface.
        """
        self._workspace = workspace
        self._adapter = adapter
        self._notifier = notifier
        self._lock = asyncio.Lock()

    @property
    def report_path(self) -> Path | None:
        root = self._workspace.primary_root
        if root is None:
            return None
        settings = self._workspace.settings
        return root / settings.report_dir_name / settings.report_file_name

    async def save_report(self, diagnostics: Iterable[Diagnostic]) -> Path | None:
        """Render and persist a report from already computed diagnostics.

        Args:
            diagnostics: Diagnostics to render, typically a scan's results.

        Returns:
            Written report path, or ``None`` when nothing was written.
        """
        report_path = self.report_path
        if report_path is None:
            self._notifier.error("No workspace folder found to save the ESLint report.")
            return None
        text = render_report(group_by_file(diagnostics))
        try:
            await self._write(report_path, text)
        except OSError as exc:
            logger.warning(f"Report save failed (path={report_path} error={exc})")
            self._notifier.error(f"Failed to save ESLint report: {exc}")
            return None
        self._notifier.info(f"ESLint report saved to {report_path}")
        return report_path

    async def update_report(self) -> Path | None:
        """Re-lint every workspace file and persist the resulting report.

        The Diagnostics Store is neither read nor modified and no fixes are
        written. Files that fail to read or lint are reported and skipped.

        Returns:
            Written report path, or ``None`` when nothing was written.
        """
        report_path = self.report_path
        if report_path is None:
            self._notifier.error("No workspace folder found to update ESLint report.")
            return None
        try:
            files = await asyncio.to_thread(self._workspace.find_files)
        except OSError as exc:
            logger.warning(f"Report update enumeration failed (error={exc})")
            self._notifier.error(f"Error updating ESLint report: {exc}")
            return None

        diagnostics: list[Diagnostic] = []
        for file_path in files:
            try:
                document = await self._workspace.open_document(file_path)
                result = await self._adapter.lint_text(document.text, str(document.path))
            except (ConfigurationError, EngineError, OSError, UnicodeDecodeError) as exc:
                logger.warning(f"Report update skipped file (file_path={file_path} error={exc})")
                self._notifier.error(f"Error updating ESLint report: {exc}")
                continue
            diagnostics.extend(
                Diagnostic.from_message(str(document.path), message)
                for message in result.messages
            )

        text = render_report(group_by_file(diagnostics))
        try:
            await self._write(report_path, text)
        except OSError as exc:
            logger.warning(f"Report update failed (path={report_path} error={exc})")
            self._notifier.error(f"Failed to update ESLint report: {exc}")
            return None
        self._notifier.info(f"ESLint report updated and saved to {report_path}")
        return report_path

    async def _write(self, report_path: Path, text: str) -> None:
        async with self._lock:
            await asyncio.to_thread(_write_atomic, report_path, text)
        logger.info(f"Report written (path={report_path} bytes={len(text.encode('utf-8'))})")
