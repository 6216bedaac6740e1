# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Process context wiring the analysis pipeline to host events."""

import asyncio
import logging
from pathlib import Path
from typing import Sequence

from lintsync.adapter import RuleEngineAdapter
from lintsync.analyzer import SingleFileAnalyzer
from lintsync.cancellation import CancellationToken
from lintsync.config import RuleConfig, WorkspaceSettings, build_rule_config
from lintsync.model import Diagnostic
from lintsync.notifier import LoggingNotifier, Notifier
from lintsync.report import ReportSynchronizer
from lintsync.scanner import WorkspaceScanner
from lintsync.store import DiagnosticsStore
from lintsync.workspace import Workspace

logger = logging.getLogger(__name__)


class LintSession:
    """Own the diagnostics store, the cancellation signal and the pipeline.

    One session corresponds to one running host process.
    """

    def __init__(
        self,
        roots: Sequence[Path],
        settings: WorkspaceSettings | None = None,
        rule_config: RuleConfig | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        """Initialize session.

        Args:
            roots: Project root directories.
            settings: Workspace settings; defaults to ``WorkspaceSettings()``.
            rule_config: Rule configuration; defaults to the embedded one.
            notifier: User notification surface; defaults to logging only.
        """
        self.notifier = notifier or LoggingNotifier()
        self.workspace = Workspace(roots, settings)
        self.store = DiagnosticsStore()
        self.token = CancellationToken()
        self.adapter = RuleEngineAdapter(
            rule_config if rule_config is not None else build_rule_config(),
            self.workspace,
        )
        self.report = ReportSynchronizer(self.workspace, self.adapter, self.notifier)
        self.analyzer = SingleFileAnalyzer(self.adapter, self.store, self.report, self.notifier)
        self.scanner = WorkspaceScanner(self.workspace, self.analyzer, self.notifier)

    async def activate(self) -> list[Diagnostic]:
        """Run the initial workspace scan and save the report from its results."""
        logger.info(f"Session activated (roots={len(self.workspace.roots)})")
        diagnostics = await self.scanner.scan(self.token)
        await self.report.save_report(diagnostics)
        return diagnostics

    async def on_document_saved(self, path: Path) -> list[Diagnostic]:
        return await self._analyze_path(path)

    async def on_document_opened(self, path: Path) -> list[Diagnostic]:
        return await self._analyze_path(path)

    async def on_workspace_folders_changed(
        self, roots: Sequence[Path] | None = None
    ) -> list[Diagnostic]:
        """Re-scan after the set of workspace files changed.

        Args:
            roots: New project roots; ``None`` keeps the current roots.

        Returns:
            Diagnostics of the re-scan.
        """
        if roots is not None:
            self.workspace.set_roots(roots)
        try:
            files = await asyncio.to_thread(self.workspace.find_files)
        except OSError as exc:
            logger.warning(f"Skipping store pruning (error={exc})")
        else:
            self.store.retain(str(file_path) for file_path in files)
        diagnostics = await self.scanner.scan(self.token)
        await self.report.save_report(diagnostics)
        return diagnostics

    def deactivate(self) -> None:
        """Signal cancellation to pending analysis work."""
        self.token.cancel()
        logger.info("Session deactivated")

    async def _analyze_path(self, path: Path) -> list[Diagnostic]:
        if self.token.is_cancellation_requested:
            return []
        try:
            document = await self.workspace.open_document(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(f"Document read failed (path={path} error={exc})")
            self.notifier.error(f"Error analyzing code: {exc}")
            return []
        return await self.analyzer.analyze(document, self.token)
