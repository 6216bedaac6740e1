# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Full workspace scans."""

import asyncio
import logging

from lintsync.analyzer import SingleFileAnalyzer
from lintsync.cancellation import CancellationToken
from lintsync.model import Diagnostic
from lintsync.notifier import Notifier
from lintsync.workspace import Workspace

logger = logging.getLogger(__name__)


class WorkspaceScanner:
    """Analyze every eligible workspace file in enumeration order."""

    def __init__(
        self, workspace: Workspace, analyzer: SingleFileAnalyzer, notifier: Notifier
    ) -> None:
        self._workspace = workspace
        self._analyzer = analyzer
        self._notifier = notifier

    async def scan(self, token: CancellationToken) -> list[Diagnostic]:
        """Scan the workspace.

        Cancellation stops launching new per-file work; diagnostics of files
        already analyzed are returned.

        Args:
            token: Shared cancellation signal.

        Returns:
            Accumulated diagnostics of every analyzed file.
        """
        accumulated: list[Diagnostic] = []
        try:
            files = await asyncio.to_thread(self._workspace.find_files)
        except OSError as exc:
            logger.warning(f"Workspace enumeration failed (error={exc})")
            self._notifier.error(f"Error analyzing workspace: {exc}")
            return accumulated

        logger.info(f"Workspace scan started (files={len(files)})")
        analyzed = 0
        for file_path in files:
            if token.is_cancellation_requested:
                logger.info(f"Workspace scan cancelled (analyzed={analyzed} total={len(files)})")
                return accumulated
            try:
                document = await self._workspace.open_document(file_path)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning(f"Skipping unreadable file (file_path={file_path} error={exc})")
                self._notifier.error(f"Error analyzing workspace: {exc}")
                continue
            accumulated.extend(
                await self._analyzer.analyze(document, token, update_report=False)
            )
            analyzed += 1

        logger.info(
            f"Workspace scan finished (files={analyzed} diagnostics={len(accumulated)})"
        )
        return accumulated
