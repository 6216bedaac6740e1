# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Single-file analysis."""

import logging
from typing import get_args

from lintsync.adapter import RuleEngineAdapter
from lintsync.cancellation import CancellationToken
from lintsync.config import ConfigurationError
from lintsync.engine import EngineError
from lintsync.model import Diagnostic, Document, LanguageKind
from lintsync.notifier import Notifier
from lintsync.report import ReportSynchronizer
from lintsync.store import DiagnosticsStore

logger = logging.getLogger(__name__)

RECOGNIZED_LANGUAGES: frozenset[str] = frozenset(get_args(LanguageKind))


class SingleFileAnalyzer:
    """Analyze one document and publish its diagnostics."""

    def __init__(
        self,
        adapter: RuleEngineAdapter,
        store: DiagnosticsStore,
        report: ReportSynchronizer,
        notifier: Notifier,
    ) -> None:
        """Initialize analyzer.

        Args:
            adapter: Engine adapter.
            store: Diagnostics store updated with each completed analysis.
            report: Report synchronizer triggered when diagnostics exist.
            notifier: User notification surface.
        """
        self._adapter = adapter
        self._store = store
        self._report = report
        self._notifier = notifier

    async def analyze(
        self,
        document: Document,
        token: CancellationToken,
        update_report: bool = True,
    ) -> list[Diagnostic]:
        """Analyze one document.

        A cancelled token, an unsupported language or a caught failure yields
        an empty list and leaves the store untouched.

        Args:
            document: Document to analyze; its text is linted as is.
            token: Shared cancellation signal.
            update_report: Whether diagnostics trigger a full report update.

        Returns:
            Diagnostics of this analysis, in engine order.
        """
        if token.is_cancellation_requested:
            return []
        if document.language_id not in RECOGNIZED_LANGUAGES:
            logger.debug(f"Skipping unsupported document (path={document.path})")
            return []

        path = str(document.path)
        try:
            result = await self._adapter.lint_text(document.text, path)
            if token.is_cancellation_requested:
                logger.debug(f"Discarding cancelled analysis (path={path})")
                return []

            diagnostics = [Diagnostic.from_message(path, message) for message in result.messages]
            self._store.set(path, diagnostics)
            if diagnostics:
                if result.output is not None and not await self._adapter.output_fixes(result):
                    self._notifier.warning(
                        f"Automatic fixes were not applied to {path} because it changed during analysis."
                    )
                if update_report:
                    await self._report.update_report()
            return diagnostics
        except (ConfigurationError, EngineError, OSError, UnicodeDecodeError) as exc:
            logger.warning(f"Analysis failed (path={path} error={exc})")
            self._notifier.error(f"Error analyzing code: {exc}")
            return []
