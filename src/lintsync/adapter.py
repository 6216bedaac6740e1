# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Adapter between the analysis pipeline and the rule engine."""

import asyncio
import logging
from pathlib import Path
from typing import Mapping

from lintsync.config import DUPLICATE_RULE_ID, RuleConfig, WorkspaceSettings
from lintsync.duplication import DuplicateBlockRule
from lintsync.engine import IgnoreRules, Linter, Rule
from lintsync.model import LintResult
from lintsync.workspace import Workspace

logger = logging.getLogger(__name__)

PLUGIN_RULES: Mapping[str, type[Rule]] = {DUPLICATE_RULE_ID: DuplicateBlockRule}


class RuleEngineAdapter:
    """Run the embedded rule configuration over source text.

    Every call builds a fresh engine instance, so no rule state survives
    from one file to the next.
    """

    def __init__(self, rule_config: RuleConfig, workspace: Workspace) -> None:
        """Initialize adapter.

        Args:
            rule_config: Rule id to setting mapping.
            workspace: Workspace whose primary root holds the ignore file.
        """
        self._rule_config = rule_config
        self._workspace = workspace

    @property
    def settings(self) -> WorkspaceSettings:
        return self._workspace.settings

    def create_linter(self) -> Linter:
        """Build an engine instance for one lint call.

        Raises:
            ConfigurationError: If the rule configuration is invalid.
            OSError: If the ignore file exists but cannot be read.
        """
        root = self._workspace.primary_root
        ignore_rules = (
            IgnoreRules.load(root, self.settings.ignore_file_name) if root is not None else None
        )
        return Linter(self._rule_config, plugin_rules=PLUGIN_RULES, ignore_rules=ignore_rules)

    async def lint_text(self, text: str, file_path: str) -> LintResult:
        """Lint source text for a path.

        Args:
            text: Source text.
            file_path: Path used for grammar selection and ignore matching.

        Returns:
            Engine result for the text.

        Raises:
            ConfigurationError: If the rule configuration is invalid.
            EngineError: If the engine fails while evaluating rules.
            OSError: If the ignore file cannot be read.
        """
        linter = self.create_linter()
        result = await asyncio.to_thread(linter.lint_text, text, file_path)
        logger.debug(
            f"Linted text (file_path={file_path} errors={result.error_count} warnings={result.warning_count})"
        )
        return result

    async def output_fixes(self, result: LintResult) -> bool:
        """Overwrite the linted file with fixed output when fixes applied.

        The file is left alone when its current content no longer matches
        the linted source, so a newer save is never replaced by fixes
        computed for older text.

        Args:
            result: Engine result carrying optional fixed output.

        Returns:
            ``True`` when the file was rewritten.

        Raises:
            OSError: If the file cannot be read or written.
            UnicodeDecodeError: If the current file content is not valid UTF-8.
        """
        if result.output is None:
            return False
        path = Path(result.file_path)
        current = await asyncio.to_thread(path.read_text, encoding="utf-8")
        if current != result.source:
            logger.warning(f"Skipped stale fixes (file_path={path})")
            return False
        await asyncio.to_thread(path.write_text, result.output, encoding="utf-8")
        logger.info(f"Applied automatic fixes (file_path={path})")
        return True
