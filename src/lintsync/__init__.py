# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Lint analysis pipeline with a continuously synchronized report."""

from lintsync.cancellation import CancellationToken
from lintsync.config import ConfigurationError, WorkspaceSettings, build_rule_config
from lintsync.model import Diagnostic, Document
from lintsync.session import LintSession

__all__ = [
    "CancellationToken",
    "ConfigurationError",
    "Diagnostic",
    "Document",
    "LintSession",
    "WorkspaceSettings",
    "build_rule_config",
]
