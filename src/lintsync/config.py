# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Embedded rule configuration and workspace settings."""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Mapping

logger = logging.getLogger(__name__)

DUPLICATE_RULE_ID = "custom-rules/no-duplicate-code"

_SEVERITY_LEVELS: dict[object, int] = {
    "off": 0,
    "warn": 1,
    "error": 2,
    0: 0,
    1: 1,
    2: 2,
}


class ConfigurationError(ValueError):
    """Represent an invalid rule configuration."""


@dataclass(frozen=True)
class RuleSetting:
    """Represent one configured rule.

    Attributes:
        severity: ``off``/``warn``/``error`` or the numeric levels 0/1/2.
        options: Rule-specific options such as thresholds.
    """

    severity: str | int
    options: Mapping[str, Any] = field(default_factory=dict)

    @property
    def level(self) -> int:
        """Return the numeric engine severity level.

        Raises:
            ConfigurationError: If the severity is not recognized.
        """
        try:
            return _SEVERITY_LEVELS[self.severity]
        except (KeyError, TypeError) as exc:
            raise ConfigurationError(
                f"Unsupported rule severity: {self.severity!r}"
            ) from exc


RuleConfig = Mapping[str, RuleSetting]


def build_rule_config(environ: Mapping[str, str] | None = None) -> dict[str, RuleSetting]:
    """Build the fixed rule configuration.

    Args:
        environ: Environment used for gated rules; defaults to ``os.environ``.

    Returns:
        Rule id to setting mapping.
    """
    env = os.environ if environ is None else environ
    production = env.get("NODE_ENV") == "production"
    logger.debug(f"Building rule configuration (production={production})")
    return {
        DUPLICATE_RULE_ID: RuleSetting("error"),
        "camelcase": RuleSetting("error", {"properties": "always"}),
        "complexity": RuleSetting("error", {"max": 5}),
        "max-depth": RuleSetting("error", {"max": 2}),
        "max-params": RuleSetting("error", {"max": 4}),
        "max-statements": RuleSetting("error", {"max": 15}),
        "no-var": RuleSetting("error"),
        "no-console": RuleSetting("error"),
        "eqeqeq": RuleSetting("error"),
        "no-unused-vars": RuleSetting("error"),
        "padding-line-between-statements": RuleSetting(
            "warn",
            {
                "blank_line": "always",
                "pairs": (("*", "function"), ("function", "*")),
            },
        ),
        "init-declarations": RuleSetting("error", {"mode": "always"}),
        "default-case": RuleSetting("error"),
        "default-case-last": RuleSetting("error"),
        "max-len": RuleSetting(
            "error",
            {
                "code": 120,
                "tab_width": 4,
                "ignore_urls": True,
                "ignore_template_literals": True,
                "ignore_strings": False,
                "ignore_comments": True,
                "ignore_regexp_literals": True,
            },
        ),
        "no-debugger": RuleSetting("error" if production else "off"),
        "quotes": RuleSetting("warn", {"style": "single"}),
    }


@dataclass(frozen=True)
class WorkspaceSettings:
    """Describe where files are scanned and where the report is written.

    Attributes:
        report_dir_name: Report directory created under the first root.
        report_file_name: Report file name inside the report directory.
        file_patterns: Glob patterns of files included in workspace scans.
        excluded_dirs: Directory names skipped at any depth.
        ignore_file_name: Ignore file read from the first root.
    """

    report_dir_name: str = "lint-report"
    report_file_name: str = "eslint-report.txt"
    file_patterns: tuple[str, ...] = ("*.js", "*.ts", "*.vue")
    excluded_dirs: frozenset[str] = frozenset({"node_modules"})
    ignore_file_name: str = ".eslintignore"
