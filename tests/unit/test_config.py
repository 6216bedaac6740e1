# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
from pathlib import Path

import pytest

from lintsync.adapter import PLUGIN_RULES
from lintsync.config import (
    DUPLICATE_RULE_ID,
    ConfigurationError,
    RuleSetting,
    WorkspaceSettings,
    build_rule_config,
)
from lintsync.engine import Linter
from lintsync.engine.rules import BUILTIN_RULES
from lintsync.model import Diagnostic, EngineMessage, detect_language


def test_embedded_configuration_covers_registered_rules() -> None:
    config = build_rule_config({})

    assert set(config) == set(BUILTIN_RULES) | {DUPLICATE_RULE_ID}
    assert config["complexity"].options == {"max": 5}
    assert config["max-depth"].options == {"max": 2}
    assert config["max-params"].options == {"max": 4}
    assert config["max-statements"].options == {"max": 15}
    assert config["max-len"].options["code"] == 120
    assert config["quotes"].level == 1
    assert config["padding-line-between-statements"].level == 1


def test_embedded_configuration_is_valid() -> None:
    Linter(build_rule_config({}), plugin_rules=PLUGIN_RULES)


def test_debugger_rule_is_gated_on_node_env() -> None:
    assert build_rule_config({})["no-debugger"].level == 0
    assert build_rule_config({"NODE_ENV": "development"})["no-debugger"].level == 0
    assert build_rule_config({"NODE_ENV": "production"})["no-debugger"].level == 2


@pytest.mark.parametrize(("severity", "level"), [("off", 0), ("warn", 1), ("error", 2), (2, 2)])
def test_rule_setting_levels(severity: str | int, level: int) -> None:
    assert RuleSetting(severity).level == level


def test_rule_setting_rejects_unknown_severity() -> None:
    with pytest.raises(ConfigurationError):
        RuleSetting("loud").level


def test_workspace_settings_defaults() -> None:
    settings = WorkspaceSettings()

    assert settings.report_dir_name == "lint-report"
    assert settings.report_file_name == "eslint-report.txt"
    assert settings.file_patterns == ("*.js", "*.ts", "*.vue")
    assert "node_modules" in settings.excluded_dirs


def test_detect_language_by_suffix() -> None:
    assert detect_language(Path("a.js")) == "javascript"
    assert detect_language(Path("a.TS")) == "typescript"
    assert detect_language(Path("a.vue")) == "vue"
    assert detect_language(Path("a.py")) is None


def test_diagnostic_defaults_end_to_one_column_past_start() -> None:
    message = EngineMessage(rule_id=None, severity=2, message="Parsing error: x", line=3, column=4)

    diagnostic = Diagnostic.from_message("a.js", message)

    assert (diagnostic.end_line, diagnostic.end_column) == (3, 5)
    assert diagnostic.severity == "error"


def test_diagnostic_maps_non_error_levels_to_warning() -> None:
    message = EngineMessage(
        rule_id="quotes",
        severity=1,
        message="Strings must use singlequote.",
        line=1,
        column=11,
        end_line=1,
        end_column=15,
    )

    diagnostic = Diagnostic.from_message("a.js", message)

    assert diagnostic.severity == "warning"
    assert (diagnostic.end_line, diagnostic.end_column) == (1, 15)
