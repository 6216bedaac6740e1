# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
import asyncio
import os
import stat
import threading
import time
from pathlib import Path

import pytest

from conftest import RecordingNotifier
from lintsync import report as report_module
from lintsync.adapter import RuleEngineAdapter
from lintsync.config import build_rule_config
from lintsync.model import Diagnostic
from lintsync.report import ReportSynchronizer, group_by_file, render_report
from lintsync.workspace import Workspace


def _diagnostic(
    path: str, line: int, column: int, message: str, rule_id: str | None
) -> Diagnostic:
    return Diagnostic(
        path=path,
        start_line=line,
        start_column=column,
        end_line=line,
        end_column=column + 1,
        message=message,
        severity="error",
        rule_id=rule_id,
    )


def _synchronizer(roots: list[Path], notifier: RecordingNotifier) -> ReportSynchronizer:
    workspace = Workspace(roots)
    adapter = RuleEngineAdapter(build_rule_config({}), workspace)
    return ReportSynchronizer(workspace, adapter, notifier)


def test_render_report_formats_sections_and_omits_clean_files() -> None:
    report = render_report(
        {
            "/p/a.js": [
                _diagnostic("/p/a.js", 1, 1, "Unexpected console statement.", "no-console")
            ],
            "/p/clean.js": [],
            "/p/b.js": [
                _diagnostic("/p/b.js", 1, 7, "Expected '===' and instead saw '=='.", "eqeqeq"),
                _diagnostic("/p/b.js", 2, 1, "Parsing error: Unexpected token", None),
            ],
        }
    )

    assert report == (
        "ESLint Report\n\n"
        "File: /p/a.js\n"
        "  [1, 1] Unexpected console statement. (no-console)\n"
        "\n"
        "File: /p/b.js\n"
        "  [1, 7] Expected '===' and instead saw '=='. (eqeqeq)\n"
        "  [2, 1] Parsing error: Unexpected token (null)\n"
        "\n"
    )


def test_render_report_without_diagnostics_is_header_only() -> None:
    assert render_report({}) == "ESLint Report\n\n"


def test_group_by_file_keeps_first_seen_order() -> None:
    diagnostics = [
        _diagnostic("b.js", 1, 1, "m", "r"),
        _diagnostic("a.js", 1, 1, "m", "r"),
        _diagnostic("b.js", 2, 1, "m", "r"),
    ]

    grouped = group_by_file(diagnostics)

    assert list(grouped) == ["b.js", "a.js"]
    assert [item.start_line for item in grouped["b.js"]] == [1, 2]


def test_save_report_writes_file_and_notifies(
    tmp_path: Path, notifier: RecordingNotifier
) -> None:
    synchronizer = _synchronizer([tmp_path], notifier)
    diagnostics = [_diagnostic("a.js", 1, 1, "Unexpected console statement.", "no-console")]

    written = asyncio.run(synchronizer.save_report(diagnostics))

    report_path = tmp_path.resolve() / "lint-report" / "eslint-report.txt"
    assert written == report_path
    assert report_path.read_text(encoding="utf-8").startswith("ESLint Report\n\nFile: a.js\n")
    assert notifier.texts("info") == [f"ESLint report saved to {report_path}"]
    assert sorted(path.name for path in report_path.parent.iterdir()) == ["eslint-report.txt"]


def test_save_report_without_workspace_reports_error(notifier: RecordingNotifier) -> None:
    synchronizer = _synchronizer([], notifier)

    assert asyncio.run(synchronizer.save_report([])) is None
    assert notifier.texts("error") == ["No workspace folder found to save the ESLint report."]


def test_save_report_failure_is_surfaced(tmp_path: Path, notifier: RecordingNotifier) -> None:
    (tmp_path / "lint-report").write_text("not a directory", encoding="utf-8")
    synchronizer = _synchronizer([tmp_path], notifier)

    assert asyncio.run(synchronizer.save_report([])) is None
    assert len(notifier.texts("error")) == 1
    assert notifier.texts("error")[0].startswith("Failed to save ESLint report: ")


def test_update_report_relints_workspace_files(
    tmp_path: Path, notifier: RecordingNotifier
) -> None:
    (tmp_path / "a.js").write_text("console.log('hello');\n", encoding="utf-8")
    (tmp_path / "clean.js").write_text("foo('hello');\n", encoding="utf-8")
    synchronizer = _synchronizer([tmp_path], notifier)

    written = asyncio.run(synchronizer.update_report())

    assert written is not None
    report = written.read_text(encoding="utf-8")
    assert f"File: {tmp_path.resolve() / 'a.js'}\n" in report
    assert "clean.js" not in report
    assert "(no-console)" in report
    assert notifier.texts("info") == [f"ESLint report updated and saved to {written}"]


def test_update_report_skips_unreadable_files(
    tmp_path: Path, notifier: RecordingNotifier
) -> None:
    (tmp_path / "a.js").write_text("console.log('hello');\n", encoding="utf-8")
    (tmp_path / "broken.js").write_bytes(b"\xff\xfe\x00bad")
    synchronizer = _synchronizer([tmp_path], notifier)

    written = asyncio.run(synchronizer.update_report())

    assert written is not None
    assert "a.js" in written.read_text(encoding="utf-8")
    assert len(notifier.texts("error")) == 1
    assert notifier.texts("error")[0].startswith("Error updating ESLint report: ")


def test_update_report_without_workspace_reports_error(notifier: RecordingNotifier) -> None:
    synchronizer = _synchronizer([], notifier)

    assert asyncio.run(synchronizer.update_report()) is None
    assert notifier.texts("error") == ["No workspace folder found to update ESLint report."]


def _umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_saved_report_uses_regular_file_permissions(
    tmp_path: Path, notifier: RecordingNotifier
) -> None:
    synchronizer = _synchronizer([tmp_path], notifier)

    written = asyncio.run(synchronizer.save_report([]))

    assert written is not None
    assert stat.S_IMODE(written.stat().st_mode) == 0o666 & ~_umask()


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_rewritten_report_keeps_existing_permissions(
    tmp_path: Path, notifier: RecordingNotifier
) -> None:
    synchronizer = _synchronizer([tmp_path], notifier)
    written = asyncio.run(synchronizer.save_report([]))
    assert written is not None
    written.chmod(0o640)

    asyncio.run(synchronizer.save_report([]))

    assert stat.S_IMODE(written.stat().st_mode) == 0o640


def test_concurrent_report_writes_are_serialized(
    tmp_path: Path, notifier: RecordingNotifier, monkeypatch: pytest.MonkeyPatch
) -> None:
    synchronizer = _synchronizer([tmp_path], notifier)
    original_write = report_module._write_atomic
    guard = threading.Lock()
    active = 0
    overlaps: list[int] = []
    order: list[str] = []

    def _slow_write(path: Path, text: str) -> None:
        nonlocal active
        with guard:
            active += 1
            overlaps.append(active)
        order.append(text)
        time.sleep(0.05 if "first.js" in text else 0.0)
        original_write(path, text)
        with guard:
            active -= 1

    monkeypatch.setattr(report_module, "_write_atomic", _slow_write)
    first = [_diagnostic("first.js", 1, 1, "Unexpected console statement.", "no-console")]
    second = [_diagnostic("second.js", 1, 1, "Unexpected var, use let or const instead.", "no-var")]

    async def _save_both() -> None:
        await asyncio.gather(synchronizer.save_report(first), synchronizer.save_report(second))

    asyncio.run(_save_both())

    report_path = tmp_path.resolve() / "lint-report" / "eslint-report.txt"
    assert max(overlaps) == 1
    assert len(order) == 2
    assert report_path.read_text(encoding="utf-8") == order[-1]
    assert report_path.read_text(encoding="utf-8") == render_report(group_by_file(second))
