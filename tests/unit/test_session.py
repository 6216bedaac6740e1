# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
import asyncio
from pathlib import Path

from conftest import RecordingNotifier
from lintsync.session import LintSession


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _report(root: Path) -> str:
    return (root / "lint-report" / "eslint-report.txt").read_text(encoding="utf-8")


def test_activation_scans_workspace_and_saves_report(
    tmp_path: Path, notifier: RecordingNotifier
) -> None:
    _write(tmp_path / "a.js", "console.log('hello');\n")
    _write(tmp_path / "b.js", "if (x == 1) {\n  y();\n}\n")
    session = LintSession([tmp_path], notifier=notifier)

    diagnostics = asyncio.run(session.activate())

    assert [(Path(item.path).name, item.rule_id) for item in diagnostics] == [
        ("a.js", "no-console"),
        ("b.js", "eqeqeq"),
    ]
    report = _report(tmp_path)
    assert report.count("File: ") == 2
    assert "  [1, 1] Unexpected console statement. (no-console)\n" in report
    assert "  [1, 7] Expected '===' and instead saw '=='. (eqeqeq)\n" in report
    report_path = tmp_path.resolve() / "lint-report" / "eslint-report.txt"
    assert notifier.texts("info") == [f"ESLint report saved to {report_path}"]


def test_clean_workspace_yields_no_diagnostics(
    tmp_path: Path, notifier: RecordingNotifier
) -> None:
    _write(tmp_path / "a.js", "const greeting = 'hello';\n\nfunction greet() {\n  return greeting;\n}\n\ngreet();\n")
    session = LintSession([tmp_path], notifier=notifier)

    assert asyncio.run(session.activate()) == []
    assert _report(tmp_path) == "ESLint Report\n\n"


def test_long_line_produces_max_len_diagnostic(
    tmp_path: Path, notifier: RecordingNotifier
) -> None:
    long_line = "const message = prefix + '" + "a" * 110 + "';"
    _write(tmp_path / "long.js", f"const prefix = 'p';\n{long_line}\nfoo(message);\n")
    _write(tmp_path / "short.js", "foo('short');\n")
    session = LintSession([tmp_path], notifier=notifier)

    diagnostics = asyncio.run(session.activate())

    assert [(Path(item.path).name, item.rule_id, item.start_line) for item in diagnostics] == [
        ("long.js", "max-len", 2)
    ]


def test_fixing_a_saved_file_clears_its_entry_and_report_section(
    tmp_path: Path, notifier: RecordingNotifier
) -> None:
    path = _write(tmp_path / "a.js", "console.log('hello');\n")
    _write(tmp_path / "b.js", "if (x == 1) {\n  y();\n}\n")
    session = LintSession([tmp_path], notifier=notifier)

    saved = asyncio.run(session.on_document_saved(path))
    assert [item.rule_id for item in saved] == ["no-console"]
    assert f"File: {path.resolve()}" in _report(tmp_path)

    _write(path, "foo('hello');\n")
    resaved = asyncio.run(session.on_document_saved(path))
    asyncio.run(session.report.update_report())

    assert resaved == []
    assert session.store.get(str(path.resolve())) == ()
    report = _report(tmp_path)
    assert "a.js" not in report
    assert report.count("File: ") == 1


def test_opened_document_is_analyzed(tmp_path: Path, notifier: RecordingNotifier) -> None:
    path = _write(tmp_path / "a.js", "var a = 1;\nfoo(a);\n")
    session = LintSession([tmp_path], notifier=notifier)

    diagnostics = asyncio.run(session.on_document_opened(path))

    assert [item.rule_id for item in diagnostics] == ["no-var"]
    assert str(path.resolve()) in session.store


def test_unreadable_document_is_reported(tmp_path: Path, notifier: RecordingNotifier) -> None:
    session = LintSession([tmp_path], notifier=notifier)

    assert asyncio.run(session.on_document_saved(tmp_path / "missing.js")) == []
    assert notifier.texts("error")[0].startswith("Error analyzing code: ")


def test_membership_change_prunes_removed_files(
    tmp_path: Path, notifier: RecordingNotifier
) -> None:
    first = _write(tmp_path / "one" / "a.js", "console.log('a');\n")
    second = _write(tmp_path / "two" / "b.js", "console.log('b');\n")
    session = LintSession([tmp_path / "one", tmp_path / "two"], notifier=notifier)
    asyncio.run(session.activate())
    assert len(session.store) == 2

    diagnostics = asyncio.run(session.on_workspace_folders_changed([tmp_path / "two"]))

    assert [Path(item.path).name for item in diagnostics] == ["b.js"]
    assert str(first.resolve()) not in session.store
    assert str(second.resolve()) in session.store
    report = (tmp_path / "two" / "lint-report" / "eslint-report.txt").read_text(encoding="utf-8")
    assert report.count("File: ") == 1


def test_deleted_file_is_dropped_on_membership_change(
    tmp_path: Path, notifier: RecordingNotifier
) -> None:
    path = _write(tmp_path / "a.js", "console.log('a');\n")
    session = LintSession([tmp_path], notifier=notifier)
    asyncio.run(session.activate())

    path.unlink()
    diagnostics = asyncio.run(session.on_workspace_folders_changed())

    assert diagnostics == []
    assert len(session.store) == 0
    assert _report(tmp_path) == "ESLint Report\n\n"


def test_deactivate_stops_further_analysis(tmp_path: Path, notifier: RecordingNotifier) -> None:
    path = _write(tmp_path / "a.js", "console.log('a');\n")
    session = LintSession([tmp_path], notifier=notifier)

    session.deactivate()

    assert asyncio.run(session.on_document_saved(path)) == []
    assert asyncio.run(session.activate()) == []
    assert len(session.store) == 0
