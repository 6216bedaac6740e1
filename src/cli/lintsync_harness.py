# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command-line harness for workspace scans, single-file checks and watching."""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.style import Style
from rich.table import Table

from lintsync.model import Diagnostic
from lintsync.notifier import ConsoleNotifier
from lintsync.report import group_by_file
from lintsync.session import LintSession
from lintsync.watcher import WorkspaceWatcher

logger = logging.getLogger(__name__)

TABLE_COLUMN_RATIOS: dict[str, int] = {
    "line": 1,
    "column": 1,
    "severity": 1,
    "rule_id": 3,
    "message": 8,
}


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="lintsync")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan")
    scan_parser.add_argument(
        "--path",
        action="append",
        required=True,
        help="Workspace root to scan; repeat for several roots.",
    )
    _add_output_arguments(scan_parser)

    check_parser = subparsers.add_parser("check")
    check_parser.add_argument("--path", required=True, help="Workspace root.")
    check_parser.add_argument("--file", required=True, help="File to analyze.")
    _add_output_arguments(check_parser)

    watch_parser = subparsers.add_parser("watch")
    watch_parser.add_argument(
        "--path",
        action="append",
        required=True,
        help="Workspace root to watch; repeat for several roots.",
    )
    return parser


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    parser.add_argument(
        "--output",
        required=False,
        help="Optional output file path for raw JSON when --format json is used.",
    )


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    roots = [Path(path) for path in ([args.path] if isinstance(args.path, str) else args.path)]
    missing = [root for root in roots if not root.is_dir()]
    if missing:
        for root in missing:
            logger.warning(f"Path does not exist (path={root})")
            stderr.write(f"Path does not exist: {root}\n")
        return 2

    notifier = ConsoleNotifier(Console(file=stderr, force_terminal=False))
    session = LintSession(roots, notifier=notifier)
    if args.command == "scan":
        return _run_scan(session=session, args=args, stdout=stdout, stderr=stderr)
    if args.command == "check":
        return _run_check(session=session, args=args, stdout=stdout, stderr=stderr)
    if args.command == "watch":
        return _run_watch(session=session, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def _run_scan(
    session: LintSession, args: argparse.Namespace, stdout: TextIO, stderr: TextIO
) -> int:
    """Run scan command.

    Args:
        session: Session over the requested roots.
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    diagnostics = asyncio.run(session.activate())
    logger.info(
        f"Scan completed (roots={len(session.workspace.roots)} diagnostics={len(diagnostics)})"
    )
    return _emit(diagnostics=diagnostics, args=args, stdout=stdout, stderr=stderr)


def _run_check(
    session: LintSession, args: argparse.Namespace, stdout: TextIO, stderr: TextIO
) -> int:
    file_path = Path(args.file)
    if not file_path.is_file():
        logger.warning(f"File does not exist (file={file_path})")
        stderr.write(f"File does not exist: {file_path}\n")
        return 2
    diagnostics = asyncio.run(session.on_document_saved(file_path))
    logger.info(f"Check completed (file={file_path} diagnostics={len(diagnostics)})")
    return _emit(diagnostics=diagnostics, args=args, stdout=stdout, stderr=stderr)


def _run_watch(session: LintSession, stderr: TextIO) -> int:
    """Run watch command until interrupted.

    Args:
        session: Session over the requested roots.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    try:
        asyncio.run(_watch(session))
    except KeyboardInterrupt:
        logger.info("Watch interrupted")
        stderr.write("Stopped watching.\n")
    return 0


async def _watch(session: LintSession) -> None:
    await session.activate()
    watcher = WorkspaceWatcher(session, asyncio.get_running_loop())
    watcher.start()
    try:
        await asyncio.Event().wait()
    finally:
        session.deactivate()
        watcher.stop()


def _emit(
    diagnostics: list[Diagnostic], args: argparse.Namespace, stdout: TextIO, stderr: TextIO
) -> int:
    if args.format == "json":
        if args.output:
            try:
                _write_json_file(diagnostics=diagnostics, output_path=Path(args.output))
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={args.output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {args.output}\n")
                return 2
        else:
            _write_json(diagnostics=diagnostics, stdout=stdout)
    else:
        _write_table(diagnostics=diagnostics, stdout=stdout)
    return 0


def _json_payload(diagnostics: list[Diagnostic]) -> dict[str, object]:
    return {
        "diagnostics": [asdict(diagnostic) for diagnostic in diagnostics],
        "error_count": sum(1 for item in diagnostics if item.severity == "error"),
        "warning_count": sum(1 for item in diagnostics if item.severity == "warning"),
    }


def _write_json(diagnostics: list[Diagnostic], stdout: TextIO) -> None:
    """Write diagnostics in JSON format.

    Args:
        diagnostics: Diagnostics to write.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(_json_payload(diagnostics), indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_json_file(diagnostics: list[Diagnostic], output_path: Path) -> None:
    """Write raw JSON payload to an output file.

    Raises:
        OSError: If directory creation or file writing fails.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(_json_payload(diagnostics), indent=2, sort_keys=True),
        encoding="utf-8",
    )


def _write_table(diagnostics: list[Diagnostic], stdout: TextIO) -> None:
    """Write diagnostics as one table per file.

    Args:
        diagnostics: Diagnostics to write.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    if not diagnostics:
        console.print("No problems found.", markup=False, highlight=False)
        return
    for file_path, file_diagnostics in group_by_file(diagnostics).items():
        console.rule(escape(file_path), style=Style(color="cyan"), characters="-")
        table = Table(show_header=True, show_lines=False, expand=True)
        table.add_column("line", ratio=TABLE_COLUMN_RATIOS["line"], justify="right")
        table.add_column("column", ratio=TABLE_COLUMN_RATIOS["column"], justify="right")
        table.add_column("severity", ratio=TABLE_COLUMN_RATIOS["severity"])
        table.add_column("rule_id", ratio=TABLE_COLUMN_RATIOS["rule_id"], overflow="fold")
        table.add_column("message", ratio=TABLE_COLUMN_RATIOS["message"], overflow="fold")
        for diagnostic in file_diagnostics:
            table.add_row(
                str(diagnostic.start_line),
                str(diagnostic.start_column),
                diagnostic.severity,
                str(diagnostic.rule_id),
                escape(diagnostic.message),
            )
        console.print(table)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
