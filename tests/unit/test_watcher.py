# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
import asyncio
from pathlib import Path

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from lintsync.watcher import SessionEvent, SessionEventHandler, classify_event
from lintsync.workspace import Workspace


class _RecordingSession:
    def __init__(self, workspace: Workspace) -> None:
        self.workspace = workspace
        self.calls: list[tuple[str, Path | None]] = []

    async def on_document_opened(self, path: Path) -> list:
        self.calls.append(("opened", path))
        return []

    async def on_document_saved(self, path: Path) -> list:
        self.calls.append(("saved", path))
        return []

    async def on_workspace_folders_changed(self, roots: list[Path] | None = None) -> list:
        self.calls.append(("membership_changed", None))
        return []


def test_file_events_map_to_session_events(tmp_path: Path) -> None:
    workspace = Workspace([tmp_path])
    source = str(tmp_path / "a.js")
    resolved = (tmp_path / "a.js").resolve()

    assert classify_event(FileCreatedEvent(source), workspace) == SessionEvent("opened", resolved)
    assert classify_event(FileModifiedEvent(source), workspace) == SessionEvent("saved", resolved)
    assert classify_event(FileDeletedEvent(source), workspace) == SessionEvent(
        "membership_changed", resolved
    )


def test_move_into_workspace_changes_membership(tmp_path: Path) -> None:
    workspace = Workspace([tmp_path])
    event = FileMovedEvent(str(tmp_path / "draft.txt"), str(tmp_path / "a.ts"))

    session_event = classify_event(event, workspace)

    assert session_event is not None
    assert session_event.kind == "membership_changed"


@pytest.mark.parametrize(
    "relative",
    ["notes.txt", "node_modules/lib/index.js", "lint-report/eslint-report.js"],
)
def test_irrelevant_paths_are_ignored(tmp_path: Path, relative: str) -> None:
    workspace = Workspace([tmp_path])

    assert classify_event(FileModifiedEvent(str(tmp_path / relative)), workspace) is None


def test_directory_events_are_ignored(tmp_path: Path) -> None:
    workspace = Workspace([tmp_path])

    assert classify_event(DirModifiedEvent(str(tmp_path / "src.js")), workspace) is None


def test_paths_outside_roots_are_ignored(tmp_path: Path) -> None:
    workspace = Workspace([tmp_path / "project"])

    assert classify_event(FileModifiedEvent(str(tmp_path / "other" / "a.js")), workspace) is None


def test_handler_routes_events_to_session(tmp_path: Path) -> None:
    session = _RecordingSession(Workspace([tmp_path]))
    path = (tmp_path / "a.js").resolve()

    async def _dispatch() -> None:
        handler = SessionEventHandler(session, asyncio.get_running_loop())  # type: ignore[arg-type]
        await handler._handle(SessionEvent("opened", path))
        await handler._handle(SessionEvent("saved", path))
        await handler._handle(SessionEvent("membership_changed", path))

    asyncio.run(_dispatch())

    assert session.calls == [
        ("opened", path),
        ("saved", path),
        ("membership_changed", None),
    ]
