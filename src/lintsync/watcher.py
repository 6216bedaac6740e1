# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Translate filesystem events into session events."""

import asyncio
import logging
import os
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from lintsync.session import LintSession
from lintsync.workspace import Workspace

logger = logging.getLogger(__name__)

SessionEventKind = Literal["opened", "saved", "membership_changed"]


@dataclass(frozen=True)
class SessionEvent:
    """Represent one host event derived from a filesystem event."""

    kind: SessionEventKind
    path: Path


def _is_relevant(path: Path, workspace: Workspace) -> bool:
    root = workspace.primary_root
    if root is not None:
        report_dir = root / workspace.settings.report_dir_name
        if path == report_dir or report_dir in path.parents:
            return False
    return workspace.matches(path)


def classify_event(event: FileSystemEvent, workspace: Workspace) -> SessionEvent | None:
    """Map a watchdog event onto a session event.

    Args:
        event: Raw filesystem event.
        workspace: Workspace deciding which paths are relevant.

    Returns:
        Session event, or ``None`` when the event is ignored.
    """
    if event.is_directory:
        return None
    src_path = Path(os.fsdecode(event.src_path)).resolve()
    if event.event_type == "created":
        return SessionEvent("opened", src_path) if _is_relevant(src_path, workspace) else None
    if event.event_type == "modified":
        return SessionEvent("saved", src_path) if _is_relevant(src_path, workspace) else None
    if event.event_type in {"deleted", "moved"}:
        paths = [src_path]
        dest_path = getattr(event, "dest_path", "")
        if dest_path:
            paths.append(Path(os.fsdecode(dest_path)).resolve())
        if any(_is_relevant(path, workspace) for path in paths):
            return SessionEvent("membership_changed", src_path)
    return None


class SessionEventHandler(FileSystemEventHandler):
    """Forward relevant filesystem events to a session on its event loop."""

    def __init__(self, session: LintSession, loop: asyncio.AbstractEventLoop) -> None:
        super().__init__()
        self._session = session
        self._loop = loop

    def on_any_event(self, event: FileSystemEvent) -> None:
        session_event = classify_event(event, self._session.workspace)
        if session_event is None:
            return
        logger.debug(f"Dispatching event (kind={session_event.kind} path={session_event.path})")
        future = asyncio.run_coroutine_threadsafe(self._handle(session_event), self._loop)
        future.add_done_callback(self._log_failure)

    async def _handle(self, session_event: SessionEvent) -> None:
        if session_event.kind == "opened":
            await self._session.on_document_opened(session_event.path)
        elif session_event.kind == "saved":
            await self._session.on_document_saved(session_event.path)
        else:
            await self._session.on_workspace_folders_changed()

    @staticmethod
    def _log_failure(future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(f"Event handling failed (error={exc})", exc_info=exc)


class WorkspaceWatcher:
    """Run a watchdog observer over every workspace root."""

    def __init__(self, session: LintSession, loop: asyncio.AbstractEventLoop) -> None:
        self._session = session
        self._handler = SessionEventHandler(session, loop)
        self._observer = Observer()

    def start(self) -> None:
        for root in self._session.workspace.roots:
            self._observer.schedule(self._handler, str(root), recursive=True)
            logger.info(f"Watching root (path={root})")
        self._observer.start()

    def stop(self) -> None:
        self._observer.stop()
        self._observer.join()
        logger.info("Watcher stopped")
