# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for documents and diagnostics."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

LanguageKind = Literal["javascript", "typescript", "vue"]
Severity = Literal["error", "warning"]

LANGUAGE_BY_SUFFIX: dict[str, LanguageKind] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".vue": "vue",
}


def detect_language(path: Path) -> LanguageKind | None:
    """Return the recognized language kind for a path, if any."""
    return LANGUAGE_BY_SUFFIX.get(path.suffix.lower())


@dataclass(frozen=True)
class Document:
    """Represent one source document as read from the host.

    Attributes:
        path: Absolute file path.
        language_id: Recognized language kind; ``None`` when unsupported.
        text: Current text content.
    """

    path: Path
    language_id: LanguageKind | None
    text: str


@dataclass(frozen=True)
class Fix:
    """Replace the character range ``[start, end)`` with ``text``."""

    start: int
    end: int
    text: str


@dataclass(frozen=True)
class EngineMessage:
    """Represent one raw message emitted by the rule engine.

    Attributes:
        rule_id: Reporting rule id; ``None`` for fatal parse messages.
        severity: Engine severity level (1 warning, 2 error).
        message: Human-readable message.
        line: Start line (1-based).
        column: Start column (1-based).
        end_line: Optional end line (1-based).
        end_column: Optional end column (1-based, exclusive).
        fix: Optional automatic fix.
        fatal: Whether the message reports a parse failure.
    """

    rule_id: str | None
    severity: int
    message: str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None
    fix: Fix | None = None
    fatal: bool = False


@dataclass(frozen=True)
class Diagnostic:
    """Represent one positioned issue in a file.

    Attributes:
        path: File path the diagnostic belongs to.
        start_line: Start line (1-based).
        start_column: Start column (1-based).
        end_line: End line (1-based).
        end_column: End column (1-based, exclusive).
        message: Human-readable message.
        severity: ``error`` for engine level 2, otherwise ``warning``.
        rule_id: Reporting rule id; ``None`` for fatal parse messages.
    """

    path: str
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    message: str
    severity: Severity
    rule_id: str | None

    @classmethod
    def from_message(cls, path: str, message: EngineMessage) -> "Diagnostic":
        """Build a diagnostic from a raw engine message.

        A message without an explicit end is given a one-column range on its
        start line.

        Args:
            path: File path the message was produced for.
            message: Raw engine message.

        Returns:
            Immutable diagnostic.
        """
        end_line = message.end_line if message.end_line is not None else message.line
        end_column = (
            message.end_column
            if message.end_column is not None
            else message.column + 1
        )
        return cls(
            path=path,
            start_line=message.line,
            start_column=message.column,
            end_line=end_line,
            end_column=end_column,
            message=message.message,
            severity="error" if message.severity == 2 else "warning",
            rule_id=message.rule_id,
        )


@dataclass(frozen=True)
class LintResult:
    """Represent the engine output for one file.

    Attributes:
        file_path: Linted file path.
        messages: Messages sorted by position.
        source: Text that was linted.
        output: Fixed text; ``None`` when no fix applied.
    """

    file_path: str
    messages: tuple[EngineMessage, ...]
    source: str
    output: str | None = None

    @property
    def error_count(self) -> int:
        return sum(1 for message in self.messages if message.severity == 2)

    @property
    def warning_count(self) -> int:
        return sum(1 for message in self.messages if message.severity == 1)
