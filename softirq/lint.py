"""Lint diagnostics for the content workspace."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum, auto

from .collections import ContentIndex
from .config import BuildMode, Config
from .content.models import ContentEntry
from .errors import ContentError, SchemaViolation, SlugCollision
from .ingest import iter_sources


class IssueSeverity(Enum):
    """Severity level for lint issues."""

    ERROR = auto()
    WARNING = auto()


@dataclass(slots=True)
class DocumentIssue:
    """Represents a lint finding for a document."""

    source_path: str
    message: str
    severity: IssueSeverity
    pointer: str | None = None


@dataclass(slots=True)
class LintReport:
    """Aggregate lint results for a workspace."""

    issues: list[DocumentIssue] = field(default_factory=list)
    document_count: int = 0

    def add(self, issue: DocumentIssue) -> None:
        self.issues.append(issue)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity is IssueSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity is IssueSeverity.WARNING)


def lint_entry(entry: ContentEntry, *, today: dt.date | None = None) -> list[DocumentIssue]:
    """Warnings for entries that are valid but probably not ready to publish."""
    issues: list[DocumentIssue] = []
    reference = today or dt.date.today()

    if entry.draft:
        issues.append(
            DocumentIssue(
                source_path=entry.source_path,
                message="Entry is a draft and will not be published.",
                severity=IssueSeverity.WARNING,
                pointer="draft",
            )
        )
    if not entry.description.strip():
        issues.append(
            DocumentIssue(
                source_path=entry.source_path,
                message="Description is empty; meta tags and listings will be blank.",
                severity=IssueSeverity.WARNING,
                pointer="description",
            )
        )
    if entry.date > reference:
        issues.append(
            DocumentIssue(
                source_path=entry.source_path,
                message=f"Date {entry.date.isoformat()} is in the future.",
                severity=IssueSeverity.WARNING,
                pointer="date",
            )
        )
    return issues


def lint_workspace(config: Config, *, today: dt.date | None = None) -> LintReport:
    """Load every document, collecting failures instead of stopping at the first."""
    report = LintReport()
    index = ContentIndex(mode=BuildMode.PREVIEW)

    for source in iter_sources(config):
        report.document_count += 1
        try:
            entry = source.load()
        except ContentError as exc:
            pointer = exc.field if isinstance(exc, SchemaViolation) else None
            report.add(
                DocumentIssue(
                    source_path=exc.source_path or str(source.path),
                    message=str(exc),
                    severity=IssueSeverity.ERROR,
                    pointer=pointer,
                )
            )
            continue

        try:
            index.add(entry)
        except SlugCollision as exc:
            report.add(
                DocumentIssue(
                    source_path=entry.source_path,
                    message=str(exc),
                    severity=IssueSeverity.ERROR,
                    pointer="slug",
                )
            )
            continue

        for issue in lint_entry(entry, today=today):
            report.add(issue)

    return report
