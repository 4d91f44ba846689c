"""
Sync domain models for treepick.

This module contains data classes and enums representing sync options,
planned and completed downloads, and the overall result of a sync run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from .github import RepoDescriptor, ResolvedRef

if TYPE_CHECKING:
    from ..infrastructure.error_handler import TreepickError


class SyncStatus(Enum):
    """Status enumeration for sync operations."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"       # Download batch finished with failures
    ABORTED = "aborted"     # A phase failed before anything was downloaded


@dataclass
class SyncOptions:
    """Per-run options controlling what is fetched and how."""

    output_dir: Path = field(default_factory=lambda: Path("."))
    force: bool = False
    dry_run: bool = False
    verbose: bool = False
    branch: Optional[str] = None
    tag: Optional[str] = None
    top_level_dot_files: bool = False
    glob_patterns: Sequence[str] = field(default_factory=list)
    apply_manifest_ignores: bool = False

    def __post_init__(self) -> None:
        if self.output_dir is None or str(self.output_dir) == "":
            raise ValueError("Output directory is required")
        self.output_dir = Path(self.output_dir)
        if isinstance(self.glob_patterns, str):
            self.glob_patterns = [self.glob_patterns]
        self.glob_patterns = list(self.glob_patterns)


@dataclass(frozen=True)
class PlannedDownload:
    """Descriptive pair produced for each candidate in dry-run mode."""

    destination: Path
    source_url: str

    def __str__(self) -> str:
        return f"{self.destination} from {self.source_url}"


@dataclass
class FileOutcome:
    """Result of fetching a single file in a real run."""

    path: str
    destination: Path
    source_url: str
    bytes_written: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SyncResult:
    """Comprehensive result of a sync run."""

    source: str
    options: SyncOptions
    status: SyncStatus = SyncStatus.PENDING

    # Resolution
    descriptor: Optional[RepoDescriptor] = None
    resolved_ref: Optional[ResolvedRef] = None

    # Selection
    total_blobs: int = 0
    selected_files: List[str] = field(default_factory=list)
    ignored_files: List[str] = field(default_factory=list)
    manifest_ignores: List[str] = field(default_factory=list)

    # Execution; only one of planned/outcomes is populated for a run
    skipped_files: List[str] = field(default_factory=list)
    planned: List[PlannedDownload] = field(default_factory=list)
    outcomes: List[FileOutcome] = field(default_factory=list)

    # Metadata
    error: Optional["TreepickError"] = None
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def downloaded_files(self) -> List[str]:
        return [outcome.path for outcome in self.outcomes if outcome.ok]

    @property
    def failed_files(self) -> Dict[str, str]:
        return {
            outcome.path: outcome.error
            for outcome in self.outcomes
            if not outcome.ok
        }

    @property
    def is_successful(self) -> bool:
        return self.status == SyncStatus.COMPLETED

    @property
    def duration_seconds(self) -> float:
        if self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    def mark_completed(self) -> None:
        self.completed_at = datetime.now()
        if self.status is SyncStatus.ABORTED:
            return
        self.status = SyncStatus.COMPLETED if not self.failed_files else SyncStatus.FAILED

    def mark_aborted(self, error: "TreepickError") -> None:
        self.error = error
        self.status = SyncStatus.ABORTED
        self.completed_at = datetime.now()


__all__ = [
    "SyncStatus",
    "SyncOptions",
    "PlannedDownload",
    "FileOutcome",
    "SyncResult",
]
