"""
Core data models API surface for treepick.

This file re-exports model classes from domain-specific modules so that
imports like `from treepick.models import X` work.
"""

from .github import (
    DEFAULT_REF,
    DEFAULT_SERVER,
    EntryKind,
    RefKind,
    RepoDescriptor,
    ResolvedRef,
    TreeEntry,
)
from .sync import (
    SyncStatus,
    SyncOptions,
    PlannedDownload,
    FileOutcome,
    SyncResult,
)
from .config import ClientConfig

__all__ = [
    # GitHub models
    "DEFAULT_REF",
    "DEFAULT_SERVER",
    "EntryKind",
    "RefKind",
    "RepoDescriptor",
    "ResolvedRef",
    "TreeEntry",
    # Sync models
    "SyncStatus",
    "SyncOptions",
    "PlannedDownload",
    "FileOutcome",
    "SyncResult",
    # Config models
    "ClientConfig",
]
