"""
GitHub domain models for treepick.

This module contains strongly typed data classes and enums representing
the repository descriptor, git references and tree listing entries.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional


DEFAULT_SERVER = "github"
DEFAULT_REF = "main"

# Git tree mode used for directory entries
TREE_MODE = "040000"


class EntryKind(Enum):
    """Kind of an entry in a git tree listing."""

    BLOB = "blob"       # Regular file or symlink
    TREE = "tree"       # Directory
    COMMIT = "commit"   # Submodule pointer


class RefKind(Enum):
    """Namespace a ref is looked up in."""

    BRANCH = "heads"
    TAG = "tags"


@dataclass(frozen=True)
class RepoDescriptor:
    """Immutable descriptor parsed from ``[server:]owner/repo[/ref]``."""

    owner: str
    repo: str
    server: str = DEFAULT_SERVER
    ref: str = ""

    def __post_init__(self) -> None:
        if not self.owner or not self.repo:
            raise ValueError("Repository owner and name are required")

    @property
    def display_name(self) -> str:
        return f'{self.owner}/{self.repo}'

    def with_ref(self, ref: str) -> "RepoDescriptor":
        """Return a copy of the descriptor pointing at ``ref``."""
        return replace(self, ref=ref)


@dataclass(frozen=True)
class ResolvedRef:
    """A ref name resolved to the commit it currently points at."""

    name: str
    kind: RefKind
    sha: str

    @property
    def api_path(self) -> str:
        return f'{self.kind.value}/{self.name}'


@dataclass(frozen=True)
class TreeEntry:
    """Represents one entry of a recursive tree listing."""

    path: str
    mode: str
    kind: EntryKind
    sha: str
    size: int = 0
    url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TreeEntry":
        """Build an entry from a ``git/trees`` API item."""

        mode = data.get("mode", "")
        if mode == TREE_MODE:
            kind = EntryKind.TREE
        else:
            try:
                kind = EntryKind(data.get("type"))
            except ValueError:
                raise ValueError(
                    f"Unknown tree entry type {data.get('type')!r} for {data.get('path')!r}"
                )

        return cls(
            path=data["path"],
            mode=mode,
            kind=kind,
            sha=data.get("sha", ""),
            size=data.get("size") or 0,
            url=data.get("url"),
        )

    @property
    def is_blob(self) -> bool:
        return self.kind is EntryKind.BLOB

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.TREE


__all__ = [
    "DEFAULT_SERVER",
    "DEFAULT_REF",
    "TREE_MODE",
    "EntryKind",
    "RefKind",
    "RepoDescriptor",
    "ResolvedRef",
    "TreeEntry",
]
