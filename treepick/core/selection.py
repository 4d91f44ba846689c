"""
Selection of tree entries by glob patterns and manifest-declared ignores.
"""

import json
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from ..models import TreeEntry
from ..infrastructure.logger import logger
from . import glob


# Synthetic pattern selecting dotfiles at the repository root
TOP_LEVEL_DOT_PATTERN = "./.*"


####
##      SELECTION RESULT MODEL
#####
@dataclass
class SelectionResult:
    """Outcome of applying patterns to a blob list."""

    selected: List[TreeEntry] = field(default_factory=list)
    patterns: List[str] = field(default_factory=list)
    # Only computed when verbose reporting is requested
    ignored: Optional[List[TreeEntry]] = None

    @property
    def selected_paths(self) -> List[str]:
        return [entry.path for entry in self.selected]

    @property
    def ignored_paths(self) -> List[str]:
        return [entry.path for entry in self.ignored or []]


####
##      SELECTION ENGINE
#####
class SelectionEngine:
    """
    Applies an ordered glob pattern set to the blobs of a tree.

    An empty pattern set selects everything and is never augmented.
    """

    def __init__(self, patterns: Sequence[str] = (), top_level_dot_files: bool = False):
        self.patterns = self.effective_patterns(patterns, top_level_dot_files)

    @staticmethod
    def effective_patterns(patterns: Sequence[str], top_level_dot_files: bool) -> List[str]:
        """Return a copy of ``patterns``, with root dotfiles added when requested."""
        effective = list(patterns)
        if effective and top_level_dot_files:
            effective.append(TOP_LEVEL_DOT_PATTERN)
        return effective

    def should_include(self, entry: TreeEntry) -> bool:
        if not entry.is_blob:
            return False
        if not self.patterns:
            return True
        return glob.is_match(entry.path, self.patterns)

    def select(self, blobs: Iterable[TreeEntry], verbose: bool = False) -> SelectionResult:
        """
        Select the entries matching at least one pattern.

        Args:
            blobs: Entries of the tree listing
            verbose: Also compute the complement for display

        Returns:
            SelectionResult; the input sequence is left untouched
        """
        blobs = [entry for entry in blobs if entry.is_blob]
        selected = [entry for entry in blobs if self.should_include(entry)]

        ignored = None
        if verbose:
            chosen = {entry.path for entry in selected}
            ignored = [entry for entry in blobs if entry.path not in chosen]

        return SelectionResult(selected=selected, patterns=list(self.patterns), ignored=ignored)


####
##      MANIFEST IGNORE STAGE
#####
def parse_manifest_ignores(content: bytes, field_name: str) -> List[str]:
    """
    Read the extra ignore globs declared in a ``package.json``-shaped manifest.

    Returns an empty list when the field is absent. A field that is not
    a list of strings is reported and ignored.

    Raises:
        ValueError: If the manifest is not a JSON object
    """
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError("Manifest is not a JSON object")

    value = data.get(field_name)
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        logger.warning(f"*** Manifest field {field_name!r} must be a list of globs, ignoring it")
        return []
    return value


def apply_ignore_patterns(entries: Iterable[TreeEntry], ignores: Sequence[str]) -> List[TreeEntry]:
    """Drop every entry matching one of ``ignores``."""
    if not ignores:
        return list(entries)
    return [entry for entry in entries if not glob.is_match(entry.path, ignores)]


__all__ = [
    "TOP_LEVEL_DOT_PATTERN",
    "SelectionResult",
    "SelectionEngine",
    "parse_manifest_ignores",
    "apply_ignore_patterns",
]
