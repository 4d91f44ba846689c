from .descriptor import parse_descriptor
from .resolver import RefResolver, RefSelection, select_ref
from .tree import TreeLister
from .selection import SelectionEngine, SelectionResult, apply_ignore_patterns, parse_manifest_ignores
from .executor import BatchReport, DownloadTask, SyncExecutor
from .orchestrator import SyncOrchestrator

__all__ = [
    "parse_descriptor",
    "RefResolver",
    "RefSelection",
    "select_ref",
    "TreeLister",
    "SelectionEngine",
    "SelectionResult",
    "apply_ignore_patterns",
    "parse_manifest_ignores",
    "BatchReport",
    "DownloadTask",
    "SyncExecutor",
    "SyncOrchestrator",
]
