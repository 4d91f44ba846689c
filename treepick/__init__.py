"""
treepick: fetch selected files of a GitHub repository without cloning it.
"""

from .interfaces.api import TreePicker
from .models import ClientConfig, SyncOptions, SyncResult, SyncStatus

__version__ = "0.1.0"

__all__ = [
    "TreePicker",
    "ClientConfig",
    "SyncOptions",
    "SyncResult",
    "SyncStatus",
]
