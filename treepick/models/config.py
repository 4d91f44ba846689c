"""
Configuration models for treepick.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ClientConfig:
    """
    Settings shared by every sync run of a client.

    Covers the GitHub endpoints, HTTP behaviour and the manifest
    convention used to declare extra ignore globs.
    """

    # Endpoints
    api_url: str = "https://api.github.com"
    raw_host: str = "raw.githubusercontent.com"
    user_agent: str = "treepick"

    # HTTP settings
    timeout: float = 30.0

    # None means every download of a batch runs at once
    max_concurrent_downloads: Optional[int] = None

    # Manifest convention
    manifest_name: str = "package.json"
    manifest_field: str = "treepickIgnore"

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_concurrent_downloads is not None and self.max_concurrent_downloads <= 0:
            raise ValueError("max_concurrent_downloads must be positive")
        self.api_url = self.api_url.rstrip("/")


__all__ = [
    "ClientConfig",
]
