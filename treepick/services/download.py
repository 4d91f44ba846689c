"""
Fetch primitive: retrieves raw file content and writes it to disk.
"""

import asyncio
from pathlib import Path
from typing import Optional

import httpx

from ..models import ClientConfig
from ..infrastructure.error_handler import handle_api_error
from ..infrastructure.logger import logger


class DownloadService:
    """Downloads raw content over an injected HTTP client."""

    def __init__(self, client: httpx.AsyncClient, config: Optional[ClientConfig] = None):
        self.client = client
        self.config = config or ClientConfig()

    @handle_api_error
    async def fetch_content(self, url: str) -> bytes:
        """
        Retrieve the raw bytes behind ``url``.

        Args:
            url: Raw-content URL

        Returns:
            Response body
        """
        response = await self.client.get(
            url,
            headers={"User-Agent": self.config.user_agent},
            timeout=self.config.timeout,
            follow_redirects=True
        )
        response.raise_for_status()
        return response.content

    async def ensure_directory(self, path: Path) -> None:
        """Create ``path`` and any missing parents."""
        await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)

    async def fetch_to_file(self, url: str, destination: Path) -> int:
        """
        Retrieve ``url`` and write it to ``destination``.

        Args:
            url: Raw-content URL
            destination: Target file path, parent directories are created

        Returns:
            Number of bytes written
        """
        content = await self.fetch_content(url)
        await self.ensure_directory(destination.parent)
        await asyncio.to_thread(destination.write_bytes, content)
        logger.debug(f"Wrote {destination} ({len(content)} bytes)")
        return len(content)


__all__ = [
    "DownloadService",
]
