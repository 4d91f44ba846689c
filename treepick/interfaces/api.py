"""
High-level Python API for treepick.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import httpx

from ..core.orchestrator import SyncOrchestrator
from ..models import ClientConfig, SyncOptions, SyncResult
from ..services import GitHubAPIService, DownloadService
from ..infrastructure.logger import logger


class TreePicker:
    """
    Fetches selected files of a GitHub repository without cloning it.

    The HTTP client is opened for the duration of each call unless one
    is injected, in which case the caller owns its lifecycle.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        verbose: bool = False,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.config = config or ClientConfig()
        self.client = client
        self.verbose = verbose
        self.set_verbose(verbose)

    def set_verbose(self, verbose: bool) -> None:
        """Toggle DEBUG logging and the matched/ignored listings."""
        self.verbose = verbose
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    def _create_client(self) -> httpx.AsyncClient:
        # No pool ceiling; a batch is bounded by the environment only
        return httpx.AsyncClient(
            timeout=self.config.timeout,
            headers={"User-Agent": self.config.user_agent},
            limits=httpx.Limits(max_connections=None, max_keepalive_connections=20)
        )

    def _create_orchestrator(self, client: httpx.AsyncClient) -> SyncOrchestrator:
        return SyncOrchestrator(
            GitHubAPIService(client, self.config),
            DownloadService(client, self.config),
            self.config
        )

    async def run(self, source: str, options: SyncOptions) -> SyncResult:
        """
        Run a sync with fully specified options.

        Args:
            source: Descriptor string ``[server:]owner/repo[/ref]``
            options: Sync options

        Returns:
            SyncResult describing the run
        """
        if self.client is not None:
            return await self._create_orchestrator(self.client).run(source, options)

        async with self._create_client() as client:
            return await self._create_orchestrator(client).run(source, options)

    async def sync(
        self,
        source: str,
        patterns: Sequence[str] = (),
        output_dir: Union[str, Path] = ".",
        force: bool = False,
        dry_run: bool = False,
        branch: Optional[str] = None,
        tag: Optional[str] = None,
        top_level_dot_files: bool = False,
        apply_manifest_ignores: bool = False
    ) -> SyncResult:
        """
        Fetch the files of ``source`` matching ``patterns`` into ``output_dir``.

        Args:
            source: Descriptor string ``[server:]owner/repo[/ref]``
            patterns: Glob patterns, empty selects every file
            output_dir: Destination directory
            force: Overwrite files that already exist
            dry_run: Only report what would be downloaded
            branch: Branch override
            tag: Tag override, wins over ``branch``
            top_level_dot_files: Also select dotfiles at the repository root
            apply_manifest_ignores: Filter by the manifest's ignore globs

        Returns:
            SyncResult describing the run
        """
        options = SyncOptions(
            output_dir=Path(output_dir),
            force=force,
            dry_run=dry_run,
            verbose=self.verbose,
            branch=branch,
            tag=tag,
            top_level_dot_files=top_level_dot_files,
            glob_patterns=list(patterns),
            apply_manifest_ignores=apply_manifest_ignores
        )
        logger.debug(f"Starting sync of {source} into {options.output_dir}")
        return await self.run(source, options)


__all__ = [
    "TreePicker",
]
