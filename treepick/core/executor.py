"""
Executor deciding which selected blobs to fetch and fetching them concurrently.
"""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from urllib.parse import quote

from ..models import (
    ClientConfig, FileOutcome, PlannedDownload, RepoDescriptor, SyncOptions, TreeEntry
)
from ..services import DownloadService
from ..infrastructure.logger import logger


####
##      EXECUTION MODELS
#####
@dataclass(frozen=True)
class DownloadTask:
    """A selected blob together with where it comes from and goes to."""

    entry: TreeEntry
    destination: Path
    source_url: str


@dataclass
class BatchReport:
    """What the executor did with a selection."""

    skipped: List[str] = field(default_factory=list)
    planned: List[PlannedDownload] = field(default_factory=list)
    outcomes: List[FileOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)


####
##      SYNC EXECUTOR
#####
class SyncExecutor:
    """
    Turns a selection into download tasks and runs them as one batch.

    Every task of a batch is awaited, failures included, so a failing
    download never abandons its in-flight siblings.
    """

    def __init__(self, download_service: DownloadService, config: Optional[ClientConfig] = None):
        self.download_service = download_service
        self.config = config or ClientConfig()

    def make_source_url(self, descriptor: RepoDescriptor, ref: str, path: str) -> str:
        """Raw-content URL of ``path`` at ``ref``."""
        return (
            f"https://{self.config.raw_host}/{quote(descriptor.owner)}/{quote(descriptor.repo)}"
            f"/{quote(ref, safe='/')}/{quote(path, safe='/')}"
        )

    def plan(
        self,
        descriptor: RepoDescriptor,
        ref: str,
        entries: Sequence[TreeEntry],
        options: SyncOptions
    ) -> Tuple[List[DownloadTask], List[str]]:
        """
        Split ``entries`` into download tasks and skipped paths.

        Directories are always skipped; existing files are skipped unless
        ``options.force`` is set.
        """
        tasks = []
        skipped = []
        for entry in entries:
            destination = options.output_dir / entry.path
            if entry.is_directory:
                skipped.append(entry.path)
                continue
            if destination.exists() and not options.force:
                logger.debug(f"Skipping existing file: {entry.path}")
                skipped.append(entry.path)
                continue
            tasks.append(DownloadTask(
                entry=entry,
                destination=destination,
                source_url=self.make_source_url(descriptor, ref, entry.path)
            ))
        return tasks, skipped

    async def execute(
        self,
        descriptor: RepoDescriptor,
        ref: str,
        entries: Sequence[TreeEntry],
        options: SyncOptions
    ) -> BatchReport:
        """
        Fetch, or in dry-run mode describe, every candidate of ``entries``.

        Args:
            descriptor: Repository the entries belong to
            ref: Resolved ref name used in source URLs
            entries: Selected blobs
            options: Sync options

        Returns:
            BatchReport with planned pairs (dry run) or per-file outcomes
        """
        tasks, skipped = self.plan(descriptor, ref, entries, options)
        report = BatchReport(skipped=skipped)

        if options.dry_run:
            report.planned = [
                PlannedDownload(destination=task.destination, source_url=task.source_url)
                for task in tasks
            ]
            return report

        if tasks:
            await self.download_service.ensure_directory(options.output_dir)

        report.outcomes = await self._download_concurrently(tasks)
        return report

    async def _download_concurrently(self, tasks: List[DownloadTask]) -> List[FileOutcome]:
        """
        Download every task at once and collect one outcome per task.

        Concurrency is unbounded unless ``max_concurrent_downloads`` is set.
        """
        limit = self.config.max_concurrent_downloads
        semaphore = asyncio.Semaphore(limit) if limit else None

        async def run(task: DownloadTask) -> int:
            if semaphore is None:
                return await self.download_service.fetch_to_file(task.source_url, task.destination)
            async with semaphore:
                return await self.download_service.fetch_to_file(task.source_url, task.destination)

        results = await asyncio.gather(*(run(task) for task in tasks), return_exceptions=True)

        outcomes = []
        for task, result in zip(tasks, results):
            outcome = FileOutcome(
                path=task.entry.path,
                destination=task.destination,
                source_url=task.source_url
            )
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                outcome.error = str(result)
                logger.error(f"!!! Failed to download {task.entry.path}: {result}")
            else:
                outcome.bytes_written = result
                logger.debug(f"Downloaded {task.entry.path} ({result} bytes)")
            outcomes.append(outcome)

        return outcomes


__all__ = [
    "DownloadTask",
    "BatchReport",
    "SyncExecutor",
]
