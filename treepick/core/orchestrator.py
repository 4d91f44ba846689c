"""
Orchestrator running a sync from descriptor string to written files,
catching each phase's failure at that phase's boundary.
"""

from typing import List, Optional, Sequence

from ..models import (
    ClientConfig, RepoDescriptor, SyncOptions, SyncResult, TreeEntry
)
from ..services import GitHubAPIService, DownloadService
from ..infrastructure.error_handler import DownloadBatchError, TreepickError
from .descriptor import parse_descriptor
from .executor import SyncExecutor
from .resolver import RefResolver
from .selection import SelectionEngine, apply_ignore_patterns, parse_manifest_ignores
from .tree import TreeLister

from treepick.infrastructure.logger import logger


####
##      SYNC ORCHESTRATOR
#####
class SyncOrchestrator:
    """
    Runs parse, resolve, list, select and execute in order.

    A failing phase is reported and the remaining phases are skipped;
    no TreepickError escapes ``run``.
    """

    def __init__(
        self,
        github_service: GitHubAPIService,
        download_service: DownloadService,
        config: Optional[ClientConfig] = None
    ):
        self.github_service = github_service
        self.download_service = download_service
        self.config = config or ClientConfig()
        self.resolver = RefResolver(github_service)
        self.lister = TreeLister(github_service)
        self.executor = SyncExecutor(download_service, self.config)

    async def run(self, source: str, options: SyncOptions) -> SyncResult:
        """
        Execute the complete sync asynchronously.

        Args:
            source: Descriptor string ``[server:]owner/repo[/ref]``
            options: Sync options

        Returns:
            SyncResult; ABORTED when a phase failed before downloading
        """
        result = SyncResult(source=source, options=options)

        try:
            descriptor = parse_descriptor(source)
        except TreepickError as e:
            return self._abort(result, e)
        result.descriptor = descriptor

        try:
            resolved = await self.resolver.resolve(descriptor, options.branch, options.tag)
        except TreepickError as e:
            return self._abort(result, e)
        descriptor = descriptor.with_ref(resolved.name)
        result.descriptor = descriptor
        result.resolved_ref = resolved

        action = "test" if options.dry_run else "download"
        logger.info(f"Try to {action} files of {resolved.name} from {source}")
        logger.info(f"SHA of target ref: {resolved.sha}")

        try:
            blobs = await self.lister.list_blobs(descriptor, resolved)
        except TreepickError as e:
            return self._abort(result, e)
        result.total_blobs = len(blobs)
        logger.info(f"# of files on the repository: {len(blobs)}")
        if options.verbose:
            for entry in blobs:
                logger.info(f"   {entry.path}")

        selected = self._select(blobs, options, result)

        if not options.dry_run:
            selected = await self._apply_manifest(descriptor, selected, options, result)

        result.selected_files = [entry.path for entry in selected]
        logger.info(f"# of files to be downloaded: {len(selected)}")

        report = await self.executor.execute(descriptor, resolved.name, selected, options)
        result.skipped_files = report.skipped
        result.planned = report.planned
        result.outcomes = report.outcomes

        result.mark_completed()
        count = len(report.planned) if options.dry_run else report.succeeded
        logger.info(f"# of files downloaded: {count} in {result.duration_seconds:.2f}s")
        for planned in report.planned:
            logger.info(f"  {planned}")

        if result.failed_files:
            result.error = DownloadBatchError(result.failed_files)
            logger.error(f"!!! Failed to download files from github: {result.error}")

        return result

    def _select(
        self,
        blobs: Sequence[TreeEntry],
        options: SyncOptions,
        result: SyncResult
    ) -> List[TreeEntry]:
        engine = SelectionEngine(options.glob_patterns, options.top_level_dot_files)
        if not engine.patterns:
            return list(blobs)

        selection = engine.select(blobs, verbose=options.verbose)
        logger.info(f"# of files applied glob pattern: {len(selection.selected)}")
        if selection.ignored is not None:
            result.ignored_files = selection.ignored_paths
            logger.info(f"Ignored files: {len(selection.ignored)}")
            for path in selection.ignored_paths:
                logger.info(f"  - {path}")
        return selection.selected

    async def _apply_manifest(
        self,
        descriptor: RepoDescriptor,
        selected: List[TreeEntry],
        options: SyncOptions,
        result: SyncResult
    ) -> List[TreeEntry]:
        """
        Fetch the manifest ahead of the batch and read its ignore globs.

        The globs only filter the selection when ``apply_manifest_ignores``
        is set. Manifest problems are warnings, never failures.
        """
        manifest = next(
            (entry for entry in selected if entry.path == self.config.manifest_name),
            None
        )
        if manifest is None:
            return selected

        url = self.executor.make_source_url(descriptor, descriptor.ref, manifest.path)
        try:
            content = await self.download_service.fetch_content(url)
            ignores = parse_manifest_ignores(content, self.config.manifest_field)
        except (TreepickError, ValueError) as e:
            logger.warning(f"*** Could not read {manifest.path}: {e}")
            return selected

        result.manifest_ignores = ignores
        if not ignores:
            return selected

        if not options.apply_manifest_ignores:
            logger.debug(
                f"{manifest.path} declares {len(ignores)} ignore glob(s) under "
                f"{self.config.manifest_field!r}, not applied"
            )
            return selected

        filtered = apply_ignore_patterns(selected, ignores)
        logger.info(
            f"Apply ignore files from {manifest.path}: "
            f"{len(selected) - len(filtered)} file(s) ignored"
        )
        return filtered

    def _abort(self, result: SyncResult, error: TreepickError) -> SyncResult:
        logger.error(f"!!! {error}")
        result.mark_aborted(error)
        return result


__all__ = [
    "SyncOrchestrator",
]
