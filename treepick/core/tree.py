"""
Recursive tree listing of a resolved commit.
"""

from typing import Tuple

from ..models import RepoDescriptor, ResolvedRef, TreeEntry
from ..services import GitHubAPIService
from ..infrastructure.error_handler import TreeFetchError, TreepickError


class TreeLister:
    """Lists the blobs of a commit through the GitHub API."""

    def __init__(self, github_service: GitHubAPIService):
        self.github_service = github_service

    async def list_blobs(
        self,
        descriptor: RepoDescriptor,
        ref: ResolvedRef
    ) -> Tuple[TreeEntry, ...]:
        """
        Fetch the recursive tree of ``ref`` and keep only blob entries.

        Raises:
            TreeFetchError: If the listing cannot be retrieved
        """
        try:
            entries = await self.github_service.get_tree(
                descriptor.owner,
                descriptor.repo,
                ref.sha,
                recursive=True
            )
        except TreepickError as e:
            raise TreeFetchError(
                f"Failed to retrieve the tree of {descriptor.display_name}@{ref.sha}",
                e
            ) from e

        return tuple(entry for entry in entries if entry.is_blob)


__all__ = [
    "TreeLister",
]
