"""
Ref selection and resolution.

Precedence, highest first: explicit tag, explicit branch, the ref embedded
in the descriptor, then the default branch name.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..models import DEFAULT_REF, DEFAULT_SERVER, RefKind, RepoDescriptor, ResolvedRef
from ..services import GitHubAPIService
from ..infrastructure.error_handler import RefResolutionError, TreepickError
from ..infrastructure.logger import logger


BRANCH_OVERRIDE_WARNING = "The target ref is overridden with the specified branch."
TAG_OVERRIDE_WARNING = "The target ref is overridden with the specified tag."


@dataclass
class RefSelection:
    """The operative ref name and the warnings raised while choosing it."""

    name: str
    kind: RefKind
    warnings: List[str] = field(default_factory=list)


def select_ref(
    descriptor: RepoDescriptor,
    branch: Optional[str] = None,
    tag: Optional[str] = None
) -> RefSelection:
    """
    Pick the ref to resolve without touching the network.

    Overriding a lower-precedence value only warns; it never fails.
    """
    warnings = []
    name = descriptor.ref
    kind = RefKind.BRANCH

    if branch:
        if descriptor.ref:
            warnings.append(BRANCH_OVERRIDE_WARNING)
        name = branch
    if tag:
        if branch:
            warnings.append(TAG_OVERRIDE_WARNING)
        name = tag
        kind = RefKind.TAG
    if not name:
        name = DEFAULT_REF

    return RefSelection(name=name, kind=kind, warnings=warnings)


class RefResolver:
    """Resolves a descriptor plus overrides to a commit SHA."""

    def __init__(self, github_service: GitHubAPIService):
        self.github_service = github_service

    async def resolve(
        self,
        descriptor: RepoDescriptor,
        branch: Optional[str] = None,
        tag: Optional[str] = None
    ) -> ResolvedRef:
        """
        Resolve the operative ref of ``descriptor``.

        Args:
            descriptor: Parsed repository descriptor
            branch: Optional branch override
            tag: Optional tag override, wins over ``branch``

        Returns:
            ResolvedRef carrying the commit SHA

        Raises:
            RefResolutionError: If the lookup fails for any reason
        """
        selection = select_ref(descriptor, branch, tag)
        for warning in selection.warnings:
            logger.warning(f"*** {warning}")

        if descriptor.server != DEFAULT_SERVER:
            logger.warning(
                f"*** Server {descriptor.server!r} is not supported, "
                f"using the GitHub API for {descriptor.display_name}"
            )

        try:
            sha = await self.github_service.get_ref(
                descriptor.owner,
                descriptor.repo,
                selection.name,
                selection.kind
            )
        except TreepickError as e:
            raise RefResolutionError(
                f'Failed to resolve "{selection.kind.value}/{selection.name}" '
                f'in "{descriptor.display_name}"',
                e
            ) from e

        return ResolvedRef(name=selection.name, kind=selection.kind, sha=sha)


__all__ = [
    "BRANCH_OVERRIDE_WARNING",
    "TAG_OVERRIDE_WARNING",
    "RefSelection",
    "select_ref",
    "RefResolver",
]
