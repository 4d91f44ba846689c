"""
Parser for compact repository descriptors.
"""

from ..models import DEFAULT_SERVER, RepoDescriptor
from ..infrastructure.error_handler import InvalidDescriptorError


def parse_descriptor(source: str) -> RepoDescriptor:
    """
    Parse ``[server:]owner/repo[/ref]`` into a RepoDescriptor.

    Args:
        source: Descriptor string, e.g. ``github:acme/widgets/main``

    Returns:
        Descriptor with ``server`` defaulted to ``github`` and ``ref``
        left empty when not given

    Raises:
        InvalidDescriptorError: If the string has any other shape
    """
    segments = source.split("/")
    if len(segments) not in (2, 3):
        raise InvalidDescriptorError(source)

    head = segments[0].split(":")
    if len(head) > 2:
        raise InvalidDescriptorError(source)

    server, owner = head if len(head) == 2 else (DEFAULT_SERVER, head[0])
    repo = segments[1]
    ref = segments[2] if len(segments) == 3 else ""

    if not server or not owner or not repo:
        raise InvalidDescriptorError(source)

    return RepoDescriptor(owner=owner, repo=repo, server=server, ref=ref)


__all__ = [
    "parse_descriptor",
]
