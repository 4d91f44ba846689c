"""
REST transport for the GitHub git-data API.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..models import ClientConfig, RefKind, TreeEntry
from ..infrastructure.error_handler import NotFoundError, handle_api_error
from ..infrastructure.logger import logger


class GitHubAPIService:
    """
    Thin typed wrapper around the GitHub REST endpoints used for a sync.

    The HTTP client is injected so that callers control its lifecycle and
    tests can substitute a mock transport.
    """

    ACCEPT = "application/vnd.github.v3+json"

    def __init__(self, client: httpx.AsyncClient, config: Optional[ClientConfig] = None):
        self.client = client
        self.config = config or ClientConfig()

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Accept": self.ACCEPT,
            "User-Agent": self.config.user_agent,
        }

    @handle_api_error
    async def get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        Issue a GET request against the API and return the decoded body.

        Args:
            path: API path starting with ``/``
            params: Optional query parameters

        Returns:
            Parsed JSON payload
        """
        url = f"{self.config.api_url}{path}"
        logger.debug(f"GET {url} {params or ''}")
        response = await self.client.get(
            url,
            params=params,
            headers=self.headers,
            timeout=self.config.timeout
        )
        response.raise_for_status()
        return response.json()

    @handle_api_error
    async def get_ref(self, owner: str, repo: str, ref: str, kind: RefKind) -> str:
        """
        Look up a branch or tag and return the SHA it points at.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Branch or tag name
            kind: Namespace to look the ref up in

        Returns:
            Commit SHA of the ref
        """
        path = f"/repos/{quote(owner)}/{quote(repo)}/git/ref/{kind.value}/{quote(ref, safe='/')}"
        data = await self.get_json(path)

        # A list is returned when only prefix matches exist
        if not isinstance(data, dict) or "object" not in data:
            raise NotFoundError(f"Ref {kind.value}/{ref} not found in {owner}/{repo}")

        return data["object"]["sha"]

    @handle_api_error
    async def get_tree(
        self,
        owner: str,
        repo: str,
        sha: str,
        recursive: bool = True
    ) -> List[TreeEntry]:
        """
        Fetch the tree listing of a commit.

        Args:
            owner: Repository owner
            repo: Repository name
            sha: Commit or tree SHA
            recursive: Whether to list nested trees as well

        Returns:
            Every entry of the listing in API order
        """
        path = f"/repos/{quote(owner)}/{quote(repo)}/git/trees/{sha}"
        params = {"recursive": "true"} if recursive else None
        data = await self.get_json(path, params)

        if data.get("truncated"):
            logger.warning(
                f"Tree listing of {owner}/{repo}@{sha} was truncated by the API; "
                "some files will be missing"
            )

        return [TreeEntry.from_api(item) for item in data.get("tree", [])]


__all__ = [
    "GitHubAPIService",
]
