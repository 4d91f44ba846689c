"""
Exception hierarchy and API error translation for treepick.
"""

import functools
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import httpx

from .logger import logger


T = TypeVar("T")


####
##      BASE ERROR
#####
class TreepickError(Exception):
    """Base exception for every failure reported by treepick."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message} (Original: {self.original_error})"
        return self.message


####
##      PHASE ERRORS
#####
class InvalidDescriptorError(TreepickError):
    """Raised when a repository descriptor string is malformed."""

    EXPECTED_FORMAT = "[{server}:]{owner}/{repo-name}[/{ref}]"

    def __init__(self, source: str):
        self.source = source
        super().__init__(
            f"Invalid repository {source!r}, expected format: {self.EXPECTED_FORMAT}"
        )


class RefResolutionError(TreepickError):
    """Raised when a branch or tag cannot be resolved to a commit."""


class TreeFetchError(TreepickError):
    """Raised when the tree listing of a commit cannot be retrieved."""


class DownloadBatchError(TreepickError):
    """Aggregate of every file that failed within one download batch."""

    def __init__(self, failures: Dict[str, str]):
        self.failures = dict(failures)
        super().__init__(
            f"Failed to download {len(self.failures)} file(s): "
            + ", ".join(sorted(self.failures))
        )


####
##      API ERRORS
#####
class ApiError(TreepickError):
    """Raised when the GitHub API or raw-content host request fails."""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message, original_error)
        self.status_code = status_code


class NotFoundError(ApiError):
    """Raised when the requested repository, ref or file does not exist."""


class RateLimitError(ApiError):
    """Raised when the GitHub API rate limit is exhausted."""


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    return (
        response.status_code == 403
        and response.headers.get("x-ratelimit-remaining") == "0"
    )


def translate_error(error: Exception) -> TreepickError:
    """Map an exception raised by httpx onto the treepick hierarchy."""

    if isinstance(error, TreepickError):
        return error

    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        status = response.status_code
        url = error.request.url
        if status == 404:
            return NotFoundError(f"Not found: {url}", error, status)
        if _is_rate_limited(response):
            return RateLimitError(f"Rate limit exceeded: {url}", error, status)
        return ApiError(f"HTTP {status} for {url}", error, status)

    if isinstance(error, httpx.RequestError):
        return ApiError(f"Request failed: {error.request.url}", error)

    if isinstance(error, ValueError):
        return ApiError("Invalid response payload", error)

    return ApiError(f"Unexpected error: {error}", error)


def handle_api_error(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Decorator translating httpx failures of a coroutine into ApiError subclasses.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await func(*args, **kwargs)
        except TreepickError:
            raise
        except Exception as e:
            error = translate_error(e)
            logger.debug(f"{func.__name__} failed: {error}")
            raise error from e

    return wrapper


__all__ = [
    "TreepickError",
    "InvalidDescriptorError",
    "RefResolutionError",
    "TreeFetchError",
    "DownloadBatchError",
    "ApiError",
    "NotFoundError",
    "RateLimitError",
    "translate_error",
    "handle_api_error",
]
