"""
Cross-cutting infrastructure: logging and error handling.
"""

from .logger import logger
from .error_handler import (
    TreepickError,
    InvalidDescriptorError,
    RefResolutionError,
    TreeFetchError,
    DownloadBatchError,
    ApiError,
    NotFoundError,
    RateLimitError,
    handle_api_error,
)

__all__ = [
    "logger",
    "TreepickError",
    "InvalidDescriptorError",
    "RefResolutionError",
    "TreeFetchError",
    "DownloadBatchError",
    "ApiError",
    "NotFoundError",
    "RateLimitError",
    "handle_api_error",
]
