"""
Error types for the content manager.
"""

from .exceptions import (
    ContentManagerError, ConfigurationError, LocalMissingError, MetadataError,
    RemoteError, NotFoundError, NotAFileError, EmptyContentError,
    StalePreconditionError, GitHubAPIError
)

__all__ = [
    "ContentManagerError",
    "ConfigurationError",
    "LocalMissingError",
    "MetadataError",
    "RemoteError",
    "NotFoundError",
    "NotAFileError",
    "EmptyContentError",
    "StalePreconditionError",
    "GitHubAPIError"
]
