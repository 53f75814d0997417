"""
Data models for the content manager.
"""

from .file_content import FileContent, CommitResult, RepoInfo
from .metadata import SidecarMetadata, utc_timestamp

__all__ = [
    "FileContent",
    "CommitResult",
    "RepoInfo",
    "SidecarMetadata",
    "utc_timestamp"
]
