"""
Remote repository access and local checkout persistence.
"""

from .base import ContentRepository
from .github_client import GitHubClient
from .sidecar import SidecarStore, sidecar_path

__all__ = [
    "ContentRepository",
    "GitHubClient",
    "SidecarStore",
    "sidecar_path"
]
