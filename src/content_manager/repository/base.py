"""
Abstract interface for a remote content repository.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import FileContent, CommitResult, RepoInfo


class ContentRepository(ABC):
    """
    The five remote operations the command surface depends on.

    Implementations raise the exceptions from ``error_handling``:
    ``NotFoundError``, ``NotAFileError``, ``EmptyContentError`` on reads,
    ``StalePreconditionError`` when a conditional write loses, and
    ``GitHubAPIError`` for everything else. None of them retry.
    """

    @abstractmethod
    def checkout(self, path: str, branch: str) -> FileContent:
        """Fetch the file at ``path`` on ``branch`` with its current SHA."""
        pass

    @abstractmethod
    def checkin(self, path: str, content: str, message: str, sha: str, branch: str) -> CommitResult:
        """Write ``content`` only if the file's current SHA is still ``sha``."""
        pass

    @abstractmethod
    def create_file(self, path: str, content: str, message: str, branch: str) -> CommitResult:
        """Write ``content`` with no precondition."""
        pass

    @abstractmethod
    def list_files(self, path: str, branch: str) -> List[str]:
        """Paths of the files (not directories) at ``path``."""
        pass

    @abstractmethod
    def get_repo_info(self) -> RepoInfo:
        """Owner, name and default branch of the repository."""
        pass
