"""
Data models for remote file snapshots and commit results.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FileContent:
    """
    A point-in-time snapshot of a remote file.

    ``sha`` is the blob SHA the remote reported when the file was read; it
    is the precondition for the next conditional write of this path.
    """

    content: str
    sha: str
    path: str
    encoding: str = "base64"


@dataclass(frozen=True)
class CommitResult:
    """
    Outcome of a create or update of a single file.

    Attributes:
        sha: SHA of the new commit
        url: HTML URL of the new commit
        message: Commit message as recorded by the remote
        content_sha: New blob SHA of the written file, empty if not reported
    """

    sha: str
    url: str
    message: str
    content_sha: str = ""

    @property
    def short_sha(self) -> str:
        """First seven characters of the commit SHA."""
        return self.sha[:7]

    @property
    def revision(self) -> str:
        """SHA to use as precondition for the next write of the same file."""
        return self.content_sha or self.sha


@dataclass(frozen=True)
class RepoInfo:
    """Repository identity and default branch."""

    owner: str
    repo: str
    default_branch: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
