import hashlib
from typing import Dict, List, Optional, Tuple

import pytest

from content_manager.config import GitHubConfig
from content_manager.error_handling import (
    NotFoundError, NotAFileError, StalePreconditionError, GitHubAPIError
)
from content_manager.models import FileContent, CommitResult, RepoInfo
from content_manager.repository import ContentRepository


class FakeRepository(ContentRepository):
    """
    In-memory ContentRepository.

    Files live in ``files[(branch, path)] = (content, sha)``. Every write
    produces a new blob SHA and a new commit SHA, so the revision always
    advances. ``fail_next`` makes the next call raise the given error.
    """

    def __init__(self, owner: str = "octo", repo: str = "site", default_branch: str = "main"):
        self.owner = owner
        self.repo = repo
        self.default_branch = default_branch
        self.files: Dict[Tuple[str, str], Tuple[str, str]] = {}
        self.calls: List[Tuple] = []
        self.fail_next: Optional[Exception] = None
        self._commits = 0

    def seed(self, path: str, content: str, branch: str = "main") -> str:
        sha = self._blob_sha(path, content)
        self.files[(branch, path)] = (content, sha)
        return sha

    def _blob_sha(self, path: str, content: str) -> str:
        self._commits += 1
        return hashlib.sha1(f"{path}:{content}:{self._commits}".encode()).hexdigest()

    def _maybe_fail(self) -> None:
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error

    def _write(self, path: str, content: str, message: str, branch: str) -> CommitResult:
        blob_sha = self._blob_sha(path, content)
        self.files[(branch, path)] = (content, blob_sha)
        commit_sha = hashlib.sha1(f"commit:{blob_sha}".encode()).hexdigest()
        return CommitResult(
            sha=commit_sha,
            url=f"https://github.com/{self.owner}/{self.repo}/commit/{commit_sha}",
            message=message,
            content_sha=blob_sha
        )

    def checkout(self, path: str, branch: str) -> FileContent:
        self.calls.append(("checkout", path, branch))
        self._maybe_fail()
        if (branch, path) not in self.files:
            prefix = path.rstrip("/") + "/"
            if any(b == branch and p.startswith(prefix) for b, p in self.files):
                raise NotAFileError(f'Path "{path}" is a directory, not a file', path=path)
            raise NotFoundError(f"File not found: {path}", path=path)
        content, sha = self.files[(branch, path)]
        return FileContent(content=content, sha=sha, path=path)

    def checkin(self, path: str, content: str, message: str, sha: str, branch: str) -> CommitResult:
        self.calls.append(("checkin", path, branch, sha))
        self._maybe_fail()
        current = self.files.get((branch, path))
        if current is None or current[1] != sha:
            raise StalePreconditionError(f"{path} does not match {sha}", expected_sha=sha, path=path)
        return self._write(path, content, message, branch)

    def create_file(self, path: str, content: str, message: str, branch: str) -> CommitResult:
        self.calls.append(("create_file", path, branch))
        self._maybe_fail()
        return self._write(path, content, message, branch)

    def list_files(self, path: str, branch: str) -> List[str]:
        self.calls.append(("list_files", path, branch))
        self._maybe_fail()
        if (branch, path) in self.files:
            return [path]
        prefix = path.rstrip("/") + "/" if path else ""
        return sorted(
            p for b, p in self.files
            if b == branch and p.startswith(prefix) and "/" not in p[len(prefix):]
        )

    def get_repo_info(self) -> RepoInfo:
        self.calls.append(("get_repo_info",))
        self._maybe_fail()
        return RepoInfo(owner=self.owner, repo=self.repo, default_branch=self.default_branch)


@pytest.fixture
def fake_repo():
    return FakeRepository()


@pytest.fixture
def github_config():
    return GitHubConfig(
        access_token="ghp_test",
        owner="octo",
        repo="site",
        api_base_url="https://api.example.test",
        timeout=5
    )


@pytest.fixture
def unclassified_error():
    return GitHubAPIError("GitHub API request failed: 500 - Server Error", status_code=500)
