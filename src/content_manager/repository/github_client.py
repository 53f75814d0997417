"""
GitHub contents API client.
"""

import base64
import binascii
import json
import logging
from typing import Dict, Any, Optional, List
from urllib.parse import quote

import requests

from ..config import GitHubConfig
from ..error_handling import (
    NotFoundError, NotAFileError, EmptyContentError,
    StalePreconditionError, GitHubAPIError
)
from ..models import FileContent, CommitResult, RepoInfo
from .base import ContentRepository

logger = logging.getLogger(__name__)


class GitHubClient(ContentRepository):
    """
    ContentRepository backed by the GitHub REST API.

    Every call is a single request: failures are classified and raised,
    never retried.
    """

    def __init__(self, config: GitHubConfig, session: Optional[requests.Session] = None):
        """
        Initialize GitHub API client.

        Args:
            config: GitHub settings (token, owner, repo, API URL, timeout)
            session: Session to send requests through; one is created if omitted
        """
        self.owner = config.owner
        self.repo = config.repo
        self.access_token = config.access_token
        self.base_url = config.api_base_url
        self.timeout = config.timeout
        self.user_agent = config.user_agent

        self.session = session or requests.Session()
        self._setup_session()

    def _setup_session(self) -> None:
        """Set up the requests session with headers and authentication."""
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": self.user_agent
        }

        if self.access_token:
            headers["Authorization"] = f"token {self.access_token}"

        self.session.headers.update(headers)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def _contents_endpoint(self, path: str) -> str:
        quoted = quote(path.strip("/"), safe="/")
        return f"/repos/{self.owner}/{self.repo}/contents/{quoted}"

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Send one request to the GitHub API.

        Args:
            method: HTTP method (GET, PUT, ...)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object for a 2xx status

        Raises:
            GitHubAPIError: On a transport failure or any non-2xx status
        """
        url = f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(method=method, url=url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise GitHubAPIError(f"Request to GitHub failed: {e}", cause=e) from e

        if not response.ok:
            error_data = None
            try:
                error_data = response.json()
            except (json.JSONDecodeError, ValueError):
                pass

            error_message = f"GitHub API request failed: {response.status_code}"
            if isinstance(error_data, dict) and error_data.get("message"):
                error_message += f" - {error_data['message']}"

            raise GitHubAPIError(
                error_message,
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def checkout(self, path: str, branch: str = "main") -> FileContent:
        """
        Fetch a file and its blob SHA.

        Args:
            path: File path within the repository
            branch: Branch to read from

        Returns:
            Decoded file snapshot

        Raises:
            NotFoundError: If the path does not exist on the branch
            NotAFileError: If the path is a directory, symlink or submodule
            EmptyContentError: If the API returned no content
            GitHubAPIError: If the content is not UTF-8 text, or for any other failure
        """
        try:
            response = self._make_request("GET", self._contents_endpoint(path), params={"ref": branch})
        except GitHubAPIError as e:
            if e.status_code == 404:
                raise NotFoundError(f"File not found: {path}", path=path, operation="checkout", cause=e) from e
            raise

        data = response.json()

        if isinstance(data, list):
            raise NotAFileError(
                f'Path "{path}" is a directory, not a file',
                entry_type="dir", path=path, operation="checkout"
            )

        entry_type = data.get("type")
        if entry_type != "file":
            raise NotAFileError(
                f'Path "{path}" is not a file (type: {entry_type})',
                entry_type=entry_type, path=path, operation="checkout"
            )

        raw = data.get("content")
        if not raw:
            raise EmptyContentError(f'No content found for file "{path}"', path=path, operation="checkout")

        try:
            content = base64.b64decode(raw).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise GitHubAPIError(
                f'Content of "{path}" is not valid UTF-8 text: {e}',
                path=path, operation="checkout", cause=e
            ) from e

        logger.info(f"Checked out {self.full_name}:{data.get('path', path)}@{branch} ({data['sha']})")

        return FileContent(
            content=content,
            sha=data["sha"],
            path=data.get("path", path),
            encoding=data.get("encoding") or "base64"
        )

    def checkin(self, path: str, content: str, message: str, sha: str, branch: str = "main") -> CommitResult:
        """
        Commit new content for an existing file, conditioned on ``sha``.

        Raises:
            StalePreconditionError: If ``sha`` is empty or no longer the file's current SHA
            GitHubAPIError: For any other failure
        """
        if not sha:
            raise StalePreconditionError(
                f"No revision recorded for {path}; checkout again before checking in",
                expected_sha=sha, path=path, operation="checkin"
            )

        try:
            result = self._put_contents(path, content, message, branch, sha=sha)
        except GitHubAPIError as e:
            if self._is_stale_precondition(e):
                logger.warning(f"Checkin of {path} rejected: {sha} is not the current revision")
                raise StalePreconditionError(
                    f"Remote file {path} has changed since it was checked out (sha {sha} is stale); "
                    "checkout again and reapply your changes",
                    expected_sha=sha, path=path, operation="checkin", cause=e
                ) from e
            raise

        logger.info(f"Committed {self.full_name}:{path}@{branch} as {result.short_sha}")
        return result

    def create_file(self, path: str, content: str, message: str, branch: str = "main") -> CommitResult:
        """
        Create (or overwrite) a file without a precondition.

        Raises:
            GitHubAPIError: If the write fails
        """
        result = self._put_contents(path, content, message, branch)
        logger.info(f"Created {self.full_name}:{path}@{branch} as {result.short_sha}")
        return result

    def _put_contents(
        self,
        path: str,
        content: str,
        message: str,
        branch: str,
        sha: Optional[str] = None
    ) -> CommitResult:
        payload: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch
        }
        if sha is not None:
            payload["sha"] = sha

        response = self._make_request("PUT", self._contents_endpoint(path), json=payload)
        data = response.json()

        commit = data.get("commit") or {}
        content_info = data.get("content") or {}

        return CommitResult(
            sha=commit.get("sha") or "",
            url=commit.get("html_url") or "",
            message=commit.get("message") or message,
            content_sha=content_info.get("sha") or ""
        )

    def _is_stale_precondition(self, error: GitHubAPIError) -> bool:
        """
        GitHub answers 409 for a mismatched sha, and 422 when a sha is
        required or malformed.
        """
        if error.status_code == 409:
            return True
        if error.status_code == 422:
            detail = (error.response_data or {}).get("message", "") if isinstance(error.response_data, dict) else ""
            return "sha" in detail.lower()
        return False

    def list_files(self, path: str = "", branch: str = "main") -> List[str]:
        """
        List the files at a repository path.

        A path naming a single file yields that file's path; for a
        directory only entries of type ``file`` are returned.
        """
        response = self._make_request("GET", self._contents_endpoint(path), params={"ref": branch})
        data = response.json()

        if not isinstance(data, list):
            return [data.get("path", path)]

        files = [item["path"] for item in data if item.get("type") == "file"]
        logger.debug(f"Listed {len(files)} of {len(data)} entries in {self.full_name}:{path or '/'}")
        return files

    def get_repo_info(self) -> RepoInfo:
        """Fetch the repository's default branch."""
        response = self._make_request("GET", f"/repos/{self.owner}/{self.repo}")
        repo_data = response.json()

        return RepoInfo(
            owner=self.owner,
            repo=self.repo,
            default_branch=repo_data.get("default_branch", "main")
        )
