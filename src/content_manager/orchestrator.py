"""
Command operations: checkout, checkin, create, update, list and info.
"""

import logging
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Callable, List, Optional, Union

from .models import FileContent, CommitResult, RepoInfo, SidecarMetadata
from .repository import ContentRepository, SidecarStore, sidecar_path
from .transforms import TransformResult, apply_transforms

logger = logging.getLogger(__name__)

Reporter = Callable[[str], None]


@dataclass
class CheckoutOutcome:
    file: FileContent
    branch: str
    content_path: Path
    metadata_path: Path


@dataclass
class CheckinOutcome:
    metadata: SidecarMetadata
    commit: CommitResult
    branch: str


@dataclass
class UpdateOutcome:
    """``commit`` is None when no transform changed the content."""
    path: str
    branch: str
    transform: TransformResult
    commit: Optional[CommitResult] = None


def _silent(_message: str) -> None:
    pass


class ContentManager:
    """
    Runs one command against a ContentRepository.

    Each operation is independent; the only state held is the repository,
    the local store and the fallback branch. Progress lines go to
    ``reporter`` as the work happens.
    """

    def __init__(
        self,
        repository: ContentRepository,
        default_branch: str = "main",
        store: Optional[SidecarStore] = None,
        reporter: Optional[Reporter] = None
    ):
        """
        Initialize the content manager.

        Args:
            repository: Remote repository to operate on
            default_branch: Branch used when neither a flag nor a sidecar names one
            store: Local content/sidecar store
            reporter: Callable receiving human-readable progress lines
        """
        self.repository = repository
        self.default_branch = default_branch
        self.store = store or SidecarStore()
        self.report = reporter or _silent

    def checkout(
        self,
        file: str,
        branch: Optional[str] = None,
        output: Optional[Union[str, Path]] = None
    ) -> CheckoutOutcome:
        """
        Fetch ``file`` and save it locally with a fresh sidecar.

        The local path is ``output`` or the remote file's base name.
        """
        branch = branch or self.default_branch

        self.report(f"Checking out: {file}")
        file_content = self.repository.checkout(file, branch)

        content_path = Path(output) if output else Path(PurePosixPath(file_content.path).name)
        self.store.write_content(content_path, file_content.content)

        metadata = SidecarMetadata.from_checkout(file_content, branch)
        metadata_path = self.store.save_metadata(content_path, metadata)

        logger.info(f"Saved {file_content.path}@{branch} to {content_path}")
        return CheckoutOutcome(
            file=file_content,
            branch=branch,
            content_path=content_path,
            metadata_path=metadata_path
        )

    def checkin(
        self,
        file: Union[str, Path],
        message: str = "Update content",
        branch: Optional[str] = None
    ) -> CheckinOutcome:
        """
        Commit a previously checked-out file, conditioned on its sidecar SHA.

        Both the local file and its sidecar must exist; otherwise
        ``LocalMissingError`` is raised before anything is sent. The
        sidecar is advanced only after the remote accepts the commit.
        """
        content = self.store.read_content(file)

        with self.store.metadata_session(file) as metadata:
            target_branch = branch or metadata.branch or self.default_branch

            self.report(f"Checking in: {metadata.path}")
            result = self.repository.checkin(metadata.path, content, message, metadata.sha, target_branch)

            metadata.record_commit(result, target_branch)

        logger.info(f"Sidecar {sidecar_path(file)} now at {metadata.sha}")
        return CheckinOutcome(metadata=metadata, commit=result, branch=target_branch)

    def create(
        self,
        file: Union[str, Path],
        remote_path: Optional[str] = None,
        message: str = "Create content",
        branch: Optional[str] = None
    ) -> CheckinOutcome:
        """
        Upload a local file with no precondition and record a sidecar so it
        can be checked in later. The remote path defaults to the file name.
        """
        content = self.store.read_content(file)
        branch = branch or self.default_branch
        remote_path = remote_path or Path(file).name

        self.report(f"Creating: {remote_path}")
        result = self.repository.create_file(remote_path, content, message, branch)

        metadata = SidecarMetadata(path=remote_path, sha=result.revision, branch=branch)
        metadata.record_commit(result)
        self.store.save_metadata(file, metadata)

        return CheckinOutcome(metadata=metadata, commit=result, branch=branch)

    def update(
        self,
        file: str,
        branch: Optional[str] = None,
        message: str = "Update content",
        find: Optional[str] = None,
        replace: Optional[str] = None,
        append: Optional[str] = None,
        prepend: Optional[str] = None
    ) -> UpdateOutcome:
        """
        Checkout, transform and checkin in one go, entirely in memory.

        Nothing is written locally. If no transform changed the content the
        checkin is skipped.
        """
        branch = branch or self.default_branch

        self.report(f"Checking out: {file}")
        file_content = self.repository.checkout(file, branch)

        transform = apply_transforms(
            file_content.content, find=find, replace=replace, append=append, prepend=prepend
        )
        for change in transform.changes:
            self.report(f"✓ {change}")
        for warning in transform.warnings:
            self.report(f"⚠ {warning}")

        outcome = UpdateOutcome(path=file_content.path, branch=branch, transform=transform)
        if not transform.modified:
            logger.info(f"No modifications to {file}; skipping checkin")
            return outcome

        self.report(f"Checking in: {file}")
        outcome.commit = self.repository.checkin(
            file_content.path, transform.content, message, file_content.sha, branch
        )
        return outcome

    def list(self, directory: str = "", branch: Optional[str] = None) -> List[str]:
        """Paths of the files in ``directory`` (repository root by default)."""
        return self.repository.list_files(directory, branch or self.default_branch)

    def info(self) -> RepoInfo:
        return self.repository.get_repo_info()
