"""
Sidecar metadata model recording where a local file came from.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from .file_content import FileContent, CommitResult


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2024-05-01T12:00:00.000Z``."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class SidecarMetadata:
    """
    Provenance of a checked-out file, stored next to it as JSON.

    The ``sha`` field is always the revision of the last fetch or successful
    commit of ``path``; checkin sends it as the precondition.
    """

    path: str
    sha: str
    branch: str
    checked_out_at: str = field(default_factory=utc_timestamp)
    last_commit: Optional[str] = None
    last_updated_at: Optional[str] = None
    last_commit_sha: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    # attribute -> JSON key
    FIELD_NAMES = {
        "path": "path",
        "sha": "sha",
        "branch": "branch",
        "checked_out_at": "checkedOutAt",
        "last_commit": "lastCommit",
        "last_updated_at": "lastUpdatedAt",
        "last_commit_sha": "lastCommitSha",
    }

    @classmethod
    def from_checkout(cls, file_content: FileContent, branch: str) -> "SidecarMetadata":
        """Fresh record for a file just fetched from ``branch``."""
        return cls(path=file_content.path, sha=file_content.sha, branch=branch)

    def record_commit(self, result: CommitResult, branch: Optional[str] = None) -> None:
        """Advance the record to the revision produced by ``result``."""
        self.sha = result.revision
        self.last_commit = result.url
        self.last_commit_sha = result.sha
        self.last_updated_at = utc_timestamp()
        if branch:
            self.branch = branch

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the on-disk JSON shape. Optional fields are omitted until
        set; unknown keys read from disk are written back unchanged.
        """
        data = dict(self.extra)
        for attr, key in self.FIELD_NAMES.items():
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SidecarMetadata":
        """
        Create from the on-disk JSON shape.

        Raises:
            KeyError: If ``path`` or ``sha`` is missing or empty
        """
        if not data["sha"]:
            raise KeyError("sha")
        known = set(cls.FIELD_NAMES.values())
        return cls(
            path=data["path"],
            sha=data["sha"],
            branch=data.get("branch") or "",
            checked_out_at=data.get("checkedOutAt") or utc_timestamp(),
            last_commit=data.get("lastCommit"),
            last_updated_at=data.get("lastUpdatedAt"),
            last_commit_sha=data.get("lastCommitSha"),
            extra={k: v for k, v in data.items() if k not in known}
        )
