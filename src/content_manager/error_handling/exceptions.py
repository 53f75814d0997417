"""
Custom exceptions for the content manager.
"""

from typing import Optional, Dict, Any


class ContentManagerError(Exception):
    """
    Base exception for all content manager errors.

    Every failure the command surface reports to the operator is one of
    these; the message is what gets printed.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize content manager error.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            context: Additional context information
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None
        }

    def describe(self) -> str:
        """Long form with code, context and cause, for debug logging."""
        parts = [self.message]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"Context: {context_str}")

        if self.cause:
            parts.append(f"Caused by: {self.cause}")

        return " | ".join(parts)

    def __str__(self) -> str:
        return self.message


class ConfigurationError(ContentManagerError):
    """Raised for invalid or incomplete configuration (e.g. no token)."""

    def __init__(self, message: str, setting: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if setting:
            context['setting'] = setting

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'CONFIG')
        super().__init__(message, **kwargs)

        self.setting = setting


class LocalMissingError(ContentManagerError):
    """
    Exception for an expected local file or sidecar that does not exist.

    Raised before any remote call is made, so nothing is committed.
    """

    def __init__(self, message: str, local_path: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if local_path:
            context['local_path'] = local_path

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'LOCAL_MISSING')
        super().__init__(message, **kwargs)

        self.local_path = local_path


class MetadataError(ContentManagerError):
    """Raised when a sidecar metadata file exists but cannot be used."""

    def __init__(self, message: str, metadata_path: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if metadata_path:
            context['metadata_path'] = metadata_path

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'METADATA')
        super().__init__(message, **kwargs)

        self.metadata_path = metadata_path


class RemoteError(ContentManagerError):
    """
    Exception for failures reported by the remote repository.

    Args:
        message: Error message
        path: Repository path the operation targeted
        operation: Operation that failed (checkout, checkin, list, ...)
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs
    ):
        context = kwargs.get('context', {})
        if path is not None:
            context['path'] = path
        if operation:
            context['operation'] = operation

        kwargs['context'] = context
        super().__init__(message, **kwargs)

        self.path = path
        self.operation = operation


class NotFoundError(RemoteError):
    """The remote path does not exist on the requested branch."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('error_code', 'NOT_FOUND')
        super().__init__(message, **kwargs)


class NotAFileError(RemoteError):
    """The remote path resolves to a directory or another non-file entry."""

    def __init__(self, message: str, entry_type: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if entry_type:
            context['entry_type'] = entry_type

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'NOT_A_FILE')
        super().__init__(message, **kwargs)

        self.entry_type = entry_type


class EmptyContentError(RemoteError):
    """The file exists but the API returned no content for it."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault('error_code', 'EMPTY_CONTENT')
        super().__init__(message, **kwargs)


class StalePreconditionError(RemoteError):
    """
    The remote rejected a conditional write because the supplied SHA is no
    longer the file's current SHA.
    """

    def __init__(self, message: str, expected_sha: Optional[str] = None, **kwargs):
        context = kwargs.get('context', {})
        if expected_sha:
            context['expected_sha'] = expected_sha

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'STALE_PRECONDITION')
        super().__init__(message, **kwargs)

        self.expected_sha = expected_sha


class GitHubAPIError(RemoteError):
    """
    Any other GitHub API or transport failure, passed through unclassified.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Dict] = None,
        **kwargs
    ):
        context = kwargs.get('context', {})
        if status_code is not None:
            context['status_code'] = status_code

        kwargs['context'] = context
        kwargs.setdefault('error_code', 'GITHUB_API')
        super().__init__(message, **kwargs)

        self.status_code = status_code
        self.response_data = response_data
