"""
Log handlers for the content manager.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, TextIO


class RotatingFileHandler(logging.handlers.RotatingFileHandler):
    """
    Size-rotating file handler that creates its directory on demand.
    """

    def __init__(
        self,
        filename: str,
        mode: str = 'a',
        maxBytes: int = 0,
        backupCount: int = 0,
        encoding: Optional[str] = None,
        delay: bool = False,
        errors: Optional[str] = None
    ):
        """
        Initialize rotating file handler.

        Args:
            filename: Log file path
            mode: File open mode
            maxBytes: Maximum file size before rotation
            backupCount: Number of backup files to keep
            encoding: File encoding
            delay: Whether to delay file opening
            errors: Error handling strategy
        """
        log_path = Path(filename)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        super().__init__(filename, mode, maxBytes, backupCount, encoding, delay, errors)


class ConsoleHandler(logging.StreamHandler):
    """
    Console handler writing to stderr, so log lines never mix with the
    command output on stdout.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        """
        Initialize console handler.

        Args:
            stream: Output stream (defaults to sys.stderr)
        """
        if stream is None:
            stream = sys.stderr

        super().__init__(stream)

    def is_tty(self) -> bool:
        """True when the stream is an interactive terminal."""
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())
