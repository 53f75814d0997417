"""
Local persistence of checked-out content and its sidecar metadata.
"""

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from ..error_handling import LocalMissingError, MetadataError
from ..models import SidecarMetadata

logger = logging.getLogger(__name__)

SIDECAR_SUFFIX = ".meta.json"

PathLike = Union[str, Path]


def sidecar_path(content_path: PathLike) -> Path:
    """``notes.md`` -> ``notes.md.meta.json``"""
    content_path = Path(content_path)
    return content_path.with_name(content_path.name + SIDECAR_SUFFIX)


class SidecarStore:
    """
    Reads and writes a content file and the ``.meta.json`` record beside it.

    Sidecar writes go through a temporary file in the same directory and
    ``os.replace``, so an interrupted write leaves the previous record intact.
    Nothing is locked: two processes updating the same sidecar race.
    """

    def write_content(self, content_path: PathLike, content: str) -> Path:
        """Write text content, creating parent directories as needed."""
        content_path = Path(content_path)
        content_path.parent.mkdir(parents=True, exist_ok=True)
        with open(content_path, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
        logger.debug(f"Wrote {len(content)} characters to {content_path}")
        return content_path

    def read_content(self, content_path: PathLike) -> str:
        """
        Read a local content file.

        Raises:
            LocalMissingError: If the file does not exist
        """
        content_path = Path(content_path)
        if not content_path.is_file():
            raise LocalMissingError(f"Local file not found: {content_path}", local_path=str(content_path))
        with open(content_path, 'r', encoding='utf-8', newline='') as f:
            return f.read()

    def load_metadata(self, content_path: PathLike) -> SidecarMetadata:
        """
        Load the sidecar for ``content_path``.

        Raises:
            LocalMissingError: If there is no sidecar (file never checked out)
            MetadataError: If the sidecar is not valid metadata
        """
        meta_path = sidecar_path(content_path)
        if not meta_path.is_file():
            raise LocalMissingError(
                f"Metadata file not found: {meta_path}\nDid you checkout this file first?",
                local_path=str(meta_path)
            )

        try:
            with open(meta_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise MetadataError(f"Metadata file {meta_path} must contain a JSON object",
                                    metadata_path=str(meta_path))
            return SidecarMetadata.from_dict(data)
        except json.JSONDecodeError as e:
            raise MetadataError(f"Metadata file {meta_path} is not valid JSON: {e}",
                                metadata_path=str(meta_path), cause=e) from e
        except KeyError as e:
            raise MetadataError(f"Metadata file {meta_path} is missing field {e}",
                                metadata_path=str(meta_path), cause=e) from e

    def save_metadata(self, content_path: PathLike, metadata: SidecarMetadata) -> Path:
        """Atomically write the sidecar for ``content_path``."""
        meta_path = sidecar_path(content_path)
        directory = meta_path.parent
        directory.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{meta_path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(metadata.to_json())
                f.write("\n")
            os.replace(tmp_name, meta_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.debug(f"Saved metadata for {metadata.path} to {meta_path}")
        return meta_path

    @contextmanager
    def metadata_session(self, content_path: PathLike) -> Iterator[SidecarMetadata]:
        """
        Load the sidecar, yield it for mutation, and persist it only if the
        block finishes without raising.
        """
        metadata = self.load_metadata(content_path)
        yield metadata
        self.save_metadata(content_path, metadata)
