"""External content store adapter.

This module drives the content store's command-line client to upload and
download raw bytes. The catalog never calls it; only the SDK and CLI do,
before or after a catalog operation.
"""

from __future__ import annotations

from pathlib import Path
import subprocess
from typing import Sequence

from core.errors import ShelfContentError
from core.logging_config import get_logger
from core.types import StoredContent

_LOGGER = get_logger(__name__)

_BLOB_ID_PREFIX = "Blob ID:"
_END_EPOCH_PREFIX = "End epoch:"


class ContentStoreClient:
    """Thin wrapper over the content store command-line client."""

    def __init__(self, executable: str) -> None:
        self._executable = executable

    def store_file(self, file_path: Path) -> StoredContent:
        """Upload a local file.

        Args:
            file_path: File to upload.

        Returns:
            Content pointer of the stored blob.

        Raises:
            ShelfContentError: If the upload fails or its output lacks the
                blob id or end epoch.
        """
        try:
            size = file_path.stat().st_size
        except OSError as error:
            raise ShelfContentError(f"Cannot read upload source {file_path}: {error}.") from error
        output = self._run(["store", str(file_path)])
        content_id = _parse_field(output, _BLOB_ID_PREFIX)
        if not content_id:
            raise ShelfContentError(
                f"Content store output for {file_path} has no blob id. "
                "Check the content store client version."
            )
        end_epoch = _parse_epoch(output)
        if end_epoch is None:
            end_epoch = self.blob_status(content_id)
        _LOGGER.info("content_stored", content_id=content_id, epoch_till=end_epoch, size=size)
        return StoredContent(content_id=content_id, epoch_till=end_epoch, size=size)

    def blob_status(self, content_id: str) -> int:
        """Return the end epoch of a stored blob.

        Raises:
            ShelfContentError: If the status call fails or reports no epoch.
        """
        output = self._run(["blob-status", "--blob-id", content_id])
        end_epoch = _parse_epoch(output)
        if end_epoch is None:
            raise ShelfContentError(f"End epoch not found in status of blob '{content_id}'.")
        return end_epoch

    def read_blob(self, content_id: str, destination: Path) -> Path:
        """Download a blob into ``destination``.

        Raises:
            ShelfContentError: If the download fails.
        """
        self._run(["read", content_id, "--out", str(destination)])
        _LOGGER.info("content_read", content_id=content_id, destination=str(destination))
        return destination

    def _run(self, arguments: Sequence[str]) -> str:
        """Run one client command and return its stdout."""
        command = [self._executable, *arguments]
        try:
            completed = subprocess.run(command, capture_output=True, text=True, check=False)
        except OSError as error:
            raise ShelfContentError(
                f"Cannot run content store client '{self._executable}': {error}. "
                "Install it or set BLOBSHELF_CONTENT_CLI."
            ) from error
        if completed.returncode != 0:
            raise ShelfContentError(
                f"Content store command '{' '.join(command)}' failed: "
                f"{completed.stderr.strip() or completed.returncode}"
            )
        return completed.stdout


def _parse_field(output: str, prefix: str) -> str:
    """Return the trimmed value of the last ``prefix`` line, or ''."""
    value = ""
    for line in output.splitlines():
        stripped = line.strip()
        if stripped.startswith(prefix):
            value = stripped[len(prefix):].strip()
    return value


def _parse_epoch(output: str) -> int | None:
    """Return a positive end epoch from client output, if present."""
    raw_value = _parse_field(output, _END_EPOCH_PREFIX)
    if not raw_value:
        return None
    try:
        epoch = int(raw_value)
    except ValueError as error:
        raise ShelfContentError(f"Invalid end epoch '{raw_value}' in content store output.") from error
    return epoch if epoch > 0 else None
