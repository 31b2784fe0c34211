"""Python SDK for catalog operations.

This module exposes the catalog operations backed by the on-disk catalog.
Each call takes the catalog file lock, loads the catalog, runs one service
operation, persists any mutation and releases the lock, so separate
processes never observe a partially applied change.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from typing import Iterator, Sequence

from filelock import FileLock, Timeout

from catalog.catalog_io import load_catalog, save_catalog
from catalog.content_store import ContentStoreClient
from catalog.models import BlobRecord
from catalog.notifications import NotificationChannel
from catalog.service import CatalogService
from core.clock import Clock, wall_clock_ms
from core.config import ShelfConfig
from core.constants import CATALOG_FILE_NAME, CATALOG_LOCK_FILE_NAME, EVENTS_FILE_NAME
from core.errors import ShelfLockTimeoutError
from core.types import BucketInfo, ObjectInfo, StoredContent


class CatalogClient:
    """Primary SDK entry point for the persistent catalog."""

    def __init__(
        self,
        config: ShelfConfig | None = None,
        clock: Clock = wall_clock_ms,
        content_store: ContentStoreClient | None = None,
        channel: NotificationChannel | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            clock: Millisecond time source for catalog timestamps.
            content_store: Content store adapter for uploads and downloads.
            channel: Notification channel; defaults to the data-root event log.
        """
        self._config = config or ShelfConfig.from_env()
        self._clock = clock
        self._config.data_root.mkdir(parents=True, exist_ok=True)
        self._catalog_path = self._config.data_root / CATALOG_FILE_NAME
        self._lock = FileLock(str(self._config.data_root / CATALOG_LOCK_FILE_NAME))
        self._content_store = content_store or ContentStoreClient(self._config.content_cli)
        if channel is None:
            event_log = self._config.data_root / EVENTS_FILE_NAME
            channel = NotificationChannel(event_log if self._config.event_log_enabled else None)
        self._channel = channel

    @property
    def config(self) -> ShelfConfig:
        """Return the runtime configuration."""
        return self._config

    @property
    def channel(self) -> NotificationChannel:
        """Return the notification channel."""
        return self._channel

    @contextmanager
    def session(self) -> Iterator[CatalogService]:
        """Hold exclusive catalog access for the duration of the block.

        Yields:
            Service over the freshly loaded catalog; mutations are persisted
            before the lock is released.

        Raises:
            ShelfLockTimeoutError: If the lock is not acquired in time.
        """
        try:
            self._lock.acquire(timeout=self._config.lock_timeout)
        except Timeout as error:
            raise ShelfLockTimeoutError(
                f"Timed out after {self._config.lock_timeout}s waiting for {self._lock.lock_file}. "
                "Another process is using the catalog; retry or raise BLOBSHELF_LOCK_TIMEOUT."
            ) from error
        try:
            yield CatalogService(
                root=load_catalog(self._catalog_path),
                clock=self._clock,
                channel=self._channel,
                persister=lambda root: save_catalog(self._catalog_path, root),
            )
        finally:
            self._lock.release()

    def set_epoch(self, epoch: int) -> None:
        """Record the current content store epoch."""
        with self.session() as service:
            service.set_epoch(epoch)

    def current_epoch(self) -> int:
        """Return the last recorded epoch."""
        with self.session() as service:
            return service.current_epoch

    def list_buckets(self) -> list[BucketInfo]:
        """List buckets in creation order."""
        with self.session() as service:
            return service.list_buckets()

    def create_bucket(self, name: str, tags: Sequence[str] = ()) -> None:
        """Create a bucket."""
        with self.session() as service:
            service.create_bucket(name, tags)

    def delete_bucket(self, name: str) -> None:
        """Delete a bucket and all of its objects."""
        with self.session() as service:
            service.delete_bucket(name)

    def tag_bucket(self, name: str, tags: Sequence[str]) -> None:
        """Replace a bucket's tags."""
        with self.session() as service:
            service.tag_bucket(name, tags)

    def get_bucket_tags(self, name: str) -> list[str]:
        """Return a bucket's tags."""
        with self.session() as service:
            return service.get_bucket_tags(name)

    def delete_bucket_tags(self, name: str) -> None:
        """Clear a bucket's tags."""
        with self.session() as service:
            service.delete_bucket_tags(name)

    def create_object(
        self,
        bucket: str,
        object_name: str,
        size: int,
        content_id: str,
        epoch_till: int,
        tags: Sequence[str] = (),
    ) -> None:
        """Write (or overwrite) an object record."""
        with self.session() as service:
            service.create_object(bucket, object_name, size, content_id, epoch_till, tags)

    def get_object(self, bucket: str, object_name: str) -> BlobRecord:
        """Return a copy of an object record."""
        with self.session() as service:
            return service.get_object(bucket, object_name)

    def delete_object(self, bucket: str, object_name: str) -> None:
        """Delete an object record."""
        with self.session() as service:
            service.delete_object(bucket, object_name)

    def tag_object(self, bucket: str, object_name: str, tags: Sequence[str]) -> None:
        """Replace an object's tags."""
        with self.session() as service:
            service.tag_object(bucket, object_name, tags)

    def get_object_tags(self, bucket: str, object_name: str) -> list[str]:
        """Return an object's tags."""
        with self.session() as service:
            return service.get_object_tags(bucket, object_name)

    def delete_object_tags(self, bucket: str, object_name: str) -> None:
        """Clear an object's tags."""
        with self.session() as service:
            service.delete_object_tags(bucket, object_name)

    def list_bucket_objects(self, bucket: str) -> list[ObjectInfo]:
        """Describe every object of a bucket in write order."""
        with self.session() as service:
            return service.list_bucket_objects(bucket)

    def put_object(
        self,
        bucket: str,
        object_name: str,
        file_path: str | Path,
        tags: Sequence[str] = (),
    ) -> StoredContent:
        """Upload a file to the content store and record it in the catalog.

        The bucket is checked before uploading so a missing bucket costs no
        upload; the record itself is written in a separate locked call.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
            ShelfContentError: If the upload fails.
        """
        with self.session() as service:
            service.require_bucket(bucket)
        stored = self._content_store.store_file(Path(file_path))
        self.create_object(
            bucket,
            object_name,
            size=stored.size,
            content_id=stored.content_id,
            epoch_till=stored.epoch_till,
            tags=tags,
        )
        return stored

    def fetch_object(self, bucket: str, object_name: str, destination: str | Path) -> Path:
        """Download an object's content into ``destination``.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
            NoSuchObjectError: If the object does not exist.
            ShelfContentError: If the download fails.
        """
        record = self.get_object(bucket, object_name)
        return self._content_store.read_blob(record.content_id, Path(destination))

    def with_data_root(self, data_root: str) -> "CatalogClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        updated_config = replace(self._config, data_root=resolved_root)
        return CatalogClient(updated_config, clock=self._clock, content_store=self._content_store)
