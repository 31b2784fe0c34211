"""Catalog operation surface.

This module implements every bucket and object operation against one
``CatalogRoot``. Each entry point holds the service lock for its whole
duration, checks existence before writing, and either completes or raises
a catalog fault with nothing changed.

Read and list operations return their result and also publish it on the
notification channel.
"""

from __future__ import annotations

import threading
from typing import Callable, NoReturn, Sequence

from catalog.models import BlobRecord, BucketRegistry, CatalogRoot
from catalog.notifications import NotificationChannel
from core.clock import Clock, wall_clock_ms
from core.errors import (
    BucketAlreadyExistsError,
    NoSuchBucketError,
    NoSuchObjectError,
    ShelfCatalogError,
)
from core.logging_config import get_logger
from core.types import BucketInfo, ObjectInfo

_LOGGER = get_logger(__name__)

Persister = Callable[[CatalogRoot], None]


class CatalogService:
    """Single-writer operation surface over one catalog root."""

    def __init__(
        self,
        root: CatalogRoot | None = None,
        clock: Clock = wall_clock_ms,
        channel: NotificationChannel | None = None,
        persister: Persister | None = None,
    ) -> None:
        """Create a service around a catalog root.

        Args:
            root: Catalog aggregate; a new empty root when omitted.
            clock: Millisecond time source read by timestamping operations.
            channel: Notification channel for read results.
            persister: Called with the root after every successful mutation.
        """
        self._root = root if root is not None else CatalogRoot()
        self._clock = clock
        self._channel = channel or NotificationChannel()
        self._persister = persister
        self._lock = threading.RLock()

    @property
    def root(self) -> CatalogRoot:
        """Return the underlying catalog root."""
        return self._root

    @property
    def channel(self) -> NotificationChannel:
        """Return the notification channel."""
        return self._channel

    @property
    def current_epoch(self) -> int:
        """Return the last epoch reported through ``set_epoch``."""
        with self._lock:
            return self._root.current_epoch

    def set_epoch(self, epoch: int) -> None:
        """Overwrite the informational current epoch."""
        with self._lock:
            self._root.current_epoch = epoch
            self._commit()
            _LOGGER.info("epoch_set", epoch=epoch)

    def list_buckets(self) -> list[BucketInfo]:
        """List buckets in insertion order and publish the listing."""
        with self._lock:
            buckets = [
                BucketInfo(name=name, create_ts=bucket.create_ts)
                for name, bucket in self._root.buckets.items()
            ]
            self._channel.publish(
                "BucketsList", {"buckets": [info.to_payload() for info in buckets]}
            )
            return buckets

    def create_bucket(self, name: str, tags: Sequence[str] = ()) -> None:
        """Create an empty bucket stamped with the current clock value.

        Raises:
            BucketAlreadyExistsError: If the name is already in use.
        """
        with self._lock:
            if name in self._root.buckets:
                _fault(
                    BucketAlreadyExistsError(
                        f"Bucket '{name}' already exists. Choose another bucket name "
                        "or delete the existing bucket first."
                    ),
                    bucket=name,
                )
            create_ts = self._clock()
            self._root.buckets[name] = BucketRegistry(create_ts=create_ts, tags=list(tags))
            self._commit()
            _LOGGER.info("bucket_created", bucket=name, create_ts=create_ts)

    def delete_bucket(self, name: str) -> None:
        """Delete a bucket together with all of its objects.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
        """
        with self._lock:
            object_count = len(self._bucket(name).children)
            del self._root.buckets[name]
            self._commit()
            _LOGGER.info("bucket_deleted", bucket=name, object_count=object_count)

    def tag_bucket(self, name: str, tags: Sequence[str]) -> None:
        """Replace the bucket's whole tag list.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
        """
        with self._lock:
            self._bucket(name).tags = list(tags)
            self._commit()
            _LOGGER.info("bucket_tagged", bucket=name, tag_count=len(tags))

    def get_bucket_tags(self, name: str) -> list[str]:
        """Return the bucket's tags and publish them.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
        """
        with self._lock:
            tags = list(self._bucket(name).tags)
            self._channel.publish("TagsList", {"tags": list(tags)})
            return tags

    def delete_bucket_tags(self, name: str) -> None:
        """Clear the bucket's tags.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
        """
        self.tag_bucket(name, [])

    def create_object(
        self,
        bucket: str,
        object_name: str,
        size: int,
        content_id: str,
        epoch_till: int,
        tags: Sequence[str] = (),
    ) -> None:
        """Write an object record, replacing any record under the same name.

        The write is an upsert: an existing record is removed and the new one
        appended to the end of the bucket's order.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
        """
        with self._lock:
            registry = self._bucket(bucket)
            replaced = object_name in registry.children
            record = BlobRecord(
                size=size,
                tags=list(tags),
                last_write_ts=self._clock(),
                content_id=content_id,
                epoch_till=epoch_till,
            )
            registry.put_child(object_name, record)
            self._commit()
            _LOGGER.info(
                "object_written",
                bucket=bucket,
                object=object_name,
                size=size,
                content_id=content_id,
                replaced=replaced,
            )

    def get_object(self, bucket: str, object_name: str) -> BlobRecord:
        """Return a copy of an object record and publish it.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
            NoSuchObjectError: If the object does not exist.
        """
        with self._lock:
            record = self._object(bucket, object_name).copy()
            self._channel.publish(
                "BlobMeta",
                {
                    "size": record.size,
                    "tags": list(record.tags),
                    "last_write_ts": record.last_write_ts,
                    "content_id": record.content_id,
                    "epoch_till": record.epoch_till,
                },
            )
            return record

    def delete_object(self, bucket: str, object_name: str) -> None:
        """Remove an object record.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
            NoSuchObjectError: If the object does not exist.
        """
        with self._lock:
            self._object(bucket, object_name)
            del self._root.buckets[bucket].children[object_name]
            self._commit()
            _LOGGER.info("object_deleted", bucket=bucket, object=object_name)

    def tag_object(self, bucket: str, object_name: str, tags: Sequence[str]) -> None:
        """Replace an object's whole tag list.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
            NoSuchObjectError: If the object does not exist.
        """
        with self._lock:
            self._object(bucket, object_name).tags = list(tags)
            self._commit()
            _LOGGER.info("object_tagged", bucket=bucket, object=object_name, tag_count=len(tags))

    def get_object_tags(self, bucket: str, object_name: str) -> list[str]:
        """Return an object's tags and publish them.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
            NoSuchObjectError: If the object does not exist.
        """
        with self._lock:
            tags = list(self._object(bucket, object_name).tags)
            self._channel.publish("TagsList", {"tags": list(tags)})
            return tags

    def delete_object_tags(self, bucket: str, object_name: str) -> None:
        """Clear an object's tags.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
            NoSuchObjectError: If the object does not exist.
        """
        self.tag_object(bucket, object_name, [])

    def list_bucket_objects(self, bucket: str) -> list[ObjectInfo]:
        """Describe every object of a bucket in insertion order and publish it.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
        """
        with self._lock:
            objects = [
                ObjectInfo(
                    uri=name,
                    size=record.size,
                    tags=tuple(record.tags),
                    last_write_ts=record.last_write_ts,
                    content_id=record.content_id,
                    epoch_till=record.epoch_till,
                )
                for name, record in self._bucket(bucket).children.items()
            ]
            self._channel.publish(
                "BucketObjectsList", {"objects": [info.to_payload() for info in objects]}
            )
            return objects

    def require_bucket(self, name: str) -> None:
        """Check that a bucket exists without publishing anything.

        Raises:
            NoSuchBucketError: If the bucket does not exist.
        """
        with self._lock:
            self._bucket(name)

    def _bucket(self, name: str) -> BucketRegistry:
        """Look up a bucket or raise ``NoSuchBucketError``."""
        registry = self._root.buckets.get(name)
        if registry is None:
            _fault(
                NoSuchBucketError(
                    f"Bucket '{name}' does not exist. Create it with create_bucket "
                    "or list buckets to find the right name."
                ),
                bucket=name,
            )
        return registry

    def _object(self, bucket: str, object_name: str) -> BlobRecord:
        """Look up an object record or raise the matching fault."""
        record = self._bucket(bucket).children.get(object_name)
        if record is None:
            _fault(
                NoSuchObjectError(
                    f"Object '{object_name}' does not exist in bucket '{bucket}'. "
                    "List the bucket to find the right object name."
                ),
                bucket=bucket,
                object=object_name,
            )
        return record

    def _commit(self) -> None:
        """Hand the mutated root to the persister, if any."""
        if self._persister is not None:
            self._persister(self._root)


def _fault(error: ShelfCatalogError, **fields: object) -> NoReturn:
    """Log a catalog fault and raise it."""
    _LOGGER.warning("catalog_fault", code=error.code, **fields)
    raise error
