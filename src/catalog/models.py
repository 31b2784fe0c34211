"""Catalog data model.

The catalog is one aggregate: a root holding buckets, each bucket holding
object records. Buckets and records are owned by value inside their parent
mapping, so removing a bucket entry discards all of its records.

Both mappings are plain ``dict`` instances and rely on insertion order,
which is the order exposed by listings.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BlobRecord:
    """Metadata of one stored object.

    Attributes:
        size: Content length in bytes at last write.
        tags: Free-form labels in caller order, duplicates allowed.
        last_write_ts: Time of the last create/overwrite in milliseconds.
        content_id: Opaque identifier into the external content store.
        epoch_till: Content store expiry epoch, recorded verbatim.
    """

    size: int
    tags: list[str]
    last_write_ts: int
    content_id: str
    epoch_till: int

    def copy(self) -> "BlobRecord":
        """Return an independent copy of this record."""
        return BlobRecord(
            size=self.size,
            tags=list(self.tags),
            last_write_ts=self.last_write_ts,
            content_id=self.content_id,
            epoch_till=self.epoch_till,
        )


@dataclass
class BucketRegistry:
    """One bucket: creation time, bucket tags and its object records."""

    create_ts: int
    tags: list[str] = field(default_factory=list)
    children: dict[str, BlobRecord] = field(default_factory=dict)

    def put_child(self, name: str, record: BlobRecord) -> None:
        """Insert a record, replacing and re-ordering any existing entry.

        An overwritten name moves to the end of the listing order.
        """
        self.children.pop(name, None)
        self.children[name] = record


@dataclass
class CatalogRoot:
    """Whole namespace: current epoch and the bucket registry."""

    current_epoch: int = 0
    buckets: dict[str, BucketRegistry] = field(default_factory=dict)
