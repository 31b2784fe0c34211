"""Shared typed result models.

This module defines immutable result models returned by catalog queries
and content store uploads, keeping interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class BucketInfo:
    """One row of a bucket listing.

    Attributes:
        name: Bucket name.
        create_ts: Creation time in milliseconds.
    """

    name: str
    create_ts: int

    def to_payload(self) -> dict[str, Any]:
        """Return the notification payload form."""
        return {"name": self.name, "create_ts": self.create_ts}


@dataclass(frozen=True)
class ObjectInfo:
    """One row of a bucket object listing.

    Attributes:
        uri: Object name inside its bucket.
        size: Content length in bytes at last write.
        tags: Object tags in stored order.
        last_write_ts: Time of the last create/overwrite in milliseconds.
        content_id: Opaque identifier into the external content store.
        epoch_till: Content store expiry epoch, recorded verbatim.
    """

    uri: str
    size: int
    tags: tuple[str, ...]
    last_write_ts: int
    content_id: str
    epoch_till: int

    def to_payload(self) -> dict[str, Any]:
        """Return the notification payload form."""
        return {
            "uri": self.uri,
            "size": self.size,
            "tags": list(self.tags),
            "last_write_ts": self.last_write_ts,
            "content_id": self.content_id,
            "epoch_till": self.epoch_till,
        }


@dataclass(frozen=True)
class StoredContent:
    """Content pointer returned by the external content store.

    Attributes:
        content_id: Opaque blob identifier.
        epoch_till: Epoch until which the store keeps the blob.
        size: Uploaded byte length.
    """

    content_id: str
    epoch_till: int
    size: int
