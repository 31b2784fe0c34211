"""Catalog persistence helpers.

This module isolates JSON catalog IO from the operation surface.
Buckets and objects are stored as ordered JSON arrays so insertion order
survives a save/load cycle.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from catalog.models import BlobRecord, BucketRegistry, CatalogRoot
from core.errors import ShelfStoreError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def save_catalog(catalog_path: Path, root: CatalogRoot) -> None:
    """Write the catalog atomically.

    Args:
        catalog_path: Catalog JSON path.
        root: Catalog aggregate to persist.

    Raises:
        ShelfStoreError: If the file cannot be written.
    """
    payload = catalog_to_dict(root)
    temp_path = catalog_path.with_name(f"{catalog_path.name}.tmp")
    try:
        catalog_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        os.replace(temp_path, catalog_path)
    except OSError as error:
        raise ShelfStoreError(
            f"Failed to write catalog at {catalog_path}: {error}. "
            "Check data-root permissions and free space."
        ) from error
    _LOGGER.debug("catalog_saved", path=str(catalog_path), bucket_count=len(root.buckets))


def load_catalog(catalog_path: Path) -> CatalogRoot:
    """Read the catalog, or return an empty one when no file exists yet.

    Args:
        catalog_path: Catalog JSON path.

    Returns:
        Loaded catalog aggregate.

    Raises:
        ShelfStoreError: If the catalog is unreadable or malformed.
    """
    if not catalog_path.exists():
        return CatalogRoot()
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise ShelfStoreError(
            f"Failed to parse catalog at {catalog_path}: {error.msg}. "
            "Restore the catalog file from a backup."
        ) from error
    except OSError as error:
        raise ShelfStoreError(f"Failed to read catalog at {catalog_path}: {error}.") from error
    if not isinstance(payload, dict):
        raise ShelfStoreError(
            f"Failed to parse catalog at {catalog_path}: "
            "expected JSON object at top level. Restore the catalog file."
        )
    try:
        return catalog_from_dict(payload)
    except (KeyError, TypeError, ValueError) as error:
        raise ShelfStoreError(
            f"Invalid catalog content at {catalog_path}: {error!r}. "
            "Restore the catalog file from a backup."
        ) from error


def catalog_to_dict(root: CatalogRoot) -> dict[str, Any]:
    """Serialize a catalog aggregate into a JSON-compatible dictionary."""
    return {
        "current_epoch": root.current_epoch,
        "buckets": [
            {
                "name": name,
                "create_ts": bucket.create_ts,
                "tags": list(bucket.tags),
                "objects": [
                    {"name": object_name, **_record_to_dict(record)}
                    for object_name, record in bucket.children.items()
                ],
            }
            for name, bucket in root.buckets.items()
        ],
    }


def catalog_from_dict(payload: dict[str, Any]) -> CatalogRoot:
    """Deserialize a catalog aggregate.

    Raises:
        KeyError: If a required field is missing.
        ValueError: If a field cannot be converted or a name repeats.
    """
    root = CatalogRoot(current_epoch=int(payload.get("current_epoch", 0)))
    for bucket_payload in payload["buckets"]:
        name = str(bucket_payload["name"])
        if name in root.buckets:
            raise ValueError(f"duplicate bucket name '{name}'")
        bucket = BucketRegistry(
            create_ts=int(bucket_payload["create_ts"]),
            tags=[str(tag) for tag in bucket_payload["tags"]],
        )
        for object_payload in bucket_payload["objects"]:
            object_name = str(object_payload["name"])
            if object_name in bucket.children:
                raise ValueError(f"duplicate object name '{object_name}' in bucket '{name}'")
            bucket.children[object_name] = _record_from_dict(object_payload)
        root.buckets[name] = bucket
    return root


def _record_to_dict(record: BlobRecord) -> dict[str, Any]:
    return {
        "size": record.size,
        "tags": list(record.tags),
        "last_write_ts": record.last_write_ts,
        "content_id": record.content_id,
        "epoch_till": record.epoch_till,
    }


def _record_from_dict(payload: dict[str, Any]) -> BlobRecord:
    return BlobRecord(
        size=int(payload["size"]),
        tags=[str(tag) for tag in payload["tags"]],
        last_write_ts=int(payload["last_write_ts"]),
        content_id=str(payload["content_id"]),
        epoch_till=int(payload["epoch_till"]),
    )
