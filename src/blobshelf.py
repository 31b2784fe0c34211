"""Public SDK surface for Blobshelf.

This module provides a stable import path for catalog users.
It re-exports the client, the in-memory service and typed models.
"""

from __future__ import annotations

from catalog.catalog_sdk import CatalogClient
from catalog.content_store import ContentStoreClient
from catalog.models import BlobRecord, BucketRegistry, CatalogRoot
from catalog.notifications import CatalogEvent, NotificationChannel
from catalog.service import CatalogService
from core.config import ShelfConfig
from core.errors import (
    BucketAlreadyExistsError,
    NoSuchBucketError,
    NoSuchObjectError,
    ObjectAlreadyExistsError,
    ShelfCatalogError,
    ShelfError,
)
from core.types import BucketInfo, ObjectInfo, StoredContent

__all__ = [
    "BlobRecord",
    "BucketAlreadyExistsError",
    "BucketInfo",
    "BucketRegistry",
    "CatalogClient",
    "CatalogEvent",
    "CatalogRoot",
    "CatalogService",
    "ContentStoreClient",
    "NoSuchBucketError",
    "NoSuchObjectError",
    "NotificationChannel",
    "ObjectAlreadyExistsError",
    "ObjectInfo",
    "ShelfCatalogError",
    "ShelfConfig",
    "ShelfError",
    "StoredContent",
]
