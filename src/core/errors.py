"""Blobshelf exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Catalog faults carry a stable ``code`` that clients surface verbatim.
"""

from __future__ import annotations


class ShelfError(Exception):
    """Base exception for all Blobshelf failures."""


class ShelfConfigError(ShelfError):
    """Raised for invalid runtime configuration."""


class ShelfStoreError(ShelfError):
    """Raised for catalog persistence failures."""


class ShelfContentError(ShelfError):
    """Raised when the external content store rejects a request."""


class ShelfUriError(ShelfError):
    """Raised for malformed bucket/object URIs."""

    code = "InvalidUri"


class ShelfLockTimeoutError(ShelfError):
    """Raised when exclusive catalog access cannot be acquired in time."""


class ShelfCatalogError(ShelfError):
    """Base class for catalog faults.

    Faults are terminal and caller-caused. Every fault is raised before
    the failing operation writes anything.
    """

    code = "CatalogFault"


class NoSuchBucketError(ShelfCatalogError):
    """Raised when a referenced bucket is absent from the catalog."""

    code = "NoSuchBucket"


class BucketAlreadyExistsError(ShelfCatalogError):
    """Raised when creating a bucket under a name already in use."""

    code = "BucketAlreadyExists"


class NoSuchObjectError(ShelfCatalogError):
    """Raised when a referenced object is absent from its bucket."""

    code = "NoSuchObject"


class ObjectAlreadyExistsError(ShelfCatalogError):
    """Reserved for strict object creation.

    ``create_object`` upserts, so nothing raises this today.
    """

    code = "ObjectAlreadyExists"
