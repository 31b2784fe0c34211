"""Object URI parsing helpers.

This module centralizes ``s3://bucket/object`` parsing for the CLI and SDK.
It keeps URI validation behavior consistent across the codebase.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from core.constants import OBJECT_URI_SCHEME
from core.errors import ShelfUriError

_OBJECT_URI_PATTERN = re.compile(
    rf"{OBJECT_URI_SCHEME}://(?P<bucket>[A-Za-z0-9\-._]+)(?P<object>[A-Za-z0-9\-._/]*)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ObjectLocation:
    """Parsed bucket/object location.

    ``object_name`` is empty when the URI names only a bucket.
    """

    bucket: str
    object_name: str

    @property
    def is_bucket(self) -> bool:
        """Return whether the location names a bucket without an object."""
        return not self.object_name


def parse_object_uri(uri: str) -> ObjectLocation:
    """Parse and validate a bucket or object URI.

    Args:
        uri: URI in format ``s3://bucket`` or ``s3://bucket/object/path``.

    Returns:
        Parsed bucket and object pair.

    Raises:
        ShelfUriError: If the URI does not match the expected grammar.
    """
    match = _OBJECT_URI_PATTERN.fullmatch(uri.strip())
    if match is None:
        raise ShelfUriError(
            f"Invalid object URI '{uri}': expected {OBJECT_URI_SCHEME}://bucket[/object]. "
            "Bucket names use letters, digits, '.', '_' and '-'."
        )
    object_part = match.group("object")
    if object_part and not object_part.startswith("/"):
        raise ShelfUriError(
            f"Invalid object URI '{uri}': separate bucket and object with '/'."
        )
    return ObjectLocation(bucket=match.group("bucket"), object_name=object_part.lstrip("/"))


def require_bucket_uri(uri: str) -> str:
    """Parse a URI that must name a bucket only.

    Raises:
        ShelfUriError: If the URI is malformed or names an object.
    """
    location = parse_object_uri(uri)
    if not location.is_bucket:
        raise ShelfUriError(
            f"Invalid bucket URI '{uri}': expected {OBJECT_URI_SCHEME}://bucket without an object."
        )
    return location.bucket


def require_object_uri(uri: str) -> ObjectLocation:
    """Parse a URI that must name an object inside a bucket.

    Raises:
        ShelfUriError: If the URI is malformed or lacks an object part.
    """
    location = parse_object_uri(uri)
    if location.is_bucket:
        raise ShelfUriError(
            f"Invalid object URI '{uri}': expected {OBJECT_URI_SCHEME}://bucket/object."
        )
    return location
