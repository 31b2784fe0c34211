"""Tag command wiring for Blobshelf CLI.

``add``/``put`` replace the whole tag list and ``del``/``rm`` clear it; the
catalog has no single-tag add or remove.
"""

from __future__ import annotations

import argparse
from typing import Any

from catalog.catalog_sdk import CatalogClient
from core.object_uri import parse_object_uri

TAG_ACTIONS = ("ls", "list", "add", "put", "del", "rm")


def add_tag_command(subparsers: Any) -> None:
    """Register tag subcommand."""
    parser = subparsers.add_parser(
        "tag",
        help="List, replace or clear tags of s3://<bucket>[/<object>]",
    )
    parser.add_argument("action", choices=TAG_ACTIONS, help="Tag action")
    parser.add_argument("uri", help="s3://<bucket>[/<object>]")
    parser.add_argument("tags", nargs="*", help="Tags for add/put, e.g. key=value")


def run_tag_command(client: CatalogClient, args: argparse.Namespace) -> int:
    """Execute one tag action against a bucket or an object."""
    location = parse_object_uri(args.uri)
    if args.action in ("ls", "list"):
        if location.is_bucket:
            tags = client.get_bucket_tags(location.bucket)
        else:
            tags = client.get_object_tags(location.bucket, location.object_name)
        for tag in tags:
            print(tag)
        return 0
    if args.action in ("add", "put"):
        if location.is_bucket:
            client.tag_bucket(location.bucket, args.tags)
        else:
            client.tag_object(location.bucket, location.object_name, args.tags)
        return 0
    if location.is_bucket:
        client.delete_bucket_tags(location.bucket)
    else:
        client.delete_object_tags(location.bucket, location.object_name)
    return 0
