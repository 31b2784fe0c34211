"""Object transfer and deletion commands for Blobshelf CLI."""

from __future__ import annotations

import argparse
from pathlib import Path, PurePosixPath
import tempfile
from typing import Any

from catalog.catalog_sdk import CatalogClient
from core.constants import TEMP_CONTENT_FILE_NAME
from core.object_uri import parse_object_uri, require_object_uri


def add_object_commands(subparsers: Any) -> None:
    """Register put/get/cat/del/rm subcommands."""
    put_parser = subparsers.add_parser(
        "put",
        help="Upload a file to s3://<bucket>[/<object>]; object defaults to the file name",
    )
    put_parser.add_argument("file", help="Local file to upload")
    put_parser.add_argument("uri", help="s3://<bucket>[/<object>]")
    get_parser = subparsers.add_parser("get", help="Download s3://<bucket>/<object>")
    get_parser.add_argument("uri", help="s3://<bucket>/<object>")
    get_parser.add_argument("file", nargs="?", help="Destination; defaults to the object name")
    cat_parser = subparsers.add_parser("cat", help="Print the content of s3://<bucket>/<object>")
    cat_parser.add_argument("uri", help="s3://<bucket>/<object>")
    for command in ("del", "rm"):
        delete_parser = subparsers.add_parser(command, help="Delete s3://<bucket>/<object>")
        delete_parser.add_argument("uri", help="s3://<bucket>/<object>")


def run_put_command(client: CatalogClient, args: argparse.Namespace) -> int:
    """Upload a file and record it under the target object name."""
    location = parse_object_uri(args.uri)
    object_name = location.object_name or Path(args.file).name
    stored = client.put_object(location.bucket, object_name, args.file)
    print(f"content_id={stored.content_id}")
    return 0


def run_get_command(client: CatalogClient, args: argparse.Namespace) -> int:
    """Download an object into a local file."""
    location = require_object_uri(args.uri)
    destination = args.file or PurePosixPath(location.object_name).name
    saved_path = client.fetch_object(location.bucket, location.object_name, destination)
    print(f"saved={saved_path}")
    return 0


def run_cat_command(client: CatalogClient, args: argparse.Namespace) -> int:
    """Print an object's content as text."""
    location = require_object_uri(args.uri)
    with tempfile.TemporaryDirectory() as temp_dir:
        destination = Path(temp_dir) / TEMP_CONTENT_FILE_NAME
        client.fetch_object(location.bucket, location.object_name, destination)
        print(destination.read_text(encoding="utf-8", errors="replace"), end="")
    return 0


def run_delete_command(client: CatalogClient, args: argparse.Namespace) -> int:
    """Delete one object record."""
    location = require_object_uri(args.uri)
    client.delete_object(location.bucket, location.object_name)
    return 0
