"""Blobshelf CLI entry points.

This module exposes bucket, object and tag commands over the catalog.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from catalog.catalog_sdk import CatalogClient
from cli.object_command import (
    add_object_commands,
    run_cat_command,
    run_delete_command,
    run_get_command,
    run_put_command,
)
from cli.tag_command import add_tag_command, run_tag_command
from core.clock import format_timestamp_ms
from core.config import ShelfConfig
from core.errors import ShelfError
from core.logging_config import configure_logging
from core.object_uri import require_bucket_uri


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="blobshelf",
        description="Bucket/object catalog over a content-addressed blob store",
    )
    parser.add_argument("--data-root", help="Override BLOBSHELF_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_listing_commands(subparsers)
    _add_bucket_commands(subparsers)
    add_object_commands(subparsers)
    add_tag_command(subparsers)
    _add_epoch_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Blobshelf CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
        return _dispatch(client, args, parser)
    except ShelfError as error:
        code = getattr(error, "code", type(error).__name__)
        print(f"error={code}: {error}")
        return 1


def _dispatch(
    client: CatalogClient,
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
) -> int:
    """Route parsed arguments to one command handler."""
    if args.command == "la":
        return _print_buckets(client)
    if args.command in ("ls", "ll"):
        return _run_list_command(client, args)
    if args.command == "mb":
        client.create_bucket(require_bucket_uri(args.uri))
        return 0
    if args.command == "rb":
        client.delete_bucket(require_bucket_uri(args.uri))
        return 0
    if args.command == "put":
        return run_put_command(client, args)
    if args.command == "get":
        return run_get_command(client, args)
    if args.command == "cat":
        return run_cat_command(client, args)
    if args.command in ("del", "rm"):
        return run_delete_command(client, args)
    if args.command == "tag":
        return run_tag_command(client, args)
    if args.command == "epoch":
        client.set_epoch(args.epoch)
        return 0
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None) -> CatalogClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = ShelfConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    configure_logging(config.log_level)
    return CatalogClient(config)


def _run_list_command(client: CatalogClient, args: argparse.Namespace) -> int:
    """Handle ls/ll: buckets without a uri, objects of one bucket otherwise.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    if args.uri is None:
        return _print_buckets(client)
    bucket = require_bucket_uri(args.uri)
    objects = client.list_bucket_objects(bucket)
    detailed = args.command == "ll"
    if detailed:
        print("URI\tTIME\tSIZE\tCONTENT ID\tEPOCH TILL")
    else:
        print("URI\tTIME")
    for info in objects:
        row = f"{info.uri}\t{format_timestamp_ms(info.last_write_ts)}"
        if detailed:
            row = f"{row}\t{info.size}\t{info.content_id}\t{info.epoch_till}"
        print(row)
    return 0


def _print_buckets(client: CatalogClient) -> int:
    """Print every bucket with its creation time."""
    print("TIME\tBUCKET NAME")
    for info in client.list_buckets():
        print(f"{format_timestamp_ms(info.create_ts)}\t{info.name}")
    return 0


def _add_listing_commands(subparsers: Any) -> None:
    """Register la/ls/ll subcommands."""
    subparsers.add_parser("la", help="List all buckets")
    list_parser = subparsers.add_parser("ls", help="List buckets, or objects of s3://<bucket>")
    list_parser.add_argument("uri", nargs="?", help="Optional s3://<bucket>")
    detail_parser = subparsers.add_parser("ll", help="List object details of s3://<bucket>")
    detail_parser.add_argument("uri", nargs="?", help="Optional s3://<bucket>")


def _add_bucket_commands(subparsers: Any) -> None:
    """Register mb/rb subcommands."""
    create_parser = subparsers.add_parser("mb", help="Create bucket s3://<bucket>")
    create_parser.add_argument("uri", help="s3://<bucket>")
    delete_parser = subparsers.add_parser("rb", help="Delete bucket s3://<bucket> and its objects")
    delete_parser.add_argument("uri", help="s3://<bucket>")


def _add_epoch_command(subparsers: Any) -> None:
    """Register epoch subcommand."""
    parser = subparsers.add_parser("epoch", help="Record the current content store epoch")
    parser.add_argument("epoch", type=_non_negative_int, help="Epoch number")


def _non_negative_int(raw_value: str) -> int:
    """Parse a non-negative integer argument."""
    try:
        value = int(raw_value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"invalid integer: {raw_value!r}") from error
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value
