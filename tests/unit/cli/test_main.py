"""Unit tests for CLI command handling."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from catalog.catalog_sdk import CatalogClient
from catalog.content_store import ContentStoreClient
from cli.main import main
from core.config import ShelfConfig
from core.types import StoredContent


def _run(tmp_path, *args: str) -> int:
    return main(["--data-root", str(tmp_path / "shelf"), *args])


def _client(tmp_path) -> CatalogClient:
    return CatalogClient(replace(ShelfConfig.from_env(), data_root=tmp_path / "shelf"))


def _fake_store_file(self: ContentStoreClient, file_path: Path) -> StoredContent:
    return StoredContent(content_id=f"cid-{file_path.name}", epoch_till=44, size=3)


def test_cli_make_bucket_then_list(tmp_path, capsys) -> None:
    """mb followed by la should print the bucket row under a header."""
    _run(tmp_path, "mb", "s3://photos")

    exit_code = _run(tmp_path, "la")
    output = capsys.readouterr().out.strip().splitlines()

    assert exit_code == 0 and output[0] == "TIME\tBUCKET NAME" and output[1].endswith("\tphotos")


def test_cli_ls_without_uri_lists_buckets(tmp_path, capsys) -> None:
    """ls without argument should behave like la."""
    _run(tmp_path, "mb", "s3://photos")
    _run(tmp_path, "mb", "s3://docs")
    capsys.readouterr()

    _run(tmp_path, "ls")
    rows = capsys.readouterr().out.strip().splitlines()[1:]

    assert [row.split("\t")[1] for row in rows] == ["photos", "docs"]


def test_cli_duplicate_bucket_reports_fault(tmp_path, capsys) -> None:
    """Creating an existing bucket should print the fault kind and exit 1."""
    _run(tmp_path, "mb", "s3://photos")

    exit_code = _run(tmp_path, "mb", "s3://photos")
    output = capsys.readouterr().out

    assert exit_code == 1 and "error=BucketAlreadyExists" in output


def test_cli_invalid_uri_reports_error(tmp_path, capsys) -> None:
    """A malformed URI should print InvalidUri and exit 1."""
    exit_code = _run(tmp_path, "mb", "photos")

    assert exit_code == 1 and "error=InvalidUri" in capsys.readouterr().out


def test_cli_put_defaults_object_name_to_file_name(
    tmp_path, capsys, monkeypatch: pytest.MonkeyPatch
) -> None:
    """put into a bucket URI should store the object under the file name."""
    monkeypatch.setattr(ContentStoreClient, "store_file", _fake_store_file)
    source = tmp_path / "cat.png"
    source.write_bytes(b"abc")
    _run(tmp_path, "mb", "s3://photos")

    exit_code = _run(tmp_path, "put", str(source), "s3://photos")
    put_output = capsys.readouterr().out.strip()
    _run(tmp_path, "ll", "s3://photos")
    rows = capsys.readouterr().out.strip().splitlines()

    assert (
        exit_code == 0
        and put_output == "content_id=cid-cat.png"
        and rows[0] == "URI\tTIME\tSIZE\tCONTENT ID\tEPOCH TILL"
        and rows[1].split("\t")[0] == "cat.png"
        and rows[1].split("\t")[2:] == ["3", "cid-cat.png", "44"]
    )


def test_cli_ls_bucket_prints_object_rows(tmp_path, capsys) -> None:
    """ls on a bucket URI should print one row per object."""
    client = _client(tmp_path)
    client.create_bucket("photos")
    client.create_object("photos", "dir/a.txt", 1, "cid-a", 1)
    client.create_object("photos", "b.txt", 1, "cid-b", 1)

    _run(tmp_path, "ls", "s3://photos")
    rows = capsys.readouterr().out.strip().splitlines()

    assert rows[0] == "URI\tTIME" and [row.split("\t")[0] for row in rows[1:]] == [
        "dir/a.txt",
        "b.txt",
    ]


def test_cli_tag_add_replaces_and_del_clears(tmp_path, capsys) -> None:
    """tag add should replace the list and tag del should clear it."""
    _run(tmp_path, "mb", "s3://photos")
    _run(tmp_path, "tag", "add", "s3://photos", "a=1")
    _run(tmp_path, "tag", "put", "s3://photos", "b=2", "c=3")
    capsys.readouterr()

    _run(tmp_path, "tag", "ls", "s3://photos")
    replaced = capsys.readouterr().out.strip().splitlines()
    _run(tmp_path, "tag", "rm", "s3://photos")
    _run(tmp_path, "tag", "list", "s3://photos")
    cleared = capsys.readouterr().out.strip()

    assert replaced == ["b=2", "c=3"] and cleared == ""


def test_cli_object_tags_use_object_uri(tmp_path, capsys) -> None:
    """Tag commands on an object URI should tag the object, not the bucket."""
    client = _client(tmp_path)
    client.create_bucket("photos", ["bucket-tag"])
    client.create_object("photos", "cat.png", 1, "cid", 1)

    _run(tmp_path, "tag", "add", "s3://photos/cat.png", "pet")
    _run(tmp_path, "tag", "ls", "s3://photos/cat.png")
    output = capsys.readouterr().out.strip().splitlines()

    assert output == ["pet"] and client.get_bucket_tags("photos") == ["bucket-tag"]


def test_cli_rm_then_get_reports_missing_object(tmp_path, capsys) -> None:
    """Deleting an object should make later downloads fail with NoSuchObject."""
    client = _client(tmp_path)
    client.create_bucket("photos")
    client.create_object("photos", "cat.png", 1, "cid", 1)

    delete_code = _run(tmp_path, "rm", "s3://photos/cat.png")
    get_code = _run(tmp_path, "get", "s3://photos/cat.png", str(tmp_path / "out.png"))

    assert delete_code == 0 and get_code == 1 and "error=NoSuchObject" in capsys.readouterr().out


def test_cli_cat_prints_downloaded_content(
    tmp_path, capsys, monkeypatch: pytest.MonkeyPatch
) -> None:
    """cat should print the content fetched for the object's content id."""

    def _fake_read_blob(self: ContentStoreClient, content_id: str, destination: Path) -> Path:
        destination.write_text(f"content of {content_id}\n", encoding="utf-8")
        return destination

    monkeypatch.setattr(ContentStoreClient, "read_blob", _fake_read_blob)
    client = _client(tmp_path)
    client.create_bucket("notes")
    client.create_object("notes", "todo.txt", 9, "cid-todo", 1)

    exit_code = _run(tmp_path, "cat", "s3://notes/todo.txt")

    assert exit_code == 0 and capsys.readouterr().out == "content of cid-todo\n"


def test_cli_rb_removes_bucket(tmp_path, capsys) -> None:
    """rb should delete the bucket so listing is empty."""
    _run(tmp_path, "mb", "s3://photos")
    _run(tmp_path, "rb", "s3://photos")
    capsys.readouterr()

    _run(tmp_path, "la")

    assert capsys.readouterr().out.strip() == "TIME\tBUCKET NAME"


def test_cli_epoch_records_value(tmp_path) -> None:
    """epoch should store the reported epoch."""
    exit_code = _run(tmp_path, "epoch", "17")

    client = _client(tmp_path)
    assert exit_code == 0 and client.current_epoch() == 17


def test_cli_epoch_rejects_negative_value(tmp_path, capsys) -> None:
    """epoch should refuse values below zero without touching the catalog."""
    with pytest.raises(SystemExit) as exit_info:
        _run(tmp_path, "epoch", "-3")

    assert exit_info.value.code == 2 and "must be >= 0" in capsys.readouterr().err and (
        _client(tmp_path).current_epoch() == 0
    )
