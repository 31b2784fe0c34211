"""Unit tests for dual delivery of read results."""

from __future__ import annotations

import pytest

from catalog.notifications import CatalogEvent, NotificationChannel
from catalog.service import CatalogService
from core.errors import NoSuchBucketError, ShelfStoreError


def _service_with_events(manual_clock) -> tuple[CatalogService, list[CatalogEvent]]:
    events: list[CatalogEvent] = []
    channel = NotificationChannel()
    channel.subscribe(events.append)
    return CatalogService(clock=manual_clock, channel=channel), events


def test_list_buckets_publishes_listing(manual_clock) -> None:
    """Bucket listing should be returned and published."""
    service, events = _service_with_events(manual_clock)
    manual_clock.now = 100
    service.create_bucket("photos")

    service.list_buckets()

    assert [(event.event_type, dict(event.payload)) for event in events] == [
        ("BucketsList", {"buckets": [{"name": "photos", "create_ts": 100}]})
    ]


def test_tag_reads_publish_tags_list(manual_clock) -> None:
    """Bucket and object tag reads should publish TagsList events."""
    service, events = _service_with_events(manual_clock)
    service.create_bucket("photos", ["b1"])
    service.create_object("photos", "cat.png", 1, "cid", 1, ["o1"])

    service.get_bucket_tags("photos")
    service.get_object_tags("photos", "cat.png")

    assert [dict(event.payload) for event in events] == [{"tags": ["b1"]}, {"tags": ["o1"]}]


def test_get_object_publishes_blob_meta(manual_clock) -> None:
    """Object reads should publish the full record."""
    service, events = _service_with_events(manual_clock)
    service.create_bucket("photos")
    manual_clock.now = 200
    service.create_object("photos", "cat.png", 500, "cid1", 10)

    service.get_object("photos", "cat.png")

    assert events[0].event_type == "BlobMeta" and dict(events[0].payload) == {
        "size": 500,
        "tags": [],
        "last_write_ts": 200,
        "content_id": "cid1",
        "epoch_till": 10,
    }


def test_list_bucket_objects_publishes_objects(manual_clock) -> None:
    """Object listing should publish one descriptor per object."""
    service, events = _service_with_events(manual_clock)
    service.create_bucket("photos")
    service.create_object("photos", "cat.png", 500, "cid1", 10)

    service.list_bucket_objects("photos")

    assert events[0].event_type == "BucketObjectsList" and events[0].payload["objects"] == [
        {
            "uri": "cat.png",
            "size": 500,
            "tags": [],
            "last_write_ts": 0,
            "content_id": "cid1",
            "epoch_till": 10,
        }
    ]


def test_mutations_and_faults_publish_nothing(manual_clock) -> None:
    """Only successful reads should publish events."""
    service, events = _service_with_events(manual_clock)
    service.create_bucket("photos")
    service.tag_bucket("photos", ["a"])

    with pytest.raises(NoSuchBucketError):
        service.list_bucket_objects("missing")

    assert events == []


def test_event_log_replays_published_events(tmp_path) -> None:
    """Logged events should replay in publication order."""
    channel = NotificationChannel(tmp_path / "events.jsonl")
    service = CatalogService(channel=channel)
    service.create_bucket("photos", ["x"])
    service.get_bucket_tags("photos")
    service.list_bucket_objects("photos")

    replayed = channel.read_log()

    assert [event.event_type for event in replayed] == ["TagsList", "BucketObjectsList"] and (
        dict(replayed[0].payload) == {"tags": ["x"]}
    )


def test_read_log_is_empty_without_log_path() -> None:
    """A channel without event log should replay nothing."""
    assert NotificationChannel().read_log() == []


def test_read_log_raises_for_corrupt_line(tmp_path) -> None:
    """Corrupt log lines should surface as store errors."""
    log_path = tmp_path / "events.jsonl"
    log_path.write_text("{not json}\n", encoding="utf-8")

    with pytest.raises(ShelfStoreError):
        NotificationChannel(log_path).read_log()


def test_iter_log_yields_events_before_reaching_later_lines(tmp_path) -> None:
    """Streaming replay should hand out earlier events before parsing later lines."""
    log_path = tmp_path / "events.jsonl"
    channel = NotificationChannel(log_path)
    channel.publish("TagsList", {"tags": ["x"]})
    with log_path.open("a", encoding="utf-8") as log_file:
        log_file.write("{not json}\n")

    stream = channel.iter_log()
    first = next(stream)

    with pytest.raises(ShelfStoreError):
        next(stream)
    assert first.event_type == "TagsList" and dict(first.payload) == {"tags": ["x"]}


def test_failing_subscriber_does_not_block_others() -> None:
    """A raising subscriber should not stop delivery to later subscribers."""
    received: list[str] = []
    channel = NotificationChannel()

    def _broken(event: CatalogEvent) -> None:
        raise RuntimeError("observer down")

    channel.subscribe(_broken)
    channel.subscribe(lambda event: received.append(event.event_type))

    channel.publish("TagsList", {"tags": []})

    assert received == ["TagsList"]


def test_unsubscribe_stops_delivery() -> None:
    """Removed subscribers should receive no further events."""
    received: list[CatalogEvent] = []
    channel = NotificationChannel()
    unsubscribe = channel.subscribe(received.append)

    unsubscribe()
    channel.publish("TagsList", {"tags": []})

    assert received == []
