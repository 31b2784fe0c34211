"""Out-of-band notification channel for catalog read results.

Observers that cannot consume a call's return value read the same payload
here, either through an in-process subscription or by replaying the
append-only JSON-lines event log.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import json
from pathlib import Path
from typing import Any, Callable, Iterator, Literal, Mapping, cast

from core.errors import ShelfStoreError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)

EventType = Literal["BucketsList", "TagsList", "BlobMeta", "BucketObjectsList"]
SUPPORTED_EVENT_TYPES: tuple[EventType, ...] = (
    "BucketsList",
    "TagsList",
    "BlobMeta",
    "BucketObjectsList",
)


@dataclass(frozen=True)
class CatalogEvent:
    """One published read result.

    Attributes:
        event_type: Payload kind.
        payload: JSON-compatible result payload.
        emitted_at: UTC ISO timestamp of publication.
    """

    event_type: EventType
    payload: Mapping[str, Any]
    emitted_at: str


Subscriber = Callable[[CatalogEvent], None]


class NotificationChannel:
    """Fan-out of catalog events to subscribers and an optional event log."""

    def __init__(self, event_log_path: Path | None = None) -> None:
        """Create a channel.

        Args:
            event_log_path: JSON-lines file to append events to, or None.
        """
        self._event_log_path = event_log_path
        self._subscribers: list[Subscriber] = []

    @property
    def event_log_path(self) -> Path | None:
        """Return the event log path, if logging is enabled."""
        return self._event_log_path

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a subscriber.

        Args:
            subscriber: Callable invoked with every published event.

        Returns:
            Callable that removes the subscription.
        """
        self._subscribers.append(subscriber)

        def _unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return _unsubscribe

    def publish(self, event_type: EventType, payload: Mapping[str, Any]) -> CatalogEvent:
        """Append an event to the log and deliver it to subscribers.

        Args:
            event_type: Payload kind.
            payload: JSON-compatible payload.

        Returns:
            The published event.

        Raises:
            ShelfStoreError: If the event log cannot be written.
        """
        event = CatalogEvent(
            event_type=event_type,
            payload=payload,
            emitted_at=datetime.now(timezone.utc).isoformat(),
        )
        if self._event_log_path is not None:
            _append_event(self._event_log_path, event)
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception as error:
                _LOGGER.error(
                    "notification_subscriber_failed",
                    event_type=event_type,
                    error=str(error),
                )
        _LOGGER.debug("notification_published", event_type=event_type)
        return event

    def read_log(self) -> list[CatalogEvent]:
        """Replay logged events in publication order.

        Returns:
            Logged events, empty when logging is disabled or nothing was logged.

        Raises:
            ShelfStoreError: If a log line cannot be parsed.
        """
        return list(self.iter_log())

    def iter_log(self) -> Iterator[CatalogEvent]:
        """Stream logged events one line at a time.

        Raises:
            ShelfStoreError: When the stream reaches an unparseable line.
        """
        if self._event_log_path is None or not self._event_log_path.exists():
            return
        with self._event_log_path.open("r", encoding="utf-8") as log_file:
            for line_number, line in enumerate(log_file, start=1):
                if not line.strip():
                    continue
                yield _event_from_line(self._event_log_path, line_number, line)


def _append_event(log_path: Path, event: CatalogEvent) -> None:
    """Append one event as a JSON line."""
    row = {
        "event_type": event.event_type,
        "payload": dict(event.payload),
        "emitted_at": event.emitted_at,
    }
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with log_path.open("a", encoding="utf-8") as log_file:
            log_file.write(json.dumps(row, sort_keys=True) + "\n")
    except OSError as error:
        raise ShelfStoreError(f"Failed to append event log {log_path}: {error}.") from error


def _event_from_line(log_path: Path, line_number: int, line: str) -> CatalogEvent:
    """Parse one event log line."""
    try:
        row = json.loads(line)
    except json.JSONDecodeError as error:
        raise ShelfStoreError(
            f"Failed to parse event log {log_path} line {line_number}: {error.msg}."
        ) from error
    event_type = row.get("event_type") if isinstance(row, dict) else None
    if event_type not in SUPPORTED_EVENT_TYPES or not isinstance(row.get("payload"), dict):
        raise ShelfStoreError(
            f"Invalid event at {log_path} line {line_number}: "
            "expected event_type and payload object."
        )
    return CatalogEvent(
        event_type=cast(EventType, event_type),
        payload=row["payload"],
        emitted_at=str(row.get("emitted_at", "")),
    )
