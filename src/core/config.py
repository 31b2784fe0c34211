"""Runtime configuration model for Blobshelf.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_CONTENT_CLI,
    DEFAULT_DATA_ROOT,
    DEFAULT_LOCK_TIMEOUT_SECONDS,
    DEFAULT_LOG_LEVEL,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import ShelfConfigError

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class ShelfConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for the catalog file, lock and event log.
        content_cli: Executable of the external content store client.
        lock_timeout: Seconds to wait for exclusive catalog access.
        event_log_enabled: Whether read results are appended to the event log.
        log_level: Minimum structured log level.
    """

    data_root: Path
    content_cli: str
    lock_timeout: float
    event_log_enabled: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "ShelfConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ShelfConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("BLOBSHELF_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        content_cli = os.getenv("BLOBSHELF_CONTENT_CLI", DEFAULT_CONTENT_CLI)
        lock_timeout = _parse_lock_timeout(
            os.getenv("BLOBSHELF_LOCK_TIMEOUT", str(DEFAULT_LOCK_TIMEOUT_SECONDS))
        )
        event_log_enabled = _parse_flag(os.getenv("BLOBSHELF_EVENT_LOG", "1"))
        log_level = _parse_log_level(os.getenv("BLOBSHELF_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            content_cli=content_cli,
            lock_timeout=lock_timeout,
            event_log_enabled=event_log_enabled,
            log_level=log_level,
        )


def _parse_lock_timeout(raw_value: str) -> float:
    """Parse the lock timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed timeout in seconds.

    Raises:
        ShelfConfigError: If value is not a non-negative number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise ShelfConfigError(
            "Invalid BLOBSHELF_LOCK_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'. "
            "Set BLOBSHELF_LOCK_TIMEOUT to a numeric value."
        ) from error
    if timeout < 0:
        raise ShelfConfigError(
            f"Invalid BLOBSHELF_LOCK_TIMEOUT value: {raw_value} is negative. "
            "Use 0 or a positive number of seconds."
        )
    return timeout


def _parse_flag(raw_value: str) -> bool:
    """Parse a boolean environment flag."""
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ShelfConfigError(
        f"Invalid BLOBSHELF_EVENT_LOG value: '{raw_value}'. "
        f"Use one of {', '.join(_TRUE_VALUES + _FALSE_VALUES)}."
    )


def _parse_log_level(raw_value: str) -> str:
    """Parse and normalize the log level environment value."""
    normalized = raw_value.strip().upper()
    if normalized not in SUPPORTED_LOG_LEVELS:
        raise ShelfConfigError(
            f"Invalid BLOBSHELF_LOG_LEVEL value: '{raw_value}'. "
            f"Use one of {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return normalized
