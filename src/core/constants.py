"""Core constants used across Blobshelf modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".blobshelf")
CATALOG_FILE_NAME = "catalog.json"
CATALOG_LOCK_FILE_NAME = "catalog.lock"
EVENTS_FILE_NAME = "events.jsonl"
DEFAULT_CONTENT_CLI = "walrus"
DEFAULT_LOCK_TIMEOUT_SECONDS = 10.0
DEFAULT_LOG_LEVEL = "WARNING"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
OBJECT_URI_SCHEME = "s3"
TEMP_CONTENT_FILE_NAME = "blobshelf_cat.tmp"
