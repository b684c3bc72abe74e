"""Record store construction from configuration."""

from __future__ import annotations

import logging

from estate_ledger.config import StorageConfig
from estate_ledger.exceptions import ConfigurationError
from estate_ledger.store.base import RecordStore
from estate_ledger.store.json_file import JsonFileRecordStore
from estate_ledger.store.memory import InMemoryRecordStore

logger = logging.getLogger(__name__)


def open_store(config: StorageConfig) -> RecordStore:
    """Open the record store selected by ``config.backend``."""
    logger.info("Opening %s record store", config.backend)
    if config.backend == "memory":
        return InMemoryRecordStore()
    if config.backend == "json":
        return JsonFileRecordStore(config.json_path)
    if config.backend == "postgres":
        # Imported lazily so libpq is only loaded when used
        from estate_ledger.store.postgres import PostgresRecordStore

        return PostgresRecordStore(config.postgres.connection_string)
    raise ConfigurationError(f"Unknown storage backend {config.backend!r}")
