"""Single-document JSON file record store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from estate_ledger.exceptions import StorageError
from estate_ledger.store.base import Collection
from estate_ledger.store.codec import from_dict, to_dict
from estate_ledger.store.memory import InMemoryRecordStore

logger = logging.getLogger(__name__)

# Top-level keys of the document, as laid out by earlier versions.
FILE_KEYS: dict[Collection, str] = {
    Collection.USERS: "users",
    Collection.PROJECTS: "projects",
    Collection.PROPERTIES: "properties",
    Collection.CUSTOMERS: "customers",
    Collection.RENTALS: "rentals",
    Collection.RECEIPTS: "receipts",
    Collection.DOCUMENTS: "documents",
    Collection.RENTAL_CONTRACTS: "rentalContracts",
    Collection.SALE_CONTRACTS: "saleContracts",
    Collection.TRANSACTIONS: "transactions",
}


class JsonFileRecordStore(InMemoryRecordStore):
    """Keep every collection in one JSON document on disk.

    The document is read once on construction and rewritten as a whole
    each time a unit of work commits. The rewrite goes through a
    temporary file and ``os.replace`` so a failed write never leaves a
    truncated document behind.
    """

    def __init__(self, path: str | Path, pretty: bool = True) -> None:
        """Open (or create) the document at ``path``.

        Parameters
        ----------
        path : str | Path
            Location of the JSON document.
        pretty : bool
            Indent the written document.
        """
        super().__init__()
        self.path = Path(path)
        self.pretty = pretty
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            logger.info("Creating empty record store at %s", self.path)
            self._persist()
            return

        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read record store {self.path}: {exc}") from exc

        known = set(FILE_KEYS.values())
        for key in document:
            if key not in known:
                logger.warning("Ignoring unknown collection %r in %s", key, self.path)

        for collection, key in FILE_KEYS.items():
            records = [from_dict(collection, item) for item in document.get(key) or []]
            self._data[collection] = {record.id: record for record in records}

        logger.info("Loaded record store %s: %s", self.path, self.summary())

    def _persist(self) -> None:
        document: dict[str, Any] = {
            key: [to_dict(record) for record in self._data[collection].values()]
            for collection, key in FILE_KEYS.items()
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2 if self.pretty else None, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Cannot write record store {self.path}: {exc}") from exc
