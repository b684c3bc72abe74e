"""In-memory record store."""

from __future__ import annotations

import copy
from typing import Any

from estate_ledger.exceptions import StorageError
from estate_ledger.store.base import Collection, RecordStore


class InMemoryRecordStore(RecordStore):
    """Dictionary-backed store; a unit of work is rolled back from a snapshot."""

    def __init__(self) -> None:
        super().__init__()
        self._data: dict[Collection, dict[str, Any]] = {coll: {} for coll in Collection}
        self._snapshot: dict[Collection, dict[str, Any]] | None = None

    def _read_all(self, collection: Collection) -> list[Any]:
        return list(self._data[collection].values())

    def _find(self, collection: Collection, record_id: str) -> Any | None:
        return self._data[collection].get(record_id)

    def _insert(self, collection: Collection, record: Any) -> None:
        if record.id in self._data[collection]:
            raise StorageError(f"{collection.label} {record.id} already exists")
        self._data[collection][record.id] = record

    def _update(self, collection: Collection, record: Any) -> None:
        self._data[collection][record.id] = record

    def _delete(self, collection: Collection, record_id: str) -> None:
        del self._data[collection][record_id]

    def _clear(self, collection: Collection) -> None:
        self._data[collection] = {}

    def _begin(self) -> None:
        self._snapshot = copy.deepcopy(self._data)

    def _commit(self) -> None:
        self._persist()
        self._snapshot = None

    def _rollback(self) -> None:
        if self._snapshot is not None:
            self._data = self._snapshot
        self._snapshot = None

    def _persist(self) -> None:
        """Hook for subclasses that keep a durable copy."""
