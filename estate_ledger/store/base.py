"""Record store interface and its transactional boundary."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator

from estate_ledger.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class Collection(str, Enum):
    PROJECTS = "projects"
    PROPERTIES = "properties"
    CUSTOMERS = "customers"
    RENTALS = "rentals"
    TRANSACTIONS = "transactions"
    RECEIPTS = "receipts"
    DOCUMENTS = "documents"
    RENTAL_CONTRACTS = "rental_contracts"
    SALE_CONTRACTS = "sale_contracts"
    USERS = "users"

    @property
    def label(self) -> str:
        """Singular display name used in error messages."""
        return _LABELS[self]


_LABELS = {
    Collection.PROJECTS: "Project",
    Collection.PROPERTIES: "Property",
    Collection.CUSTOMERS: "Customer",
    Collection.RENTALS: "Rental",
    Collection.TRANSACTIONS: "Transaction",
    Collection.RECEIPTS: "Receipt",
    Collection.DOCUMENTS: "Document",
    Collection.RENTAL_CONTRACTS: "Rental contract",
    Collection.SALE_CONTRACTS: "Sale contract",
    Collection.USERS: "User",
}


def as_collection(collection: Collection | str) -> Collection:
    """Coerce a collection name to :class:`Collection`."""
    return collection if isinstance(collection, Collection) else Collection(collection)


class RecordStore(ABC):
    """Keyed collections of records with an atomic unit of work.

    All public operations are serialized through one re-entrant lock.
    Mutations made inside :meth:`transaction` are committed together when
    the block exits normally and rolled back when it raises; a mutation
    made outside any transaction is its own unit of work.

    Subclasses implement the underscore-prefixed primitives and the
    ``_begin``/``_commit``/``_rollback`` hooks.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._depth = 0

    # Unit of work
    @contextmanager
    def transaction(self) -> Iterator[RecordStore]:
        """Run a block of operations as one atomic, serialized unit.

        Nested calls join the outermost transaction.
        """
        with self._lock:
            outermost = self._depth == 0
            if outermost:
                self._begin()
            self._depth += 1
            try:
                yield self
                if outermost:
                    self._commit()
            except BaseException:
                if outermost:
                    logger.debug("Rolling back unit of work")
                    self._rollback()
                raise
            finally:
                self._depth -= 1

    @property
    def in_transaction(self) -> bool:
        """Whether the calling thread is inside :meth:`transaction`."""
        return self._depth > 0

    # Queries
    def read_all(self, collection: Collection | str) -> list[Any]:
        """Return every record of ``collection`` in insertion order."""
        with self._lock:
            return self._read_all(as_collection(collection))

    def find_by_id(self, collection: Collection | str, record_id: str | None) -> Any | None:
        """Return the record with ``record_id`` or ``None``."""
        if not record_id:
            return None
        with self._lock:
            return self._find(as_collection(collection), record_id)

    def get(self, collection: Collection | str, record_id: str | None) -> Any:
        """Return the record with ``record_id``.

        Raises
        ------
        NotFoundError
            If no such record exists.
        """
        coll = as_collection(collection)
        record = self.find_by_id(coll, record_id)
        if record is None:
            raise NotFoundError(f"{coll.label} {record_id} not found")
        return record

    def summary(self) -> dict[str, int]:
        """Return record counts per collection."""
        with self._lock:
            return {coll.value: len(self._read_all(coll)) for coll in Collection}

    # Mutations
    def insert(self, collection: Collection | str, record: Any) -> Any:
        """Append ``record`` to ``collection``."""
        coll = as_collection(collection)
        with self.transaction():
            self._insert(coll, record)
        return record

    def update(self, collection: Collection | str, record: Any) -> Any:
        """Replace the stored record that has ``record.id``."""
        coll = as_collection(collection)
        with self.transaction():
            if self._find(coll, record.id) is None:
                raise NotFoundError(f"{coll.label} {record.id} not found")
            self._update(coll, record)
        return record

    def delete(self, collection: Collection | str, record_id: str) -> None:
        """Remove the record with ``record_id``. Nothing cascades."""
        coll = as_collection(collection)
        with self.transaction():
            if self._find(coll, record_id) is None:
                raise NotFoundError(f"{coll.label} {record_id} not found")
            self._delete(coll, record_id)

    def clear(self, collection: Collection | str) -> int:
        """Remove every record of ``collection``; return how many there were."""
        coll = as_collection(collection)
        with self.transaction():
            count = len(self._read_all(coll))
            self._clear(coll)
        return count

    def close(self) -> None:
        """Release backend resources."""

    # Backend primitives
    @abstractmethod
    def _read_all(self, collection: Collection) -> list[Any]: ...

    @abstractmethod
    def _find(self, collection: Collection, record_id: str) -> Any | None: ...

    @abstractmethod
    def _insert(self, collection: Collection, record: Any) -> None: ...

    @abstractmethod
    def _update(self, collection: Collection, record: Any) -> None: ...

    @abstractmethod
    def _delete(self, collection: Collection, record_id: str) -> None: ...

    @abstractmethod
    def _clear(self, collection: Collection) -> None: ...

    def _begin(self) -> None:
        """Start a unit of work."""

    def _commit(self) -> None:
        """Make the unit of work durable."""

    def _rollback(self) -> None:
        """Discard the unit of work."""
