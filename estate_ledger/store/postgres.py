"""PostgreSQL record store."""

from __future__ import annotations

import logging
from typing import Any

import psycopg
from psycopg.types.json import Jsonb

from estate_ledger.exceptions import StorageError
from estate_ledger.store.base import Collection, RecordStore
from estate_ledger.store.codec import from_dict, to_dict

logger = logging.getLogger(__name__)


class PostgresRecordStore(RecordStore):
    """Store every record as a JSONB document in one ``records`` table.

    Each unit of work is one database transaction. Reads outside a unit
    of work end their implicit transaction immediately.
    """

    CREATE_TABLE = """
        CREATE TABLE IF NOT EXISTS records (
            seq         BIGSERIAL,
            collection  TEXT NOT NULL,
            id          TEXT NOT NULL,
            payload     JSONB NOT NULL,
            PRIMARY KEY (collection, id)
        )
    """

    def __init__(self, connection_string: str, create_tables: bool = True) -> None:
        """Connect to PostgreSQL.

        Parameters
        ----------
        connection_string : str
            libpq connection string or URL.
        create_tables : bool
            Create the ``records`` table when missing.
        """
        super().__init__()
        try:
            self.conn = psycopg.connect(connection_string)
        except psycopg.Error as exc:
            raise StorageError(f"Cannot connect to PostgreSQL: {exc}") from exc
        if create_tables:
            self.create_tables()

    def create_tables(self) -> None:
        """Create the ``records`` table if it does not exist."""
        with self.transaction():
            self._execute(self.CREATE_TABLE)
        logger.info("PostgreSQL record table ready")

    def close(self) -> None:
        """Close the connection."""
        self.conn.close()

    def _execute(self, sql: str, params: tuple = ()) -> list[tuple]:
        try:
            with self.conn.cursor() as cur:
                cur.execute(sql, params)
                rows = cur.fetchall() if cur.description else []
            if not self.in_transaction:
                self.conn.commit()
            return rows
        except psycopg.Error as exc:
            if not self.in_transaction:
                # Leave the connection usable for the next statement
                self._rollback()
            raise StorageError(f"PostgreSQL error: {exc}") from exc

    def _read_all(self, collection: Collection) -> list[Any]:
        rows = self._execute(
            "SELECT payload FROM records WHERE collection = %s ORDER BY seq",
            (collection.value,),
        )
        return [from_dict(collection, row[0]) for row in rows]

    def _find(self, collection: Collection, record_id: str) -> Any | None:
        rows = self._execute(
            "SELECT payload FROM records WHERE collection = %s AND id = %s",
            (collection.value, record_id),
        )
        return from_dict(collection, rows[0][0]) if rows else None

    def _insert(self, collection: Collection, record: Any) -> None:
        self._execute(
            "INSERT INTO records (collection, id, payload) VALUES (%s, %s, %s)",
            (collection.value, record.id, Jsonb(to_dict(record))),
        )

    def _update(self, collection: Collection, record: Any) -> None:
        self._execute(
            "UPDATE records SET payload = %s WHERE collection = %s AND id = %s",
            (Jsonb(to_dict(record)), collection.value, record.id),
        )

    def _delete(self, collection: Collection, record_id: str) -> None:
        self._execute(
            "DELETE FROM records WHERE collection = %s AND id = %s",
            (collection.value, record_id),
        )

    def _clear(self, collection: Collection) -> None:
        self._execute("DELETE FROM records WHERE collection = %s", (collection.value,))

    def _commit(self) -> None:
        try:
            self.conn.commit()
        except psycopg.Error as exc:
            raise StorageError(f"PostgreSQL commit failed: {exc}") from exc

    def _rollback(self) -> None:
        try:
            self.conn.rollback()
        except psycopg.Error as exc:
            raise StorageError(f"PostgreSQL rollback failed: {exc}") from exc
