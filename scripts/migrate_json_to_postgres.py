#!/usr/bin/env python3
"""Copy a JSON record store into PostgreSQL.

Every collection of the JSON document is read (older record shapes are
upgraded on the way in) and written to PostgreSQL in a single database
transaction: either the whole document is migrated or nothing is.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from estate_ledger.config import LedgerConfig
from estate_ledger.exceptions import EstateLedgerError
from estate_ledger.logging import setup_logging
from estate_ledger.store import Collection, JsonFileRecordStore, RecordStore

logger = logging.getLogger(__name__)


def migrate(source: RecordStore, target: RecordStore, replace: bool = False) -> dict[str, int]:
    """Copy every record of ``source`` into ``target``.

    Parameters
    ----------
    source : RecordStore
        Store to read.
    target : RecordStore
        Store to write; must not already hold the same records unless
        ``replace`` is set.
    replace : bool
        Empty each target collection first.

    Returns
    -------
    dict[str, int]
        Records copied per collection.
    """
    copied: dict[str, int] = {}
    with target.transaction():
        for collection in Collection:
            records = source.read_all(collection)
            if replace:
                target.clear(collection)
            for record in records:
                target.insert(collection, record)
            copied[collection.value] = len(records)
            logger.info("Migrated %d %s", len(records), collection.value)
    return copied


def main() -> int:
    """Main entry point."""
    config = LedgerConfig.from_env()

    parser = argparse.ArgumentParser(description="Migrate a JSON record store to PostgreSQL")
    parser.add_argument(
        "--db-path",
        type=Path,
        default=config.storage.json_path,
        help="JSON store to read (default: ESTATE_DB_PATH or data/db.json)",
    )
    parser.add_argument(
        "--postgres-url",
        type=str,
        default=config.storage.postgres.connection_string,
        help="PostgreSQL connection string (default: from POSTGRES_* variables)",
    )
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Empty the PostgreSQL collections before copying",
    )
    args = parser.parse_args()

    setup_logging(config.log_level, config.log_format)

    if not args.db_path.exists():
        logger.error("JSON store %s does not exist", args.db_path)
        return 1

    from estate_ledger.store.postgres import PostgresRecordStore

    t0 = time.perf_counter()
    try:
        source = JsonFileRecordStore(args.db_path)
        target = PostgresRecordStore(args.postgres_url)
    except EstateLedgerError as exc:
        logger.error("Cannot open stores: %s", exc)
        return 1

    try:
        copied = migrate(source, target, replace=args.replace)
    except EstateLedgerError as exc:
        logger.error("Migration failed, nothing was written: %s", exc)
        return 1
    finally:
        target.close()

    logger.info("Migration complete in %.1fs: %d records", time.perf_counter() - t0, sum(copied.values()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
