#!/usr/bin/env python3
"""Seed a record store with a sample real-estate portfolio.

Projects, properties, customers, leases and their payments are created
through the same services the application uses, so numbering and
settlement match what real input would produce.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from estate_ledger.config import LedgerConfig, StorageConfig
from estate_ledger.exceptions import EstateLedgerError
from estate_ledger.generators import SampleDataGenerator
from estate_ledger.logging import setup_logging
from estate_ledger.services.catalog import CatalogService
from estate_ledger.store import open_store

logger = logging.getLogger(__name__)


def main() -> int:
    """Main entry point."""
    config = LedgerConfig.from_env()

    parser = argparse.ArgumentParser(description="Seed a record store with sample data")
    parser.add_argument(
        "--backend",
        choices=["json", "postgres"],
        default=config.storage.backend if config.storage.backend != "memory" else "json",
        help="Storage backend (default: ESTATE_STORAGE or json)",
    )
    parser.add_argument(
        "--db-path",
        type=Path,
        default=config.storage.json_path,
        help="JSON store location (default: ESTATE_DB_PATH or data/db.json)",
    )
    parser.add_argument(
        "--projects",
        type=int,
        default=2,
        help="Number of projects to generate (default: 2)",
    )
    parser.add_argument(
        "--properties-per-project",
        type=int,
        default=5,
        help="Properties per project (default: 5)",
    )
    parser.add_argument(
        "--customers",
        type=int,
        default=10,
        help="Number of customers to generate (default: 10)",
    )
    parser.add_argument(
        "--months",
        type=int,
        default=6,
        help="Months of payment history (default: 6)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for reproducibility (default: 42)",
    )
    parser.add_argument(
        "--clean",
        action="store_true",
        help="Remove existing data (users are kept) before seeding",
    )
    args = parser.parse_args()

    setup_logging(config.log_level, config.log_format)

    storage = StorageConfig(backend=args.backend, json_path=args.db_path, postgres=config.storage.postgres)
    t0 = time.perf_counter()
    store = open_store(storage)
    try:
        if args.clean:
            removed = CatalogService(store).clean_data()
            logger.info("Removed existing data: %s", removed)

        generator = SampleDataGenerator(store, seed=args.seed)
        data = generator.generate(
            projects=args.projects,
            properties_per_project=args.properties_per_project,
            customers=args.customers,
            months=args.months,
        )
    except EstateLedgerError as exc:
        logger.error("Seeding failed: %s", exc)
        return 1
    finally:
        store.close()

    logger.info("Seeded %s in %.1fs: %s", args.backend, time.perf_counter() - t0, data.counts())
    return 0


if __name__ == "__main__":
    sys.exit(main())
