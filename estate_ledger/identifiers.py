"""Sequential, human-readable identifiers.

Every sequenced collection uses a fixed prefix and a zero-padded number,
e.g. ``TPL-0042``. The next number is one past the highest number ever
handed out that is still on record, so gaps left by deletions are never
filled::

    next_id(["TPL-0001", "TPL-0002", "TPL-0004"], "TPL")  # "TPL-0005"
"""

from __future__ import annotations

import re
import uuid
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from datetime import date

    from estate_ledger.store.base import Collection, RecordStore

DEFAULT_WIDTH = 4

# collection name -> (attribute holding the number, prefix)
SEQUENCES: dict[str, tuple[str, str]] = {
    "projects": ("project_no", "PRJ"),
    "properties": ("property_no", "PRP"),
    "customers": ("customer_no", "CUS"),
    "rentals": ("rental_no", "RNT"),
    "transactions": ("transaction_no", "TPL"),
    "receipts": ("receipt_no", "RCP"),
}

# Contract collections numbered PREFIX-YYYYMMDD-NNN, restarting each day
DAILY_SEQUENCES: dict[str, str] = {
    "rental_contracts": "RC",
    "sale_contracts": "SC",
}
DAILY_WIDTH = 3


def new_record_id() -> str:
    """Return a new opaque record id."""
    return uuid.uuid4().hex


def sequence_number(identifier: str | None, prefix: str) -> int:
    """Extract the numeric suffix of ``identifier``; 0 when malformed."""
    if not identifier:
        return 0
    match = re.search(rf"{re.escape(prefix)}-(\d+)", identifier)
    return int(match.group(1)) if match else 0


def next_id(existing: Iterable[str | None], prefix: str, width: int = DEFAULT_WIDTH) -> str:
    """Compute the next identifier in the ``prefix`` space.

    Parameters
    ----------
    existing : Iterable[str | None]
        Identifiers already on record. Missing or malformed ones count as 0.
    prefix : str
        Sequence prefix, e.g. ``"RNT"``.
    width : int
        Minimum number of digits (zero-padded).

    Returns
    -------
    str
        ``prefix-NNNN``.
    """
    highest = max((sequence_number(identifier, prefix) for identifier in existing), default=0)
    return f"{prefix}-{highest + 1:0{width}d}"


def next_sequence(store: RecordStore, collection: Collection | str) -> str:
    """Next identifier for ``collection``, computed from the store's contents.

    Call inside ``store.transaction()`` so the number cannot be handed out
    twice.
    """
    name = getattr(collection, "value", collection)
    attr, prefix = SEQUENCES[name]
    return next_id((getattr(record, attr, None) for record in store.read_all(name)), prefix)


def next_daily_number(store: RecordStore, collection: Collection | str, day: date) -> str:
    """Next contract number for ``day``, e.g. ``SC-20240115-003``.

    Numbers handed out on other days do not count. Call inside
    ``store.transaction()``.
    """
    name = getattr(collection, "value", collection)
    prefix = f"{DAILY_SEQUENCES[name]}-{day:%Y%m%d}"
    numbers = (getattr(record, "contract_number", None) for record in store.read_all(name))
    return next_id(numbers, prefix, width=DAILY_WIDTH)
