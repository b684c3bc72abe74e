"""Conversion between records and their JSON-compatible form.

Stored documents may come from older versions of the application: keys
in camelCase, enum values in upper case, amounts as floats, and early
income records shaped as receipts rather than transactions. All of that
is normalized here, once, when a record is read; the rest of the package
only ever sees current-shape dataclasses.
"""

from __future__ import annotations

import re
import types
from dataclasses import MISSING, asdict, fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Union, get_args, get_origin, get_type_hints

from estate_ledger.exceptions import StorageError, ValidationError
from estate_ledger.identifiers import SEQUENCES
from estate_ledger.models import (
    Customer,
    Document,
    Project,
    Property,
    Receipt,
    Rental,
    RentalContract,
    SaleContract,
    Transaction,
    User,
    parse_enum,
)
from estate_ledger.store.base import Collection, as_collection

MODELS: dict[Collection, type] = {
    Collection.PROJECTS: Project,
    Collection.PROPERTIES: Property,
    Collection.CUSTOMERS: Customer,
    Collection.RENTALS: Rental,
    Collection.TRANSACTIONS: Transaction,
    Collection.RECEIPTS: Receipt,
    Collection.DOCUMENTS: Document,
    Collection.RENTAL_CONTRACTS: RentalContract,
    Collection.SALE_CONTRACTS: SaleContract,
    Collection.USERS: User,
}

# Field names used by older documents, after camelCase -> snake_case.
ALIASES: dict[Collection, dict[str, str]] = {
    Collection.PROJECTS: {"project_id": "project_no"},
    Collection.PROPERTIES: {"property_id": "property_no", "type": "property_type"},
    Collection.CUSTOMERS: {"customer_id": "customer_no", "type": "customer_type"},
    Collection.RENTALS: {"rental_id": "rental_no"},
    Collection.TRANSACTIONS: {"type": "transaction_type"},
    Collection.RECEIPTS: {"type": "receipt_type"},
    Collection.RENTAL_CONTRACTS: {"type": "contract_type"},
    Collection.SALE_CONTRACTS: {"type": "contract_type"},
    Collection.USERS: {"password": "password_hash"},
}

LEGACY_RECEIPT_TYPES = {
    "rent": "rent_payment",
    "deposit": "deposit",
    "maintenance": "maintenance",
    "other": "other_income",
}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


# Encoding
def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return serialize_value(obj)
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


# Decoding
def snake_case(key: str) -> str:
    """``paidUntil`` -> ``paid_until``; snake_case keys pass through."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def normalize_keys(data: Mapping[str, Any], aliases: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Snake-case every key and apply ``aliases`` to the result."""
    aliases = aliases or {}
    result = {}
    for key, value in data.items():
        name = snake_case(key)
        result[aliases.get(name, name)] = value
    return result


def upgrade_transaction(data: Mapping[str, Any]) -> dict[str, Any]:
    """Bring a stored income/expense record to the current transaction shape.

    Receipt-shaped records (``receipt_no`` and a receipt type) become
    transactions numbered by their receipt number. Records without a
    category predate expenses and are income.
    """
    record = dict(data)
    if "transaction_no" not in record and "receipt_no" in record:
        record["transaction_no"] = record.pop("receipt_no")
        legacy_type = str(record.pop("transaction_type", "") or "").lower()
        record["transaction_type"] = LEGACY_RECEIPT_TYPES.get(legacy_type, "other_income")
    if not record.get("category"):
        record["category"] = "income"
    record.setdefault("transaction_type", "other_income")
    record.setdefault("payment_method", "cash")
    record.setdefault("paid_by", "Unknown")
    for key in ("project_id", "property_id"):
        if record.get(key) is None:
            record[key] = ""
    return record


def _upgrade_rental(data: dict[str, Any]) -> dict[str, Any]:
    if not data.get("paid_until"):
        data["paid_until"] = data.get("lease_start")
    return data


def _upgrade_document(data: dict[str, Any]) -> dict[str, Any]:
    related = data.pop("related_to", None)
    if isinstance(related, Mapping):
        data.setdefault("related_type", related.get("type"))
        data.setdefault("related_id", related.get("id"))
    return data


_UPGRADES = {
    Collection.TRANSACTIONS: upgrade_transaction,
    Collection.RENTALS: _upgrade_rental,
    Collection.DOCUMENTS: _upgrade_document,
}


def from_dict(collection: Collection | str, data: Mapping[str, Any]) -> Any:
    """Decode a stored document into the model of ``collection``.

    Raises
    ------
    StorageError
        If the document cannot be represented as a valid record.
    """
    coll = as_collection(collection)
    record = normalize_keys(data, ALIASES.get(coll))
    upgrade = _UPGRADES.get(coll)
    if upgrade is not None:
        record = upgrade(record)
    if coll.value in SEQUENCES:
        record.setdefault(SEQUENCES[coll.value][0], "")
    try:
        return decode_dataclass(MODELS[coll], record)
    except (ValidationError, ValueError, TypeError, InvalidOperation) as exc:
        raise StorageError(f"Malformed {coll.label.lower()} record {data.get('id')!r}: {exc}") from exc


def decode_dataclass(cls: type, data: Mapping[str, Any]) -> Any:
    """Build ``cls`` from ``data``, coercing each field to its annotation."""
    hints = get_type_hints(cls)
    kwargs = {}
    for f in fields(cls):
        if f.name in data:
            kwargs[f.name] = coerce(hints[f.name], data[f.name], f.name)
        elif f.default is MISSING and f.default_factory is MISSING:
            raise ValueError(f"missing field {f.name!r}")
    return cls(**kwargs)


def coerce(annotation: Any, value: Any, name: str) -> Any:
    """Coerce a JSON value to ``annotation``."""
    origin = get_origin(annotation)
    if origin in (Union, types.UnionType):
        if value is None or value == "":
            return None
        inner = [arg for arg in get_args(annotation) if arg is not type(None)]
        return coerce(inner[0], value, name)
    if value is None:
        return None
    if origin is list:
        (item_type,) = get_args(annotation)
        return [coerce(item_type, item, name) for item in value]
    if origin is dict:
        return {str(k): v for k, v in value.items()}
    if is_dataclass(annotation):
        return decode_dataclass(annotation, normalize_keys(value))
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return parse_enum(annotation, value, name)
    if annotation is Decimal:
        return parse_decimal(value)
    if annotation is datetime:
        return parse_datetime(value)
    if annotation is date:
        return parse_date(value)
    if annotation is bool:
        return bool(value)
    if annotation is int:
        return int(value)
    if annotation is str:
        return str(value)
    return value


def parse_decimal(value: Any) -> Decimal:
    """Exact decimal from a string, int or float (floats via ``str``)."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    return Decimal(str(value).strip())


def parse_datetime(value: Any) -> datetime:
    """ISO 8601 timestamp, accepting the ``Z`` suffix."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))


def parse_date(value: Any) -> date:
    """Calendar date from a date, a timestamp or an ISO string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])
