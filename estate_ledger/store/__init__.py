"""Record stores and the transactional boundary around them."""

from estate_ledger.store.base import Collection, RecordStore
from estate_ledger.store.factory import open_store
from estate_ledger.store.json_file import JsonFileRecordStore
from estate_ledger.store.memory import InMemoryRecordStore

__all__ = [
    "Collection",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "RecordStore",
    "open_store",
]
