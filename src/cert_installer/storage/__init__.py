"""Durable local state: alias counter and installed key pair records."""

from .kv import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore
from .records import CertificateRecordStore, RecordLoadResult
from .sequence import AliasSequencer

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "CertificateRecordStore",
    "RecordLoadResult",
    "AliasSequencer",
]
