from src.storage.kv import (
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    S3KeyValueStore,
)
from src.storage.schema import SCHEMA_VERSION, decode, encode

__all__ = [
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "S3KeyValueStore",
    "SCHEMA_VERSION",
    "decode",
    "encode",
]
