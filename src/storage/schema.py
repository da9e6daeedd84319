"""Versioned JSON envelopes for persisted blobs.

Written form: {"schema_version": 1, "data": ...}

Blobs without an envelope are version 0 (written by the browser build,
camelCase keys) and are migrated on load. Anything that cannot be parsed
or migrated raises StorageCorruptionError.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable

from src.errors import StorageCorruptionError

SCHEMA_VERSION = 1

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _snake_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {_snake(k): _snake_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_snake_keys(v) for v in value]
    return value


# {from_version: migration to from_version + 1}
MIGRATIONS: dict[int, Callable[[Any], Any]] = {
    0: _snake_keys,
}


def encode(data: Any) -> str:
    return json.dumps({"schema_version": SCHEMA_VERSION, "data": data}, ensure_ascii=False, default=str)


def decode(key: str, raw: str) -> Any:
    """Parses a stored blob and migrates it to the current schema version."""
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise StorageCorruptionError(key, f"invalid JSON ({e})")

    if isinstance(parsed, dict) and "schema_version" in parsed:
        version = parsed["schema_version"]
        if not isinstance(version, int) or isinstance(version, bool) or "data" not in parsed:
            raise StorageCorruptionError(key, "malformed envelope")
        data = parsed["data"]
    else:
        version, data = 0, parsed

    if version > SCHEMA_VERSION or (version < SCHEMA_VERSION and version not in MIGRATIONS):
        raise StorageCorruptionError(key, f"unsupported schema version {version}")

    while version < SCHEMA_VERSION:
        data = MIGRATIONS[version](data)
        version += 1
    return data
