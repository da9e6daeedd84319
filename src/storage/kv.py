"""Key-value backends for persisted blobs.

Each backend stores text values under fixed keys:
- MemoryKeyValueStore: process memory (tests, demo)
- JsonFileKeyValueStore: one <key>.json file per key in a directory
- S3KeyValueStore: one object per key under a bucket prefix
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Returns the stored text, or None when the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Removes the key; absent keys are ignored."""
        ...


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore(KeyValueStore):
    def __init__(self, directory: str) -> None:
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self._path(key).write_text(value, encoding="utf-8")

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class S3KeyValueStore(KeyValueStore):
    """Blobs as S3 objects: s3://<bucket>/<prefix><key>.json"""

    def __init__(
        self,
        bucket_name: str,
        prefix: str = "dashboard/",
        region_name: str = "us-east-1",
        s3_client: Optional[Any] = None,
    ) -> None:
        self.bucket_name = bucket_name
        self.prefix = prefix
        # Injectable for tests
        self.s3 = s3_client or boto3.client("s3", region_name=region_name)

    def _object_key(self, key: str) -> str:
        return f"{self.prefix}{key}.json"

    def get(self, key: str) -> Optional[str]:
        try:
            response = self.s3.get_object(Bucket=self.bucket_name, Key=self._object_key(key))
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _MISSING_KEY_CODES:
                return None
            logger.error("S3 read error [%s]: %s", key, e)
            raise
        return response["Body"].read().decode("utf-8")

    def set(self, key: str, value: str) -> None:
        try:
            self.s3.put_object(
                Bucket=self.bucket_name,
                Key=self._object_key(key),
                Body=value.encode("utf-8"),
                ContentType="application/json",
            )
        except ClientError as e:
            logger.error("S3 write error [%s]: %s", key, e)
            raise

    def delete(self, key: str) -> None:
        try:
            self.s3.delete_object(Bucket=self.bucket_name, Key=self._object_key(key))
        except ClientError as e:
            logger.warning("S3 delete error [%s]: %s", key, e)
            raise
