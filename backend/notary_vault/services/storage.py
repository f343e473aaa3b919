"""
Object storage for attachment bytes.

Only metadata lives in the database; bytes are addressed by bucket and key.
"""
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from notary_vault.errors import InvalidInputError, StorageUnavailableError

logger = logging.getLogger("notary_vault.storage")


class ObjectStorage(ABC):
    @abstractmethod
    def put(self, bucket: str, key: str, data: bytes) -> None:
        ...

    @abstractmethod
    def get(self, bucket: str, key: str) -> bytes:
        ...

    @abstractmethod
    def delete(self, bucket: str, key: str) -> None:
        """Remove an object. Deleting a missing object is not an error."""

    @abstractmethod
    def exists(self, bucket: str, key: str) -> bool:
        ...


class LocalObjectStorage(ObjectStorage):
    """Filesystem-backed storage: ``<root>/<bucket>/<key>``, written read-only."""

    def __init__(self, root: Path):
        self.root = root

    def _path(self, bucket: str, key: str) -> Path:
        base = (self.root / bucket).resolve()
        path = (base / key).resolve()
        if base not in path.parents:
            raise InvalidInputError(f"Invalid storage key '{key}'.")
        return path

    def put(self, bucket: str, key: str, data: bytes) -> None:
        path = self._path(bucket, key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            os.chmod(path, 0o444)
        except OSError as exc:
            logger.error("Failed to store object %s/%s: %s", bucket, key, exc)
            raise StorageUnavailableError(f"Could not store object '{key}'.") from exc

    def get(self, bucket: str, key: str) -> bytes:
        path = self._path(bucket, key)
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise StorageUnavailableError(f"Object '{key}' is missing from storage.") from exc
        except OSError as exc:
            logger.error("Failed to read object %s/%s: %s", bucket, key, exc)
            raise StorageUnavailableError(f"Could not read object '{key}'.") from exc

    def delete(self, bucket: str, key: str) -> None:
        path = self._path(bucket, key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.error("Failed to delete object %s/%s: %s", bucket, key, exc)
            raise StorageUnavailableError(f"Could not delete object '{key}'.") from exc

    def exists(self, bucket: str, key: str) -> bool:
        return self._path(bucket, key).is_file()
