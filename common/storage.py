"""
Storage gateway used by the services in from-storage mode.

The engine only needs path-addressed blob access; ``StorageGateway`` is the
interface, ``LocalStorage`` a filesystem implementation rooted at a data
directory.
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import Protocol

from .exceptions import StorageError
from .logging_config import get_logger

logger = get_logger(__name__)

DATA_DIR_ENV = "DOC_ENGINE_DATA_DIR"
DEFAULT_DATA_DIR = "data/storage"


class StorageGateway(Protocol):
    def read(self, path: str) -> bytes:
        ...

    def write(self, path: str, data: bytes, content_type: str) -> None:
        ...


def build_storage_path(prefix: str, filename: str) -> str:
    """Unique storage key of the form ``<prefix>/<uuid>-<filename>``."""
    return f"{prefix}/{uuid.uuid4()}-{Path(filename).name}"


class LocalStorage:
    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)

    def resolve(self, path: str) -> Path:
        base = self.data_dir.resolve()
        target = (base / path).resolve()
        if target != base and base not in target.parents:
            raise StorageError("Path escapes the storage root", path=path)
        return target

    def read(self, path: str) -> bytes:
        target = self.resolve(path)
        try:
            return target.read_bytes()
        except FileNotFoundError as exc:
            raise StorageError("File not found", path=path, original_error=exc) from exc
        except OSError as exc:
            raise StorageError("Failed to read file", path=path, original_error=exc) from exc

    def write(self, path: str, data: bytes, content_type: str) -> None:
        target = self.resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise StorageError("Failed to write file", path=path, original_error=exc) from exc
        logger.debug(f"Stored {len(data)} bytes ({content_type}) at {path}")


def default_data_dir() -> str:
    """Storage root from ``DOC_ENGINE_DATA_DIR``, else ``data/storage``."""
    return os.environ.get(DATA_DIR_ENV, DEFAULT_DATA_DIR)
