"""
Shared building blocks for the document engine packages.

- Error taxonomy (``EngineError`` and its six kinds)
- Logging setup
- Storage gateway interface and local implementation
- PDF open/info helpers on top of PyMuPDF
- Option validation at service boundaries
"""

from .exceptions import (
    EngineError,
    InputError,
    RangeError,
    PasswordError,
    LibraryLimitation,
    SerializationError,
    StorageError,
    format_error_chain,
)
from .logging_config import setup_logging, get_logger
from .options import build_options
from .storage import StorageGateway, LocalStorage, build_storage_path, default_data_dir

__all__ = [
    "EngineError",
    "InputError",
    "RangeError",
    "PasswordError",
    "LibraryLimitation",
    "SerializationError",
    "StorageError",
    "format_error_chain",
    "setup_logging",
    "get_logger",
    "build_options",
    "StorageGateway",
    "LocalStorage",
    "build_storage_path",
    "default_data_dir",
]
