"""
Error Taxonomy for the Document Engine.

Every failure surfaced to a caller is an ``EngineError`` subclass carrying a
stable ``kind`` tag, so callers can branch on ``error.kind`` (or on the class)
without string matching.

Exception Hierarchy:
    EngineError (base)
    ├── InputError            unsupported format hint, corrupt bytes, bad options
    ├── RangeError            page index out of bounds, empty or inverted range
    ├── PasswordError         password required or incorrect
    ├── LibraryLimitation     no available provider can perform the request
    ├── SerializationError    target-format writer failure, unknown target
    └── StorageError          storage gateway read/write failure

Usage:
    from common.exceptions import EngineError, PasswordError

    try:
        result = service.unlock(data, password="secret")
    except PasswordError as e:
        print(f"Wrong password: {e.message}")
    except EngineError as e:
        payload = e.to_dict()   # {"kind": ..., "message": ...}
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class EngineError(Exception):
    """
    Base exception for all engine errors.

    Attributes:
        kind: Stable machine-readable error tag
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    kind: str = "engine_error"

    def __init__(
        self,
        message: str = "A document engine error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)

    def to_dict(self) -> dict[str, str]:
        """Structured form handed to callers: ``{kind, message}``."""
        return {"kind": self.kind, "message": self.message}


# =============================================================================
# INPUT / RANGE ERRORS
# =============================================================================


class InputError(EngineError):
    """Raised for unsupported format hints, unreadable bytes or invalid options."""

    kind = "input_error"


class RangeError(EngineError):
    """
    Raised when a page selection cannot be satisfied.

    Attributes:
        total_pages: Page count of the document the range was checked against
    """

    kind = "range_error"

    def __init__(
        self,
        message: str = "Invalid page range",
        total_pages: Optional[int] = None,
        details: Optional[str] = None,
    ):
        self.total_pages = total_pages
        if total_pages is not None:
            message = f"{message} (document has {total_pages} pages)"
        super().__init__(message, details)


# =============================================================================
# PROTECTION ERRORS
# =============================================================================


class PasswordError(EngineError):
    """
    Raised when a password is required or was rejected.

    Only an explicit authentication failure reported by a provider (or a
    document that demands a password the caller did not give) produces this.

    Attributes:
        provider: Name of the provider that rejected the password (optional)
    """

    kind = "password_error"

    def __init__(
        self,
        message: str = "Incorrect password. Please check your password and try again.",
        provider: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.provider = provider
        super().__init__(message, details)


class LibraryLimitation(EngineError):
    """
    Raised when no available provider supports the requested feature.

    Attributes:
        attempts: ``(provider_name, message)`` pairs collected along the chain
    """

    kind = "library_limitation"

    def __init__(
        self,
        message: str = "No available provider supports this operation",
        attempts: Optional[list[tuple[str, str]]] = None,
    ):
        self.attempts = attempts or []
        details = None
        if self.attempts:
            details = "; ".join(f"{name}: {reason}" for name, reason in self.attempts)
        super().__init__(message, details)


# =============================================================================
# OUTPUT ERRORS
# =============================================================================


class SerializationError(EngineError):
    """
    Raised when a target-format writer fails or the target is unknown.

    Attributes:
        target: The requested target kind
        original_error: The underlying writer error (optional)
    """

    kind = "serialization_error"

    def __init__(
        self,
        message: str = "Serialization failed",
        target: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.target = target
        self.original_error = original_error
        details = str(original_error) if original_error else None
        if target:
            message = f"{message} [{target}]"
        super().__init__(message, details)


class StorageError(EngineError):
    """
    Raised when the storage gateway cannot read or write a path.

    Attributes:
        path: Storage path involved
        original_error: The underlying I/O error (optional)
    """

    kind = "storage_error"

    def __init__(
        self,
        message: str = "Storage operation failed",
        path: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.path = path
        self.original_error = original_error
        details = str(original_error) if original_error else None
        if path:
            message = f"{message} [{path}]"
        super().__init__(message, details)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def format_error_chain(error: BaseException) -> str:
    """
    Format an exception and its chain for logging.

    Returns a multi-line string showing the error hierarchy.
    """
    lines = []
    current: Optional[BaseException] = error
    depth = 0

    while current is not None:
        prefix = "  " * depth + ("└─ " if depth > 0 else "")
        lines.append(f"{prefix}{type(current).__name__}: {current}")

        if getattr(current, "original_error", None) is not None:
            current = current.original_error  # type: ignore[attr-defined]
            depth += 1
        elif current.__cause__:
            current = current.__cause__
            depth += 1
        else:
            break

    return "\n".join(lines)
