"""
PDF Utilities shared by the engine packages.

This module provides document handling functionality:
- Opening documents from immutable byte buffers (never from shared paths)
- Mapping PyMuPDF open/authentication failures onto the error taxonomy
- Metadata access

Uses PyMuPDF (fitz) for all parsing and writing.
"""

from __future__ import annotations

from typing import Optional

import fitz  # PyMuPDF

from .exceptions import InputError, PasswordError


# =============================================================================
# CONSTANTS
# =============================================================================

PDF_MIME_TYPE = "application/pdf"

# Points (1/72 inch)
A4_SIZE = (595.28, 841.89)

METADATA_FIELDS = ("title", "author", "subject", "creator")


# =============================================================================
# OPENING DOCUMENTS
# =============================================================================


def open_document(
    data: bytes,
    filetype: str = "pdf",
    password: Optional[str] = None,
    name: Optional[str] = None,
) -> fitz.Document:
    """
    Open a document from bytes.

    The caller owns the returned document and must close it
    (``with open_document(...) as doc:``).

    Args:
        data: Source bytes
        filetype: PyMuPDF file type ("pdf", "xps", "epub", ...)
        password: Password for protected documents (optional)
        name: Display name used in error messages (optional)

    Raises:
        InputError: If the bytes cannot be opened as ``filetype``
        PasswordError: If the document needs a password that was not given
            or was rejected
    """
    label = name or f"{filetype} document"
    if not data:
        raise InputError(f"Empty input: {label}")

    try:
        doc = fitz.open(stream=data, filetype=filetype)
    except Exception as exc:
        raise InputError(
            f"File is corrupted or unreadable: {label}",
            details=str(exc),
        ) from exc

    if doc.needs_pass:
        if not password or not doc.authenticate(password):
            doc.close()
            if password:
                raise PasswordError(f"Incorrect password for {label}")
            raise PasswordError(f"Password required to open {label}")

    return doc


def open_pdf(
    data: bytes,
    password: Optional[str] = None,
    name: Optional[str] = None,
) -> fitz.Document:
    """Open PDF bytes; see :func:`open_document`."""
    return open_document(data, filetype="pdf", password=password, name=name)


# =============================================================================
# METADATA
# =============================================================================


def read_metadata(doc: fitz.Document) -> dict[str, str]:
    """Title/author/subject/creator of ``doc``; missing fields become ``""``."""
    metadata = doc.metadata or {}
    return {key: metadata.get(key) or "" for key in METADATA_FIELDS}


def strip_extension(filename: str) -> str:
    """``"report.final.pdf"`` -> ``"report.final"``."""
    base = filename.rsplit("/", 1)[-1]
    if "." in base.lstrip("."):
        return base.rsplit(".", 1)[0]
    return base
