"""
Best-effort PDF compression.

The document is re-serialized through PyMuPDF with garbage collection and
stream compression settings that grow with the compression level. The
result is not guaranteed to be smaller; a negative ratio is reported, not
raised.
"""

from __future__ import annotations

from typing import Any, Optional

from common.logging_config import get_logger
from common.pdf_utils import open_pdf

from .models import CompressionLevel, CompressOptions, CompressResult

logger = get_logger(__name__)

# Keyword arguments for fitz.Document.tobytes per level
LEVEL_SETTINGS: dict[CompressionLevel, dict[str, Any]] = {
    CompressionLevel.LOW: {"garbage": 1, "deflate": True},
    CompressionLevel.MEDIUM: {"garbage": 2, "deflate": True, "clean": True},
    CompressionLevel.HIGH: {
        "garbage": 3,
        "deflate": True,
        "deflate_images": True,
        "deflate_fonts": True,
        "clean": True,
    },
    CompressionLevel.MAXIMUM: {
        "garbage": 4,
        "deflate": True,
        "deflate_images": True,
        "deflate_fonts": True,
        "clean": True,
    },
}

STRIPS_METADATA = {CompressionLevel.HIGH, CompressionLevel.MAXIMUM}


def compression_ratio(original_size: int, result_size: int) -> float:
    """``(original - result) / original``; 0.0 for an empty original."""
    if original_size <= 0:
        return 0.0
    return round((original_size - result_size) / original_size, 4)


def compress_document(data: bytes, options: Optional[CompressOptions] = None) -> CompressResult:
    """
    Raises:
        InputError: The bytes are not a readable PDF
        PasswordError: The document is password-protected
    """
    options = options or CompressOptions()
    settings = dict(LEVEL_SETTINGS[options.compression_level])
    # Linearized output is written without object streams
    settings["use_objstms"] = 0 if options.linearize else 1

    with open_pdf(data, name=options.output_name) as doc:
        if options.remove_metadata or options.compression_level in STRIPS_METADATA:
            doc.set_metadata({})
            doc.del_xml_metadata()
        page_count = doc.page_count
        output = doc.tobytes(**settings)

    ratio = compression_ratio(len(data), len(output))
    logger.info(
        f"Compressed {options.output_name} ({options.compression_level.value}): "
        f"{len(data)} -> {len(output)} bytes (ratio {ratio})"
    )
    return CompressResult(
        filename=options.output_name,
        size=len(output),
        data=output,
        original_size=len(data),
        compression_ratio=ratio,
        page_count=page_count,
    )
