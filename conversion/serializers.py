"""
Format serializer registry.

Every target kind has exactly one serializer; :func:`serialize` is the only
dispatch point. Writers are pure functions ``(document, options) -> bytes``.

Usage:
    from conversion.serializers import serialize
    from conversion.models import TargetKind

    data = serialize(document, TargetKind.DOCX)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from common.exceptions import SerializationError
from common.logging_config import get_logger

from .docx_writer import write_docx
from .models import ConversionOptions, StructuredDocument, TargetKind
from .pptx_writer import write_pptx
from .rtf_writer import write_rtf
from .text_writer import write_text
from .xlsx_writer import write_xlsx

logger = get_logger(__name__)

Writer = Callable[[StructuredDocument, ConversionOptions], bytes]


@dataclass(frozen=True)
class Serializer:
    target: TargetKind
    mime_type: str
    extension: str
    write: Writer


SERIALIZERS: dict[TargetKind, Serializer] = {
    TargetKind.DOCX: Serializer(
        TargetKind.DOCX,
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "docx",
        write_docx,
    ),
    TargetKind.XLSX: Serializer(
        TargetKind.XLSX,
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "xlsx",
        write_xlsx,
    ),
    TargetKind.PPTX: Serializer(
        TargetKind.PPTX,
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        "pptx",
        write_pptx,
    ),
    TargetKind.RTF: Serializer(TargetKind.RTF, "application/rtf", "rtf", write_rtf),
    TargetKind.TXT: Serializer(TargetKind.TXT, "text/plain", "txt", write_text),
}


def get_serializer(target: Union[TargetKind, str]) -> Serializer:
    """
    Raises:
        SerializationError: If ``target`` is not a known target kind
    """
    try:
        kind = TargetKind(str(getattr(target, "value", target)).lower().lstrip("."))
    except ValueError as exc:
        raise SerializationError("Unsupported target format", target=str(target)) from exc
    return SERIALIZERS[kind]


def mime_type_for(target: Union[TargetKind, str]) -> str:
    return get_serializer(target).mime_type


def extension_for(target: Union[TargetKind, str]) -> str:
    return get_serializer(target).extension


def serialize(
    document: StructuredDocument,
    target: Union[TargetKind, str],
    options: Optional[ConversionOptions] = None,
) -> bytes:
    """
    Serialize ``document`` to the ``target`` format.

    Raises:
        SerializationError: Unknown target, or the writer failed
    """
    serializer = get_serializer(target)
    options = options or ConversionOptions()
    try:
        data = serializer.write(document, options)
    except Exception as exc:
        logger.error(f"{serializer.target.value} writer failed: {exc}")
        raise SerializationError(
            "Failed to write document",
            target=serializer.target.value,
            original_error=exc,
        ) from exc

    logger.debug(f"Serialized {document.page_count} pages to {len(data)} bytes ({serializer.extension})")
    return data
