"""
PDF analysis: basic information, per-page geometry, security flags,
content hints and handling recommendations.
"""

from __future__ import annotations

from typing import Optional

import fitz  # PyMuPDF

from common.logging_config import get_logger
from common.pdf_utils import open_pdf

from .models import (
    BasicInfo,
    OptimizationInfo,
    PageInfo,
    PDFAnalysis,
    Recommendation,
    SecurityInfo,
)

logger = get_logger(__name__)

LARGE_FILE_BYTES = 10 * 1024 * 1024
LARGE_PAGE_COUNT = 50


def analyze_document(
    data: bytes,
    password: Optional[str] = None,
    name: Optional[str] = None,
) -> PDFAnalysis:
    """
    Raises:
        InputError: The bytes are not a readable PDF
        PasswordError: A password is required (or wrong)
    """
    with open_pdf(data, password=password, name=name) as doc:
        metadata = doc.metadata or {}
        basic = BasicInfo(
            page_count=doc.page_count,
            file_size=len(data),
            title=metadata.get("title") or "Untitled",
            author=metadata.get("author") or "Unknown",
            subject=metadata.get("subject") or "",
            creator=metadata.get("creator") or "Unknown",
            producer=metadata.get("producer") or "Unknown",
            creation_date=metadata.get("creationDate") or "",
            modification_date=metadata.get("modDate") or "",
        )

        pages = []
        image_count = 0
        has_text = False
        for page in doc:
            width, height = page.rect.width, page.rect.height
            pages.append(
                PageInfo(
                    page_number=page.number + 1,
                    width=round(width, 2),
                    height=round(height, 2),
                    orientation="landscape" if width > height else "portrait",
                    aspect_ratio=round(width / height, 2) if height else 0.0,
                )
            )
            image_count += len(page.get_images(full=False))
            if not has_text and page.get_text("text").strip():
                has_text = True

        security = read_security(doc)
        optimization = OptimizationInfo(
            has_images=image_count > 0,
            has_text=has_text,
            has_bookmarks=bool(doc.get_toc(simple=True)),
            has_forms=bool(doc.is_form_pdf),
            image_count=image_count,
        )

    analysis = PDFAnalysis(
        basic_info=basic,
        pages=pages,
        security=security,
        optimization=optimization,
        recommendations=recommend(basic),
    )
    logger.info(
        f"Analyzed {name or 'document'}: {basic.page_count} pages, "
        f"{len(analysis.recommendations)} recommendations"
    )
    return analysis


def read_security(doc: fitz.Document) -> SecurityInfo:
    permissions = doc.permissions
    return SecurityInfo(
        encrypted=bool(doc.is_encrypted or (doc.metadata or {}).get("encryption")),
        printing=bool(permissions & fitz.PDF_PERM_PRINT),
        copying=bool(permissions & fitz.PDF_PERM_COPY),
        editing=bool(permissions & fitz.PDF_PERM_MODIFY),
        annotating=bool(permissions & fitz.PDF_PERM_ANNOTATE),
    )


def recommend(basic: BasicInfo) -> list[Recommendation]:
    recommendations = []
    if basic.file_size > LARGE_FILE_BYTES:
        recommendations.append(
            Recommendation(
                type="compression",
                message="File is large and could benefit from compression",
                action="compress",
            )
        )
    if basic.page_count > LARGE_PAGE_COUNT:
        recommendations.append(
            Recommendation(
                type="split",
                message="Large document could be split for easier handling",
                action="split",
            )
        )
    if basic.title == "Untitled":
        recommendations.append(
            Recommendation(
                type="metadata",
                message="Document lacks proper metadata",
                action="add_metadata",
            )
        )
    return recommendations
