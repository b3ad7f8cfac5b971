"""
Content Extractor - source bytes to Structured Document Model.

Pipeline per request:
    1. Resolve the format hint (extension or content type)
    2. Open the bytes with PyMuPDF (page count, page sizes, metadata)
    3. Run the text pass through the injected ``TextSource``
    4. Infer page boundaries (explicit markers or proportional allocation)
    5. Split each page into paragraphs and run the table classifier
    6. Estimate the column count per page

If the text pass fails or yields no text, a degraded document with one
placeholder paragraph per page is returned instead of raising, so that a
conversion can always complete.

Usage:
    from conversion.extractor import ContentExtractor

    extractor = ContentExtractor()
    document = extractor.extract(pdf_bytes, "pdf", page_range="1-3")
    print(document.page_count, document.page_mapping)
"""

from __future__ import annotations

from typing import Optional

import fitz  # PyMuPDF

from common.exceptions import InputError, RangeError
from common.logging_config import get_logger
from common.pdf_utils import open_document, read_metadata

from .models import (
    ConversionOptions,
    DocumentMetadata,
    Page,
    PageMapping,
    Paragraph,
    StructuredDocument,
)
from .table_detector import NullTableClassifier, TableClassifier, WhitespaceTableClassifier
from .text_extractor import (
    ColumnEstimator,
    PyMuPDFTextSource,
    TextSource,
    clean_text,
    infer_page_texts,
    split_paragraphs,
    strip_control_chars,
)

logger = get_logger(__name__)


# =============================================================================
# INPUT FORMATS
# =============================================================================

# Extension -> PyMuPDF filetype
INPUT_FORMATS = {
    "pdf": "pdf",
    "xps": "xps",
    "oxps": "xps",
    "epub": "epub",
    "cbz": "cbz",
    "fb2": "fb2",
    "txt": "txt",
}

CONTENT_TYPES = {
    "application/pdf": "pdf",
    "application/vnd.ms-xpsdocument": "xps",
    "application/oxps": "xps",
    "application/epub+zip": "epub",
    "application/vnd.comicbook+zip": "cbz",
    "application/x-fictionbook+xml": "fb2",
    "text/plain": "txt",
}


def resolve_input_format(format_hint: str) -> str:
    """
    Map an extension (``"pdf"``, ``".PDF"``, ``"report.pdf"``) or a content
    type to a PyMuPDF file type.

    Raises:
        InputError: If the hint names no supported input format
    """
    hint = (format_hint or "").strip().lower()
    if "/" in hint:
        filetype = CONTENT_TYPES.get(hint.split(";", 1)[0].strip())
    else:
        filetype = INPUT_FORMATS.get(hint.rsplit(".", 1)[-1])
    if filetype is None:
        raise InputError(
            f"Unsupported input format: {format_hint!r}",
            details=f"Supported: {', '.join(sorted(INPUT_FORMATS))}",
        )
    return filetype


def parse_page_selection(selection: str, total_pages: int) -> list[int]:
    """
    Parse a compact 1-based selection (``"1-3,5"``) into sorted, unique
    0-based page indices clamped to the document. Unparseable parts are
    ignored.
    """
    indices: set[int] = set()
    for part in selection.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            first, _, last = part.partition("-")
            try:
                start, end = int(first), int(last)
            except ValueError:
                continue
            for number in range(max(1, start), min(total_pages, end) + 1):
                indices.add(number - 1)
        else:
            try:
                number = int(part)
            except ValueError:
                continue
            if 1 <= number <= total_pages:
                indices.add(number - 1)
    return sorted(indices)


def placeholder_text(page_number: int) -> str:
    return f"Content from page {page_number} of the document."


# =============================================================================
# EXTRACTOR
# =============================================================================


class ContentExtractor:
    """
    Turns source document bytes into a ``StructuredDocument``.

    Args:
        text_source: Text pass implementation (default: PyMuPDF page text)
        table_classifier: Table detection strategy (default: whitespace runs)
    """

    def __init__(
        self,
        text_source: Optional[TextSource] = None,
        table_classifier: Optional[TableClassifier] = None,
    ):
        self.text_source = text_source or PyMuPDFTextSource()
        self.table_classifier = table_classifier or WhitespaceTableClassifier()

    def extract(
        self,
        data: bytes,
        format_hint: str,
        page_range: str = "",
        options: Optional[ConversionOptions] = None,
    ) -> StructuredDocument:
        """
        Extract the SDM from ``data``.

        Raises:
            InputError: Unsupported format hint or unreadable bytes
            PasswordError: The document is password-protected
            RangeError: ``page_range`` selects no page
        """
        options = options or ConversionOptions()
        selection = page_range or options.page_range
        filetype = resolve_input_format(format_hint)

        with open_document(data, filetype=filetype) as doc:
            total_pages = doc.page_count
            if total_pages < 1:
                raise InputError("Document has no pages")

            selected = list(range(total_pages))
            if selection:
                selected = parse_page_selection(selection, total_pages)
                if not selected:
                    raise RangeError(
                        f"Page range {selection!r} selects no pages",
                        total_pages=total_pages,
                    )

            metadata = DocumentMetadata(**read_metadata(doc))
            sizes = [(doc[i].rect.width, doc[i].rect.height) for i in range(total_pages)]

            text = self._run_text_pass(doc)
            if text is None:
                return self._degraded(metadata, sizes, selected)

            page_texts, mapping = infer_page_texts(text, total_pages)
            classifier = self.table_classifier if options.detect_tables else NullTableClassifier()
            estimator = ColumnEstimator(column_gap_ratio=options.column_gap_ratio)

            pages = []
            for index in selected:
                page_text = strip_control_chars(page_texts[index])
                width, height = sizes[index]
                column_count = 1
                if options.detect_columns:
                    column_count = estimator.count_columns(doc[index])
                pages.append(
                    Page(
                        page_number=index + 1,
                        width=width,
                        height=height,
                        paragraphs=[Paragraph(text=p) for p in split_paragraphs(page_text)],
                        tables=classifier.detect(page_text),
                        column_count=column_count,
                    )
                )

        logger.info(
            f"Extracted {len(pages)}/{total_pages} pages ({mapping.value} mapping, "
            f"{sum(len(p.tables) for p in pages)} tables)"
        )
        return StructuredDocument(metadata=metadata, pages=pages, page_mapping=mapping)

    def _run_text_pass(self, doc: fitz.Document) -> Optional[str]:
        """Full document text, or ``None`` when the pass failed or found nothing."""
        try:
            text = self.text_source.extract_text(doc)
        except Exception as exc:
            logger.warning(f"Text extraction failed, returning degraded document: {exc}")
            return None

        text = clean_text(text or "")
        if not text.replace("\f", "").strip():
            logger.warning("Text extraction yielded no text, returning degraded document")
            return None
        return text

    @staticmethod
    def _degraded(
        metadata: DocumentMetadata,
        sizes: list[tuple[float, float]],
        selected: list[int],
    ) -> StructuredDocument:
        pages = [
            Page(
                page_number=index + 1,
                width=sizes[index][0],
                height=sizes[index][1],
                paragraphs=[Paragraph(text=placeholder_text(index + 1))],
            )
            for index in selected
        ]
        return StructuredDocument(
            metadata=metadata,
            pages=pages,
            degraded=True,
            page_mapping=PageMapping.PLACEHOLDER,
        )
