"""Plain-text (TXT) writer."""

from __future__ import annotations

from .models import ConversionOptions, StructuredDocument


def write_text(document: StructuredDocument, options: ConversionOptions) -> bytes:
    lines: list[str] = []

    title = document.metadata.title
    if options.include_title and title:
        lines.extend([title, "=" * len(title), ""])

    for page in document.pages:
        lines.extend([f"--- Page {page.page_number} ---", ""])
        if page.paragraphs:
            lines.append("\n\n".join(p.text for p in page.paragraphs))
            lines.append("")
        for table in page.tables:
            lines.extend(" | ".join(row.texts) for row in table.rows)
            lines.append("")

    return "\n".join(lines).encode("utf-8")
