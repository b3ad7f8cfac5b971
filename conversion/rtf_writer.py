"""
Rich-text (RTF) writer.

Emits a plain RTF 1 stream: Arial font table, a colour table built from the
paragraph colours, ``Page N`` headings, styled paragraphs and ``\\trowd``
tables. All text goes through :func:`escape_rtf`.
"""

from __future__ import annotations

from .models import ConversionOptions, ParagraphStyle, StructuredDocument, Table

CELL_WIDTH_TWIPS = 2000


def escape_rtf(text: str) -> str:
    """
    Escape text for an RTF stream.

    Backslashes are escaped first, then braces, then newlines become
    ``\\par``; characters outside ASCII are written as ``\\uN?`` last, so no
    substitution is applied to the output of another.
    """
    escaped = text.replace("\\", "\\\\")
    escaped = escaped.replace("{", "\\{").replace("}", "\\}")
    escaped = escaped.replace("\r\n", "\n").replace("\n", "\\par ")

    parts = []
    for char in escaped:
        code = ord(char)
        if code < 128:
            parts.append(char)
            continue
        for unit in _utf16_units(code):
            # RTF \u takes a signed 16-bit value
            parts.append(f"\\u{unit - 65536 if unit > 32767 else unit}?")
    return "".join(parts)


def _utf16_units(code: int) -> list[int]:
    if code <= 0xFFFF:
        return [code]
    code -= 0x10000
    return [0xD800 + (code >> 10), 0xDC00 + (code & 0x3FF)]


def _color_table(colors: list[str]) -> str:
    entries = ""
    for color in colors:
        red, green, blue = (int(color[i:i + 2], 16) for i in (1, 3, 5))
        entries += f"\\red{red}\\green{green}\\blue{blue};"
    return "{\\colortbl;" + entries + "}"


def write_rtf(document: StructuredDocument, options: ConversionOptions) -> bytes:
    colors = ["#000000"]
    if options.preserve_formatting:
        for page in document.pages:
            for paragraph in page.paragraphs:
                if paragraph.style.color not in colors:
                    colors.append(paragraph.style.color)

    out = [
        "{\\rtf1\\ansi\\deff0",
        "{\\fonttbl{\\f0\\fswiss Arial;}}",
        _color_table(colors),
        "\\f0\\fs24",
    ]

    if options.include_title and document.metadata.title:
        out.append(f"\\qc\\fs32\\b {escape_rtf(document.metadata.title)}\\b0\\fs24\\par\\ql\\par")

    for number, page in enumerate(document.pages):
        if number:
            out.append("\\page")
        out.append(f"\\fs24\\b Page {page.page_number}\\b0\\par\\par")

        for paragraph in page.paragraphs:
            style = paragraph.style if options.preserve_formatting else ParagraphStyle()
            out.append(_paragraph(paragraph.text, style, colors.index(style.color) + 1))

        for table in page.tables:
            out.extend(_table(table))
            out.append("\\pard\\par")

    out.append("}")
    return "\n".join(out).encode("ascii")


def _paragraph(text: str, style: ParagraphStyle, color_index: int) -> str:
    opening = f"\\fs{int(round(style.font_size * 2))}\\cf{color_index}"
    closing = "\\cf0"
    if style.bold:
        opening += "\\b"
        closing = "\\b0" + closing
    if style.italic:
        opening += "\\i"
        closing = "\\i0" + closing
    return f"{opening} {escape_rtf(text)}{closing}\\fs24\\par\\par"


def _table(table: Table) -> list[str]:
    columns = max(1, table.column_count)
    boundaries = "".join(f"\\cellx{CELL_WIDTH_TWIPS * (i + 1)}" for i in range(columns))
    rows = []
    for row in table.rows:
        texts = row.texts + [""] * (columns - len(row.cells))
        cells = "".join(f"\\intbl {escape_rtf(text)}\\cell" for text in texts)
        rows.append(f"\\trowd\\trgaph108{boundaries}\n{cells}\\row")
    return rows
