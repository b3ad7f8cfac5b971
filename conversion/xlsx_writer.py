"""
Spreadsheet (XLSX) writer built on openpyxl.

Two modes:
    - one sheet per page (``Page N`` sheets)
    - a single ``Converted Content`` sheet with a bold page-header row per page
      and a blank row between pages

Paragraph text occupies column A, one row each. A table starts one blank row
after the preceding content, fills contiguous rows (cell i in column i+1)
and is followed by one blank row.
"""

from __future__ import annotations

import io

from openpyxl import Workbook
from openpyxl.cell.cell import Cell
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .models import ConversionOptions, Page, StructuredDocument

SINGLE_SHEET_TITLE = "Converted Content"
COLUMN_WIDTH = 20
HEADER_FONT = Font(bold=True, size=14)


def write_xlsx(document: StructuredDocument, options: ConversionOptions) -> bytes:
    workbook = Workbook()

    if options.one_sheet_per_page and document.pages:
        workbook.remove(workbook.active)
        for page in document.pages:
            sheet = workbook.create_sheet(f"Page {page.page_number}")
            _write_page(sheet, page, 1, options)
            _set_widths(sheet, page)
    else:
        sheet = workbook.active
        sheet.title = SINGLE_SHEET_TITLE
        row = 1
        for page in document.pages:
            sheet.cell(row=row, column=1, value=f"Page {page.page_number}").font = HEADER_FONT
            row = _write_page(sheet, page, row + 1, options)
            row += 1
        for page in document.pages:
            _set_widths(sheet, page)

    properties = workbook.properties
    properties.title = document.metadata.title or None
    properties.creator = document.metadata.author or None
    properties.subject = document.metadata.subject or None

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def _write_page(sheet: Worksheet, page: Page, row: int, options: ConversionOptions) -> int:
    """Write one page starting at ``row``; returns the next free row."""
    for paragraph in page.paragraphs:
        cell = _text_cell(sheet, row, 1, paragraph.text)
        if options.preserve_formatting and (paragraph.style.bold or paragraph.style.italic):
            cell.font = Font(bold=paragraph.style.bold, italic=paragraph.style.italic)
        row += 1

    for table in page.tables:
        row += 1
        for table_row in table.rows:
            for column, table_cell in enumerate(table_row.cells, start=1):
                _text_cell(sheet, row, column, table_cell.text)
            row += 1
        row += 1

    return row


def _text_cell(sheet: Worksheet, row: int, column: int, text: str) -> Cell:
    # openpyxl treats any string starting with "=" as a formula
    cell = sheet.cell(row=row, column=column, value=text)
    cell.data_type = "s"
    return cell


def _set_widths(sheet: Worksheet, page: Page) -> None:
    columns = max([1] + [table.column_count for table in page.tables])
    for column in range(1, columns + 1):
        sheet.column_dimensions[get_column_letter(column)].width = COLUMN_WIDTH
