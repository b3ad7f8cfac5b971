"""
Tests for the format serializers.

Each writer is checked by reading its output back with the same library
that wrote it (python-docx, openpyxl, python-pptx) or as text (RTF, TXT).
"""

import io

import pytest
from docx import Document
from openpyxl import load_workbook
from pptx import Presentation

from common.exceptions import SerializationError
from conversion.models import ConversionOptions, Page, Paragraph, StructuredDocument, Table, TargetKind
from conversion.rtf_writer import escape_rtf
from conversion.serializers import (
    SERIALIZERS,
    Serializer,
    extension_for,
    get_serializer,
    mime_type_for,
    serialize,
)


class TestRegistry:
    def test_every_target_registered(self):
        assert set(SERIALIZERS) == set(TargetKind)

    @pytest.mark.parametrize("target", ["docx", "DOCX", ".docx", TargetKind.DOCX])
    def test_get_serializer_accepts_variants(self, target):
        assert get_serializer(target).target == TargetKind.DOCX

    def test_unknown_target(self, sample_document):
        with pytest.raises(SerializationError) as exc_info:
            serialize(sample_document, "odt")
        assert exc_info.value.kind == "serialization_error"
        assert exc_info.value.target == "odt"

    def test_mime_types(self):
        assert mime_type_for("rtf") == "application/rtf"
        assert mime_type_for("txt") == "text/plain"
        assert mime_type_for("xlsx").endswith("spreadsheetml.sheet")
        assert extension_for(TargetKind.PPTX) == "pptx"

    def test_writer_failure_wrapped(self, sample_document, monkeypatch):
        def broken(document, options):
            raise KeyError("missing style")

        monkeypatch.setitem(
            SERIALIZERS,
            TargetKind.DOCX,
            Serializer(TargetKind.DOCX, "application/test", "docx", broken),
        )
        with pytest.raises(SerializationError) as exc_info:
            serialize(sample_document, TargetKind.DOCX)
        assert isinstance(exc_info.value.original_error, KeyError)
        assert exc_info.value.target == "docx"


class TestDocx:
    """Tests for the flow-document writer."""

    def test_structure(self, sample_document):
        doc = Document(io.BytesIO(serialize(sample_document, "docx")))
        texts = [p.text for p in doc.paragraphs]

        assert texts[0] == "Quarterly Report"
        assert "Page 1" in texts
        assert "Page 2" in texts
        assert texts.index("Introduction") < texts.index("Page 2")
        assert doc.core_properties.title == "Quarterly Report"
        assert doc.core_properties.author == "Finance"

    def test_table(self, sample_document):
        doc = Document(io.BytesIO(serialize(sample_document, "docx")))
        assert len(doc.tables) == 1
        table = doc.tables[0]
        assert table.cell(0, 0).text == "Name"
        assert table.cell(1, 1).text == "30"
        assert table.style.name == "Table Grid"

    def test_styles_preserved(self, sample_document):
        doc = Document(io.BytesIO(serialize(sample_document, "docx")))
        run = next(p for p in doc.paragraphs if p.text.startswith("Revenue")).runs[0]
        assert run.bold is True
        assert run.font.size.pt == 14
        assert str(run.font.color.rgb) == "FF0000"

    def test_styles_normalised(self, sample_document):
        options = ConversionOptions(preserve_formatting=False)
        doc = Document(io.BytesIO(serialize(sample_document, "docx", options)))
        run = next(p for p in doc.paragraphs if p.text.startswith("Revenue")).runs[0]
        assert not run.bold
        assert run.font.size.pt == 12

    def test_title_optional(self, sample_document):
        options = ConversionOptions(include_title=False)
        doc = Document(io.BytesIO(serialize(sample_document, "docx", options)))
        assert doc.paragraphs[0].text == "Page 1"


class TestXlsx:
    """Tests for the spreadsheet writer."""

    def test_single_sheet_layout(self, sample_document):
        workbook = load_workbook(io.BytesIO(serialize(sample_document, "xlsx")))
        assert workbook.sheetnames == ["Converted Content"]
        sheet = workbook["Converted Content"]

        assert sheet["A1"].value == "Page 1"
        assert sheet["A1"].font.bold
        assert sheet["A2"].value == "Introduction"
        assert sheet["A3"].value == "Revenue grew {strongly}"
        assert sheet["A4"].value is None
        assert sheet["A5"].value == "Name"
        assert sheet["B6"].value == "30"
        assert sheet["A7"].value is None
        assert sheet["A9"].value == "Page 2"
        assert sheet["A10"].value == "Closing remarks"

    def test_one_sheet_per_page(self, sample_document):
        options = ConversionOptions(one_sheet_per_page=True)
        workbook = load_workbook(io.BytesIO(serialize(sample_document, "xlsx", options)))

        assert workbook.sheetnames == ["Page 1", "Page 2"]
        first = workbook["Page 1"]
        assert first["A1"].value == "Introduction"
        assert first["A4"].value == "Name"
        assert first["B5"].value == "30"
        assert workbook["Page 2"]["A1"].value == "Closing remarks"

    def test_column_widths(self, sample_document):
        workbook = load_workbook(io.BytesIO(serialize(sample_document, "xlsx")))
        sheet = workbook.active
        assert sheet.column_dimensions["A"].width == 20
        assert sheet.column_dimensions["B"].width == 20

    def test_formula_like_text_stays_text(self):
        document = StructuredDocument(
            pages=[
                Page(
                    page_number=1,
                    paragraphs=[Paragraph(text="=1+2")],
                    tables=[Table.from_texts([["Total", "=SUM(1,2)"]])],
                )
            ]
        )
        sheet = load_workbook(io.BytesIO(serialize(document, "xlsx"))).active

        assert sheet["A2"].value == "=1+2"
        assert sheet["A2"].data_type == "s"
        assert sheet["B4"].value == "=SUM(1,2)"
        assert sheet["B4"].data_type == "s"

    def test_empty_page(self, empty_document):
        workbook = load_workbook(io.BytesIO(serialize(empty_document, "xlsx")))
        assert workbook.active["A1"].value == "Page 1"


class TestPptx:
    """Tests for the slide-deck writer."""

    def test_one_slide_per_page(self, sample_document):
        presentation = Presentation(io.BytesIO(serialize(sample_document, "pptx")))
        assert len(presentation.slides) == 2

    def test_slide_content(self, sample_document):
        presentation = Presentation(io.BytesIO(serialize(sample_document, "pptx")))
        first = presentation.slides[0]

        texts = [shape.text_frame.text for shape in first.shapes if shape.has_text_frame]
        assert texts[0] == "Page 1"
        assert "Introduction" in texts
        assert "Revenue grew {strongly}" in texts

        tables = [shape.table for shape in first.shapes if shape.has_table]
        assert len(tables) == 1
        assert tables[0].cell(1, 0).text == "Bob"

    def test_paragraph_positions_step_down(self, sample_document):
        presentation = Presentation(io.BytesIO(serialize(sample_document, "pptx")))
        boxes = [s for s in presentation.slides[0].shapes if s.has_text_frame][1:]
        tops = [box.top for box in boxes]
        assert tops == sorted(tops)
        assert tops[1] - tops[0] > 0


class TestRtf:
    """Tests for the rich-text writer and its escaping."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("plain", "plain"),
            ("a\\b", "a\\\\b"),
            ("{x}", "\\{x\\}"),
            ("line1\nline2", "line1\\par line2"),
            ("é", "\\u233?"),
            ("€", "\\u8364?"),
            ("￿", "\\u-1?"),
            ("😀", "\\u-10179?\\u-8704?"),
        ],
    )
    def test_escape(self, text, expected):
        assert escape_rtf(text) == expected

    def test_escape_does_not_double_escape(self):
        assert escape_rtf("\\{") == "\\\\\\{"

    def test_document(self, sample_document):
        rtf = serialize(sample_document, "rtf").decode("ascii")

        assert rtf.startswith("{\\rtf1\\ansi")
        assert rtf.rstrip().endswith("}")
        assert "Quarterly Report" in rtf
        assert "Page 1" in rtf and "Page 2" in rtf
        assert "\\page" in rtf
        assert "Revenue grew \\{strongly\\}" in rtf
        assert "\\red255\\green0\\blue0;" in rtf
        assert "\\trowd" in rtf
        assert "\\intbl Name\\cell" in rtf

    def test_styled_paragraph(self, sample_document):
        rtf = serialize(sample_document, "rtf").decode("ascii")
        assert "\\fs28\\cf2\\b Revenue" in rtf
        assert "\\i Closing remarks\\i0" in rtf

    def test_unicode_output_is_ascii(self, empty_document):
        document = empty_document.model_copy(deep=True)
        document.metadata.title = "Über"
        rtf = serialize(document, "rtf")
        assert b"\\u220?ber" in rtf


class TestText:
    def test_layout(self, sample_document):
        text = serialize(sample_document, "txt").decode("utf-8")
        assert text.splitlines() == [
            "Quarterly Report",
            "================",
            "",
            "--- Page 1 ---",
            "",
            "Introduction",
            "",
            "Revenue grew {strongly}",
            "",
            "Name | Age",
            "Bob | 30",
            "",
            "--- Page 2 ---",
            "",
            "Closing remarks",
        ]

    def test_no_title(self, sample_document):
        text = serialize(sample_document, "txt", ConversionOptions(include_title=False)).decode()
        assert text.startswith("--- Page 1 ---")
