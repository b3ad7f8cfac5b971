"""
Tests for PDF analysis.
"""

import pytest

from assembly.analyzer import analyze_document, recommend
from assembly.models import BasicInfo
from common.exceptions import InputError, PasswordError


class TestAnalyze:
    def test_basic_info(self, plain_pdf):
        analysis = analyze_document(plain_pdf)

        info = analysis.basic_info
        assert info.page_count == 1
        assert info.file_size == len(plain_pdf)
        assert info.title == "Sample"
        assert info.author == "Tester"
        assert analysis.recommendations == []

    def test_pages(self, landscape_pdf):
        page = analyze_document(landscape_pdf).pages[0]
        assert page.page_number == 1
        assert page.orientation == "landscape"
        assert page.width == 842
        assert page.aspect_ratio == pytest.approx(1.42)

    def test_content_hints(self, outline_pdf, blank_pdf):
        outlined = analyze_document(outline_pdf).optimization
        assert outlined.has_text is True
        assert outlined.has_bookmarks is True
        assert outlined.has_images is False
        assert outlined.has_forms is False

        blank = analyze_document(blank_pdf).optimization
        assert blank.has_text is False
        assert blank.has_bookmarks is False

    def test_missing_metadata_recommendation(self, blank_pdf):
        analysis = analyze_document(blank_pdf)
        assert analysis.basic_info.title == "Untitled"
        assert analysis.basic_info.author == "Unknown"
        assert [r.action for r in analysis.recommendations] == ["add_metadata"]

    def test_unencrypted_security(self, plain_pdf):
        security = analyze_document(plain_pdf).security
        assert security.encrypted is False
        assert security.printing and security.copying

    def test_encrypted_with_password(self, encrypted_pdf):
        analysis = analyze_document(encrypted_pdf, password="secret")
        assert analysis.security.encrypted is True
        assert analysis.basic_info.page_count == 1

    def test_encrypted_without_password(self, encrypted_pdf):
        with pytest.raises(PasswordError):
            analyze_document(encrypted_pdf)

    def test_garbage(self):
        with pytest.raises(InputError):
            analyze_document(b"nonsense")

    def test_contract_is_camel_case(self, plain_pdf):
        contract = analyze_document(plain_pdf).to_contract()
        assert contract["basicInfo"]["pageCount"] == 1
        assert "aspectRatio" in contract["pages"][0]
        assert "hasBookmarks" in contract["optimization"]


class TestRecommend:
    def _info(self, **overrides):
        values = dict(
            page_count=1,
            file_size=1000,
            title="Report",
            author="A",
            subject="",
            creator="C",
            producer="P",
        )
        values.update(overrides)
        return BasicInfo(**values)

    def test_nothing_to_recommend(self):
        assert recommend(self._info()) == []

    def test_large_file(self):
        actions = [r.action for r in recommend(self._info(file_size=11 * 1024 * 1024))]
        assert actions == ["compress"]

    def test_many_pages(self):
        actions = [r.action for r in recommend(self._info(page_count=51))]
        assert actions == ["split"]

    def test_all(self):
        info = self._info(file_size=20 * 1024 * 1024, page_count=80, title="Untitled")
        assert [r.type for r in recommend(info)] == ["compression", "split", "metadata"]
