"""
Text extraction tests. PDF and DOCX fixtures are generated in-test.
"""
import io

import docx
import pytest
from pypdf import PdfWriter

from knowledge_workspace.api.exceptions import EmptyFileError
from knowledge_workspace.services.text_extractors import TextExtractorFactory
from knowledge_workspace.services.text_extractors.docx_extractor import DOCXExtractor
from knowledge_workspace.services.text_extractors.pdf_extractor import PDFExtractor
from knowledge_workspace.services.text_extractors.text_extractor import TextExtractor

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@pytest.fixture
def blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def sample_docx() -> bytes:
    document = docx.Document()
    document.add_paragraph("Onboarding checklist for new engineers.")
    document.add_paragraph("   ")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Laptop"
    table.rows[0].cells[1].text = "Day one"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class TestDispatch:
    """Extractor selection by declared type, then extension"""

    @pytest.mark.parametrize("declared_type, file_name, expected", [
        ("application/pdf", "report", PDFExtractor),
        ("", "report.PDF", PDFExtractor),
        (DOCX_MIME, "notes", DOCXExtractor),
        ("application/msword", "legacy.doc", DOCXExtractor),
        ("text/plain", "notes.txt", TextExtractor),
        ("application/octet-stream", "data.bin", TextExtractor),
    ])
    def test_get_extractor(self, declared_type, file_name, expected):
        assert isinstance(TextExtractorFactory.get_extractor(declared_type, file_name), expected)

    def test_pdf_checked_before_word(self):
        # A PDF export of a Word file keeps the PDF parser
        assert isinstance(TextExtractorFactory.get_extractor("application/pdf", "memo.docx"), PDFExtractor)


class TestExtraction:
    """Best-effort extraction"""

    def test_plain_text_decoded_as_utf8(self):
        assert TextExtractorFactory.extract_text("Grüße aus Köln".encode("utf-8"), "text/plain", "a.txt") == "Grüße aus Köln"

    def test_invalid_utf8_replaced_not_raised(self):
        text = TextExtractorFactory.extract_text(b"ok \xff\xfe bytes", "", "blob")
        assert text.startswith("ok ")
        assert "�" in text

    def test_docx_paragraphs_and_tables(self, sample_docx):
        text = TextExtractorFactory.extract_text(sample_docx, DOCX_MIME, "checklist.docx")

        assert "Onboarding checklist for new engineers." in text
        assert "Laptop | Day one" in text

    def test_blank_pdf_yields_empty_text(self, blank_pdf):
        assert TextExtractorFactory.extract_text(blank_pdf, "application/pdf", "scan.pdf").strip() == ""

    def test_corrupt_pdf_yields_empty_text(self):
        assert TextExtractorFactory.extract_text(b"%PDF-1.4 garbage", "application/pdf", "broken.pdf") == ""

    def test_corrupt_docx_yields_empty_text(self):
        assert TextExtractorFactory.extract_text(b"not a zip archive", DOCX_MIME, "broken.docx") == ""

    def test_empty_buffer_raises(self):
        with pytest.raises(EmptyFileError):
            TextExtractorFactory.extract_text(b"", "application/pdf", "empty.pdf")

    async def test_async_extraction(self):
        text = await TextExtractorFactory.extract_text_async(b"hello world", "text/plain", "a.txt")
        assert text == "hello world"

    async def test_async_empty_buffer_raises(self):
        with pytest.raises(EmptyFileError):
            await TextExtractorFactory.extract_text_async(b"", "text/plain", "a.txt")

    def test_output_not_truncated(self):
        text = TextExtractorFactory.extract_text(b"a" * 20000, "text/plain", "long.txt")
        assert len(text) == 20000

    def test_supported_formats(self):
        assert TextExtractorFactory.get_supported_formats() == ["PDF", "DOCX", "Text"]
