"""Tests for the content-type registry of document openers."""

import pytest

from doccontext.document import PDFDocument, is_supported, open_document, supported_formats
from doccontext.errors.exceptions import DocumentError


class TestFormatRegistry:
    def test_pdf_supported(self):
        assert is_supported("application/pdf")
        assert supported_formats() == ["application/pdf"]

    def test_other_types_unsupported(self):
        assert not is_supported("image/png")

    def test_open_document(self, sample_pdf):
        doc = open_document(str(sample_pdf))
        assert isinstance(doc, PDFDocument)
        assert doc.page_count == 3

    def test_unsupported_content_type(self, sample_pdf):
        with pytest.raises(DocumentError, match="unsupported content type: text/plain"):
            open_document(str(sample_pdf), "text/plain")
