"""Documents and pages — opening files and rendering pages through the cache."""

from doccontext.document.base import (
    Document,
    Page,
    is_supported,
    open_document,
    supported_formats,
)
from doccontext.document.pages import parse_page_spec
from doccontext.document.pdf import PDFDocument, PDFPage

__all__ = [
    "Document",
    "PDFDocument",
    "PDFPage",
    "Page",
    "is_supported",
    "open_document",
    "parse_page_spec",
    "supported_formats",
]
