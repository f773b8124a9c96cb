"""Document and page contracts, plus the content-type registry of openers."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from doccontext.errors.exceptions import DocumentError

if TYPE_CHECKING:
    from doccontext.cache.base import Cache
    from doccontext.image.renderer import Renderer


class Page(Protocol):
    @property
    def number(self) -> int: ...

    def to_image(self, renderer: Renderer, cache: Cache | None = None) -> bytes: ...


class Document(Protocol):
    @property
    def path(self) -> str: ...

    @property
    def page_count(self) -> int: ...

    def extract_page(self, page_number: int) -> Page: ...

    def extract_all_pages(self) -> list[Page]: ...

    def close(self) -> None: ...


def _open_pdf(path: str) -> Document:
    from doccontext.document.pdf import PDFDocument

    return PDFDocument.open(path)


_FORMAT_REGISTRY: dict[str, Callable[[str], Document]] = {
    "application/pdf": _open_pdf,
}


def supported_formats() -> list[str]:
    return sorted(_FORMAT_REGISTRY)


def is_supported(content_type: str) -> bool:
    return content_type in _FORMAT_REGISTRY


def open_document(path: str, content_type: str = "application/pdf") -> Document:
    """Open path with the opener registered for content_type."""
    opener = _FORMAT_REGISTRY.get(content_type)
    if opener is None:
        raise DocumentError(f"unsupported content type: {content_type}")
    return opener(path)
