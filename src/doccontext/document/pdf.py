"""PDF documents and cache-aware page rendering."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from doccontext.cache.base import CacheEntry
from doccontext.cache.keys import build_key_input, generate_key
from doccontext.errors.exceptions import CacheNotFoundError, DocumentError, RenderError

if TYPE_CHECKING:
    from doccontext.cache.base import Cache
    from doccontext.image.renderer import Renderer

logger = logging.getLogger(__name__)


class PDFDocument:
    """A PDF on disk. Only the page count is read up front; pages are rendered
    by an external renderer straight from the file."""

    def __init__(self, path: str, page_count: int) -> None:
        self._path = path
        self._page_count = page_count

    @classmethod
    def open(cls, path: str | Path) -> PDFDocument:
        import pymupdf

        path = str(path)
        if not Path(path).is_file():
            raise DocumentError(f"failed to open PDF: file not found: {path}")

        try:
            with pymupdf.open(path) as doc:
                is_pdf = doc.is_pdf
                page_count = doc.page_count
        except Exception as e:
            raise DocumentError(f"failed to open PDF: {e}") from e

        if not is_pdf:
            raise DocumentError(f"failed to open PDF: not a PDF file: {path}")
        if page_count == 0:
            raise DocumentError("PDF has no pages")

        return cls(path, page_count)

    @property
    def path(self) -> str:
        return self._path

    @property
    def page_count(self) -> int:
        return self._page_count

    def extract_page(self, page_number: int) -> PDFPage:
        if not 1 <= page_number <= self._page_count:
            raise DocumentError(f"page {page_number} out of range [1-{self._page_count}]")
        return PDFPage(self, page_number)

    def extract_all_pages(self) -> list[PDFPage]:
        return [self.extract_page(n) for n in range(1, self._page_count + 1)]

    def close(self) -> None:
        """Nothing is held open between calls; kept for the Document contract."""

    def __enter__(self) -> PDFDocument:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class PDFPage:
    def __init__(self, document: PDFDocument, number: int) -> None:
        self._document = document
        self._number = number

    @property
    def number(self) -> int:
        return self._number

    def to_image(self, renderer: Renderer, cache: Cache | None = None) -> bytes:
        """Render this page, going through cache when one is given.

        Hit: the cached bytes are returned and the renderer is not invoked.
        Miss: the page is rendered into a temporary directory (always removed),
        stored, then returned. Any cache error other than a miss propagates,
        and so does a failure to store after a successful render.
        """
        key = None
        if cache is not None:
            key = self.build_cache_key(renderer)
            try:
                entry = cache.get(key)
            except CacheNotFoundError:
                pass
            else:
                logger.debug("Page %d served from cache", self._number)
                return entry.data

        data = self._render(renderer)

        if cache is not None:
            cache.set(self.prepare_cache_entry(data, renderer, key=key))

        return data

    def build_cache_key(self, renderer: Renderer) -> str:
        """Derive the key from path, page number and every rendering setting.

        Mandatory settings come first (dpi, quality), followed by the
        renderer's own parameters in the renderer's fixed order.
        """
        settings = renderer.settings()
        params = [f"dpi={settings.dpi}", f"quality={settings.quality}"]
        params.extend(renderer.parameters())
        return generate_key(
            build_key_input(self._document.path, self._number, settings.format, params)
        )

    def prepare_cache_entry(
        self,
        data: bytes,
        renderer: Renderer,
        key: str | None = None,
    ) -> CacheEntry:
        """Entry named <basename>.<page>.<format>, e.g. report.1.png."""
        settings = renderer.settings()
        stem = Path(self._document.path).stem
        return CacheEntry(
            key=key or self.build_cache_key(renderer),
            data=data,
            filename=f"{stem}.{self._number}.{settings.format}",
        )

    def _render(self, renderer: Renderer) -> bytes:
        ext = renderer.file_extension()
        with tempfile.TemporaryDirectory(prefix="doccontext-") as tmp_dir:
            output_path = Path(tmp_dir) / f"page-{self._number}.{ext}"
            try:
                renderer.render(self._document.path, self._number, str(output_path))
            except RenderError as e:
                raise RenderError(
                    f"failed to render page {self._number}: {e}",
                    page_number=self._number,
                    output=e.output,
                ) from e

            try:
                return output_path.read_bytes()
            except OSError as e:
                raise RenderError(
                    f"failed to read rendered image for page {self._number}: {e}",
                    page_number=self._number,
                ) from e
