"""Top-level entry points: convert(), DocumentConverter."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from doccontext.cache.base import Cache
from doccontext.cache.registry import CacheRegistry, get_registry
from doccontext.concurrency.pool import PagePool
from doccontext.config.defaults import DEFAULT_MAX_WORKERS
from doccontext.config.schema import CacheConfig, ImageConfig
from doccontext.document.pdf import PDFDocument
from doccontext.image.imagemagick import ImageMagickRenderer
from doccontext.image.renderer import Renderer
from doccontext.types import ConversionResult, PageImage, parse_image_format

logger = logging.getLogger(__name__)


class DocumentConverter:
    """Converts document pages to images through an optional cache.

    The converter owns one cache handle for its whole lifetime, or none when
    cache_config is None, in which case every page is rendered.
    """

    def __init__(
        self,
        image_config: ImageConfig | None = None,
        cache_config: CacheConfig | None = None,
        registry: CacheRegistry | None = None,
        renderer: Renderer | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self._renderer = renderer or ImageMagickRenderer(image_config)
        self._cache: Cache | None = None
        if cache_config is not None:
            self._cache = (registry or get_registry()).create(cache_config)
        self._pool = PagePool(max_workers=max_workers)

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    @property
    def cache(self) -> Cache | None:
        return self._cache

    def convert_page(self, input_path: str | Path, page_number: int) -> bytes:
        """Render a single page (1-based), using the cache when enabled."""
        with PDFDocument.open(input_path) as doc:
            return doc.extract_page(page_number).to_image(self._renderer, self._cache)

    async def convert_async(
        self,
        input_path: str | Path,
        pages: Sequence[int] | None = None,
    ) -> ConversionResult:
        """Convert the selected pages (all when pages is None) concurrently.

        Pages that fail are listed in pages_failed; the rest still convert.
        """
        image_format = parse_image_format(self._renderer.file_extension())

        with PDFDocument.open(input_path) as doc:
            page_numbers = list(pages) if pages is not None else list(
                range(1, doc.page_count + 1)
            )
            # Validate every selection before doing any work
            selected = {n: doc.extract_page(n) for n in page_numbers}

            def render(page_number: int) -> bytes:
                return selected[page_number].to_image(self._renderer, self._cache)

            results = await self._pool.render_pages(render, page_numbers)

        converted = ConversionResult(source=str(input_path))
        for result in results:
            if result.ok and result.data is not None:
                converted.pages.append(
                    PageImage(page_number=result.page_number, data=result.data, format=image_format)
                )
            else:
                converted.pages_failed.append(result.page_number)

        logger.info(
            "Converted %d page(s) of %s (%d failed)",
            converted.pages_processed,
            input_path,
            len(converted.pages_failed),
        )
        return converted

    def convert(
        self,
        input_path: str | Path,
        pages: Sequence[int] | None = None,
    ) -> ConversionResult:
        """Sync wrapper around convert_async."""
        return asyncio.run(self.convert_async(input_path, pages=pages))


# ── Module-level convenience functions ──


def convert(
    input_path: str | Path,
    pages: Sequence[int] | None = None,
    image_config: ImageConfig | None = None,
    cache_dir: str | Path | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> ConversionResult:
    """Convert a PDF's pages to images, caching under cache_dir when given."""
    cache_config = None
    if cache_dir is not None:
        cache_config = CacheConfig(name="filesystem", options={"directory": str(cache_dir)})
    converter = DocumentConverter(
        image_config=image_config,
        cache_config=cache_config,
        max_workers=max_workers,
    )
    return converter.convert(input_path, pages=pages)
