"""Shared Pydantic models for doccontext."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field

# ── Enums ──


class ImageFormat(StrEnum):
    PNG = "png"
    JPEG = "jpg"

    @property
    def mime_type(self) -> str:
        return "image/png" if self is ImageFormat.PNG else "image/jpeg"


def parse_image_format(value: str) -> ImageFormat:
    """Accept "", "png", "jpg" and "jpeg" in any case; "" means png."""
    normalized = value.strip().lower()
    if normalized in ("", "png"):
        return ImageFormat.PNG
    if normalized in ("jpg", "jpeg"):
        return ImageFormat.JPEG
    raise ValueError(f"unsupported image format: {value}")


# ── Runtime models ──


class PageImage(BaseModel):
    page_number: int
    data: bytes
    format: ImageFormat = ImageFormat.PNG

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class ConversionResult(BaseModel):
    source: str
    pages: list[PageImage] = Field(default_factory=list)
    pages_failed: list[int] = Field(default_factory=list)

    @property
    def pages_processed(self) -> int:
        return len(self.pages)

    def save(self, output_dir: str | Path, include_data_uri: bool = False) -> list[Path]:
        """Write each page as <basename>-page-<n>.<ext> into output_dir.

        With include_data_uri, a <basename>-page-<n>.txt file holding the
        base64 data URI is written next to each image.

        Returns:
            List of paths written.
        """
        from doccontext.utils.image import encode_data_uri

        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        base_name = Path(self.source).stem
        written: list[Path] = []

        for page in self.pages:
            image_path = out / f"{base_name}-page-{page.page_number}.{page.format.value}"
            image_path.write_bytes(page.data)
            written.append(image_path)

            if include_data_uri:
                txt_path = out / f"{base_name}-page-{page.page_number}.txt"
                txt_path.write_text(encode_data_uri(page.data, page.format), encoding="ascii")
                written.append(txt_path)

        return written
