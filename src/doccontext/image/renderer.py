"""Renderer contract — turn one document page into an image file."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from doccontext.config.schema import ImageConfig


@runtime_checkable
class Renderer(Protocol):
    """Renderers are immutable once created and safe for concurrent use."""

    def render(self, input_path: str, page_number: int, output_path: str) -> None:
        """Write page page_number (1-based) of input_path to output_path."""
        ...

    def file_extension(self) -> str:
        """Extension of the output format, without the leading dot."""
        ...

    def settings(self) -> ImageConfig:
        """The finalized rendering settings."""
        ...

    def parameters(self) -> list[str]:
        """Renderer-specific key=value settings, in a fixed order, for cache keys."""
        ...
