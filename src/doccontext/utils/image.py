"""Image encoding utilities."""

from __future__ import annotations

import base64

from doccontext.types import ImageFormat


def image_to_base64(image_bytes: bytes) -> str:
    """Encode raw image bytes to a base64 string."""
    return base64.b64encode(image_bytes).decode("ascii")


def encode_data_uri(image_bytes: bytes, image_format: ImageFormat) -> str:
    """Return a data:<mime>;base64,<payload> URI for the image."""
    if not image_bytes:
        raise ValueError("image data is empty")
    return f"data:{image_format.mime_type};base64,{image_to_base64(image_bytes)}"
