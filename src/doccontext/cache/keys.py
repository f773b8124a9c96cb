"""Cache key generation — content-addressed, order-sensitive."""

from __future__ import annotations

import hashlib
import os
from collections.abc import Sequence


def generate_key(value: str) -> str:
    """Return the SHA256 hex digest (64 lowercase chars) of value.

    The input must already be canonical: parameters that mean the same thing
    but appear in a different order produce different keys.
    """
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def build_key_input(
    document_path: str | os.PathLike[str],
    page_number: int,
    image_format: str,
    parameters: Sequence[str],
) -> str:
    """Compose the canonical string describing one rendered page.

    Shape: <absolute path>/<page>.<format>?<key=value>&<key=value>...

    parameters are joined in the order given; callers pass mandatory settings
    first, then optional ones, each group in its own fixed order.
    """
    abs_path = os.path.abspath(document_path)
    return f"{abs_path}/{page_number}.{image_format}?{'&'.join(parameters)}"
