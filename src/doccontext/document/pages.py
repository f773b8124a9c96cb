"""Page selection parsing."""

from __future__ import annotations


def parse_page_spec(spec: str, page_count: int) -> list[int]:
    """Resolve a page selection to 1-based page numbers.

    Supports: "" (all pages), "3", "1,3,5", "2:5", "2:" (to the end),
    ":3" (from the start). Raises ValueError for malformed or out-of-range
    selections.
    """
    spec = spec.strip()
    if not spec:
        return list(range(1, page_count + 1))

    if ":" in spec:
        parts = spec.split(":")
        if len(parts) != 2:
            raise ValueError(f"invalid range syntax: {spec}")
        start = _parse_bound(parts[0], default=1, label="start")
        end = _parse_bound(parts[1], default=page_count, label="end")
        if start > end:
            raise ValueError(f"start page ({start}) must be <= end page ({end})")
        if end > page_count:
            raise ValueError(f"end page ({end}) exceeds document page count ({page_count})")
        return list(range(start, end + 1))

    pages = [_parse_page(part, page_count) for part in spec.split(",")]
    return pages


def _parse_bound(value: str, default: int, label: str) -> int:
    if not value.strip():
        return default
    try:
        page = int(value)
    except ValueError:
        raise ValueError(f"invalid {label} page: {value}") from None
    if page < 1:
        raise ValueError(f"invalid {label} page: {value}")
    return page


def _parse_page(value: str, page_count: int) -> int:
    try:
        page = int(value.strip())
    except ValueError:
        raise ValueError(f"invalid page number: {value}") from None
    if not 1 <= page <= page_count:
        raise ValueError(f"page {page} out of range (1-{page_count})")
    return page
