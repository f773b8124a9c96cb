"""Bounded concurrent page rendering."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence

logger = logging.getLogger(__name__)


class PageResult:
    """Outcome of one page: data on success, error on failure."""

    __slots__ = ("page_number", "data", "error")

    def __init__(
        self,
        page_number: int,
        data: bytes | None = None,
        error: Exception | None = None,
    ) -> None:
        self.page_number = page_number
        self.data = data
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None


class PagePool:
    """Async dispatcher that runs blocking page work on worker threads.

    Each page is handed to asyncio.to_thread, with at most max_workers in
    flight at once. Rendering itself stays synchronous; concurrency only comes
    from independent pages running side by side.
    """

    def __init__(self, max_workers: int = 4) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._max_workers = max_workers

    @property
    def max_workers(self) -> int:
        return self._max_workers

    async def render_pages(
        self,
        render_fn: Callable[[int], bytes],
        page_numbers: Sequence[int],
    ) -> list[PageResult]:
        """Call render_fn(page_number) for every page concurrently.

        A failing page is logged and reported in its PageResult; the other
        pages continue. Results come back in input order.
        """
        semaphore = asyncio.Semaphore(self._max_workers)

        async def worker(page_number: int) -> bytes:
            async with semaphore:
                return await asyncio.to_thread(render_fn, page_number)

        tasks = [worker(n) for n in page_numbers]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: list[PageResult] = []
        for page_number, outcome in zip(page_numbers, outcomes, strict=True):
            if isinstance(outcome, Exception):
                logger.error("Page %d failed: %s", page_number, outcome)
                results.append(PageResult(page_number, error=outcome))
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append(PageResult(page_number, data=outcome))

        return results
