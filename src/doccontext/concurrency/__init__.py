"""Concurrency — bounded worker pool for rendering pages side by side."""

from doccontext.concurrency.pool import PagePool, PageResult

__all__ = ["PagePool", "PageResult"]
