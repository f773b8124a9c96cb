"""Click CLI for doccontext — convert PDF pages to images and manage the cache."""

from __future__ import annotations

import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.tree import Tree

from doccontext.config.hierarchy import load_settings
from doccontext.config.schema import ImageConfig, LoggerConfig, RuntimeSettings
from doccontext.errors.exceptions import DocContextError

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, configured_level: str | None = None) -> None:
    """Configure logging based on verbosity level."""
    level = logging.getLevelName(str(configured_level or "WARNING").upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _fail(message: str) -> NoReturn:
    error_console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


@click.group()
@click.version_option(package_name="doccontext")
def cli() -> None:
    """doccontext — render PDF pages to images with a content-addressed cache."""


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(file_okay=False), default="output",
              show_default=True, help="Output directory.")
@click.option("--page", "page_spec", type=str, default="",
              help="Page selection: 3, 1,3,5, 2:5, 2:, :3 (default: all pages).")
@click.option("--format", "image_format", type=click.Choice(["png", "jpg"]), default=None,
              help="Output format.")
@click.option("--dpi", type=int, default=None, help="Rendering DPI.")
@click.option("--quality", type=int, default=None, help="JPEG quality 1-100.")
@click.option("--cache-dir", type=click.Path(file_okay=False), default=None,
              help="Cache directory.")
@click.option("--no-cache", is_flag=True, default=False, help="Disable caching.")
@click.option("--base64", "include_base64", is_flag=True, default=False,
              help="Also write base64 data URI files.")
@click.option("--brightness", type=int, default=None, help="Brightness 0-200 (100=neutral).")
@click.option("--contrast", type=int, default=None, help="Contrast -100 to +100 (0=neutral).")
@click.option("--saturation", type=int, default=None, help="Saturation 0-200 (100=neutral).")
@click.option("--rotation", type=int, default=None, help="Rotation 0-360 degrees.")
@click.option("--background", type=str, default=None, help="Background color.")
@click.option("--workers", type=int, default=None, help="Pages rendered concurrently.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def convert(
    input_path: str,
    output: str,
    page_spec: str,
    image_format: str | None,
    dpi: int | None,
    quality: int | None,
    cache_dir: str | None,
    no_cache: bool,
    include_base64: bool,
    brightness: int | None,
    contrast: int | None,
    saturation: int | None,
    rotation: int | None,
    background: str | None,
    workers: int | None,
    verbose: int,
) -> None:
    """Convert PDF pages to images."""
    try:
        settings = load_settings(
            format=image_format,
            dpi=dpi,
            quality=quality,
            background=background,
            cache_dir=cache_dir,
            cache_disabled=no_cache or None,
            max_workers=workers,
        )
    except DocContextError as e:
        _fail(str(e))
    _setup_logging(verbose, settings.log_level)

    from doccontext.core import DocumentConverter
    from doccontext.document.pages import parse_page_spec
    from doccontext.document.pdf import PDFDocument

    image_config = settings.image_config(
        brightness=brightness,
        contrast=contrast,
        saturation=saturation,
        rotation=rotation,
    )

    try:
        with PDFDocument.open(input_path) as doc:
            pages = parse_page_spec(page_spec, doc.page_count)
            total_pages = doc.page_count
        converter = DocumentConverter(
            image_config=image_config,
            cache_config=settings.cache_config(LoggerConfig.disabled()),
            max_workers=settings.max_workers,
        )
    except (DocContextError, ValueError) as e:
        _fail(str(e))

    _print_convert_header(input_path, pages, total_pages, image_config, output, settings)

    start = time.perf_counter()
    try:
        result = asyncio.run(converter.convert_async(input_path, pages=pages))
    except DocContextError as e:
        _fail(str(e))
    elapsed = time.perf_counter() - start

    written = result.save(output, include_data_uri=include_base64)

    console.print(
        f"\nConverted {result.pages_processed} page(s) in {_format_duration(elapsed)}"
    )
    from doccontext.cache.stats import format_bytes

    for path in written:
        suffix = ", base64 data URI" if path.suffix == ".txt" else ""
        console.print(f"  - {path} ({format_bytes(path.stat().st_size)}{suffix})")

    if result.pages_failed:
        _fail(f"failed to convert page(s): {', '.join(map(str, result.pages_failed))}")


def _print_convert_header(
    input_path: str,
    pages: list[int],
    total_pages: int,
    image_config: ImageConfig,
    output: str,
    settings: RuntimeSettings,
) -> None:
    console.print(f"Converting: {input_path}")
    if len(pages) == total_pages:
        console.print(f"Pages: 1-{total_pages} ({total_pages} pages)")
    else:
        console.print(f"Pages: {pages} ({len(pages)} page(s))")
    console.print(f"Format: {str(image_config.format).upper()} @ {image_config.dpi} DPI")
    console.print(f"Output: {output}")
    if settings.cache_disabled:
        console.print("Cache: disabled")
    else:
        console.print(f"Cache: {settings.cache_backend} ({settings.cache_dir})")


def _format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    return f"{seconds:.2f}s"


@cli.command("caches")
def list_caches() -> None:
    """List registered cache backends."""
    from doccontext.cache.registry import get_registry

    table = Table(title="Cache Backends", show_header=True)
    table.add_column("Name", style="cyan")
    for name in get_registry().list_caches():
        table.add_row(name)
    console.print(table)


cache_dir_option = click.option(
    "--cache-dir", type=click.Path(file_okay=False), default=None, help="Cache directory."
)


def _resolve_settings(cache_dir: str | None) -> RuntimeSettings:
    try:
        return load_settings(cache_dir=cache_dir)
    except DocContextError as e:
        _fail(str(e))


@cli.group()
def cache() -> None:
    """Cache management commands."""


@cache.command("clear")
@cache_dir_option
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
def cache_clear(cache_dir: str | None) -> None:
    """Clear all cache entries."""
    from doccontext.cache.registry import create_cache

    settings = _resolve_settings(cache_dir).model_copy(update={"cache_disabled": False})
    console.print(f"Clearing cache: {settings.cache_backend} ({settings.cache_dir})")
    try:
        handle = create_cache(settings.cache_config(LoggerConfig.disabled()))
        handle.clear()
    except DocContextError as e:
        _fail(f"failed to clear cache: {e}")
    console.print("[green]Cache cleared.[/green]")


@cache.command("inspect")
@cache_dir_option
def cache_inspect(cache_dir: str | None) -> None:
    """Show the cache directory structure."""
    from doccontext.cache.stats import format_bytes, inspect_entries

    directory = Path(_resolve_settings(cache_dir).cache_dir)
    console.print(f"Cache directory: {directory}\n")

    if not directory.is_dir():
        console.print("Cache directory does not exist (empty cache)")
        return

    entries = inspect_entries(directory)
    if not entries:
        console.print("Cache is empty")
        return

    tree = Tree(f"Cache entries ({len(entries)})")
    for entry in entries:
        branch = tree.add(f"{entry.key}/")
        for f in entry.files:
            branch.add(f"{f.name} ({format_bytes(f.size_bytes)})")
    console.print(tree)


@cache.command("stats")
@cache_dir_option
def cache_stats(cache_dir: str | None) -> None:
    """Show cache statistics."""
    from doccontext.cache.stats import collect_stats, format_bytes

    stats = collect_stats(_resolve_settings(cache_dir).cache_dir)

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    table.add_row("Directory", stats.directory)
    table.add_row("Entries", str(stats.entries))
    table.add_row("Files", str(stats.files))
    table.add_row("Size", format_bytes(stats.size_bytes))
    if not stats.exists:
        status = "Empty (directory does not exist)"
    else:
        status = "Empty" if stats.is_empty else "Active"
    table.add_row("Status", status)

    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    cli()
