"""CLI interface for gallery-cache.

Requires the 'cli' extra: pip install gallery-cache[cli]
"""

from __future__ import annotations

import asyncio
import sys
from datetime import datetime, timedelta
from pathlib import Path

try:
    import typer
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table
except ImportError:
    print(
        "CLI dependencies not installed. Install with: pip install gallery-cache[cli]",
        file=sys.stderr,
    )
    sys.exit(1)

from gallery_cache import __version__
from gallery_cache.client.gallery import CachedGallery
from gallery_cache.config import DEFAULT_API_URL, DEFAULT_CACHE_PATH, GalleryConfig
from gallery_cache.exceptions import GalleryCacheError
from gallery_cache.models.image import ImageFilters

app = typer.Typer(
    name="gallery-cache",
    help="Image gallery client with a persistent query cache.",
    add_completion=False,
)
console = Console()


def _format_age(age: timedelta) -> str:
    seconds = int(age.total_seconds())
    if seconds < 60:
        return f"{seconds}s"
    return f"{seconds // 60}m{seconds % 60:02d}s"


def _gallery(ctx: typer.Context) -> CachedGallery:
    config: GalleryConfig = ctx.obj
    return CachedGallery.from_config(config)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
    api_url: str = typer.Option(
        DEFAULT_API_URL, "--api-url", envvar="GALLERY_API_URL", help="Gallery API base URL"
    ),
    cache_path: Path = typer.Option(  # noqa: B008
        DEFAULT_CACHE_PATH,
        "--cache-path",
        envvar="GALLERY_CACHE_PATH",
        help="File backing the query cache",
    ),
    ttl: int = typer.Option(300, "--ttl", min=1, help="Cache lifetime in seconds"),
) -> None:
    if version:
        console.print(f"gallery-cache {__version__}")
        raise typer.Exit()
    ctx.obj = GalleryConfig(
        api_url=api_url,
        cache_path=cache_path,
        default_ttl=timedelta(seconds=ttl),
    )


@app.command()
def info(ctx: typer.Context) -> None:
    """Show information about the gallery-cache installation."""
    config: GalleryConfig = ctx.obj
    table = Table(title="gallery-cache info")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Version", __version__)
    table.add_row("Python", sys.version.split()[0])
    table.add_row("API URL", config.api_url)
    table.add_row("Cache file", str(config.cache_path))
    table.add_row("Default TTL", _format_age(config.default_ttl))

    for dep_name in ["httpx", "pydantic"]:
        try:
            mod = __import__(dep_name)
            ver = getattr(mod, "__version__", "installed")
            table.add_row(dep_name, str(ver))
        except ImportError:
            table.add_row(dep_name, "[red]not installed[/red]")

    console.print(table)


@app.command("list")
def list_images(
    ctx: typer.Context,
    category: list[str] = typer.Option([], "--category", "-c", help="Category filter"),  # noqa: B008
    tag: list[str] = typer.Option([], "--tag", "-t", help="Tag filter"),  # noqa: B008
    start: datetime | None = typer.Option(None, "--start", help="Uploaded on or after"),  # noqa: B008
    end: datetime | None = typer.Option(None, "--end", help="Uploaded on or before"),  # noqa: B008
    refresh: bool = typer.Option(False, "--refresh", help="Bypass cached results"),
) -> None:
    """List images, served from the cache when a fresh listing is held."""
    gallery = _gallery(ctx)
    filters = ImageFilters(categories=category, tags=tag, start_date=start, end_date=end)
    hits_before = gallery.cache.stats().hits
    try:
        images = asyncio.run(gallery.get_images(filters, refresh=refresh))
    except GalleryCacheError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    source = "cache" if gallery.cache.stats().hits > hits_before else "api"
    table = Table(title=f"{len(images)} images ({source})")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Category", style="green")
    table.add_column("Tags")
    table.add_column("Uploaded")
    for image in images:
        table.add_row(
            image.id,
            image.title,
            image.category,
            ", ".join(image.tags),
            image.uploaded_at.isoformat(timespec="seconds"),
        )
    console.print(table)


@app.command()
def upload(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Image file to upload"),  # noqa: B008
    title: str = typer.Option(..., "--title", help="Image title"),
    category: str = typer.Option(..., "--category", "-c", help="Image category"),
    tag: list[str] = typer.Option([], "--tag", "-t", help="Image tag"),  # noqa: B008
) -> None:
    """Upload an image file. Clears the query cache on success."""
    if not path.is_file():
        console.print(f"[red]Error: {path} does not exist[/red]")
        raise typer.Exit(code=1)

    gallery = _gallery(ctx)
    try:
        image = asyncio.run(
            gallery.upload_image(
                title=title,
                category=category,
                tags=tag,
                filename=path.name,
                content=path.read_bytes(),
            )
        )
    except GalleryCacheError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[green]Uploaded {image.id}[/green] {image.url}")


@app.command()
def delete(
    ctx: typer.Context,
    image_id: str = typer.Argument(..., help="ID of the image to delete"),
) -> None:
    """Delete an image and drop it from every cached listing."""
    gallery = _gallery(ctx)
    try:
        asyncio.run(gallery.delete_image(image_id))
    except GalleryCacheError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[green]Deleted {image_id}[/green]")


@app.command()
def inspect(ctx: typer.Context) -> None:
    """Show every cached listing with its age and freshness."""
    cache = _gallery(ctx).cache
    entries = cache.entries()
    if not entries:
        console.print("[dim]Cache is empty.[/dim]")
        return

    table = Table(title=f"{len(entries)} cached listings")
    table.add_column("Partition", style="cyan")
    table.add_column("Key")
    table.add_column("Images", justify="right")
    table.add_column("Age", justify="right")
    table.add_column("TTL", justify="right")
    table.add_column("Fresh")
    for entry in entries:
        table.add_row(
            entry.partition.value,
            entry.key,
            str(entry.size),
            _format_age(entry.age),
            _format_age(entry.ttl),
            "[green]yes[/green]" if entry.fresh else "[red]no[/red]",
        )
    console.print(table)


@app.command()
def stats(ctx: typer.Context) -> None:
    """Show how many listings each cache partition holds."""
    cache_stats = _gallery(ctx).cache.stats()
    table = Table(title="cache partitions")
    table.add_column("Partition", style="cyan")
    table.add_column("Entries", justify="right")
    for partition, count in cache_stats.entries.items():
        table.add_row(partition.value, str(count))
    console.print(table)


@app.command()
def purge(ctx: typer.Context) -> None:
    """Remove expired listings from the cache file."""
    try:
        removed = _gallery(ctx).cache.purge_expired()
    except GalleryCacheError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"Purged {removed} expired entries")


@app.command()
def clear(ctx: typer.Context) -> None:
    """Discard every cached listing."""
    try:
        _gallery(ctx).cache.clear()
    except GalleryCacheError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    console.print("[green]Cache cleared[/green]")


if __name__ == "__main__":
    app()
