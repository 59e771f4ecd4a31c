"""
Album consistency report - compare posts, descriptors and the manual order.

Flags posts without descriptors, descriptors without posts, order entries
for missing albums, and images whose stored file name no longer matches
their position (the next upload to such an album may reuse a name).

Usage:
    python scripts/check_albums.py
"""
from __future__ import annotations

import re
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from photoblog_admin.core.config import settings
from photoblog_admin.repositories import DescriptorRepository, PostRepository, scan_front_matter
from photoblog_admin.services import AlbumOrderService, AlbumService, ImageService
from photoblog_admin.services.album_service import remote_keys

console = Console()

IMAGE_NUMBER_RE = re.compile(r"img(\d+)\.jpg$")


def image_numbers(album) -> list[int | None]:
    numbers = []
    for image in album.images:
        keys = remote_keys(image)
        match = IMAGE_NUMBER_RE.search(keys[0]) if keys else None
        numbers.append(int(match.group(1)) if match else None)
    return numbers


def album_post_slugs(posts: PostRepository) -> dict[str, Path]:
    """Slugs of posts in the album category."""
    slugs = {}
    for path in sorted(posts.directory.glob("*.md")):
        scanned = scan_front_matter(posts.read_text(path))
        if scanned is None:
            continue
        values, _ = scanned
        categories = values.get("categories") or []
        if isinstance(categories, str):
            categories = [categories]
        if settings.post_category in categories and values.get("slug"):
            slugs[str(values["slug"])] = path
    return slugs


def main():
    """Print the album report."""
    console.print(Panel.fit(
        "[bold cyan]Album Consistency Report[/bold cyan]\n"
        f"{settings.posts_dir}\n{settings.data_dir}",
        border_style="cyan"
    ))

    # Read-only report: the bucket is never contacted
    album_service = AlbumService(settings, None, ImageService(), AlbumOrderService(settings))
    order, albums = album_service.get_order_view()
    descriptors = DescriptorRepository(settings.data_dir)

    table = Table()
    table.add_column("#", justify="right", style="dim")
    table.add_column("Slug", style="cyan")
    table.add_column("Date")
    table.add_column("Images", justify="right", style="yellow")
    table.add_column("Order", justify="right")
    table.add_column("Notes", style="red")

    problems = 0
    for position, album in enumerate(albums):
        notes = []
        numbers = image_numbers(album)
        drifted = [i for i, n in enumerate(numbers) if n is not None and n != i]
        if drifted:
            notes.append(f"{len(drifted)} images off position")
        if any(n is not None and n >= len(numbers) for n in numbers):
            notes.append("next upload may overwrite a file")
        if album.image_count == 0:
            notes.append("no images")
        problems += len(notes)

        table.add_row(
            str(position + 1),
            album.slug,
            album.date.isoformat() if album.date else "-",
            str(album.image_count),
            str(order.index(album.slug) + 1) if album.slug in order else "-",
            ", ".join(notes),
        )

    console.print(table)

    known = {album.slug for album in albums}
    post_slugs = album_post_slugs(album_service.posts)

    orphan_descriptors = [slug for slug in descriptors.list_slugs() if slug not in known]
    orphan_posts = [path.name for slug, path in post_slugs.items() if slug not in known]
    stale_order = [slug for slug in order if slug not in known]

    for title, items in [
        ("Descriptors without a readable post", orphan_descriptors),
        ("Album posts without a descriptor", orphan_posts),
        ("Order entries for missing albums", stale_order),
    ]:
        if items:
            problems += len(items)
            console.print(f"\n[bold yellow]{title}:[/bold yellow]")
            for item in items:
                console.print(f"  • {item}")

    console.print(f"\n[bold]Albums:[/bold] {len(albums)}  [bold]Problems:[/bold] {problems}")
    return 1 if problems else 0


if __name__ == "__main__":
    sys.exit(main())
