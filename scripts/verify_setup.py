"""
Quick setup verification script.

Checks the interpreter, dependencies, configuration, site directories and
B2 authorization before starting the admin panel.

Usage:
    python scripts/verify_setup.py
"""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console
from rich.panel import Panel

console = Console()


def check_python_version():
    """Check Python version."""
    version = sys.version_info
    if version.major == 3 and version.minor >= 10:
        console.print(f"[green]✓ Python {version.major}.{version.minor}.{version.micro}[/green]")
        return True
    console.print(f"[red]✗ Python {version.major}.{version.minor} (need 3.10+)[/red]")
    return False


def check_dependencies():
    """Check if key dependencies are installed."""
    required = [
        "fastapi",
        "uvicorn",
        "pydantic",
        "pydantic_settings",
        "multipart",
        "httpx",
        "PIL",
        "slugify",
        "rich",
    ]

    missing = []
    for package in required:
        try:
            __import__(package)
            console.print(f"[green]✓ {package}[/green]")
        except ImportError:
            console.print(f"[red]✗ {package}[/red]")
            missing.append(package)

    if missing:
        console.print(f"\n[yellow]Missing packages: {', '.join(missing)}[/yellow]")
        console.print("[cyan]Run: pip install -e .[/cyan]")
        return False

    return True


def check_configuration():
    """Check settings and site directories."""
    try:
        from photoblog_admin.core.config import settings
    except Exception as e:
        console.print(f"[red]✗ Cannot load configuration: {e}[/red]")
        return None

    console.print(f"[green]✓ Site root: {settings.site_root}[/green]")
    for dir_path in [settings.posts_dir, settings.data_dir]:
        if dir_path.exists():
            console.print(f"[green]✓ {dir_path}[/green]")
        else:
            console.print(f"[yellow]⚠ {dir_path} (will be created)[/yellow]")

    if settings.b2_config_file.is_file():
        console.print(f"[green]✓ Legacy credentials file: {settings.b2_config_file}[/green]")

    if not settings.storage_configured:
        console.print("[red]✗ B2 credentials or bucket not configured[/red]")
        return None

    console.print(f"[green]✓ Bucket: {settings.b2_bucket_name or settings.b2_bucket_id}[/green]")
    if settings.b2_use_cdn and settings.b2_cdn_domain:
        console.print(f"[green]✓ CDN: {settings.b2_cdn_domain}[/green]")
    return settings


async def check_storage(settings):
    """Authorize against B2 and resolve the bucket."""
    from photoblog_admin.core.exceptions import StorageException
    from photoblog_admin.services import StorageService

    storage = StorageService(settings)
    try:
        session = await storage.authorize()
        console.print(f"[green]✓ Authorized, bucket ID {session.bucket_id}[/green]")
        console.print(f"[dim]  Sample URL: {storage.public_url('album/img000.jpg')}[/dim]")
        return True
    except StorageException as e:
        console.print(f"[red]✗ {e.message}[/red]")
        return False
    finally:
        await storage.aclose()


def main():
    """Run all checks."""
    console.print(Panel.fit(
        "[bold cyan]Setup Verification[/bold cyan]\n"
        "Checking prerequisites for the admin panel",
        border_style="cyan"
    ))

    console.print("\n[bold]1. Python Version[/bold]")
    python_ok = check_python_version()

    console.print("\n[bold]2. Dependencies[/bold]")
    deps_ok = check_dependencies()

    console.print("\n[bold]3. Configuration[/bold]")
    settings = check_configuration() if deps_ok else None
    config_ok = settings is not None

    storage_ok = False
    if config_ok:
        console.print("\n[bold]4. Remote Storage[/bold]")
        storage_ok = asyncio.run(check_storage(settings))

    console.print("\n" + "=" * 50)

    if python_ok and deps_ok and config_ok and storage_ok:
        console.print("[bold green]✓ Setup verification passed![/bold green]")
        console.print("\n[cyan]You can now run:[/cyan]")
        console.print("  [white]photoblog-admin[/white]")
        return 0

    console.print("[bold yellow]⚠ Some checks failed[/bold yellow]")
    console.print("\n[cyan]Steps to fix:[/cyan]")
    if not python_ok:
        console.print("  1. Install Python 3.10+")
    if not deps_ok:
        console.print("  2. Install dependencies: pip install -e .")
    if not config_ok:
        console.print("  3. Copy .env.example to .env and fill in the B2 settings")
    elif not storage_ok:
        console.print("  4. Check the B2 key, bucket name and bucket ID")
    return 1


if __name__ == "__main__":
    sys.exit(main())
