"""CLI interface for appsweep."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from appsweep import __version__
from appsweep.config import load_config
from appsweep.display import console, show_discovery, show_roots, show_rules, show_scanning_progress
from appsweep.finder import AppPathFinder
from appsweep.locations import get_search_roots
from appsweep.models import AppDescriptor, RunMode

# Create Typer app
app = typer.Typer(
    name="appsweep",
    help="Find every file a macOS app leaves behind",
    add_completion=False,
)


def setup_logging(verbose: bool) -> None:
    """Send log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"appsweep version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """appsweep - find macOS application leftovers."""


@app.command()
def find(
    bundle: Path = typer.Argument(..., help="Path to the .app bundle"),
    root: Optional[list[Path]] = typer.Option(
        None, "--root", "-r", help="Search root (repeatable, replaces the defaults)"
    ),
    bundle_id: Optional[str] = typer.Option(None, "--bundle-id", help="Override the bundle identifier"),
    name: Optional[str] = typer.Option(None, "--name", help="Override the display name"),
    web_app: bool = typer.Option(False, "--web-app", help="Treat the bundle as a web app wrapper"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging"),
) -> None:
    """Find files and folders belonging to an app."""
    setup_logging(verbose)

    bundle = bundle.expanduser()
    descriptor = AppDescriptor.from_bundle(
        bundle, bundle_identifier=bundle_id, app_name=name, web_app=web_app
    )
    if not descriptor.bundle_identifier and not (bundle / "Contents").exists():
        console.print(f"[red]Not an app bundle: {bundle}[/red]")
        raise typer.Exit(1)

    finder = AppPathFinder(
        descriptor,
        search_roots=list(root) if root else None,
        run_mode=RunMode.BACKGROUND,
    )

    if as_json:
        result = finder.find_paths().result()
        typer.echo(result.model_dump_json(indent=2))
        return

    with show_scanning_progress() as progress:
        progress.add_task(f"Searching for {descriptor.app_name} files...", total=None)
        result = finder.find_paths().result()

    show_discovery(result)


@app.command()
def rules() -> None:
    """List match rules and skip rules."""
    config = load_config()
    show_rules(config.match_rules(), config.skip_rules())


@app.command()
def roots() -> None:
    """List the search roots that exist on this system."""
    config = load_config()
    show_roots(get_search_roots(config.extra_search_roots))


if __name__ == "__main__":
    app()
