"""Rich terminal display for appsweep."""

from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from appsweep.models import DiscoveryResult, MatchRule, SkipRule

console = Console()


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable string (decimal units like macOS)."""
    if size_bytes >= 1000**3:
        return f"{size_bytes / (1000**3):.1f} GB"
    elif size_bytes >= 1000**2:
        return f"{size_bytes / (1000**2):.1f} MB"
    elif size_bytes >= 1000:
        return f"{size_bytes / 1000:.1f} KB"
    else:
        return f"{size_bytes} B"


def show_discovery(result: DiscoveryResult) -> None:
    """Display the paths found for an app."""
    app = result.app
    title = f"{app.app_name} ({app.bundle_identifier or 'no bundle id'})"

    if not result.items:
        console.print(f"[yellow]No files found for {title}[/yellow]")
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("", width=1)
    table.add_column("Path")
    table.add_column("Size", justify="right")
    table.add_column("Logical", justify="right", style="dim")

    for item in sorted(result.items, key=lambda i: i.real_bytes, reverse=True):
        glyph = item.icon.glyph if item.icon else " "
        table.add_row(glyph, item.path, item.size_human, format_size(item.logical_bytes))

    console.print(table)
    console.print(
        f"[bold]{len(result.items)} paths[/bold], "
        f"[green]{format_size(result.total_real_bytes)}[/green] on disk "
        f"[dim]({format_size(result.total_logical_bytes)} logical)[/dim]"
    )


def show_rules(match_rules: list[MatchRule], skip_rules: list[SkipRule]) -> None:
    """Display match and skip rules."""
    table = Table(title="Match Rules", show_header=True, header_style="bold")
    table.add_column("Bundle key", style="cyan")
    table.add_column("Include")
    table.add_column("Exclude", style="red")
    table.add_column("Forced paths", style="dim")
    for rule in match_rules:
        table.add_row(
            rule.bundle_id,
            ", ".join(rule.include),
            ", ".join(rule.exclude),
            "\n".join(rule.include_force or []),
        )
    console.print(table)
    console.print()

    table = Table(title="Skip Rules", show_header=True, header_style="bold")
    table.add_column("Prefix", style="yellow")
    table.add_column("Allowed prefixes")
    for rule in skip_rules:
        table.add_row(rule.skip_prefix, ", ".join(rule.allow_prefixes) or "-")
    console.print(table)


def show_roots(roots: list[Path]) -> None:
    """Display the effective search roots."""
    console.print("[bold]Search Roots[/bold]\n")
    for root in roots:
        console.print(f"  • {root}")
    if not roots:
        console.print("[yellow]No search roots exist on this system.[/yellow]")


def show_scanning_progress() -> Progress:
    """Create a spinner for a running discovery."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
