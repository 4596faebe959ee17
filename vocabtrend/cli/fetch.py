"""Fetch command implementation."""

from pathlib import Path

import typer
from rich.console import Console

from ..ingestion import ArticleFetcher, load_manifest, print_fetch_summary, write_snapshot

console = Console()


def fetch_command(
    manifest: Path = typer.Argument(..., help="Manifest of article links (YAML or CSV)"),
    output: Path = typer.Argument(..., help="Snapshot to write (JSON Lines)"),
    max_concurrent: int = typer.Option(3, "--max-concurrent", help="Simultaneous requests", min=1),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout in seconds"),
    trim: bool = typer.Option(
        True,
        "--trim/--no-trim",
        help="Cut extracted text at the first back-matter heading",
    ),
) -> None:
    """Fetch the articles listed in a manifest into a corpus snapshot."""
    try:
        items = load_manifest(manifest)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not items:
        console.print("[yellow]Manifest lists no articles.[/yellow]")
        raise typer.Exit(1)

    console.print(f"Fetching {len(items)} articles...")
    fetcher = ArticleFetcher(timeout=timeout, max_concurrent=max_concurrent, trim=trim)
    articles = fetcher.fetch_articles_sync(items)
    print_fetch_summary(articles)

    written = write_snapshot(articles, output)
    if written == 0:
        console.print("[red]❌ No article could be fetched.[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✅ Wrote {written} articles to {output}[/green]")
