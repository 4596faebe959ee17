"""Article exception list management commands."""

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ..config import ArticleException, Config, load_exceptions, save_exceptions

console = Console()
exceptions_app = typer.Typer(help="Manage the article exception list")


def _exceptions_path(config_path: Optional[Path]) -> Path:
    return Config(config_path).exceptions_path


@exceptions_app.command("list")
def exceptions_list(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", envvar="VOCABTREND_CONFIG", help="Config file"),
) -> None:
    """List all article exceptions."""
    exceptions_path = _exceptions_path(config_path)

    try:
        exceptions = load_exceptions(exceptions_path)
    except FileNotFoundError:
        console.print("[red]Exception list not found. Run 'vocabtrend init' first.[/red]")
        raise typer.Exit(1)

    if not exceptions:
        console.print("[yellow]No exceptions configured.[/yellow]")
        return

    table = Table(title="Article Exceptions")
    table.add_column("Article", style="cyan")
    table.add_column("Action", style="magenta")
    table.add_column("Value", style="green")
    table.add_column("Reason", style="yellow")

    for exception in exceptions:
        table.add_row(
            exception.article_id,
            exception.action,
            exception.value or "-",
            exception.reason,
        )

    console.print(table)


@exceptions_app.command("add")
def exceptions_add(
    article_id: str = typer.Argument(..., help="Article identifier (link or DOI)"),
    action: str = typer.Option(
        "exclude",
        "--action",
        "-a",
        help="Correction (exclude, set_year, set_title)",
    ),
    value: Optional[str] = typer.Option(None, "--value", "-v", help="New year or title"),
    reason: str = typer.Option(..., "--reason", "-r", help="Justification tag"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", envvar="VOCABTREND_CONFIG", help="Config file"),
) -> None:
    """Add an article exception."""
    exceptions_path = _exceptions_path(config_path)

    try:
        exceptions = load_exceptions(exceptions_path)
    except FileNotFoundError:
        exceptions = []

    if any(e.article_id == article_id and e.action == action for e in exceptions):
        console.print(f"[red]Exception '{action}' for {article_id} already exists.[/red]")
        raise typer.Exit(1)

    try:
        new_exception = ArticleException(article_id=article_id, action=action, value=value, reason=reason)
    except ValidationError as e:
        console.print(f"[red]Invalid exception: {e}[/red]")
        raise typer.Exit(1)

    exceptions.append(new_exception)
    save_exceptions(exceptions, exceptions_path)

    console.print(f"[green]✅ Added exception: {action} {article_id}[/green]")


@exceptions_app.command("remove")
def exceptions_remove(
    article_id: str = typer.Argument(..., help="Article identifier to remove"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", envvar="VOCABTREND_CONFIG", help="Config file"),
) -> None:
    """Remove every exception for an article."""
    exceptions_path = _exceptions_path(config_path)

    try:
        exceptions = load_exceptions(exceptions_path)
    except FileNotFoundError:
        console.print("[red]Exception list not found.[/red]")
        raise typer.Exit(1)

    original_count = len(exceptions)
    exceptions = [e for e in exceptions if e.article_id != article_id]

    if len(exceptions) == original_count:
        console.print(f"[red]No exception for '{article_id}'.[/red]")
        raise typer.Exit(1)

    save_exceptions(exceptions, exceptions_path)
    console.print(f"[green]✅ Removed {original_count - len(exceptions)} exception(s) for {article_id}[/green]")
