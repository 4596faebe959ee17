"""Init command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import ConfigModel, CorpusConfig, save_config, save_exceptions

console = Console()


def init_command(
    config_dir: Path = typer.Option(
        Path.home() / ".config" / "vocabtrend",
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    workspace: Path = typer.Option(
        Path.home() / "VocabTrend",
        "--workspace",
        "-w",
        help="Workspace root directory",
    ),
    snapshot: Optional[Path] = typer.Option(
        None,
        "--snapshot",
        "-s",
        help="Corpus snapshot (json, jsonl or csv)",
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing configuration"),
) -> None:
    """Initialize VocabTrend configuration and workspace."""
    console.print(Panel.fit("📈 VocabTrend - Initialization", style="bold blue"))

    # Create configuration directory
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    exceptions_path = config_dir / "exceptions.yaml"

    if config_path.exists() and not force:
        console.print(f"[red]Config already exists: {config_path} (use --force to overwrite)[/red]")
        raise typer.Exit(1)

    config = ConfigModel(
        workspace_root=str(workspace),
        corpus=CorpusConfig(snapshot_path=str(snapshot.resolve()) if snapshot else None),
    )

    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    if not exceptions_path.exists():
        save_exceptions([], exceptions_path)
        console.print(f"✅ Created exception list: {exceptions_path} (empty)")

    workspace.mkdir(parents=True, exist_ok=True)
    console.print(f"✅ Created workspace: {workspace}")

    console.print(
        Panel(
            f"[green]✅ VocabTrend initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Exception list: {exceptions_path}\n"
            f"Workspace: {workspace}\n\n"
            f"Next steps:\n"
            f"1. Build a snapshot: [bold]vocabtrend fetch manifest.yaml corpus.jsonl[/bold]\n"
            f"2. Run: [bold]vocabtrend run --corpus corpus.jsonl[/bold]",
            style="green",
        )
    )
