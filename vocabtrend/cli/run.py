"""Run command implementation."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from ..config import Config
from ..pipeline import PipelineOrchestrator

console = Console()


def run_command(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="VOCABTREND_CONFIG",
        help="Config file. Default: ~/.config/vocabtrend/config.yaml",
    ),
    corpus: Optional[Path] = typer.Option(
        None,
        "--corpus",
        help="Corpus snapshot. Default: corpus.snapshot_path from the config",
    ),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        help="Run folder name. Default: timestamp",
    ),
    replicates: Optional[int] = typer.Option(
        None,
        "--replicates",
        "-r",
        help="Bootstrap replicates",
        min=2,
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Bootstrap random seed"),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-j",
        help="Worker processes for tokenization and bootstrap",
        min=1,
    ),
    keep_replicates: bool = typer.Option(
        False,
        "--keep-replicates",
        help="Also write the per-replicate frequency table",
    ),
    sentences: Optional[List[str]] = typer.Option(
        None,
        "--sentences",
        help="Stem to export sentences for (repeatable)",
    ),
) -> None:
    """Run the vocabulary trend analysis on a corpus snapshot."""
    try:
        config = Config(config_path)
        settings = config.config

        # Command-line options override the config file
        if replicates is not None:
            settings.bootstrap.replicates = replicates
        if seed is not None:
            settings.bootstrap.seed = seed
        if workers is not None:
            settings.analysis.workers = workers
            settings.bootstrap.workers = workers
        if keep_replicates:
            settings.bootstrap.keep_replicates = True

        orchestrator = PipelineOrchestrator(config)
        success = orchestrator.run(
            run_name=name,
            snapshot_path=corpus,
            sentence_stems=sentences or None,
        )

        if not success:
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except KeyboardInterrupt:
        console.print("\n[yellow]Pipeline interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Pipeline failed: {e}[/red]")
        raise typer.Exit(1)
