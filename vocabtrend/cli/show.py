"""Show command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..analysis import TrendResult
from ..config import Config
from ..pipeline import outputs

console = Console()


def show_command(
    run_name: Optional[str] = typer.Argument(None, help="Run folder name. Default: latest run"),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="VOCABTREND_CONFIG",
        help="Config file",
    ),
    limit: int = typer.Option(20, "--limit", "-n", help="Number of stems to show", min=1),
    all_stems: bool = typer.Option(False, "--all", help="Include non-significant stems"),
) -> None:
    """Show the trending stems of a run."""
    config = Config(config_path)
    runs_dir = config.runs_dir

    if run_name:
        run_dir = runs_dir / run_name
        if not run_dir.is_dir():
            console.print(f"[red]Run not found: {run_name}[/red]")
            raise typer.Exit(1)
    else:
        run_dir = outputs.latest_run_dir(runs_dir)
        if run_dir is None:
            console.print("[red]No runs found. Run 'vocabtrend run' first.[/red]")
            raise typer.Exit(1)

    try:
        trends = outputs.read_trends(run_dir)
    except FileNotFoundError:
        console.print(f"[red]Run {run_dir.name} has no trend table (see {outputs.DIAGNOSTICS}).[/red]")
        raise typer.Exit(1)

    if not all_stems:
        trends = trends[trends["significant"].astype(bool)]

    results = [
        TrendResult(
            stem=row.stem,
            correlation=row.correlation,
            raw_p_value=row.raw_p,
            adjusted_p_value=row.adjusted_p,
            significant=bool(row.significant),
        )
        for row in trends.itertuples(index=False)
    ]

    try:
        inflections = outputs.read_inflections(run_dir)
    except FileNotFoundError:
        inflections = None

    console.print(f"Run: {run_dir}")
    outputs.print_trend_summary(results, inflections, limit=limit)
