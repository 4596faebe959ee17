"""Tabular outputs of an analysis run."""

import json
import re
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from rich.console import Console
from rich.table import Table

from ..analysis.inflections import read_inflection_table, stem_label
from ..analysis.models import InflectionTable, TrendResult

console = Console()

YEAR_FREQUENCIES = "year_frequencies.csv"
TRENDS = "trends.csv"
STANDARD_ERRORS = "standard_errors.csv"
INFLECTIONS = "inflections.csv"
REPLICATES = "bootstrap_replicates.csv"
CORPUS_SUMMARY = "corpus_summary.csv"
TOTAL_WORDS = "total_words.csv"
DIAGNOSTICS = "diagnostics.json"
SENTENCES_DIR = "sentences"


def write_table(frame: pd.DataFrame, path: Path) -> Path:
    """Write a table as CSV."""
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False)
    return path


def write_diagnostics(diagnostics: Dict, run_dir: Path) -> Path:
    """Write the diagnostics report."""
    path = run_dir / DIAGNOSTICS
    with open(path, "w") as f:
        json.dump(diagnostics, f, indent=2, default=str)
    return path


def _safe_name(stem: str) -> str:
    return re.sub(r"[^\w\-]+", "_", stem) or "stem"


def write_sentences(sentences: pd.DataFrame, run_dir: Path) -> List[Path]:
    """Write one ``<stem>.tsv`` of (year, sentence) per exported stem."""
    out_dir = run_dir / SENTENCES_DIR
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for stem, group in sentences.groupby("stem", sort=False):
        path = out_dir / f"{_safe_name(stem)}.tsv"
        group[["year", "sentence"]].to_csv(path, sep="\t", index=False)
        paths.append(path)
    return paths


def read_trends(run_dir: Path) -> pd.DataFrame:
    """Read the trend table of a run."""
    path = run_dir / TRENDS
    if not path.exists():
        raise FileNotFoundError(f"No trend table in {run_dir}")
    return pd.read_csv(path, keep_default_na=False, dtype={"stem": str})


def read_inflections(run_dir: Path) -> InflectionTable:
    """Read the inflection table of a run."""
    path = run_dir / INFLECTIONS
    if not path.exists():
        raise FileNotFoundError(f"No inflection table in {run_dir}")
    return read_inflection_table(pd.read_csv(path, keep_default_na=False))


def latest_run_dir(runs_dir: Path) -> Optional[Path]:
    """Most recent run folder (run names sort chronologically)."""
    if not runs_dir.exists():
        return None
    run_dirs = sorted([d for d in runs_dir.iterdir() if d.is_dir()], reverse=True)
    return run_dirs[0] if run_dirs else None


def print_trend_summary(
    results: List[TrendResult],
    inflections: Optional[InflectionTable] = None,
    limit: int = 20,
) -> None:
    """Print the top trending stems."""
    table = Table(title="Trending Stems")
    table.add_column("#", style="dim")
    table.add_column("Stem", style="cyan")
    table.add_column("Rho", style="green")
    table.add_column("p (raw)", style="yellow")
    table.add_column("p (BH)", style="yellow")

    for i, result in enumerate(results[:limit], 1):
        label = stem_label(inflections, result.stem) if inflections else result.stem
        table.add_row(
            str(i),
            label,
            f"{result.correlation:.3f}",
            f"{result.raw_p_value:.2e}",
            f"{result.adjusted_p_value:.2e}",
        )

    console.print(table)
    if len(results) > limit:
        console.print(f"[dim]... and {len(results) - limit} more[/dim]")
