"""Sentences command implementation."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from ..analysis import (
    FrequencyAggregator,
    TextTokenizer,
    build_inflections,
    export_sentences,
    load_stopwords,
    normalize_article,
)
from ..config import Config, load_exceptions
from ..errors import VocabTrendError
from ..ingestion import ExceptionList, load_corpus, print_ingestion_summary
from ..pipeline import outputs

console = Console()


def sentences_command(
    stems: List[str] = typer.Argument(..., help="Stems to export sentences for"),
    run_name: Optional[str] = typer.Option(
        None,
        "--run",
        help="Run folder to write into. Default: latest run",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="VOCABTREND_CONFIG",
        help="Config file",
    ),
    corpus: Optional[Path] = typer.Option(
        None,
        "--corpus",
        help="Corpus snapshot. Default: corpus.snapshot_path from the config",
    ),
) -> None:
    """Export every sentence that uses one of the given stems."""
    config = Config(config_path)
    settings = config.config

    if run_name:
        run_dir = config.get_run_dir(run_name)
    else:
        run_dir = outputs.latest_run_dir(config.runs_dir)
        if run_dir is None:
            console.print("[red]No runs found. Run 'vocabtrend run' first.[/red]")
            raise typer.Exit(1)

    snapshot_path = corpus or config.resolve_path(settings.corpus.snapshot_path)
    if snapshot_path is None:
        console.print("[red]No corpus snapshot given or configured.[/red]")
        raise typer.Exit(1)

    exceptions_path = config.exceptions_path
    exceptions = ExceptionList(load_exceptions(exceptions_path) if exceptions_path.exists() else [])

    try:
        articles, report = load_corpus(snapshot_path, settings.corpus, exceptions)
    except (FileNotFoundError, ValueError, VocabTrendError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    print_ingestion_summary(report)
    articles = [normalize_article(a) for a in articles]

    tokenizer = TextTokenizer(
        load_stopwords(settings.text.stopword_source, settings.text.extra_stopwords),
        language=settings.text.stemmer_language,
    )

    # Reuse the run's inflections; anything else is indexed from the corpus.
    try:
        inflections = outputs.read_inflections(run_dir)
    except FileNotFoundError:
        inflections = {}
    missing = [s for s in stems if s not in inflections]
    if missing:
        tables = FrequencyAggregator(tokenizer, workers=settings.analysis.workers).aggregate(articles)
        inflections.update(build_inflections(tables.forms, missing))

    unknown = [s for s in stems if not inflections.get(s)]
    for stem in unknown:
        console.print(f"[yellow]Stem '{stem}' does not occur in the corpus.[/yellow]")

    frame = export_sentences(articles, inflections, stems, tokenizer)
    paths = outputs.write_sentences(frame, run_dir)

    for path in paths:
        console.print(f"✅ {path}")
    console.print(f"[green]Exported {len(frame)} sentences for {len(paths)} stems into {run_dir}[/green]")
