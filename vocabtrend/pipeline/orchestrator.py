"""Pipeline orchestrator that runs the complete vocabulary trend analysis."""

import json
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pandas as pd
import pendulum
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from ..analysis import (
    BootstrapEstimator,
    BootstrapResult,
    FrequencyAggregator,
    FrequencyTables,
    PrevalenceThresholds,
    TextTokenizer,
    TrendReport,
    TrendResult,
    TrendTester,
    build_inflections,
    corpus_summary,
    export_sentences,
    filter_prevalent,
    inflection_table,
    load_stopwords,
    normalize_article,
    require_significant,
    standard_error_table,
    thresholds_for,
    trend_table,
)
from ..analysis.models import InflectionTable
from ..config import Config, load_exceptions
from ..ingestion import ExceptionList, IngestionReport, load_corpus
from ..models import Article
from . import outputs

console = Console()


class PipelineStage:
    """One step of the analysis, with its timing, stats and failure cause."""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.success = False
        self.error: Optional[str] = None
        # Exception class name, e.g. ThresholdConfigError, for diagnostics.
        self.error_type: Optional[str] = None
        self.stats: Dict = {}

    def start(self):
        """Mark stage as started."""
        self.start_time = time.time()

    def complete(self, stats: Optional[Dict] = None):
        """Mark stage as completed successfully."""
        self.end_time = time.time()
        self.success = True
        if stats:
            self.stats.update(stats)

    def fail(self, error: str, error_type: Optional[str] = None):
        """Mark stage as failed."""
        self.end_time = time.time()
        self.success = False
        self.error = error
        self.error_type = error_type

    def fail_with(self, exc: Exception):
        """Mark stage as failed by an exception raised inside it."""
        self.fail(f"{type(exc).__name__}: {exc}", type(exc).__name__)

    @property
    def skipped(self) -> bool:
        """True when an earlier failure kept the stage from starting."""
        return self.start_time is None and self.error is None

    @property
    def duration(self) -> float:
        """Get stage duration in seconds."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    def to_stats(self) -> Dict:
        return {
            "duration": self.duration,
            "success": self.success,
            "skipped": self.skipped,
            "error": self.error,
            "error_type": self.error_type,
            "stats": self.stats,
        }


class AnalysisState:
    """Everything produced by a run, filled in stage by stage."""

    def __init__(self) -> None:
        self.articles: List[Article] = []
        self.ingestion: Optional[IngestionReport] = None
        self.tokenizer: Optional[TextTokenizer] = None
        self.tables: Optional[FrequencyTables] = None
        self.thresholds: Optional[PrevalenceThresholds] = None
        self.prevalent: Optional[FrequencyTables] = None
        self.trends: Optional[TrendReport] = None
        self.significant: List[TrendResult] = []
        self.bootstrap: Optional[BootstrapResult] = None
        self.inflections: InflectionTable = {}
        self.sentences: Optional[pd.DataFrame] = None


class PipelineOrchestrator:
    """Orchestrates the complete vocabulary trend analysis."""

    def __init__(self, config: Config):
        """Initialize pipeline orchestrator."""
        self.config = config
        self.stages = [
            PipelineStage("corpus", "Loading corpus snapshot"),
            PipelineStage("normalize", "Removing citations and numbers"),
            PipelineStage("tokenize", "Tokenizing, stemming and counting"),
            PipelineStage("prevalence", "Filtering rare stems"),
            PipelineStage("trends", "Testing stems for trends with time"),
            PipelineStage("bootstrap", "Bootstrapping articles"),
            PipelineStage("inflections", "Indexing inflections"),
            PipelineStage("outputs", "Writing tables"),
        ]
        self.state = AnalysisState()
        self.total_start_time: Optional[float] = None

    def _save_stage_stats(self, run_dir: Path):
        """Save pipeline stage statistics."""
        stats = {
            "pipeline": {
                "total_duration": time.time() - self.total_start_time if self.total_start_time else 0,
                "completed_at": pendulum.now().to_iso8601_string(),
            },
            "stages": {}
        }

        for stage in self.stages:
            stats["stages"][stage.name] = stage.to_stats()

        stats_file = run_dir / "pipeline_stats.json"
        with open(stats_file, "w") as f:
            json.dump(stats, f, indent=2)

    def _diagnostics(self) -> Dict:
        """Collect per-record and per-stem problems that did not abort the run."""
        state = self.state
        bootstrap_config = self.config.config.bootstrap
        return {
            "ingestion": state.ingestion.model_dump() if state.ingestion else None,
            "thresholds": state.thresholds.model_dump() if state.thresholds else None,
            "stems": {
                "observed": len(state.tables.stems) if state.tables else 0,
                "prevalent": len(state.prevalent.stems) if state.prevalent else 0,
                "tested": len(state.trends.results) if state.trends else 0,
                "significant": len(state.significant),
            },
            "untestable": [u.model_dump() for u in state.trends.untestable] if state.trends else [],
            "bootstrap": {
                "replicates": state.bootstrap.replicate_count if state.bootstrap else 0,
                "seed": bootstrap_config.seed,
            },
            "failed_stages": [s.name for s in self.stages if s.error],
            "stage_errors": {s.name: s.error_type for s in self.stages if s.error},
            "skipped_stages": [s.name for s in self.stages if s.skipped],
        }

    def _print_summary(self, run_name: str, run_dir: Path):
        """Print pipeline execution summary."""
        successful_stages = sum(1 for s in self.stages if s.success)
        total_duration = time.time() - self.total_start_time if self.total_start_time else 0

        table = Table(title="Pipeline Summary")
        table.add_column("Stage", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Duration", style="yellow")
        table.add_column("Details", style="dim")

        for stage in self.stages:
            status = "[green]✓[/green]" if stage.success else "[red]✗[/red]"
            duration = f"{stage.duration:.1f}s" if stage.duration > 0 else "-"

            details = ""
            if stage.success and stage.stats:
                if stage.name == "corpus":
                    details = f"{stage.stats.get('articles', 0)} articles, {stage.stats.get('dropped', 0)} dropped"
                elif stage.name == "tokenize":
                    details = f"{stage.stats.get('stems', 0)} stems, {stage.stats.get('tokens', 0)} tokens"
                elif stage.name == "prevalence":
                    details = f"{stage.stats.get('kept', 0)} of {stage.stats.get('observed', 0)} stems kept"
                elif stage.name == "trends":
                    details = f"{stage.stats.get('significant', 0)} significant, {stage.stats.get('untestable', 0)} untestable"
                elif stage.name == "bootstrap":
                    details = f"{stage.stats.get('replicates', 0)} replicates"
            elif stage.skipped:
                details = "Not run"
            elif not stage.success:
                details = stage.error or "Failed"

            table.add_row(stage.name.title(), status, duration, details)

        console.print("\n")
        console.print(table)

        if successful_stages == len(self.stages):
            console.print(Panel(
                f"[green]✅ Analysis completed successfully![/green]\n\n"
                f"Run: {run_name}\n"
                f"Duration: {total_duration:.1f} seconds\n"
                f"Output directory: {run_dir}",
                style="green"
            ))
        else:
            failed_stages = [s.name for s in self.stages if s.error]
            console.print(Panel(
                f"[red]❌ Analysis failed![/red]\n\n"
                f"Failed stages: {', '.join(failed_stages)}\n"
                f"Duration: {total_duration:.1f} seconds\n"
                f"See {outputs.DIAGNOSTICS} for details.",
                style="red"
            ))

    def run(
        self,
        run_name: Optional[str] = None,
        snapshot_path: Optional[Path] = None,
        sentence_stems: Optional[List[str]] = None,
        quiet: bool = False,
    ) -> bool:
        """
        Run the complete analysis.

        Args:
            run_name: Name of the run folder; defaults to a timestamp
            snapshot_path: Corpus snapshot; defaults to the configured one
            sentence_stems: Stems to export sentences for
            quiet: Skip the console summary

        Returns:
            True if every stage completed, False otherwise
        """
        self.total_start_time = time.time()
        run_name = run_name or pendulum.now().format("YYYY-MM-DD_HHmmss")
        snapshot_path = snapshot_path or self.config.resolve_path(self.config.config.corpus.snapshot_path)
        if sentence_stems is None:
            sentence_stems = list(self.config.config.analysis.sentence_stems)

        if not quiet:
            console.print(Panel.fit(
                f"📈 Vocabulary Trend Analysis\n"
                f"Run: {run_name} • Corpus: {snapshot_path}",
                style="bold blue"
            ))

        run_dir = self.config.get_run_dir(run_name)

        try:
            if snapshot_path is None:
                self.stages[0].fail("No corpus snapshot configured")
                return False
            return self._execute_pipeline(Path(snapshot_path), run_dir, sentence_stems)
        finally:
            self._save_stage_stats(run_dir)
            outputs.write_diagnostics(self._diagnostics(), run_dir)
            if not quiet:
                self._print_summary(run_name, run_dir)

    def _run_stage(self, progress: Progress, stage: PipelineStage, action: Callable[[], Dict]) -> bool:
        """Run one stage, recording its stats or its failure."""
        task = progress.add_task(stage.description, total=1)
        stage.start()
        try:
            stats = action()
        except Exception as e:
            stage.fail_with(e)
            progress.console.print(f"[red]{stage.name} failed: {e}[/red]")
            return False
        finally:
            progress.remove_task(task)
        stage.complete(stats)
        return True

    def _execute_pipeline(self, snapshot_path: Path, run_dir: Path, sentence_stems: List[str]) -> bool:
        """Execute the pipeline stages."""
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        ) as progress:
            steps = [
                lambda: self._load(snapshot_path),
                self._normalize,
                self._tokenize,
                self._filter,
                self._test_trends,
                self._bootstrap,
                self._index_inflections,
                lambda: self._write(run_dir, sentence_stems),
            ]
            for stage, step in zip(self.stages, steps):
                if not self._run_stage(progress, stage, step):
                    return False

        return all(stage.success for stage in self.stages)

    def _load(self, snapshot_path: Path) -> Dict:
        config = self.config.config
        exceptions_path = self.config.exceptions_path
        exceptions = ExceptionList(load_exceptions(exceptions_path) if exceptions_path.exists() else [])

        articles, report = load_corpus(snapshot_path, config.corpus, exceptions)
        self.state.articles = articles
        self.state.ingestion = report
        return {
            "articles": report.accepted,
            "dropped": report.dropped_count,
            "excluded": len(report.excluded),
            "years": len({a.year for a in articles}),
        }

    def _normalize(self) -> Dict:
        self.state.articles = [normalize_article(a) for a in self.state.articles]
        return {"articles": len(self.state.articles)}

    def _tokenize(self) -> Dict:
        config = self.config.config
        stopwords = load_stopwords(config.text.stopword_source, config.text.extra_stopwords)
        self.state.tokenizer = TextTokenizer(stopwords, language=config.text.stemmer_language)

        aggregator = FrequencyAggregator(self.state.tokenizer, workers=config.analysis.workers)
        tables = aggregator.aggregate(self.state.articles)
        self.state.tables = tables
        return {
            "stems": len(tables.stems),
            "tokens": int(tables.total_words.sum()),
            "stopwords": len(stopwords),
        }

    def _filter(self) -> Dict:
        prevalence = self.config.config.prevalence
        tables = self.state.tables
        self.state.thresholds = thresholds_for(tables, prevalence.year_fraction, prevalence.article_fraction)
        self.state.prevalent = filter_prevalent(tables, self.state.thresholds)
        return {
            "observed": len(tables.stems),
            "kept": len(self.state.prevalent.stems),
            **self.state.thresholds.model_dump(),
        }

    def _test_trends(self) -> Dict:
        tester = TrendTester(self.config.config.trends.significance_level)
        report = tester.run(self.state.prevalent)
        self.state.trends = report
        self.state.significant = require_significant(report)
        return {
            "tested": len(report.results),
            "significant": len(self.state.significant),
            "untestable": len(report.untestable),
        }

    def _bootstrap(self) -> Dict:
        settings = self.config.config.bootstrap
        estimator = BootstrapEstimator(settings.replicates, seed=settings.seed, workers=settings.workers)
        stems = [r.stem for r in self.state.significant]
        self.state.bootstrap = estimator.run(self.state.prevalent, stems)
        self.state.significant = self.state.bootstrap.attach(self.state.significant)
        return {"replicates": self.state.bootstrap.replicate_count, "stems": len(stems)}

    def _index_inflections(self) -> Dict:
        stems = [r.stem for r in self.state.significant]
        self.state.inflections = build_inflections(self.state.prevalent.forms, stems)
        return {"stems": len(stems), "forms": sum(len(v) for v in self.state.inflections.values())}

    def _write(self, run_dir: Path, sentence_stems: List[str]) -> Dict:
        state = self.state
        year_table = state.prevalent.year_table(zero_fill=True)

        outputs.write_table(year_table, run_dir / outputs.YEAR_FREQUENCIES)
        outputs.write_table(trend_table(state.trends), run_dir / outputs.TRENDS)
        outputs.write_table(standard_error_table(year_table, state.bootstrap), run_dir / outputs.STANDARD_ERRORS)
        outputs.write_table(inflection_table(state.inflections), run_dir / outputs.INFLECTIONS)
        outputs.write_table(corpus_summary(state.articles), run_dir / outputs.CORPUS_SUMMARY)
        outputs.write_table(state.tables.total_words_table(), run_dir / outputs.TOTAL_WORDS)
        if self.config.config.bootstrap.keep_replicates:
            outputs.write_table(state.bootstrap.replicate_table(), run_dir / outputs.REPLICATES)

        exported = 0
        if sentence_stems:
            # Inflections of non-significant stems come from the full token stream.
            missing = [s for s in sentence_stems if s not in state.inflections]
            inflections = dict(state.inflections)
            inflections.update(build_inflections(state.tables.forms, missing))
            state.sentences = export_sentences(state.articles, inflections, sentence_stems, state.tokenizer)
            exported = len(outputs.write_sentences(state.sentences, run_dir))

        return {"rows": len(year_table), "sentence_files": exported}
