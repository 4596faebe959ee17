"""Corpus snapshot loading and validation."""

import json
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import pandas as pd
from pydantic import ValidationError
from rich.console import Console

from ..config import CorpusConfig
from ..errors import EmptyCorpusError, IngestionError
from ..models import Article
from .exceptions import ExceptionList
from .models import ArticleRecord, DroppedRecord, ExcludedRecord, IngestionReport
from .sections import trim_back_matter, word_count

console = Console()

# Alternative column names used by older snapshots.
FIELD_ALIASES = {
    "link": "id",
    "url": "id",
    "doi": "id",
    "article": "body",
    "text": "body",
}


def _normalize_keys(raw: Dict) -> Dict:
    """Lower-case keys and map aliases onto canonical field names."""
    record: Dict = {}
    for key, value in raw.items():
        name = str(key).strip().lower()
        name = FIELD_ALIASES.get(name, name)
        # The canonical key wins over an alias.
        if name in record and str(key).strip().lower() != name:
            continue
        record[name] = value
    return record


def read_snapshot(path: Path) -> List[Dict]:
    """Read raw records from a json, jsonl or csv snapshot."""
    if not path.exists():
        raise FileNotFoundError(f"Corpus snapshot not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".jsonl":
        records = []
        with open(path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    records.append(json.loads(line))
        return records

    if suffix == ".json":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get("articles", [])
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of articles in {path}")
        return data

    if suffix == ".csv":
        frame = pd.read_csv(path, dtype=str, keep_default_na=False)
        return frame.to_dict(orient="records")

    raise ValueError(f"Unsupported snapshot format: {path.suffix}")


def validate_record(
    raw: Dict,
    min_year: int = 1900,
    max_year: Optional[int] = None,
) -> Article:
    """
    Turn a raw record into an Article.

    Raises:
        IngestionError: if a field is missing or malformed, or the year is
            outside the analysis window
    """
    if not isinstance(raw, dict):
        raise IngestionError("record is not a mapping")
    record_id = str(raw.get("id") or "").strip() or None
    try:
        parsed = ArticleRecord(**raw)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise IngestionError(problems, record_id=record_id)

    if parsed.year < min_year or (max_year is not None and parsed.year > max_year):
        raise IngestionError(
            f"year {parsed.year} outside analysis window", record_id=parsed.id
        )

    return Article(
        id=parsed.id,
        year=parsed.year,
        journal=parsed.journal,
        title=parsed.title,
        body=parsed.body,
    )


def iter_articles(
    records: List[Dict],
    report: IngestionReport,
    config: CorpusConfig,
    exceptions: ExceptionList,
) -> Iterator[Article]:
    """Validate raw records, recording every rejection in the report."""
    seen_ids = set()

    for position, raw in enumerate(records):
        if not isinstance(raw, dict):
            report.dropped.append(DroppedRecord(position=position, reason="record is not a mapping"))
            continue

        normalized = _normalize_keys(raw)
        record, excluded_reason = exceptions.apply(normalized)
        if record is None:
            report.excluded.append(
                ExcludedRecord(record_id=str(normalized.get("id") or ""), reason=excluded_reason)
            )
            continue
        if record is not normalized:
            report.corrected += 1

        try:
            article = validate_record(record, config.min_year, config.max_year)

            if article.id in seen_ids:
                raise IngestionError("duplicate article id", record_id=article.id)

            if config.trim_back_matter:
                trimmed = trim_back_matter(article.body)
                if trimmed != article.body:
                    report.trimmed += 1
                    if not trimmed:
                        raise IngestionError("body empty after back-matter trimming", record_id=article.id)
                    article = article.with_body(trimmed)

            if config.min_body_words and word_count(article.body) < config.min_body_words:
                raise IngestionError(
                    f"body shorter than {config.min_body_words} words", record_id=article.id
                )
        except IngestionError as e:
            report.dropped.append(
                DroppedRecord(position=position, record_id=e.record_id, reason=str(e))
            )
            continue

        seen_ids.add(article.id)
        yield article


def load_corpus(
    path: Path,
    config: Optional[CorpusConfig] = None,
    exceptions: Optional[ExceptionList] = None,
) -> Tuple[List[Article], IngestionReport]:
    """
    Load and validate a corpus snapshot.

    Args:
        path: Snapshot file (json, jsonl or csv)
        config: Corpus settings (window, trimming, minimum length)
        exceptions: Per-article corrections

    Returns:
        Articles sorted by (year, id) and the ingestion report

    Raises:
        EmptyCorpusError: if no record survives validation
    """
    config = config or CorpusConfig()
    exceptions = exceptions or ExceptionList()

    records = read_snapshot(path)
    report = IngestionReport(source=str(path), total_records=len(records))

    articles = list(iter_articles(records, report, config, exceptions))
    articles.sort(key=lambda a: (a.year, a.id))
    report.accepted = len(articles)

    if report.dropped:
        console.print(
            f"[yellow]Dropped {report.dropped_count} of {report.total_records} records from {path.name}[/yellow]"
        )

    if not articles:
        raise EmptyCorpusError(f"No valid articles in {path}")

    return articles, report


def print_ingestion_summary(report: IngestionReport) -> None:
    """Print summary of a corpus load."""
    console.print(f"\n[bold]Corpus Summary:[/bold]")
    console.print(f"  Records read: {report.total_records}")
    console.print(f"  Accepted: [green]{report.accepted}[/green]")
    console.print(f"  Dropped: [red]{report.dropped_count}[/red]")
    console.print(f"  Excluded by exception list: {len(report.excluded)}")

    if report.dropped:
        console.print(f"\n[bold red]Dropped records:[/bold red]")
        reason_counts: Dict[str, int] = {}
        for dropped in report.dropped:
            reason_counts[dropped.reason] = reason_counts.get(dropped.reason, 0) + 1
        for reason, count in sorted(reason_counts.items()):
            console.print(f"  - {reason}: {count}")
