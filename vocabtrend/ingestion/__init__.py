"""Corpus ingestion: snapshot loading, corrections and article fetching."""

from .article_fetcher import ArticleFetcher, load_manifest, print_fetch_summary, write_snapshot
from .corpus import load_corpus, print_ingestion_summary, read_snapshot, validate_record
from .exceptions import ExceptionList
from .models import ArticleRecord, FetchedArticle, IngestionReport, ManifestItem
from .sections import BACK_MATTER_HEADINGS, trim_back_matter

__all__ = [
    "ArticleFetcher",
    "ArticleRecord",
    "ExceptionList",
    "FetchedArticle",
    "IngestionReport",
    "ManifestItem",
    "BACK_MATTER_HEADINGS",
    "load_corpus",
    "load_manifest",
    "print_fetch_summary",
    "print_ingestion_summary",
    "read_snapshot",
    "trim_back_matter",
    "validate_record",
    "write_snapshot",
]
