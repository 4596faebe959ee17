"""Article fetcher and main-text extractor for corpus snapshots."""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import httpx
import pandas as pd
import trafilatura
import yaml
from pydantic import ValidationError
from rich.console import Console

from .models import FetchedArticle, ManifestItem
from .sections import trim_back_matter

console = Console()


def load_manifest(manifest_path: Path) -> List[ManifestItem]:
    """Load a fetch manifest (YAML with an ``articles`` list, or CSV)."""
    if not manifest_path.exists():
        raise FileNotFoundError(f"Manifest not found: {manifest_path}")

    if manifest_path.suffix.lower() == ".csv":
        rows = pd.read_csv(manifest_path, dtype=str, keep_default_na=False).to_dict(orient="records")
    else:
        try:
            with open(manifest_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in manifest: {e}")
        rows = (data or {}).get("articles", []) or []

    items = []
    for row in rows:
        row = {str(k).strip().lower(): v for k, v in row.items()}
        try:
            items.append(ManifestItem(**row))
        except ValidationError as e:
            console.print(f"[yellow]Skipping invalid manifest entry {row.get('link', 'unknown')}: {e}[/yellow]")
    return items


class ArticleFetcher:
    """Fetch article pages and extract their main text."""

    def __init__(
        self,
        timeout: float = 30.0,
        max_concurrent: int = 3,
        user_agent: str = "vocabtrend/0.1 (corpus builder)",
        trim: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize article fetcher."""
        self.timeout = timeout
        self.max_concurrent = max_concurrent
        self.user_agent = user_agent
        self.trim = trim
        self.transport = transport

    def _failed(self, item: ManifestItem, error: str, canonical_url: Optional[str] = None) -> FetchedArticle:
        return FetchedArticle(
            link=item.link,
            canonical_url=canonical_url or item.link,
            year=item.year,
            journal=item.journal,
            title=item.title,
            fetch_success=False,
            error=error,
        )

    async def fetch_article(self, client: httpx.AsyncClient, item: ManifestItem) -> FetchedArticle:
        """Fetch and extract a single article."""
        try:
            response = await client.get(item.link)
            response.raise_for_status()

            extracted = trafilatura.extract(
                response.text,
                include_comments=False,
                include_tables=False,
                deduplicate=True,
                favor_precision=True,
                url=str(response.url),
            )

            if not extracted:
                return self._failed(item, "Failed to extract article content", str(response.url))

            if self.trim:
                extracted = trim_back_matter(extracted)

            title = item.title
            if not title:
                metadata = trafilatura.metadata.extract_metadata(response.text)
                if metadata and metadata.title:
                    title = metadata.title

            return FetchedArticle(
                link=item.link,
                canonical_url=str(response.url),
                year=item.year,
                journal=item.journal,
                title=title,
                body=extracted,
            )

        except httpx.HTTPStatusError as e:
            error_msg = f"HTTP {e.response.status_code}"
            if e.response.status_code == 404:
                error_msg = "Article not found (404)"
            elif e.response.status_code == 403:
                error_msg = "Access forbidden (403)"
            elif e.response.status_code >= 500:
                error_msg = f"Server error ({e.response.status_code})"
            return self._failed(item, error_msg)
        except httpx.TimeoutException:
            return self._failed(item, "Request timed out")
        except httpx.HTTPError as e:
            return self._failed(item, f"HTTP error: {e}")

    async def fetch_all_articles(self, items: List[ManifestItem]) -> List[FetchedArticle]:
        """Fetch all articles concurrently."""
        if not items:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent)
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml",
        }

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers=headers,
            transport=self.transport,
        ) as client:

            async def fetch_with_semaphore(item: ManifestItem) -> FetchedArticle:
                async with semaphore:
                    return await self.fetch_article(client, item)

            tasks = [fetch_with_semaphore(item) for item in items]
            return await asyncio.gather(*tasks)

    def fetch_articles_sync(self, items: List[ManifestItem]) -> List[FetchedArticle]:
        """Synchronous wrapper for fetch_all_articles."""
        return asyncio.run(self.fetch_all_articles(items))


def write_snapshot(articles: List[FetchedArticle], snapshot_path: Path) -> int:
    """Write successfully fetched articles as a JSON Lines corpus snapshot."""
    snapshot_path.parent.mkdir(parents=True, exist_ok=True)

    written = 0
    with open(snapshot_path, "w", encoding="utf-8") as f:
        for article in articles:
            if not article.fetch_success:
                continue
            record = {
                "id": article.link,
                "year": article.year,
                "journal": article.journal,
                "title": article.title,
                "body": article.body,
            }
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
            written += 1
    return written


def print_fetch_summary(articles: List[FetchedArticle]) -> None:
    """Print summary of article fetch results."""
    successful = sum(1 for a in articles if a.fetch_success)
    failed = len(articles) - successful

    console.print(f"\n[bold]Article Fetch Summary:[/bold]")
    console.print(f"  Total articles: {len(articles)}")
    console.print(f"  Successful: [green]{successful}[/green]")
    console.print(f"  Failed: [red]{failed}[/red]")

    if failed > 0:
        console.print(f"\n[bold red]Failed articles:[/bold red]")
        error_counts = {}
        for article in articles:
            if not article.fetch_success:
                error = article.error or "Unknown error"
                error_counts[error] = error_counts.get(error, 0) + 1

        for error, count in sorted(error_counts.items()):
            console.print(f"  - {error}: {count}")
