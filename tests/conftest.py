"""Shared fixtures."""

from typing import List

import pytest

from vocabtrend.analysis import FrequencyAggregator, FrequencyTables, TextTokenizer
from vocabtrend.models import Article


def make_article(article_id: str, year: int, body: str, journal: str = "Proc B") -> Article:
    return Article(id=article_id, year=year, journal=journal, title=f"Title {article_id}", body=body)


@pytest.fixture
def tokenizer() -> TextTokenizer:
    return TextTokenizer()


@pytest.fixture
def small_corpus() -> List[Article]:
    return [
        make_article("a1", 2000, "cat dog cat"),
        make_article("a2", 2000, "dog fish"),
        make_article("a3", 2001, "cat bird"),
    ]


@pytest.fixture
def small_tables(tokenizer: TextTokenizer, small_corpus: List[Article]) -> FrequencyTables:
    return FrequencyAggregator(tokenizer).aggregate(small_corpus)


@pytest.fixture
def rising_corpus() -> List[Article]:
    """Three years, two articles each; only "ancient" grows in count."""
    articles = []
    for year, repeats in ((2000, 1), (2001, 2), (2002, 3)):
        for n in range(2):
            body = " ".join(["ancient"] * repeats) + " study data (Smith 2001) [2]. Another sentence here."
            articles.append(make_article(f"{year}-{n}", year, body))
    return articles
