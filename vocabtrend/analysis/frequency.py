"""Per-year and per-article stem frequency tables."""

from collections import Counter
from concurrent.futures import ProcessPoolExecutor
from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd

from ..models import Article
from .models import ArticleCounts
from .tokenizer import TextTokenizer

YEAR_COLUMNS = ["stem", "year", "count", "total_words", "frequency"]
ARTICLE_COLUMNS = ["stem", "article_id", "count"]


class FrequencyTables:
    """Observed stem counts for a corpus, with zero-filled views on demand.

    Only non-zero counts are stored; ``year_table`` and ``article_table``
    materialize the zero-filled long tables for the stems currently held.
    Corpus-level figures (years, articles, word totals) never change when
    the tables are restricted to fewer stems.
    """

    def __init__(
        self,
        year_counts: pd.DataFrame,
        article_counts: pd.DataFrame,
        total_words: pd.Series,
        article_years: pd.Series,
        article_words: pd.Series,
        forms: Counter,
    ) -> None:
        self.year_counts = year_counts
        self.article_counts = article_counts
        self.total_words = total_words
        self.article_years = article_years
        self.article_words = article_words
        self.forms = forms

    @classmethod
    def from_partials(cls, partials: Sequence[ArticleCounts]) -> "FrequencyTables":
        """Reduce per-article partial aggregates into corpus tables."""
        by_year: Counter = Counter()
        totals: Counter = Counter()
        forms: Counter = Counter()
        article_rows = []
        article_years = {}
        article_words = {}

        for partial in partials:
            article_years[partial.article_id] = partial.year
            article_words[partial.article_id] = partial.total_words
            totals[partial.year] += partial.total_words
            forms.update(partial.forms)
            for stem, count in partial.stems.items():
                by_year[(stem, partial.year)] += count
                article_rows.append((stem, partial.article_id, count))

        year_counts = pd.DataFrame(
            [(stem, year, count) for (stem, year), count in by_year.items()],
            columns=["stem", "year", "count"],
        )
        article_counts = pd.DataFrame(article_rows, columns=ARTICLE_COLUMNS)

        years = sorted(set(article_years.values()))
        total_words = pd.Series([totals[year] for year in years], index=years, dtype="int64")
        total_words.index.name = "year"

        return cls(
            year_counts=year_counts.sort_values(["stem", "year"]).reset_index(drop=True),
            article_counts=article_counts.sort_values(["stem", "article_id"]).reset_index(drop=True),
            total_words=total_words,
            article_years=pd.Series(article_years, dtype="int64"),
            article_words=pd.Series(article_words, dtype="int64"),
            forms=forms,
        )

    @property
    def years(self) -> List[int]:
        """Distinct publication years covered by the corpus."""
        return [int(y) for y in self.total_words.index]

    @property
    def article_ids(self) -> List[str]:
        """Identifiers of every article in the corpus, in corpus order."""
        return list(self.article_years.index)

    @property
    def num_years(self) -> int:
        return len(self.total_words)

    @property
    def num_articles(self) -> int:
        return len(self.article_years)

    @property
    def stems(self) -> List[str]:
        """Stems held by the tables, sorted."""
        return sorted(self.year_counts["stem"].unique())

    def year_table(self, zero_fill: bool = True) -> pd.DataFrame:
        """
        Per-(stem, year) counts and frequencies.

        With ``zero_fill`` every stem gets exactly one row per covered year.
        Frequency is count / total words of that year.
        """
        if zero_fill:
            index = pd.MultiIndex.from_product([self.stems, self.years], names=["stem", "year"])
            counts = (
                self.year_counts.set_index(["stem", "year"])["count"]
                .reindex(index, fill_value=0)
                .reset_index()
            )
        else:
            counts = self.year_counts.copy()

        counts["count"] = counts["count"].astype("int64")
        counts["year"] = counts["year"].astype("int64")
        counts["total_words"] = counts["year"].map(self.total_words).fillna(0).astype("int64")
        denominator = counts["total_words"].where(counts["total_words"] > 0)
        counts["frequency"] = (counts["count"] / denominator).fillna(0.0)
        return counts[YEAR_COLUMNS].reset_index(drop=True)

    def article_table(self, zero_fill: bool = True) -> pd.DataFrame:
        """Per-(stem, article) counts, zero-filled over every article by default."""
        if not zero_fill:
            return self.article_counts.copy()
        index = pd.MultiIndex.from_product([self.stems, sorted(self.article_ids)], names=["stem", "article_id"])
        counts = (
            self.article_counts.set_index(["stem", "article_id"])["count"]
            .reindex(index, fill_value=0)
            .reset_index()
        )
        counts["count"] = counts["count"].astype("int64")
        return counts[ARTICLE_COLUMNS]

    def year_coverage(self) -> pd.Series:
        """Number of distinct years in which each stem occurs."""
        observed = self.year_counts[self.year_counts["count"] > 0]
        return observed.groupby("stem")["year"].nunique()

    def article_coverage(self) -> pd.Series:
        """Number of distinct articles in which each stem occurs."""
        observed = self.article_counts[self.article_counts["count"] > 0]
        return observed.groupby("stem")["article_id"].nunique()

    def restrict(self, stems: Iterable[str]) -> "FrequencyTables":
        """Return new tables holding only the given stems."""
        keep = set(stems)
        return FrequencyTables(
            year_counts=self.year_counts[self.year_counts["stem"].isin(keep)].reset_index(drop=True),
            article_counts=self.article_counts[self.article_counts["stem"].isin(keep)].reset_index(drop=True),
            total_words=self.total_words,
            article_years=self.article_years,
            article_words=self.article_words,
            forms=Counter({key: n for key, n in self.forms.items() if key[0] in keep}),
        )

    def stem_matrix(self, stems: Sequence[str]) -> np.ndarray:
        """Count matrix of shape (articles, stems), rows in ``article_ids`` order."""
        rows = {article_id: i for i, article_id in enumerate(self.article_ids)}
        cols = {stem: j for j, stem in enumerate(stems)}
        matrix = np.zeros((len(rows), len(cols)), dtype=np.int64)

        subset = self.article_counts[self.article_counts["stem"].isin(cols)]
        if not subset.empty:
            r = subset["article_id"].map(rows).to_numpy()
            c = subset["stem"].map(cols).to_numpy()
            np.add.at(matrix, (r, c), subset["count"].to_numpy())
        return matrix

    def top_stems(self, n: int = 20) -> pd.DataFrame:
        """Most common stems over the whole corpus."""
        totals = self.year_counts.groupby("stem")["count"].sum().reset_index()
        return totals.sort_values(["count", "stem"], ascending=[False, True]).head(n).reset_index(drop=True)

    def total_words_table(self) -> pd.DataFrame:
        """Total post stop-word tokens per year."""
        return self.total_words.rename("total_words").reset_index()


class FrequencyAggregator:
    """Tokenize a corpus article by article and reduce the counts."""

    def __init__(self, tokenizer: TextTokenizer, workers: int = 1, chunksize: int = 16) -> None:
        """
        Initialize aggregator.

        Args:
            tokenizer: Tokenizer applied to every article body
            workers: Worker processes; 1 runs in-process
            chunksize: Articles sent to a worker at once
        """
        self.tokenizer = tokenizer
        self.workers = workers
        self.chunksize = chunksize

    def count_articles(self, articles: Sequence[Article]) -> List[ArticleCounts]:
        """Produce one partial aggregate per article, in corpus order."""
        if self.workers <= 1 or len(articles) < 2:
            return [self.tokenizer.count_article(a) for a in articles]

        with ProcessPoolExecutor(max_workers=self.workers) as executor:
            return list(executor.map(self.tokenizer.count_article, articles, chunksize=self.chunksize))

    def aggregate(self, articles: Sequence[Article]) -> FrequencyTables:
        """Build frequency tables for a corpus."""
        return FrequencyTables.from_partials(self.count_articles(articles))


def corpus_summary(articles: Sequence[Article]) -> pd.DataFrame:
    """Number of articles per (year, journal)."""
    frame = pd.DataFrame([{"year": a.year, "journal": a.journal} for a in articles], columns=["year", "journal"])
    return frame.groupby(["year", "journal"]).size().rename("articles").reset_index()
