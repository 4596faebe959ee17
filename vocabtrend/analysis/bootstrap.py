"""Article-level bootstrap of per-year stem frequencies.

Every replicate draws as many articles as the corpus holds, with
replacement, and recomputes the yearly frequency of the selected stems.
Tokenization is a pure function of an article, so a replicate reuses the
per-article counts instead of re-tokenizing the resampled copy. Replicates
share nothing: each gets its own pre-spawned seed and returns its own
``ReplicateResult``, and standard errors are reduced only after all of them
have finished.
"""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .frequency import FrequencyTables
from .models import TrendResult


@dataclass
class ReplicateResult:
    """Yearly frequencies of the selected stems in one replicate."""

    replicate: int
    # shape (stems, years); a year missing from the resample has frequency 0
    frequencies: np.ndarray


def _run_replicates(
    counts: np.ndarray,
    article_words: np.ndarray,
    year_onehot: np.ndarray,
    seeds: Sequence[Tuple[int, np.random.SeedSequence]],
) -> List[ReplicateResult]:
    n_articles = counts.shape[0]
    results = []
    for replicate, seed in seeds:
        rng = np.random.default_rng(seed)
        sample = rng.integers(0, n_articles, size=n_articles)
        multiplicity = np.bincount(sample, minlength=n_articles).astype(float)

        weighted_years = year_onehot * multiplicity[:, None]
        stem_sums = weighted_years.T @ counts
        totals = weighted_years.T @ article_words

        frequencies = np.divide(
            stem_sums,
            totals[:, None],
            out=np.zeros_like(stem_sums, dtype=float),
            where=totals[:, None] > 0,
        )
        results.append(ReplicateResult(replicate=replicate, frequencies=frequencies.T))
    return results


class BootstrapResult:
    """Replicate frequencies for a set of stems, reduced to standard errors."""

    def __init__(
        self,
        stems: List[str],
        years: List[int],
        replicates: List[ReplicateResult],
        num_articles: int,
    ) -> None:
        self.stems = stems
        self.years = years
        self.num_articles = num_articles
        ordered = sorted(replicates, key=lambda r: r.replicate)
        if ordered:
            self.frequencies = np.stack([r.frequencies for r in ordered])
        else:
            self.frequencies = np.zeros((0, len(stems), len(years)))

    @property
    def replicate_count(self) -> int:
        return self.frequencies.shape[0]

    def standard_deviation(self) -> np.ndarray:
        """Sample standard deviation across replicates, shape (stems, years)."""
        return self.frequencies.std(axis=0, ddof=1)

    def standard_errors(self) -> np.ndarray:
        """Standard deviation divided by the square root of the corpus size."""
        return self.standard_deviation() / np.sqrt(self.num_articles)

    def standard_error_table(self) -> pd.DataFrame:
        """Rows of (stem, year, standard_error)."""
        se = self.standard_errors()
        return pd.DataFrame(
            [
                {"stem": stem, "year": year, "standard_error": float(se[i, j])}
                for i, stem in enumerate(self.stems)
                for j, year in enumerate(self.years)
            ],
            columns=["stem", "year", "standard_error"],
        )

    def replicate_table(self) -> pd.DataFrame:
        """Fixed-shape rows of (stem, year, replicate, frequency)."""
        n_rep, n_stems, n_years = self.frequencies.shape
        return pd.DataFrame(
            {
                "stem": np.tile(np.repeat(self.stems, n_years), n_rep),
                "year": np.tile(self.years, n_rep * n_stems),
                "replicate": np.repeat(np.arange(n_rep), n_stems * n_years),
                "frequency": self.frequencies.reshape(-1),
            },
            columns=["stem", "year", "replicate", "frequency"],
        )

    def attach(self, results: Sequence[TrendResult]) -> List[TrendResult]:
        """Copy trend results with their per-year standard errors filled in."""
        se = self.standard_errors()
        index = {stem: i for i, stem in enumerate(self.stems)}
        attached = []
        for result in results:
            if result.stem not in index:
                attached.append(result)
                continue
            row = se[index[result.stem]]
            errors = {year: float(row[j]) for j, year in enumerate(self.years)}
            attached.append(result.model_copy(update={"standard_errors": errors}))
        return attached


class BootstrapEstimator:
    """Estimate the sampling variability of yearly frequencies by resampling articles."""

    def __init__(self, replicates: int = 100, seed: Optional[int] = None, workers: int = 1) -> None:
        """
        Initialize bootstrap estimator.

        Args:
            replicates: Number of resampled corpora (at least 2)
            seed: Root seed; None draws fresh entropy
            workers: Worker processes; 1 runs in-process
        """
        if replicates < 2:
            raise ValueError(f"At least 2 replicates are needed, got {replicates}")
        self.replicates = replicates
        self.seed = seed
        self.workers = workers

    def _batches(self) -> List[List[Tuple[int, np.random.SeedSequence]]]:
        seeds = np.random.SeedSequence(self.seed).spawn(self.replicates)
        indexed = list(enumerate(seeds))
        n_batches = max(1, min(self.workers, self.replicates))
        return [indexed[i::n_batches] for i in range(n_batches)]

    def run(self, tables: FrequencyTables, stems: Sequence[str]) -> BootstrapResult:
        """
        Bootstrap the yearly frequencies of the given stems.

        Args:
            tables: Frequency tables holding per-article counts for the stems
            stems: Stems to follow (typically the significant ones)

        Returns:
            Replicate frequencies and standard errors
        """
        stems = list(stems)
        years = tables.years
        article_ids = tables.article_ids

        counts = tables.stem_matrix(stems).astype(float)
        article_words = tables.article_words.reindex(article_ids, fill_value=0).to_numpy(dtype=float)
        year_position = {year: j for j, year in enumerate(years)}
        year_onehot = np.zeros((len(article_ids), len(years)))
        for i, year in enumerate(tables.article_years.reindex(article_ids)):
            year_onehot[i, year_position[int(year)]] = 1.0

        batches = self._batches()
        if self.workers <= 1 or len(batches) == 1:
            replicates = [r for batch in batches for r in _run_replicates(counts, article_words, year_onehot, batch)]
        else:
            with ProcessPoolExecutor(max_workers=self.workers) as executor:
                futures = [
                    executor.submit(_run_replicates, counts, article_words, year_onehot, batch)
                    for batch in batches
                ]
                replicates = [r for future in futures for r in future.result()]

        return BootstrapResult(
            stems=stems,
            years=years,
            replicates=replicates,
            num_articles=tables.num_articles,
        )


def standard_error_table(year_table: pd.DataFrame, result: BootstrapResult) -> pd.DataFrame:
    """Observed yearly frequency of each bootstrapped stem next to its standard error."""
    observed = year_table[year_table["stem"].isin(result.stems)][["stem", "year", "frequency"]]
    merged = observed.merge(result.standard_error_table(), on=["stem", "year"], how="right")
    merged["frequency"] = merged["frequency"].fillna(0.0)
    return merged[["stem", "year", "frequency", "standard_error"]]
