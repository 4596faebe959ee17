"""Rank-correlation trend tests with false-discovery-rate control.

Each prevalent stem's yearly frequency series is correlated with year using
Spearman's rho; the p-value comes from the t-distribution approximation,
which tolerates tied ranks. P-values of all tested stems are adjusted with
the Benjamini-Hochberg step-up procedure. A stem trends upward when its
adjusted p-value is below the significance level and rho is positive.
"""

from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.stats import false_discovery_control, spearmanr

from ..errors import DegenerateSeriesError, ThresholdConfigError
from .frequency import FrequencyTables
from .models import TrendReport, TrendResult, UntestableStem


def stem_trend(stem: str, years: Sequence[int], frequencies: Sequence[float]) -> Tuple[float, float]:
    """
    Spearman correlation between year and frequency for one stem.

    Returns:
        (rho, two-sided p-value)

    Raises:
        DegenerateSeriesError: if the series is constant, too short, or the
            coefficient is undefined
    """
    freq = np.asarray(frequencies, dtype=float)
    if len(freq) != len(years):
        raise ValueError(f"{stem}: {len(years)} years but {len(freq)} frequencies")
    if len(freq) < 3:
        raise DegenerateSeriesError(stem, f"only {len(freq)} years, need at least 3")
    if np.ptp(freq) == 0:
        raise DegenerateSeriesError(stem, "constant frequency series")

    rho, p_value = spearmanr(np.asarray(years, dtype=float), freq)
    if not (np.isfinite(rho) and np.isfinite(p_value)):
        raise DegenerateSeriesError(stem, "undefined correlation")

    return float(np.clip(rho, -1.0, 1.0)), float(np.clip(p_value, 0.0, 1.0))


def adjust_p_values(p_values: Sequence[float]) -> np.ndarray:
    """Benjamini-Hochberg adjusted p-values, in input order."""
    if len(p_values) == 0:
        return np.array([], dtype=float)
    return false_discovery_control(np.asarray(p_values, dtype=float), method="bh")


class TrendTester:
    """Test every stem of a frequency table for a monotonic trend with time."""

    def __init__(self, significance_level: float = 0.05) -> None:
        """Initialize trend tester."""
        self.significance_level = significance_level

    def test_series(self, year_table: pd.DataFrame) -> TrendReport:
        """
        Test a zero-filled per-year table.

        Args:
            year_table: Columns stem, year, frequency; one row per (stem, year)

        Returns:
            Report with results ranked by correlation (ties by stem) and the
            stems that could not be tested
        """
        series = year_table.pivot(index="stem", columns="year", values="frequency").sort_index()
        series = series.reindex(columns=sorted(series.columns))
        years = [int(y) for y in series.columns]

        tested: List[Tuple[str, float, float]] = []
        untestable: List[UntestableStem] = []
        for stem, row in zip(series.index, series.to_numpy(dtype=float)):
            try:
                rho, p_value = stem_trend(stem, years, row)
            except DegenerateSeriesError as e:
                untestable.append(UntestableStem(stem=e.stem, reason=e.reason))
                continue
            tested.append((stem, rho, p_value))

        adjusted = adjust_p_values([p for _, _, p in tested])

        results = []
        for (stem, rho, p_value), adj in zip(tested, adjusted):
            adj = float(min(1.0, max(adj, p_value)))
            results.append(
                TrendResult(
                    stem=stem,
                    correlation=rho,
                    raw_p_value=p_value,
                    adjusted_p_value=adj,
                    significant=adj < self.significance_level and rho > 0,
                )
            )
        results.sort(key=lambda r: (-r.correlation, r.stem))

        return TrendReport(
            results=results,
            untestable=untestable,
            significance_level=self.significance_level,
        )

    def run(self, tables: FrequencyTables) -> TrendReport:
        """Test every stem held by the tables."""
        return self.test_series(tables.year_table(zero_fill=True))


def require_significant(report: TrendReport) -> List[TrendResult]:
    """
    Significant positive trends, ranked.

    Raises:
        ThresholdConfigError: if no stem passes the significance level
    """
    significant = report.significant
    if not significant:
        raise ThresholdConfigError(
            f"No stem shows a positive trend with adjusted p < {report.significance_level} "
            f"({len(report.results)} tested, {len(report.untestable)} untestable)"
        )
    return significant


def trend_table(report: TrendReport) -> pd.DataFrame:
    """Trend results as rows of (stem, correlation, raw_p, adjusted_p, significant)."""
    return pd.DataFrame(
        [
            {
                "stem": r.stem,
                "correlation": r.correlation,
                "raw_p": r.raw_p_value,
                "adjusted_p": r.adjusted_p_value,
                "significant": r.significant,
            }
            for r in report.results
        ],
        columns=["stem", "correlation", "raw_p", "adjusted_p", "significant"],
    )
