import pandas as pd
import pytest

from vocabtrend.analysis import (
    TrendReport,
    TrendResult,
    TrendTester,
    adjust_p_values,
    require_significant,
    stem_trend,
    trend_table,
)
from vocabtrend.errors import DegenerateSeriesError, ThresholdConfigError

YEARS = list(range(2000, 2010))


def _year_table(series: dict) -> pd.DataFrame:
    rows = [
        {"stem": stem, "year": year, "frequency": freq}
        for stem, freqs in series.items()
        for year, freq in zip(YEARS, freqs)
    ]
    return pd.DataFrame(rows)


def test_increasing_series_has_positive_significant_correlation() -> None:
    freqs = [0.001 * (i + 1) for i in range(len(YEARS))]
    rho, p_value = stem_trend("rise", YEARS, freqs)

    assert rho > 0
    assert p_value < 0.05


def test_constant_series_is_degenerate() -> None:
    with pytest.raises(DegenerateSeriesError) as excinfo:
        stem_trend("flat", YEARS, [0.01] * len(YEARS))
    assert excinfo.value.stem == "flat"


def test_two_years_are_not_enough() -> None:
    with pytest.raises(DegenerateSeriesError):
        stem_trend("short", [2000, 2001], [0.1, 0.2])


def test_benjamini_hochberg_adjustment() -> None:
    raw = [0.01, 0.04, 0.03]
    adjusted = adjust_p_values(raw)

    assert list(adjusted) == pytest.approx([0.03, 0.04, 0.04])
    assert all(a >= r for a, r in zip(adjusted, raw))
    assert len(adjust_p_values([])) == 0


def test_tester_ranks_and_flags_stems() -> None:
    n = len(YEARS)
    table = _year_table(
        {
            "up": [0.001 * (i + 1) for i in range(n)],
            "down": [0.001 * (n - i) for i in range(n)],
            "flat": [0.002] * n,
        }
    )
    report = TrendTester(0.05).test_series(table)

    assert [r.stem for r in report.results] == ["up", "down"]
    assert [u.stem for u in report.untestable] == ["flat"]
    assert [r.stem for r in report.significant] == ["up"]
    for result in report.results:
        assert result.adjusted_p_value >= result.raw_p_value


def test_tester_runs_on_frequency_tables(small_tables) -> None:
    report = TrendTester().run(small_tables)
    # two covered years leave every series untestable
    assert report.results == []
    assert len(report.untestable) == len(small_tables.stems)


def test_require_significant_raises_when_nothing_passes() -> None:
    report = TrendReport(
        results=[TrendResult(stem="x", correlation=0.2, raw_p_value=0.4, adjusted_p_value=0.4)],
    )
    with pytest.raises(ThresholdConfigError):
        require_significant(report)


def test_trend_table_columns() -> None:
    report = TrendReport(
        results=[
            TrendResult(stem="x", correlation=0.9, raw_p_value=0.001, adjusted_p_value=0.002, significant=True)
        ]
    )
    table = trend_table(report)
    assert list(table.columns) == ["stem", "correlation", "raw_p", "adjusted_p", "significant"]
    assert table.iloc[0]["significant"]
