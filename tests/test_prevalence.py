import pytest

from vocabtrend.analysis import (
    FrequencyTables,
    PrevalenceThresholds,
    compute_thresholds,
    filter_prevalent,
    prevalent_stems,
    thresholds_for,
)
from vocabtrend.errors import ThresholdConfigError


def test_default_thresholds() -> None:
    thresholds = compute_thresholds(9, 50)
    assert thresholds.min_year_coverage == 6
    assert thresholds.min_article_coverage == 5


def test_thresholds_round_up() -> None:
    thresholds = compute_thresholds(10, 3)
    assert thresholds.min_year_coverage == 7
    assert thresholds.min_article_coverage == 1


def test_thresholds_for_tables(small_tables: FrequencyTables) -> None:
    thresholds = thresholds_for(small_tables)
    assert thresholds == PrevalenceThresholds(min_year_coverage=2, min_article_coverage=1)


def test_only_stems_meeting_both_thresholds_survive(small_tables: FrequencyTables) -> None:
    thresholds = thresholds_for(small_tables)
    assert prevalent_stems(small_tables, thresholds) == {"cat"}

    article_only = PrevalenceThresholds(min_year_coverage=1, min_article_coverage=2)
    assert prevalent_stems(small_tables, article_only) == {"cat", "dog"}


def test_filtering_is_idempotent(small_tables: FrequencyTables) -> None:
    thresholds = PrevalenceThresholds(min_year_coverage=1, min_article_coverage=2)
    once = filter_prevalent(small_tables, thresholds)
    twice = filter_prevalent(once, thresholds)

    assert once.stems == twice.stems == ["cat", "dog"]
    assert once.year_table().equals(twice.year_table())


def test_nothing_prevalent_raises(small_tables: FrequencyTables) -> None:
    thresholds = PrevalenceThresholds(min_year_coverage=3, min_article_coverage=1)
    with pytest.raises(ThresholdConfigError):
        filter_prevalent(small_tables, thresholds)
