"""Prevalence filter: drop stems too rare across years or articles."""

import math
from fractions import Fraction
from typing import Set

from ..errors import ThresholdConfigError
from .frequency import FrequencyTables
from .models import PrevalenceThresholds


def _ceil_share(total: int, fraction: float) -> int:
    # Exact arithmetic so that e.g. 9 * 2/3 is 6, not 6.000000000000001.
    share = Fraction(fraction).limit_denominator(1000) * total
    return max(1, math.ceil(share))


def compute_thresholds(
    num_years: int,
    num_articles: int,
    year_fraction: float = 2 / 3,
    article_fraction: float = 0.1,
) -> PrevalenceThresholds:
    """Minimum coverage as ``ceil(num_years * year_fraction)`` and ``ceil(num_articles * article_fraction)``."""
    return PrevalenceThresholds(
        min_year_coverage=_ceil_share(num_years, year_fraction),
        min_article_coverage=_ceil_share(num_articles, article_fraction),
    )


def thresholds_for(
    tables: FrequencyTables,
    year_fraction: float = 2 / 3,
    article_fraction: float = 0.1,
) -> PrevalenceThresholds:
    """Thresholds scaled to the corpus behind the tables."""
    return compute_thresholds(tables.num_years, tables.num_articles, year_fraction, article_fraction)


def prevalent_stems(tables: FrequencyTables, thresholds: PrevalenceThresholds) -> Set[str]:
    """Stems that meet both the year and the article coverage threshold."""
    years = tables.year_coverage()
    articles = tables.article_coverage().reindex(years.index, fill_value=0)
    keep = (years >= thresholds.min_year_coverage) & (articles >= thresholds.min_article_coverage)
    return set(years.index[keep])


def filter_prevalent(tables: FrequencyTables, thresholds: PrevalenceThresholds) -> FrequencyTables:
    """
    Restrict the tables to prevalent stems.

    Raises:
        ThresholdConfigError: if no stem survives
    """
    keep = prevalent_stems(tables, thresholds)
    if not keep:
        raise ThresholdConfigError(
            f"No stem occurs in at least {thresholds.min_year_coverage} of {tables.num_years} years "
            f"and {thresholds.min_article_coverage} of {tables.num_articles} articles"
        )
    return tables.restrict(keep)
