"""Data models for the analysis stages."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field


@dataclass
class ArticleCounts:
    """Partial aggregate of one article's tokens.

    Partials combine by summation, so any sharding of the corpus reduces to
    the same totals.
    """

    article_id: str
    year: int
    total_words: int = 0
    stems: Counter = field(default_factory=Counter)
    # (stem, surface_form) -> occurrences
    forms: Counter = field(default_factory=Counter)


class TrendResult(BaseModel):
    """Rank correlation of one stem's yearly frequency with time."""

    model_config = ConfigDict(frozen=True)

    stem: str = Field(..., description="Stem")
    correlation: float = Field(..., description="Spearman correlation coefficient", ge=-1.0, le=1.0)
    raw_p_value: float = Field(..., description="Two-sided p-value", ge=0.0, le=1.0)
    adjusted_p_value: float = Field(..., description="Benjamini-Hochberg adjusted p-value", ge=0.0, le=1.0)
    significant: bool = Field(False, description="Significant positive trend")
    standard_errors: Dict[int, float] = Field(default_factory=dict, description="Bootstrap standard error per year")


class UntestableStem(BaseModel):
    """A stem excluded from the trend ranking."""

    stem: str = Field(..., description="Stem")
    reason: str = Field(..., description="Why no correlation could be computed")


class TrendReport(BaseModel):
    """Outcome of testing every prevalent stem."""

    results: List[TrendResult] = Field(default_factory=list, description="Tested stems, correlation descending")
    untestable: List[UntestableStem] = Field(default_factory=list, description="Degenerate series")
    significance_level: float = Field(0.05, description="Level applied to adjusted p-values")

    @property
    def significant(self) -> List[TrendResult]:
        """Stems with a significant positive trend, in ranking order."""
        return [r for r in self.results if r.significant]


class PrevalenceThresholds(BaseModel):
    """Minimum coverage a stem needs to be kept."""

    min_year_coverage: int = Field(..., description="Distinct years with a non-zero count", ge=1)
    min_article_coverage: int = Field(..., description="Distinct articles containing the stem", ge=1)


InflectionTable = Dict[str, List[Tuple[str, int]]]
