"""Configuration models."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class CorpusConfig(BaseModel):
    """Corpus snapshot and ingestion settings."""

    snapshot_path: Optional[str] = Field(None, description="Path to the corpus snapshot (json, jsonl or csv)")
    exceptions_path: Optional[str] = Field(None, description="Path to the article exception list (YAML)")
    min_year: int = Field(1900, description="First year of the analysis window", ge=1900, le=9999)
    max_year: Optional[int] = Field(None, description="Last year of the analysis window", ge=1900, le=9999)
    trim_back_matter: bool = Field(False, description="Cut bodies at the first back-matter heading")
    min_body_words: int = Field(0, description="Drop articles with fewer words than this", ge=0)

    @model_validator(mode="after")
    def validate_window(self) -> "CorpusConfig":
        """Validate that the analysis window is not inverted."""
        if self.max_year is not None and self.max_year < self.min_year:
            raise ValueError(f"max_year ({self.max_year}) is before min_year ({self.min_year})")
        return self


class TextConfig(BaseModel):
    """Tokenization settings."""

    stopword_source: str = Field("nltk", description="Stop word list to start from (nltk, none)")
    extra_stopwords: List[str] = Field(default_factory=list, description="Additional stop words")
    stemmer_language: str = Field("porter", description="Snowball stemmer language")

    @field_validator("stopword_source")
    @classmethod
    def validate_source(cls, v: str) -> str:
        """Validate the stop word source name."""
        v = v.lower()
        if v not in ("nltk", "none"):
            raise ValueError(f"Unknown stop word source: {v}")
        return v


class AnalysisConfig(BaseModel):
    """Tokenization and aggregation execution settings."""

    workers: int = Field(1, description="Worker processes for tokenization", ge=1, le=64)
    sentence_stems: List[str] = Field(default_factory=list, description="Stems to export sentences for")


class PrevalenceConfig(BaseModel):
    """Prevalence filter thresholds, as fractions of the corpus."""

    year_fraction: float = Field(2 / 3, description="Minimum share of covered years", gt=0.0, le=1.0)
    article_fraction: float = Field(0.1, description="Minimum share of articles", gt=0.0, le=1.0)


class TrendConfig(BaseModel):
    """Trend test settings."""

    significance_level: float = Field(0.05, description="FDR-adjusted significance level", gt=0.0, lt=1.0)


class BootstrapConfig(BaseModel):
    """Bootstrap settings."""

    replicates: int = Field(100, description="Number of bootstrap replicates", ge=2, le=100000)
    seed: Optional[int] = Field(None, description="Random seed (None for fresh entropy)")
    workers: int = Field(1, description="Worker processes for replicates", ge=1, le=64)
    keep_replicates: bool = Field(False, description="Write the per-replicate frequency table")


class ConfigModel(BaseModel):
    """Main configuration model."""

    workspace_root: str = Field("~/VocabTrend", description="Root directory for outputs")
    corpus: CorpusConfig = Field(default_factory=CorpusConfig)
    text: TextConfig = Field(default_factory=TextConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    prevalence: PrevalenceConfig = Field(default_factory=PrevalenceConfig)
    trends: TrendConfig = Field(default_factory=TrendConfig)
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)


class ArticleException(BaseModel):
    """Per-article correction from exceptions.yaml."""

    article_id: str = Field(..., description="Stable article identifier (link or DOI)")
    action: str = Field(..., description="Correction to apply (exclude, set_year, set_title)")
    value: Optional[str] = Field(None, description="New value for set_year / set_title")
    reason: str = Field(..., description="Justification tag")

    @field_validator("action")
    @classmethod
    def validate_action(cls, v: str) -> str:
        """Validate the action name."""
        if v not in ("exclude", "set_year", "set_title"):
            raise ValueError(f"Unknown exception action: {v}")
        return v

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value(cls, v):
        """Accept unquoted YAML years."""
        if v is None:
            return v
        return str(v)

    @model_validator(mode="after")
    def validate_value(self) -> "ArticleException":
        """Validate that set_* actions carry a usable value."""
        if self.action == "exclude":
            return self
        if not self.value:
            raise ValueError(f"Action {self.action} requires a value")
        if self.action == "set_year" and not self.value.strip().isdigit():
            raise ValueError(f"set_year needs an integer year, got {self.value!r}")
        return self
