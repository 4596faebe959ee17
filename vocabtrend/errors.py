"""Error taxonomy for corpus ingestion and analysis."""

from typing import Optional


class VocabTrendError(Exception):
    """Base class for all vocabtrend errors."""


class IngestionError(VocabTrendError):
    """A corpus record is malformed and has to be dropped."""

    def __init__(self, message: str, record_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.record_id = record_id


class EmptyCorpusError(VocabTrendError):
    """No valid article survived ingestion."""


class DegenerateSeriesError(VocabTrendError):
    """A stem's frequency series has no usable variation."""

    def __init__(self, stem: str, reason: str) -> None:
        super().__init__(f"{stem}: {reason}")
        self.stem = stem
        self.reason = reason


class ThresholdConfigError(VocabTrendError):
    """Thresholds leave nothing for downstream stages to work on."""
