"""Text-mining stages: cleaning, counting, filtering, testing and resampling."""

from .bootstrap import BootstrapEstimator, BootstrapResult, ReplicateResult, standard_error_table
from .frequency import FrequencyAggregator, FrequencyTables, corpus_summary
from .inflections import build_inflections, inflection_table, stem_label, top_forms
from .models import ArticleCounts, PrevalenceThresholds, TrendReport, TrendResult, UntestableStem
from .normalizer import normalize_article, normalize_body
from .prevalence import compute_thresholds, filter_prevalent, prevalent_stems, thresholds_for
from .sentences import export_sentences, split_sentences
from .tokenizer import TextTokenizer, load_stopwords
from .trends import TrendTester, adjust_p_values, require_significant, stem_trend, trend_table

__all__ = [
    "ArticleCounts",
    "BootstrapEstimator",
    "BootstrapResult",
    "FrequencyAggregator",
    "FrequencyTables",
    "PrevalenceThresholds",
    "ReplicateResult",
    "TextTokenizer",
    "TrendReport",
    "TrendResult",
    "TrendTester",
    "UntestableStem",
    "adjust_p_values",
    "build_inflections",
    "compute_thresholds",
    "corpus_summary",
    "export_sentences",
    "filter_prevalent",
    "inflection_table",
    "load_stopwords",
    "normalize_article",
    "normalize_body",
    "prevalent_stems",
    "require_significant",
    "split_sentences",
    "standard_error_table",
    "stem_label",
    "stem_trend",
    "thresholds_for",
    "top_forms",
    "trend_table",
]
