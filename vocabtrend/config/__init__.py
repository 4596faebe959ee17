"""Configuration management for vocabtrend."""

from .loader import Config, load_config, load_exceptions, save_config, save_exceptions
from .models import (
    AnalysisConfig,
    ArticleException,
    BootstrapConfig,
    ConfigModel,
    CorpusConfig,
    PrevalenceConfig,
    TextConfig,
    TrendConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "CorpusConfig",
    "TextConfig",
    "AnalysisConfig",
    "PrevalenceConfig",
    "TrendConfig",
    "BootstrapConfig",
    "ArticleException",
    "load_config",
    "load_exceptions",
    "save_config",
    "save_exceptions",
]
