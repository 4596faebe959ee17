"""Data models for vocabtrend."""

from .article import Article

__all__ = ["Article"]
