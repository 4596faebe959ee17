"""Longitudinal vocabulary trend analysis for journal article corpora."""

__version__ = "0.1.0"
