"""Declarative per-article corrections applied during ingestion."""

from typing import Dict, List, Optional, Tuple

from ..config import ArticleException


class ExceptionList:
    """Index of article exceptions keyed by article id."""

    def __init__(self, exceptions: Optional[List[ArticleException]] = None) -> None:
        """Initialize the index."""
        self._by_id: Dict[str, List[ArticleException]] = {}
        for exception in exceptions or []:
            self._by_id.setdefault(exception.article_id.strip(), []).append(exception)

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_id.values())

    def __contains__(self, article_id: str) -> bool:
        return article_id in self._by_id

    def apply(self, record: Dict) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Apply the exceptions registered for a raw record.

        Args:
            record: Raw record with normalized keys

        Returns:
            (record, None) with corrections applied, or (None, reason) when
            the record is excluded
        """
        article_id = str(record.get("id") or "").strip()
        exceptions = self._by_id.get(article_id)
        if not exceptions:
            return record, None

        corrected = dict(record)
        for exception in exceptions:
            if exception.action == "exclude":
                return None, exception.reason
            if exception.action == "set_year":
                corrected["year"] = int(exception.value.strip())
            elif exception.action == "set_title":
                corrected["title"] = exception.value
        return corrected, None
