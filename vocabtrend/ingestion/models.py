"""Data models for ingestion."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ArticleRecord(BaseModel):
    """Raw corpus record as produced by a scraper, before it becomes an Article."""

    id: str = Field(..., description="Stable identifier (link or DOI)")
    year: int = Field(..., description="Publication year", ge=1900, le=9999)
    journal: str = Field(..., description="Journal name")
    title: str = Field("", description="Article title")
    body: str = Field(..., description="Main body text")

    @field_validator("id", "journal", "title", mode="before")
    @classmethod
    def strip_text(cls, v, info):
        """Strip surrounding whitespace from text fields."""
        if v is None and info.field_name == "title":
            return ""
        if isinstance(v, int) and info.field_name == "id":
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("year", mode="before")
    @classmethod
    def parse_year(cls, v):
        """Accept years serialized as strings or floats."""
        if isinstance(v, str):
            v = v.strip()
            if v.endswith(".0"):
                v = v[:-2]
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v

    @field_validator("id", "body")
    @classmethod
    def require_content(cls, v: str, info) -> str:
        """Reject empty identifiers and bodies."""
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} must not be empty")
        return v


class DroppedRecord(BaseModel):
    """A record rejected during ingestion."""

    position: int = Field(..., description="Position of the record in the snapshot")
    record_id: Optional[str] = Field(None, description="Identifier, when one was present")
    reason: str = Field(..., description="Why the record was dropped")


class ExcludedRecord(BaseModel):
    """A record removed by the article exception list."""

    record_id: str = Field(..., description="Article identifier")
    reason: str = Field(..., description="Justification tag from the exception list")


class IngestionReport(BaseModel):
    """Summary of a corpus load."""

    source: str = Field(..., description="Snapshot path")
    total_records: int = Field(0, description="Records read from the snapshot")
    accepted: int = Field(0, description="Records that became articles")
    trimmed: int = Field(0, description="Bodies cut at a back-matter heading")
    corrected: int = Field(0, description="Records changed by the exception list")
    dropped: List[DroppedRecord] = Field(default_factory=list, description="Rejected records")
    excluded: List[ExcludedRecord] = Field(default_factory=list, description="Records excluded on purpose")

    @property
    def dropped_count(self) -> int:
        """Number of rejected records."""
        return len(self.dropped)


class ManifestItem(BaseModel):
    """One article to fetch, as listed in a fetch manifest."""

    link: str = Field(..., description="Article URL")
    year: int = Field(..., description="Publication year", ge=1900, le=9999)
    journal: str = Field(..., description="Journal name")
    title: str = Field("", description="Article title")


class FetchedArticle(BaseModel):
    """Result of fetching and extracting one article."""

    link: str = Field(..., description="Requested URL")
    canonical_url: str = Field(..., description="URL after redirects")
    year: int = Field(..., description="Publication year")
    journal: str = Field(..., description="Journal name")
    title: str = Field("", description="Article title")
    body: str = Field("", description="Extracted main text")
    fetch_success: bool = Field(True, description="Whether fetch was successful")
    error: Optional[str] = Field(None, description="Error message if failed")
