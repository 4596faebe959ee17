"""Article model for corpus records."""

from pydantic import BaseModel, ConfigDict, Field


class Article(BaseModel):
    """A single ingested research article.

    Articles are immutable once ingested; cleaning the body produces a new
    instance through ``model_copy``.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable identifier (link or DOI)")
    year: int = Field(..., description="Publication year")
    journal: str = Field(..., description="Journal name")
    title: str = Field("", description="Article title")
    body: str = Field(..., description="Main body text")

    def with_body(self, body: str) -> "Article":
        """Return a copy of the article with a replaced body."""
        return self.model_copy(update={"body": body})
