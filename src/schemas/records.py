"""Cross-article records and processing results."""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field


class ExtractedAuthor(BaseModel):
    """An author consolidated over every article of an edition.

    Attributes:
        name: Display name as first seen
        normalized_name: Lowercased, whitespace-collapsed key
        photo_filename: Matched author photo, if any
        photo_path: Photo path relative to the export root
        article_titles: Titles of the articles credited to this author
        article_indexes: Positions of those articles in the extraction result
    """

    name: str
    normalized_name: str
    photo_filename: str | None = None
    photo_path: str | None = None
    article_titles: list[str] = []
    article_indexes: list[int] = []


class ExtractedImage(BaseModel):
    """A content image attached to an article.

    Attributes:
        filename: Image filename
        source_path: Path relative to the export root
        caption: Caption text, if one was associated
        is_featured: Whether this is the article's lead image
        sort_order: Position within the article's images
        article_title: Title of the owning article
        article_index: Position of the owning article in the extraction result
    """

    filename: str
    source_path: str
    caption: str | None = None
    is_featured: bool = False
    sort_order: int = 0
    article_title: str
    article_index: int | None = None


class LogEntry(BaseModel):
    """A warning or error recorded while processing an edition.

    Attributes:
        timestamp: When the entry was recorded (UTC)
        level: Severity
        stage: Pipeline stage that produced the entry
        message: Human-readable message
        context: Extra structured detail
    """

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    level: Literal["info", "warning", "error"] = "warning"
    stage: str
    message: str
    context: dict[str, Any] = {}


class ProcessingStats(BaseModel):
    """Counters for one processing run."""

    spreads_loaded: int = 0
    elements_extracted: int = 0
    articles_extracted: int = 0
    articles_saved: int = 0
    authors_saved: int = 0
    images_saved: int = 0


class ProcessingResult(BaseModel):
    """Outcome of processing one edition.

    ``failed`` is reserved for runs that salvaged zero articles; any recorded
    warning or error otherwise yields ``completed_with_warnings``.

    Attributes:
        status: Tri-state outcome
        edition_id: Identifier of the processed edition
        output_path: Directory the edition was packaged into
        stats: Run counters
        log: Every warning and error recorded during the run
    """

    status: Literal["completed", "completed_with_warnings", "failed"]
    edition_id: str
    output_path: str | None = None
    stats: ProcessingStats = Field(default_factory=ProcessingStats)
    log: list[LogEntry] = []

    @property
    def warnings(self) -> list[LogEntry]:
        return [e for e in self.log if e.level == "warning"]

    @property
    def errors(self) -> list[LogEntry]:
        return [e for e in self.log if e.level == "error"]
