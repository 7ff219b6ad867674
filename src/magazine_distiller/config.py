"""Tunable settings for article extraction.

All thresholds used by the extraction stages live on one pydantic model so
a run can be configured from a JSON file (``--config``) without touching
code. Defaults match the layout conventions of De Waarheidsvriend exports.
"""

import logging
import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_END_MARKER = "■"
DEFAULT_OBITUARY_PATTERN = r"^\s*in\s+memoriam\s*$"
DEFAULT_LIFESPAN_PATTERN = r"^\s*\d{4}\s*[-–—]\s*\d{4}\s*$"
DEFAULT_PUBLICATION_NAME = "De Waarheidsvriend"


class ExtractorSettings(BaseModel):
    """Settings shared by every extraction stage.

    Attributes:
        end_marker: Glyph the layout tool places at the end of an article
        obituary_pattern: Regex matching the title that opens an obituary
        lifespan_pattern: Regex matching an obituary's year-year title
        line_break_threshold: Vertical jump (px) inside a node that counts as
            a new line
        line_height: Typical line height (px) in the export's coordinates
        paragraph_gap_factor: Multiple of line_height above which two body
            fragments are separate paragraphs
        author_photo_window: Elements after an author credit searched for a
            portrait
        caption_window: Elements around a caption searched for its image
        min_author_name_length: Shortest accepted author name
        excerpt_length: Maximum excerpt length in characters
        max_workers: Threads used for per-page extraction (1 = sequential)
        publication_name: Masthead name printed in page footers
    """

    end_marker: str = DEFAULT_END_MARKER
    obituary_pattern: str = DEFAULT_OBITUARY_PATTERN
    lifespan_pattern: str = DEFAULT_LIFESPAN_PATTERN
    line_break_threshold: float = 100.0
    line_height: float = 250.0
    paragraph_gap_factor: float = 1.5
    author_photo_window: int = Field(default=2, ge=0)
    caption_window: int = Field(default=4, ge=0)
    min_author_name_length: int = Field(default=3, ge=1)
    excerpt_length: int = Field(default=150, gt=0)
    max_workers: int = Field(default=1, ge=1)
    publication_name: str = DEFAULT_PUBLICATION_NAME

    model_config = {"frozen": True}

    @field_validator("obituary_pattern", "lifespan_pattern")
    @classmethod
    def _valid_regex(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"Invalid pattern {value!r}: {e}") from e
        return value

    @property
    def paragraph_gap_threshold(self) -> float:
        return self.line_height * self.paragraph_gap_factor

    def is_obituary_title(self, text: str) -> bool:
        return re.match(self.obituary_pattern, text, re.IGNORECASE) is not None

    def is_lifespan(self, text: str) -> bool:
        return re.match(self.lifespan_pattern, text) is not None


def load_settings(path: Path | None = None) -> ExtractorSettings:
    """Load extractor settings from an optional JSON file.

    Args:
        path: JSON file with any subset of the settings fields

    Returns:
        Settings with file values applied over the defaults
    """
    if path is None:
        return ExtractorSettings()
    logger.debug(f"Loading settings from {path}")
    return ExtractorSettings.model_validate_json(path.read_text())
