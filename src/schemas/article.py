"""Extracted article schemas.

An :class:`Article` is the output of the article builder: one logical
article reconstructed from the page flow of an edition, ready to be handed
to a persistence collaborator.
"""

from typing import Literal

from pydantic import BaseModel, field_validator, model_validator

BlockKind = Literal["intro", "paragraph", "subheading", "streamer", "sidebar", "question"]


class BodyBlock(BaseModel):
    """A merged block of article body content.

    Attributes:
        kind: Block type
        content: HTML-safe text with inline ``<em>``/``<strong>`` markup;
            kept line breaks are encoded as ``\\n``
    """

    kind: BlockKind
    content: str

    model_config = {"frozen": True}


class Article(BaseModel):
    """A reconstructed article.

    Attributes:
        title: Article title
        subtitle: Secondary title, if any
        lifespan: Year range of an obituary subject (e.g. "1938–2026")
        chapeau: Lead-in text
        verse_reference: Scripture reference of a meditation
        author_bio: Author biography line
        body_blocks: Ordered body blocks
        content: Assembled HTML content
        excerpt: Short plain-text summary
        category: Section/category label
        page_start: First printed page of the article
        page_end: Last printed page of the article
        source_spread_indexes: Sorted page indexes the article was built from
        author_names: Ordered, deduplicated author names
        author_photo_filenames: Candidate author photo filenames
        referenced_images: Image filenames in document order
        captions: Image filename to caption text
        subheadings: Plain text of the subheading blocks
        streamers: Plain text of the streamer blocks
        sidebars: HTML content of the sidebar blocks
    """

    title: str
    subtitle: str | None = None
    lifespan: str | None = None
    chapeau: str | None = None
    verse_reference: str | None = None
    author_bio: str | None = None
    body_blocks: list[BodyBlock] = []
    content: str = ""
    excerpt: str = ""
    category: str | None = None
    page_start: int
    page_end: int
    source_spread_indexes: list[int]
    author_names: list[str] = []
    author_photo_filenames: list[str] = []
    referenced_images: list[str] = []
    captions: dict[str, str] = {}
    subheadings: list[str] = []
    streamers: list[str] = []
    sidebars: list[str] = []

    model_config = {"frozen": True}

    @field_validator("source_spread_indexes")
    @classmethod
    def _sorted_unique(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("source_spread_indexes must not be empty")
        return sorted(set(value))

    @field_validator("author_photo_filenames", "referenced_images")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def _check_pages(self) -> "Article":
        if self.page_start > self.page_end:
            raise ValueError(
                f"page_start {self.page_start} is after page_end {self.page_end}"
            )
        return self

    @property
    def page_range(self) -> str:
        if self.page_start == self.page_end:
            return str(self.page_start)
        return f"{self.page_start}-{self.page_end}"


class ArticleExtractionResult(BaseModel):
    """Articles extracted from an edition plus the warnings collected on the way.

    Attributes:
        articles: Successfully built articles
        errors: Warning strings from every extraction stage
        element_count: Number of content elements extracted from the pages
    """

    articles: list[Article] = []
    errors: list[str] = []
    element_count: int = 0
