"""Packaged edition schemas.

The edition packager writes an extracted edition to disk:

    editions/
    └── {edition_id}/
        ├── edition-manifest.json     # EditionManifest
        ├── authors.json              # list[AuthorRecord]
        ├── articles/
        │   ├── article-001/
        │   │   ├── article.json      # Article
        │   │   └── article.html
        │   └── ...
        └── images/
            ├── authors/
            └── articles/
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from schemas.edition import CoverHeadline, EditionMetadata


class PackagedArticle(BaseModel):
    """A persisted article row.

    Attributes:
        id: Generated identifier ("article-001")
        title: Article title
        category: Article category
        page_start: First printed page
        page_end: Last printed page
        json_path: Relative path to the article record
        html_path: Relative path to the rendered article page
    """

    id: str
    title: str
    category: str | None = None
    page_start: int
    page_end: int
    json_path: str
    html_path: str


class AuthorRecord(BaseModel):
    """A persisted author row, keyed by normalized name.

    Attributes:
        id: Generated identifier ("author-001")
        name: Display name
        normalized_name: Upsert key
        photo_path: Relative path to the copied photo
    """

    id: str
    name: str
    normalized_name: str
    photo_path: str | None = None


class ArticleAuthorRelation(BaseModel):
    """Link between a persisted article and a persisted author."""

    article_id: str
    author_id: str


class ImageRecord(BaseModel):
    """A persisted image row.

    Attributes:
        id: Generated identifier ("image-001")
        article_id: Owning article identifier
        filename: Image filename
        path: Relative path to the copied file
        caption: Caption text
        is_featured: Whether the image leads its article
        sort_order: Position within the article
    """

    id: str
    article_id: str
    filename: str
    path: str
    caption: str | None = None
    is_featured: bool = False
    sort_order: int = 0


class EditionManifest(BaseModel):
    """Manifest for a packaged edition.

    Attributes:
        id: Edition identifier
        version: Manifest schema version
        source_path: Export directory the edition was extracted from
        created: When packaging started
        metadata: Issue number and date
        cover_headlines: Headlines from the cover page
        articles: Persisted articles
        authors: Persisted authors
        relations: Article to author links
        images: Persisted images
        validation_errors: Warnings recorded while packaging
        status: "building" while packaging, "sealed" when complete
    """

    id: str
    version: str = "1.0"
    source_path: str
    created: datetime = Field(default_factory=datetime.now)
    metadata: EditionMetadata = Field(default_factory=EditionMetadata)
    cover_headlines: list[CoverHeadline] = []
    articles: list[PackagedArticle] = []
    authors: list[AuthorRecord] = []
    relations: list[ArticleAuthorRelation] = []
    images: list[ImageRecord] = []
    validation_errors: list[str] = []
    status: Literal["building", "sealed"] = "building"

    model_config = {"extra": "allow"}
