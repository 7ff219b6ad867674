"""Edition-level schemas produced by the spread loader."""

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel

from schemas.page import PageDocument
from schemas.style import StyleClassification


class ImageIndex(BaseModel):
    """Image files found in the export, bucketed by filename keyword.

    Attributes:
        images: Filename to path relative to the export root
        author_photos: Filenames that look like author portraits
        decorative: Filenames of logos and icons
        article_images: Remaining content-image candidates
    """

    images: dict[str, str] = {}
    author_photos: list[str] = []
    decorative: list[str] = []
    article_images: list[str] = []

    def __contains__(self, filename: object) -> bool:
        return filename in self.images

    def __len__(self) -> int:
        return len(self.images)

    def path_for(self, filename: str) -> str | None:
        return self.images.get(filename)


class EditionMetadata(BaseModel):
    """Coarse metadata scraped from page text.

    Attributes:
        issue_number: Issue or volume number ("Jaargang 101", "Nr. 3")
        issue_date: Issue date in ISO format
    """

    issue_number: int | None = None
    issue_date: str | None = None


class CoverHeadline(BaseModel):
    """A headline announced on the cover page.

    Attributes:
        title: Headline text
        chapeau: Lead-in text printed with the headline
    """

    title: str
    chapeau: str | None = None


@dataclass
class EditionExport:
    """Everything loaded from one export directory.

    Attributes:
        root_dir: Export root directory
        html_dir: Located html directory, or None when it is missing
        image_dir: Located image directory, or None when it is missing
        spreads: Page documents sorted by spread index
        images: Image index
        styles: Style classification built from CSS and HTML usage
        metadata: Issue number and date
        cover_headlines: Headlines from the cover page
        errors: Warnings and errors recorded while loading
    """

    root_dir: Path
    html_dir: Path | None = None
    image_dir: Path | None = None
    spreads: list[PageDocument] = field(default_factory=list)
    images: ImageIndex = field(default_factory=ImageIndex)
    styles: StyleClassification = field(default_factory=StyleClassification)
    metadata: EditionMetadata = field(default_factory=EditionMetadata)
    cover_headlines: list[CoverHeadline] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def cover(self) -> PageDocument | None:
        for spread in self.spreads:
            if spread.is_cover:
                return spread
        return None

    @property
    def content_spreads(self) -> list[PageDocument]:
        return [s for s in self.spreads if not s.is_cover]
