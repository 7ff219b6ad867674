"""Content element domain object."""

from dataclasses import dataclass
from enum import Enum


class ElementKind(str, Enum):
    """Kind of a classified content element.

    Every text role of :class:`schemas.style.StyleRole` except the
    article-boundary role, plus images and the end-of-article marker.
    """

    TITLE = "title"
    CHAPEAU = "chapeau"
    BODY = "body"
    AUTHOR = "author"
    CATEGORY = "category"
    SUBHEADING = "subheading"
    STREAMER = "streamer"
    SIDEBAR = "sidebar"
    CAPTION = "caption"
    COVER_TITLE = "cover-title"
    COVER_CHAPEAU = "cover-chapeau"
    INTRO_VERSE = "intro-verse"
    VERSE_REFERENCE = "verse-reference"
    AUTHOR_BIO = "author-bio"
    QUESTION = "question"
    IMAGE = "image"
    ARTICLE_END = "article-end"


@dataclass(frozen=True)
class ContentElement:
    """Atomic classified unit extracted from one page in document order.

    Attributes:
        kind: Resolved element kind
        content: Raw HTML of the node, or the image source for images
        class_name: Style class that produced the classification
        spread_index: Page index the element was found on
        page_start: Printed page number the element starts on
        page_end: Printed page number the element ends on
        y_range: Vertical (start, end) position in pixels, when known
        text: Plain text of the node
    """

    kind: ElementKind
    content: str
    class_name: str = ""
    spread_index: int = 0
    page_start: int = 1
    page_end: int = 1
    y_range: tuple[float, float] | None = None
    text: str = ""

    @property
    def is_image(self) -> bool:
        return self.kind == ElementKind.IMAGE

    @property
    def image_filename(self) -> str | None:
        """Basename of the image source, for image elements."""
        if not self.is_image:
            return None
        return self.content.rsplit("/", 1)[-1].split("?", 1)[0] or None
