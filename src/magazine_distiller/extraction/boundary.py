"""Article boundary detection.

The page flow of an edition carries no explicit article structure. This
module scans the flattened, page-ordered element stream once and groups it
into per-article element lists.

An article normally runs from its title to the end-of-article marker (■).
Physical order is not logical order, though: author credits, portraits and
pull-quotes are often laid out after the marker, body text can precede its
own title across columns, and an obituary carries three stacked titles
("In memoriam", the name, the lifespan). The scanner handles these with an
explicit state machine:

``IDLE``
    No article is open and no trailing window is active.
``COLLECTING``
    An article with a title is open; elements are appended to it.
``AWAITING_TITLE``
    Content arrived outside any article; it is buffered until a title
    claims it (inserted at the front) or a marker seals it untitled.
``AWAITING_TRAILING``
    An article was just sealed by a marker. Author credits, author bios,
    images, streamers and sidebars on the marker's page still join it.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from magazine_distiller.config import ExtractorSettings
from schemas.element import ContentElement, ElementKind

logger = logging.getLogger(__name__)

TRAILING_KINDS = frozenset(
    {
        ElementKind.AUTHOR,
        ElementKind.AUTHOR_BIO,
        ElementKind.IMAGE,
        ElementKind.STREAMER,
        ElementKind.SIDEBAR,
    }
)
OBITUARY_EXIT_KINDS = frozenset(
    {ElementKind.BODY, ElementKind.CHAPEAU, ElementKind.INTRO_VERSE}
)
IGNORED_KINDS = frozenset({ElementKind.COVER_TITLE, ElementKind.COVER_CHAPEAU})
RETROACTIVE_TITLE_DISTANCE = 1


class BoundaryState(Enum):
    """Scanner state."""

    IDLE = "idle"
    COLLECTING = "collecting"
    AWAITING_TITLE = "awaiting-title"
    AWAITING_TRAILING = "awaiting-trailing"


@dataclass
class ScanState:
    """Everything the boundary scanner remembers between elements.

    Attributes:
        state: Current scanner state
        buffer: Elements of the open article (COLLECTING, AWAITING_TITLE)
        groups: Sealed article groups in output order
        pending_category: Category seen while no article was open; it is
            prepended to the next article that receives a title
        marker_page: Printed page of the last end marker (AWAITING_TRAILING)
        obituary: Whether the open (or just retroactively titled) article is
            collecting obituary titles
        article_opened: Whether any article has been opened yet; content
            before the first article is discarded
        warnings: Structural warnings recorded during the scan
    """

    state: BoundaryState = BoundaryState.IDLE
    buffer: list[ContentElement] = field(default_factory=list)
    groups: list[list[ContentElement]] = field(default_factory=list)
    pending_category: ContentElement | None = None
    marker_page: int | None = None
    obituary: bool = False
    article_opened: bool = False
    warnings: list[str] = field(default_factory=list)


def _has_title(group: list[ContentElement]) -> bool:
    return any(e.kind == ElementKind.TITLE for e in group)


def _page_span(group: list[ContentElement]) -> tuple[int, int]:
    return min(e.page_start for e in group), max(e.page_end for e in group)


class ArticleBoundaryScanner:
    """Single-pass grouping of content elements into articles.

    Feed elements in page order with :meth:`feed`, then call :meth:`finish`
    to obtain the groups. A scanner is used for one edition only.

    Attributes:
        settings: Extractor settings (end marker, obituary patterns)
        scan: The scanner's state record
    """

    def __init__(self, settings: ExtractorSettings | None = None):
        self.settings = settings or ExtractorSettings()
        self.scan = ScanState()

    @property
    def state(self) -> BoundaryState:
        return self.scan.state

    def feed(self, element: ContentElement) -> None:
        """Process the next element of the stream."""
        kind = element.kind
        if kind in IGNORED_KINDS:
            return
        if kind != ElementKind.TITLE and self.scan.state in (
            BoundaryState.IDLE,
            BoundaryState.AWAITING_TRAILING,
        ):
            # Stacked titles of a retroactive obituary end at the first non-title
            self.scan.obituary = False
        if kind == ElementKind.TITLE:
            self._on_title(element)
        elif kind == ElementKind.ARTICLE_END:
            self._on_end_marker(element)
        elif kind == ElementKind.CATEGORY and self.scan.state in (
            BoundaryState.IDLE,
            BoundaryState.AWAITING_TRAILING,
        ):
            self._on_pending_category(element)
        else:
            self._on_content(element)

    def finish(self) -> list[list[ContentElement]]:
        """Flush the open article and return every group in order."""
        scan = self.scan
        if scan.buffer:
            if scan.state == BoundaryState.COLLECTING:
                self._warn("Last article ended without end marker, saving anyway")
            scan.groups.append(scan.buffer)
            scan.buffer = []
        scan.state = BoundaryState.IDLE
        scan.obituary = False
        return scan.groups

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.scan.warnings.append(message)

    def _take_pending(self) -> list[ContentElement]:
        pending = self.scan.pending_category
        self.scan.pending_category = None
        return [pending] if pending is not None else []

    def _seal(self) -> None:
        scan = self.scan
        scan.groups.append(scan.buffer)
        scan.buffer = []
        scan.obituary = False

    def _open(self, title: ContentElement) -> None:
        scan = self.scan
        scan.buffer = self._take_pending() + [title]
        scan.state = BoundaryState.COLLECTING
        scan.article_opened = True
        scan.obituary = self.settings.is_obituary_title(title.text)

    def _on_title(self, title: ContentElement) -> None:
        scan = self.scan

        if scan.state == BoundaryState.COLLECTING:
            if scan.obituary:
                scan.buffer.append(title)
                return
            opening = next(e for e in scan.buffer if e.kind == ElementKind.TITLE)
            self._warn(f"Article '{opening.text}' ended without end marker, saving anyway")
            self._seal()
            self._open(title)
            return

        if scan.state == BoundaryState.AWAITING_TITLE:
            scan.buffer[:0] = self._take_pending() + [title]
            scan.state = BoundaryState.COLLECTING
            scan.article_opened = True
            scan.obituary = self.settings.is_obituary_title(title.text)
            return

        # IDLE or AWAITING_TRAILING: nothing is open
        if scan.obituary and scan.groups:
            group = scan.groups[-1]
            last_title = max(i for i, e in enumerate(group) if e.kind == ElementKind.TITLE)
            group.insert(last_title + 1, title)
            return

        if scan.groups and not _has_title(scan.groups[-1]):
            first, last = _page_span(scan.groups[-1])
            if (
                first - RETROACTIVE_TITLE_DISTANCE
                <= title.page_start
                <= last + RETROACTIVE_TITLE_DISTANCE
            ):
                logger.debug(
                    f"Attaching title '{title.text}' to untitled article on page {first}"
                )
                scan.groups[-1][:0] = self._take_pending() + [title]
                scan.obituary = self.settings.is_obituary_title(title.text)
                return

        self._open(title)

    def _on_end_marker(self, marker: ContentElement) -> None:
        scan = self.scan
        if scan.state in (BoundaryState.COLLECTING, BoundaryState.AWAITING_TITLE):
            scan.buffer.append(marker)
            self._seal()
            scan.state = BoundaryState.AWAITING_TRAILING
            scan.marker_page = marker.page_start
        else:
            logger.debug(f"Ignoring end marker outside an article on page {marker.page_start}")

    def _on_pending_category(self, category: ContentElement) -> None:
        scan = self.scan
        scan.pending_category = category
        # A category announces the next article, so the trailing window closes
        scan.state = BoundaryState.IDLE
        scan.marker_page = None

    def _on_content(self, element: ContentElement) -> None:
        scan = self.scan

        if scan.obituary and element.kind in OBITUARY_EXIT_KINDS:
            scan.obituary = False

        if scan.state in (BoundaryState.COLLECTING, BoundaryState.AWAITING_TITLE):
            scan.buffer.append(element)
            return

        if scan.state == BoundaryState.AWAITING_TRAILING:
            if element.kind in TRAILING_KINDS and element.page_start == scan.marker_page:
                scan.groups[-1].append(element)
                return
            scan.marker_page = None
            scan.buffer = [element]
            scan.state = BoundaryState.AWAITING_TITLE
            return

        if not scan.article_opened:
            logger.debug(f"Discarding orphan {element.kind.value} before the first article")
            return
        scan.buffer = [element]
        scan.state = BoundaryState.AWAITING_TITLE


def group_elements_into_articles(
    elements: list[ContentElement],
    settings: ExtractorSettings | None = None,
) -> tuple[list[list[ContentElement]], list[str]]:
    """Group a page-ordered element stream into article element groups.

    Args:
        elements: Elements of every content page, in page order
        settings: Extractor settings

    Returns:
        (groups in output order, structural warnings)
    """
    scanner = ArticleBoundaryScanner(settings)
    for element in elements:
        scanner.feed(element)
    groups = scanner.finish()
    logger.info(f"Grouped {len(elements)} elements into {len(groups)} articles")
    return groups, scanner.scan.warnings
