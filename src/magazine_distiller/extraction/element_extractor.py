"""Per-page element extraction.

Walks one page document in document order and emits a typed
:class:`ContentElement` for every classified text node and every image.
Pages are independent of each other, so an edition's pages can be
extracted on a thread pool; the results are always returned in page order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

from lxml import html as lxml_html

from magazine_distiller.config import ExtractorSettings
from magazine_distiller.extraction.text import (
    direct_text,
    element_classes,
    extract_text,
    get_y_range,
    is_footer_content,
)
from schemas.element import ContentElement, ElementKind
from schemas.page import PageDocument
from schemas.style import StyleClassification, StyleRole

logger = logging.getLogger(__name__)

WALKED_TAGS = {"p", "div", "span", "h1", "h2", "h3", "h4", "h5", "h6", "img"}
CONTAINER_TAGS = {"div"}

# Highest priority first; container tags never take the roles in CONTAINER_EXCLUDED
ROLE_PRIORITY: tuple[StyleRole, ...] = (
    StyleRole.COVER_TITLE,
    StyleRole.COVER_CHAPEAU,
    StyleRole.INTRO_VERSE,
    StyleRole.VERSE_REFERENCE,
    StyleRole.AUTHOR_BIO,
    StyleRole.QUESTION,
    StyleRole.SUBHEADING,
    StyleRole.STREAMER,
    StyleRole.SIDEBAR,
    StyleRole.CAPTION,
    StyleRole.TITLE,
    StyleRole.CHAPEAU,
    StyleRole.BODY,
    StyleRole.AUTHOR,
    StyleRole.CATEGORY,
)
CONTAINER_EXCLUDED = {StyleRole.SIDEBAR, StyleRole.BODY}


def resolve_kind(
    tag: str,
    classes: list[str],
    styles: StyleClassification,
) -> ElementKind | None:
    """Return the element kind for a node's tag and classes.

    Args:
        tag: Lowercase tag name
        classes: The node's class names
        styles: Edition style classification

    Returns:
        The highest-priority kind among the node's classes, or None
    """
    roles = {styles.role_of(cls) for cls in classes} - {None}
    for role in ROLE_PRIORITY:
        if role not in roles:
            continue
        if tag in CONTAINER_TAGS and role in CONTAINER_EXCLUDED:
            continue
        return ElementKind(role.value)
    return None


def extract_elements_from_spread(
    spread: PageDocument,
    styles: StyleClassification,
    settings: ExtractorSettings | None = None,
) -> list[ContentElement]:
    """Extract the classified elements of one page in document order.

    An element whose own text holds the end-of-article marker is emitted as
    an ``article-end`` element instead of its classified kind. The marker is
    stripped from the text of its ancestors.

    Args:
        spread: Page document
        styles: Edition style classification
        settings: Extractor settings

    Returns:
        Ordered content elements
    """
    settings = settings or ExtractorSettings()
    marker = settings.end_marker
    root = spread.parse()
    elements: list[ContentElement] = []

    def make(kind: ElementKind, content: str, class_name: str, text: str, y_range=None):
        return ContentElement(
            kind=kind,
            content=content,
            class_name=class_name,
            spread_index=spread.spread_index,
            page_start=spread.page_start,
            page_end=spread.page_end,
            y_range=y_range,
            text=text,
        )

    for node in root.iter(*WALKED_TAGS):
        tag = node.tag

        if tag == "img":
            src = (node.get("src") or "").strip()
            if src and not src.startswith("data:"):
                elements.append(make(ElementKind.IMAGE, src, "", ""))
            continue

        classes = element_classes(node)
        class_name = " ".join(classes)
        # A node carrying the marker in its own text stands for the article end only
        if marker in direct_text(node):
            elements.append(make(ElementKind.ARTICLE_END, marker, class_name, marker))
            continue

        kind = resolve_kind(tag, classes, styles)
        if kind is not None:
            text = extract_text(node, settings.line_break_threshold).replace(marker, "").strip()
            if text and not is_footer_content(text, settings.publication_name):
                content = lxml_html.tostring(node, encoding="unicode", with_tail=False)
                elements.append(make(kind, content, class_name, text, get_y_range(node)))

    return elements


def _extract_page(
    spread: PageDocument,
    styles: StyleClassification,
    settings: ExtractorSettings,
) -> tuple[list[ContentElement], str | None]:
    try:
        return extract_elements_from_spread(spread, styles, settings), None
    except Exception as e:
        message = f"Failed to extract elements from spread {spread.spread_index}: {e}"
        logger.error(message)
        return [], message


def extract_all_elements(
    spreads: list[PageDocument],
    styles: StyleClassification,
    settings: ExtractorSettings | None = None,
) -> tuple[list[ContentElement], list[str]]:
    """Extract the elements of every content page of an edition.

    The cover is skipped. A page that fails is recorded and skipped without
    affecting its siblings. With ``settings.max_workers > 1`` pages are
    extracted on a thread pool.

    Args:
        spreads: Page documents sorted by spread index
        styles: Edition style classification
        settings: Extractor settings

    Returns:
        (elements in page order, error strings)
    """
    settings = settings or ExtractorSettings()
    pages = [s for s in spreads if not s.is_cover]

    if settings.max_workers > 1 and len(pages) > 1:
        with ThreadPoolExecutor(max_workers=settings.max_workers) as executor:
            results = list(
                executor.map(lambda s: _extract_page(s, styles, settings), pages)
            )
    else:
        results = [_extract_page(s, styles, settings) for s in pages]

    elements: list[ContentElement] = []
    errors: list[str] = []
    for page_elements, error in results:
        elements.extend(page_elements)
        if error:
            errors.append(error)

    markers = sum(1 for e in elements if e.kind == ElementKind.ARTICLE_END)
    logger.info(
        f"Extracted {len(elements)} elements from {len(pages)} pages "
        f"({markers} end markers)"
    )
    return elements, errors
