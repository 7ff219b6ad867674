"""Resolve a sealed element group into an :class:`Article`.

Each group produced by the boundary scanner is turned into one article:
titles are split into title, subtitle and lifespan, authors are parsed and
deduplicated, images and captions are associated by position, and the body
is reflowed and rendered.
"""

import logging
import re
from collections.abc import Iterable

from magazine_distiller.analysis.style_classifier import extract_category_from_class
from magazine_distiller.config import ExtractorSettings
from magazine_distiller.extraction.paragraphs import dominant_char_override, merge_paragraphs
from magazine_distiller.extraction.text import generate_excerpt, html_to_plain_text
from magazine_distiller.renderers.content_renderer import ContentRenderer
from schemas.article import Article, BodyBlock
from schemas.element import ContentElement, ElementKind
from schemas.style import StyleClassification

logger = logging.getLogger(__name__)

AUTHOR_SEPARATOR_PATTERN = re.compile(r"\s+en\s+|\s+and\s+|\s*&\s*|\s*,\s*", re.IGNORECASE)
AUTHOR_PREFIX_PATTERN = re.compile(r"^(door|tekst|text|auteur|author):\s*", re.IGNORECASE)
BY_PREFIX_PATTERN = re.compile(r"^by\s+", re.IGNORECASE)
TRAILING_PUNCTUATION_PATTERN = re.compile(r"[.,;:!?]+$")
NON_WORD_PATTERN = re.compile(r"[^\w\s]")

# Class prefixes that name a layout template rather than a section
GENERIC_CLASS_PREFIXES = frozenset(
    {"Artikelen", "Artikel", "Algemeen", "Basis", "Onderschrift", "Tussenkop"}
)
TEXT_BODY_KINDS = ("intro", "paragraph")


def normalize_name(name: str) -> str:
    """Clean up one author credit.

    Collapses whitespace, strips credit prefixes ("Tekst:", "Door:",
    "Text:", "Auteur:", "Author:", "by") and trailing punctuation.

    Examples:
        >>> normalize_name("Tekst: ds. K.H. Bogerd")
        'ds. K.H. Bogerd'
        >>> normalize_name("by Jane Doe.")
        'Jane Doe'
    """
    normalized = " ".join(name.split())
    normalized = AUTHOR_PREFIX_PATTERN.sub("", normalized)
    normalized = BY_PREFIX_PATTERN.sub("", normalized)
    return TRAILING_PUNCTUATION_PATTERN.sub("", normalized).strip()


def parse_author_names(author_texts: Iterable[str]) -> list[str]:
    """Split author credits into individual normalised names.

    Credits may name several authors separated by "en", "and", "&" or
    commas. Exact duplicates are dropped, order is kept.

    Examples:
        >>> parse_author_names(["Door: Jan Jansen en Piet de Boer"])
        ['Jan Jansen', 'Piet de Boer']
    """
    names: list[str] = []
    for text in author_texts:
        cleaned = AUTHOR_PREFIX_PATTERN.sub("", " ".join(text.split()))
        for part in AUTHOR_SEPARATOR_PATTERN.split(cleaned):
            name = normalize_name(part)
            if name and name not in names:
                names.append(name)
    return names


def _name_key(name: str) -> str:
    return " ".join(NON_WORD_PATTERN.sub("", name.lower()).split())


def deduplicate_author_names(names: Iterable[str], min_length: int = 3) -> list[str]:
    """Drop short fragments and names contained in another accepted name.

    Comparison ignores case and punctuation. When a later name contains an
    already accepted one, the longer name takes its place.

    Args:
        names: Candidate names in credit order
        min_length: Shortest accepted name

    Returns:
        Accepted names in credit order

    Examples:
        >>> deduplicate_author_names(["ds. K.H. Bogerd", "Bogerd"])
        ['ds. K.H. Bogerd']
    """
    accepted: list[str] = []
    for name in names:
        key = _name_key(name)
        if len(key) < min_length:
            continue
        if any(key in _name_key(existing) for existing in accepted):
            continue
        replaced = False
        for i, existing in enumerate(accepted):
            if _name_key(existing) in key:
                accepted[i] = name
                replaced = True
                break
        if not replaced:
            accepted.append(name)
    return list(dict.fromkeys(accepted))


def find_author_photo_candidates(elements: list[ContentElement], window: int = 2) -> list[str]:
    """Return images placed shortly after an author credit or author bio.

    Args:
        elements: An article's elements in document order
        window: Maximum distance (in elements) after the credit

    Returns:
        Candidate photo filenames in document order
    """
    candidates: list[str] = []
    last_author = None
    for i, element in enumerate(elements):
        if element.kind in (ElementKind.AUTHOR, ElementKind.AUTHOR_BIO):
            last_author = i
        elif element.is_image and last_author is not None and i - last_author <= window:
            filename = element.image_filename
            if filename and filename not in candidates:
                candidates.append(filename)
    return candidates


def associate_captions(elements: list[ContentElement], window: int = 4) -> dict[str, str]:
    """Attach each caption to its nearest image.

    The nearest preceding image within ``window`` elements wins; when there
    is none, the nearest following image within the window is used. An image
    keeps the first caption associated with it.

    Args:
        elements: An article's elements in document order
        window: Maximum distance (in elements) between caption and image

    Returns:
        Image filename to caption text
    """
    captions: dict[str, str] = {}
    for i, element in enumerate(elements):
        if element.kind != ElementKind.CAPTION or not element.text:
            continue
        before = range(i - 1, max(i - window, 0) - 1, -1)
        after = range(i + 1, min(i + window, len(elements) - 1) + 1)
        for j in [*before, *after]:
            candidate = elements[j]
            if candidate.is_image:
                filename = candidate.image_filename
                if filename:
                    captions.setdefault(filename, element.text)
                break
    return captions


def _first_text(elements: list[ContentElement], kind: ElementKind) -> str | None:
    for element in elements:
        if element.kind == kind and element.text:
            return element.text
    return None


def _resolve_titles(
    elements: list[ContentElement],
    settings: ExtractorSettings,
) -> tuple[str | None, str | None, str | None, str | None]:
    """Return (title, subtitle, lifespan, obituary category)."""
    titles = [e.text for e in elements if e.kind == ElementKind.TITLE and e.text]
    if not titles:
        return None, None, None, None

    if settings.is_obituary_title(titles[0]):
        category = titles[0]
        rest = titles[1:]
        lifespan = next((t for t in rest if settings.is_lifespan(t)), None)
        names = [t for t in rest if t != lifespan]
        title = names[0] if names else category
        subtitle = " ".join(names[1:]) or None
        return title, subtitle, lifespan, category

    subtitle = " ".join(titles[1:]) or None
    return titles[0], subtitle, None, None


def _class_category(elements: list[ContentElement]) -> str | None:
    for element in elements:
        if element.is_image or element.kind == ElementKind.ARTICLE_END:
            continue
        for class_name in element.class_name.split():
            prefix = extract_category_from_class(class_name)
            if prefix and prefix not in GENERIC_CLASS_PREFIXES:
                return prefix
    return None


def _plain_blocks(blocks: list[BodyBlock], kind: str) -> list[str]:
    return [html_to_plain_text(b.content) for b in blocks if b.kind == kind]


def build_article(
    elements: list[ContentElement],
    styles: StyleClassification | None = None,
    settings: ExtractorSettings | None = None,
    renderer: ContentRenderer | None = None,
) -> Article | None:
    """Build an article from one sealed element group.

    Args:
        elements: The group's elements in document order
        styles: Edition style classification (for CharOverride emphasis)
        settings: Extractor settings
        renderer: Renderer for the assembled content

    Returns:
        The article, or None when the group has no title
    """
    settings = settings or ExtractorSettings()
    renderer = renderer or ContentRenderer()
    char_overrides = styles.char_overrides if styles is not None else {}

    title, subtitle, lifespan, obituary_category = _resolve_titles(elements, settings)
    if not title:
        return None

    category = (
        obituary_category
        or _first_text(elements, ElementKind.CATEGORY)
        or _class_category(elements)
    )

    dominant = dominant_char_override(elements)
    blocks = merge_paragraphs(elements, dominant, char_overrides, settings)

    chapeau = _first_text(elements, ElementKind.CHAPEAU) or _first_text(
        elements, ElementKind.INTRO_VERSE
    )
    if chapeau is None:
        intro = next((b for b in blocks if b.kind == "intro"), None)
        chapeau = html_to_plain_text(intro.content) if intro is not None else None

    author_texts = [e.text for e in elements if e.kind == ElementKind.AUTHOR and e.text]
    author_names = deduplicate_author_names(
        parse_author_names(author_texts), settings.min_author_name_length
    )

    referenced_images = [e.image_filename for e in elements if e.is_image and e.image_filename]
    body_text = " ".join(
        html_to_plain_text(b.content) for b in blocks if b.kind in TEXT_BODY_KINDS
    )

    return Article(
        title=title,
        subtitle=subtitle,
        lifespan=lifespan,
        chapeau=chapeau or None,
        verse_reference=_first_text(elements, ElementKind.VERSE_REFERENCE),
        author_bio=_first_text(elements, ElementKind.AUTHOR_BIO),
        body_blocks=blocks,
        content=renderer.render_content(blocks),
        excerpt=generate_excerpt(body_text, settings.excerpt_length),
        category=category,
        page_start=min(e.page_start for e in elements),
        page_end=max(e.page_end for e in elements),
        source_spread_indexes=[e.spread_index for e in elements],
        author_names=author_names,
        author_photo_filenames=find_author_photo_candidates(
            elements, settings.author_photo_window
        ),
        referenced_images=referenced_images,
        captions=associate_captions(elements, settings.caption_window),
        subheadings=_plain_blocks(blocks, "subheading"),
        streamers=_plain_blocks(blocks, "streamer"),
        sidebars=[b.content for b in blocks if b.kind == "sidebar"],
    )
