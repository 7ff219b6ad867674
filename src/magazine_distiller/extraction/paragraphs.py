"""Reflow an article's layout fragments into logical paragraphs.

InDesign splits running text into one fragment per text frame and column.
Consecutive body fragments of the same style are merged back into a
paragraph while the vertical gap between them stays below a line-height
derived threshold.
"""

import logging
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass

from magazine_distiller.config import ExtractorSettings
from magazine_distiller.extraction.text import (
    count_char_overrides,
    fix_hyphenation,
    get_dominant_char_override,
    html_to_semantic_html,
)
from schemas.article import BodyBlock
from schemas.element import ContentElement, ElementKind
from schemas.style import OverrideStyle

logger = logging.getLogger(__name__)

BODY_FLOW_KINDS = frozenset(
    {
        ElementKind.BODY,
        ElementKind.STREAMER,
        ElementKind.SUBHEADING,
        ElementKind.SIDEBAR,
        ElementKind.QUESTION,
    }
)
PASS_THROUGH_KINDS = {
    ElementKind.SUBHEADING: "subheading",
    ElementKind.STREAMER: "streamer",
    ElementKind.QUESTION: "question",
}
TERMINAL_PUNCTUATION = (".", "!", "?", "…", ":", '"', "”", "’", "'")


@dataclass
class Fragment:
    """A body-flow element rendered to HTML-safe text.

    Attributes:
        element: Source element
        html: Semantic HTML of the element
        verse: Whether the fragment is verse or italic text
    """

    element: ContentElement
    html: str
    verse: bool = False

    @property
    def kind(self) -> ElementKind:
        return self.element.kind


def dominant_char_override(elements: list[ContentElement]) -> str | None:
    """Return the most frequent CharOverride class over an article's body text.

    This is the override of normal prose; fragments dominated by another
    override are emphasised text such as verse.
    """
    counts: Counter = Counter()
    for element in elements:
        if element.kind == ElementKind.BODY:
            counts.update(count_char_overrides(element.content))
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def is_verse_fragment(
    element: ContentElement,
    dominant_override: str | None,
    char_overrides: Mapping[str, OverrideStyle],
) -> bool:
    """Return True when a fragment is set in a different, italic override.

    Without CSS information for the fragment's override, any override that
    differs from the article's dominant one counts.
    """
    if dominant_override is None:
        return False
    override = get_dominant_char_override(element.content)
    if override is None or override == dominant_override:
        return False
    style = char_overrides.get(override)
    return style.italic if style is not None else True


def _render(
    element: ContentElement,
    dominant_override: str | None,
    char_overrides: Mapping[str, OverrideStyle],
    settings: ExtractorSettings,
) -> Fragment:
    verse = element.kind == ElementKind.BODY and is_verse_fragment(
        element, dominant_override, char_overrides
    )
    html = html_to_semantic_html(
        element.content,
        dominant_override,
        char_overrides,
        settings.line_break_threshold,
    )
    html = html.replace(settings.end_marker, "").strip()
    if not verse:
        html = " ".join(line.strip() for line in html.split("\n") if line.strip())
    return Fragment(element=element, html=html, verse=verse)


def _ends_mid_sentence(html: str) -> bool:
    return not html.rstrip().endswith(TERMINAL_PUNCTUATION)


def continues_paragraph(previous: Fragment, following: Fragment, threshold: float) -> bool:
    """Return True when ``following`` continues the paragraph of ``previous``.

    Fragments continue when they share class and emphasis and the gap between
    the previous fragment's last line and the next fragment's first line is
    below ``threshold``. Across a page turn only the sentence matters: a
    fragment that ends mid-sentence continues on the next page.

    Args:
        previous: Earlier body fragment
        following: Next body fragment
        threshold: Maximum vertical gap (px) inside a paragraph

    Returns:
        Whether the two fragments belong to one paragraph
    """
    if previous.element.class_name != following.element.class_name:
        return False
    if previous.verse != following.verse:
        return False
    if previous.element.spread_index != following.element.spread_index:
        return _ends_mid_sentence(previous.html)
    if previous.element.y_range is None or following.element.y_range is None:
        return False
    gap = following.element.y_range[0] - previous.element.y_range[1]
    return gap < threshold


def _join(parts: list[Fragment]) -> str:
    text = parts[0].html
    for part in parts[1:]:
        if part.verse:
            text = f"{text}\n{part.html}"
            continue
        text, joined = fix_hyphenation(text, part.html)
        text = text + part.html if joined else f"{text} {part.html}"
    return text


def merge_paragraphs(
    elements: list[ContentElement],
    dominant_override: str | None = None,
    char_overrides: Mapping[str, OverrideStyle] | None = None,
    settings: ExtractorSettings | None = None,
) -> list[BodyBlock]:
    """Merge an article's body-flow fragments into body blocks.

    Only body, streamer, subheading, sidebar and question elements are used.
    The first body paragraph becomes the ``intro`` block. Consecutive
    sidebar fragments form one sidebar block and every sidebar is moved to
    the end of the article; a subheading directly followed by a sidebar is
    that sidebar's heading and moves with it.

    Args:
        elements: The article's elements in document order
        dominant_override: The article's prose CharOverride class
        char_overrides: CharOverride class to emphasis mapping
        settings: Extractor settings

    Returns:
        Ordered body blocks
    """
    settings = settings or ExtractorSettings()
    overrides = char_overrides or {}
    threshold = settings.paragraph_gap_threshold
    fragments = [
        _render(e, dominant_override, overrides, settings)
        for e in elements
        if e.kind in BODY_FLOW_KINDS
    ]
    fragments = [f for f in fragments if f.html]

    blocks: list[BodyBlock] = []
    floating: list[BodyBlock] = []
    seen_body = False
    i = 0
    while i < len(fragments):
        fragment = fragments[i]

        if fragment.kind == ElementKind.BODY:
            run = [fragment]
            while (
                i + 1 < len(fragments)
                and fragments[i + 1].kind == ElementKind.BODY
                and continues_paragraph(run[-1], fragments[i + 1], threshold)
            ):
                i += 1
                run.append(fragments[i])
            blocks.append(BodyBlock(kind="paragraph" if seen_body else "intro", content=_join(run)))
            seen_body = True

        elif fragment.kind == ElementKind.SIDEBAR:
            run = [fragment]
            while i + 1 < len(fragments) and fragments[i + 1].kind == ElementKind.SIDEBAR:
                i += 1
                run.append(fragments[i])
            content = "".join(f"<p>{f.html}</p>" for f in run)
            floating.append(BodyBlock(kind="sidebar", content=content))

        elif (
            fragment.kind == ElementKind.SUBHEADING
            and i + 1 < len(fragments)
            and fragments[i + 1].kind == ElementKind.SIDEBAR
        ):
            floating.append(BodyBlock(kind="subheading", content=fragment.html))

        else:
            blocks.append(BodyBlock(kind=PASS_THROUGH_KINDS[fragment.kind], content=fragment.html))

        i += 1

    logger.debug(f"Merged {len(fragments)} fragments into {len(blocks) + len(floating)} blocks")
    return blocks + floating
