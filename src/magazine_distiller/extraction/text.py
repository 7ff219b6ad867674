"""Text helpers for InDesign page markup.

Single-page InDesign exports break every line into absolutely positioned
``<span>`` elements. These helpers walk those spans as text runs, detect
line breaks from jumps in the ``top`` coordinate, repair word hyphenation
split across runs and translate ``CharOverride`` classes into ``<em>`` and
``<strong>`` markup.
"""

import re
from collections import Counter
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from html import escape

from lxml import etree
from lxml import html as lxml_html

from schemas.style import OverrideStyle

DEFAULT_LINE_BREAK_THRESHOLD = 100.0

TOP_PATTERN = re.compile(r"top:\s*([\d.]+)px")
PAGE_NUMBER_PATTERN = re.compile(r"^\d{1,3}$")
WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass
class TextRun:
    """A piece of text with its layout context.

    Attributes:
        text: Whitespace-normalised text
        y: ``top`` position of the nearest positioned ancestor, if any
        classes: Classes of the enclosing spans, innermost last
    """

    text: str
    y: float | None = None
    classes: tuple[str, ...] = ()

    @property
    def char_override(self) -> str | None:
        for cls in reversed(self.classes):
            if cls.startswith("CharOverride"):
                return cls
        return None

    @property
    def is_introletter(self) -> bool:
        return any("introletter" in cls.lower() for cls in self.classes)


def parse_fragment(fragment: str):
    """Parse an HTML fragment into a wrapping ``<div>`` element.

    Returns:
        The wrapper element, or None for blank input
    """
    if not fragment or not fragment.strip():
        return None
    try:
        return lxml_html.fragment_fromstring(fragment, create_parent="div")
    except etree.ParserError:
        return None


def element_classes(element) -> list[str]:
    """Return the class names of an lxml element."""
    return (element.get("class") or "").split()


def normalize_whitespace(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def direct_text(element) -> str:
    """Return the element's own text, excluding text of child elements.

    Tails of children are included because they are text nodes of the
    element itself.
    """
    parts = [element.text or ""]
    for child in element:
        parts.append(child.tail or "")
    return "".join(parts)


def _y_of(element) -> float | None:
    match = TOP_PATTERN.search(element.get("style") or "")
    return float(match.group(1)) if match else None


def iter_text_runs(element) -> Iterator[TextRun]:
    """Yield the text runs of an element in document order.

    ``<br>`` elements yield a run holding a single newline.
    """
    yield from _walk(element, None, ())


def _walk(element, y: float | None, classes: tuple[str, ...]) -> Iterator[TextRun]:
    own_y = _y_of(element)
    if own_y is not None:
        y = own_y
    inner_classes = classes
    if element.tag == "span":
        inner_classes = classes + tuple(element_classes(element))

    if element.text:
        yield TextRun(WHITESPACE_PATTERN.sub(" ", element.text), y, inner_classes)
    for child in element:
        if isinstance(child.tag, str):
            if child.tag == "br":
                yield TextRun("\n", None, inner_classes)
            else:
                yield from _walk(child, y, inner_classes)
        if child.tail:
            yield TextRun(WHITESPACE_PATTERN.sub(" ", child.tail), y, inner_classes)


def _coalesce(runs: list[TextRun]) -> list[TextRun]:
    # Whitespace-only runs become a trailing space on the previous run so a
    # space between runs never counts as a hyphenation join.
    parts: list[TextRun] = []
    for run in runs:
        if run.text != "\n" and not run.text.strip():
            if parts and parts[-1].text != "\n" and not parts[-1].text.endswith(" "):
                parts[-1] = TextRun(parts[-1].text + " ", parts[-1].y, parts[-1].classes)
            continue
        parts.append(run)
    return parts


def fix_hyphenation(current: str, following: str | None) -> tuple[str, bool]:
    """Remove a line-end hyphen when the next run continues the word.

    Args:
        current: Text of the current run
        following: Text of the next run

    Returns:
        (text, joined) where joined is True when the hyphen was removed

    Examples:
        >>> fix_hyphenation("ver-", "halen")
        ('ver', True)
        >>> fix_hyphenation("Noord-", "Holland")
        ('Noord-', False)
    """
    if current.endswith("-") and following and following[:1].islower():
        return current[:-1], True
    return current, False


def _join_runs(
    runs: list[TextRun],
    render,
    threshold: float,
) -> str:
    parts = _coalesce(runs)
    result = ""
    last_y: float | None = None
    skip_line_break = False

    for i, part in enumerate(parts):
        if part.text == "\n":
            result = result.rstrip() + "\n"
            continue
        following = parts[i + 1].text if i + 1 < len(parts) else None
        text, joined = fix_hyphenation(part.text, following)
        if not joined:
            if (
                not skip_line_break
                and last_y is not None
                and part.y is not None
                and abs(part.y - last_y) > threshold
                and not result.endswith("\n")
            ):
                result = result.rstrip() + "\n"
        result += render(text, part)
        skip_line_break = joined
        if part.y is not None:
            last_y = part.y

    lines = [normalize_whitespace(line) for line in result.split("\n")]
    return "\n".join(lines).strip()


def extract_text(
    element,
    threshold: float = DEFAULT_LINE_BREAK_THRESHOLD,
    keep_line_breaks: bool = False,
) -> str:
    """Return the plain text of an element.

    Args:
        element: lxml element
        threshold: Vertical jump (px) between runs that starts a new line
        keep_line_breaks: Keep detected line breaks as ``\\n`` instead of
            collapsing them to spaces

    Returns:
        Whitespace-normalised text
    """
    text = _join_runs(list(iter_text_runs(element)), lambda t, _: t, threshold)
    if keep_line_breaks:
        return text
    return normalize_whitespace(text)


def html_to_plain_text(fragment: str, threshold: float = DEFAULT_LINE_BREAK_THRESHOLD) -> str:
    """Strip all markup from an HTML fragment.

    Examples:
        >>> html_to_plain_text("<p>Een <em>korte</em> zin</p>")
        'Een korte zin'
    """
    root = parse_fragment(fragment)
    if root is None:
        return ""
    return extract_text(root, threshold)


def _wrap(text: str, bold: bool, italic: bool) -> str:
    text = escape(text, quote=False)
    if not text.strip():
        return text
    if italic:
        text = f"<em>{text}</em>"
    if bold:
        text = f"<strong>{text}</strong>"
    return text


def _emphasis(
    run: TextRun,
    default_override: str | None,
    char_overrides: Mapping[str, OverrideStyle],
) -> tuple[bool, bool]:
    override = run.char_override
    if run.is_introletter or override is None or override == default_override:
        return False, False
    style = char_overrides.get(override)
    if style is not None:
        return style.bold, style.italic
    # Without CSS information a non-default override reads as italic
    return False, default_override is not None


ADJACENT_TAGS = (
    (re.compile(r"</em></strong>(\s*)<strong><em>"), r"\1"),
    (re.compile(r"</strong>(\s*)<strong>"), r"\1"),
    (re.compile(r"</em>(\s*)<em>"), r"\1"),
)


def html_to_semantic_html(
    fragment: str,
    default_override: str | None = None,
    char_overrides: Mapping[str, OverrideStyle] | None = None,
    threshold: float = DEFAULT_LINE_BREAK_THRESHOLD,
) -> str:
    """Convert InDesign markup into escaped text with inline emphasis.

    Runs whose CharOverride differs from the article's default override get
    ``<em>``/``<strong>`` according to the override's CSS. Drop-cap
    (introletter) runs are never emphasised. Detected line breaks are kept
    as ``\\n``.

    Args:
        fragment: Raw HTML of one element
        default_override: The article's dominant CharOverride class
        char_overrides: CharOverride class to emphasis mapping
        threshold: Vertical jump (px) between runs that starts a new line

    Returns:
        HTML-safe text
    """
    root = parse_fragment(fragment)
    if root is None:
        return ""
    overrides = char_overrides or {}

    def render(text: str, run: TextRun) -> str:
        bold, italic = _emphasis(run, default_override, overrides)
        return _wrap(text, bold, italic)

    result = _join_runs(list(iter_text_runs(root)), render, threshold)
    for pattern, replacement in ADJACENT_TAGS:
        result = pattern.sub(replacement, result)
    return result


def get_y_range(element) -> tuple[float, float] | None:
    """Return the (min, max) ``top`` position of an element and its descendants."""
    positions = []
    for el in element.iter():
        if not isinstance(el.tag, str):
            continue
        y = _y_of(el)
        if y is not None:
            positions.append(y)
    if not positions:
        return None
    return min(positions), max(positions)


def count_char_overrides(fragment: str) -> Counter:
    """Count CharOverride classes used in an HTML fragment."""
    counts: Counter = Counter()
    root = parse_fragment(fragment)
    if root is None:
        return counts
    for el in root.iter():
        if not isinstance(el.tag, str):
            continue
        for cls in element_classes(el):
            if cls.startswith("CharOverride"):
                counts[cls] += 1
    return counts


def get_dominant_char_override(fragment: str) -> str | None:
    """Return the most frequent CharOverride class of a fragment.

    Ties go to the class seen first.
    """
    counts = count_char_overrides(fragment)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def is_footer_content(text: str, publication_name: str = "De Waarheidsvriend") -> bool:
    """Return True for page furniture: a bare page number or the dated masthead.

    Examples:
        >>> is_footer_content("12")
        True
        >>> is_footer_content("De Waarheidsvriend 15 januari 2026")
        True
        >>> is_footer_content("Een gewone zin")
        False
    """
    trimmed = text.strip()
    if PAGE_NUMBER_PATTERN.match(trimmed):
        return True
    masthead = re.compile(
        re.escape(publication_name) + r"\s+\d{1,2}\s+\w+\s+\d{4}", re.IGNORECASE
    )
    return masthead.search(trimmed) is not None


def generate_excerpt(text: str, max_length: int = 150) -> str:
    """Truncate plain text to an excerpt, preferring a word boundary.

    The cut falls on the last space when that space lies beyond 80% of
    ``max_length``; otherwise the text is cut hard. Truncated excerpts end
    with "...".
    """
    plain = normalize_whitespace(text)
    if len(plain) <= max_length:
        return plain
    truncated = plain[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > max_length * 0.8:
        return truncated[:last_space] + "..."
    return truncated + "..."
