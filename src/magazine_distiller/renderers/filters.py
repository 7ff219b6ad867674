"""Jinja2 filters for article templates.

These filters are used in article_content.html.j2 and article.html.j2.
"""

from datetime import date

from markupsafe import Markup, escape

DUTCH_MONTH_NAMES = [
    "januari",
    "februari",
    "maart",
    "april",
    "mei",
    "juni",
    "juli",
    "augustus",
    "september",
    "oktober",
    "november",
    "december",
]


def nl2br(content: str) -> Markup:
    """Turn kept line breaks of HTML-safe block content into ``<br>`` tags.

    Block content is already escaped by the paragraph merger, so it is
    marked safe rather than escaped again.

    Examples:
        >>> str(nl2br("Regel een\\nRegel twee"))
        'Regel een<br>\\nRegel twee'
    """
    if not content:
        return Markup("")
    return Markup(content.replace("\n", "<br>\n"))


def format_authors(names: list[str] | None) -> str:
    """Join author names the Dutch way.

    Examples:
        >>> format_authors(["Jan", "Piet", "Klaas"])
        'Jan, Piet en Klaas'
        >>> format_authors(["Jan"])
        'Jan'
    """
    names = [n for n in (names or []) if n]
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names[:-1])} en {names[-1]}"


def format_date(iso_date: str | None) -> str:
    """Format an ISO date as a Dutch date.

    Examples:
        >>> format_date("2026-01-15")
        '15 januari 2026'
    """
    if not iso_date:
        return ""
    try:
        d = date.fromisoformat(iso_date)
    except ValueError:
        return iso_date
    return f"{d.day} {DUTCH_MONTH_NAMES[d.month - 1]} {d.year}"


def format_pages(page_start: int | None, page_end: int | None = None) -> str:
    """Format a printed page range.

    Examples:
        >>> format_pages(4, 4)
        'p. 4'
        >>> format_pages(4, 6)
        'p. 4-6'
    """
    if page_start is None:
        return ""
    if page_end is None or page_end == page_start:
        return f"p. {page_start}"
    return f"p. {page_start}-{page_end}"


def caption_for(filename: str, captions: dict[str, str] | None) -> Markup:
    """Look up and escape the caption of an image."""
    if not captions or filename not in captions:
        return Markup("")
    return escape(captions[filename])


FILTERS = {
    "nl2br": nl2br,
    "format_authors": format_authors,
    "format_date": format_date,
    "format_pages": format_pages,
    "caption_for": caption_for,
}
