"""Consolidate author credits over all articles of an edition."""

import logging

from magazine_distiller.extraction.article_builder import normalize_name
from schemas.article import Article
from schemas.edition import ImageIndex
from schemas.records import ExtractedAuthor

logger = logging.getLogger(__name__)

MIN_NAME_PART_LENGTH = 3


def author_key(name: str) -> str:
    """Return the case-insensitive identity key of an author name.

    Examples:
        >>> author_key("  Tekst: Jan  Jansen ")
        'jan jansen'
    """
    return normalize_name(name).lower()


def match_author_photo(author_name: str, index: ImageIndex) -> str | None:
    """Find an author portrait in the image index by name.

    Tries the full name as a filename slug ("jan-jansen"), then the last
    name, then any name part of at least three characters.

    Args:
        author_name: Normalised author name
        index: Image index of the export

    Returns:
        Matching photo filename, or None
    """
    if not index.author_photos:
        return None
    name = author_name.lower()
    parts = name.split()
    if not parts:
        return None
    slug = "-".join(parts)
    photos = [(photo, photo.lower()) for photo in index.author_photos]

    for photo, lower in photos:
        if slug in lower:
            return photo
    for photo, lower in photos:
        if parts[-1] in lower:
            return photo
    for part in parts:
        if len(part) < MIN_NAME_PART_LENGTH:
            continue
        for photo, lower in photos:
            if part in lower:
                return photo
    return None


def _photo_from_article(author_name: str, article: Article) -> str | None:
    candidates = article.author_photo_filenames
    if not candidates:
        return None
    last_name = author_name.lower().split()[-1]
    for filename in candidates:
        if last_name in filename.lower():
            return filename
    if len(article.author_names) == 1 and len(candidates) == 1:
        return candidates[0]
    return None


def extract_authors_from_articles(
    articles: list[Article],
    index: ImageIndex,
) -> tuple[list[ExtractedAuthor], list[str]]:
    """Consolidate the authors credited in an edition's articles.

    Authors are keyed by normalised, case-insensitive name. A photo is
    taken from the candidates found next to the credit in the article,
    falling back to a name match in the image index.

    Args:
        articles: Extracted articles
        index: Image index of the export

    Returns:
        (authors in first-credit order, error strings)
    """
    authors: dict[str, ExtractedAuthor] = {}
    errors: list[str] = []

    for position, article in enumerate(articles):
        try:
            for raw_name in article.author_names:
                name = normalize_name(raw_name)
                if not name:
                    continue
                key = name.lower()
                existing = authors.get(key)
                if existing is not None:
                    if position not in existing.article_indexes:
                        existing.article_titles.append(article.title)
                        existing.article_indexes.append(position)
                    if existing.photo_filename is None:
                        photo = _photo_from_article(name, article)
                        if photo:
                            existing.photo_filename = photo
                            existing.photo_path = index.path_for(photo)
                    continue

                photo = _photo_from_article(name, article) or match_author_photo(name, index)
                authors[key] = ExtractedAuthor(
                    name=name,
                    normalized_name=key,
                    photo_filename=photo,
                    photo_path=index.path_for(photo) if photo else None,
                    article_titles=[article.title],
                    article_indexes=[position],
                )
        except Exception as e:
            message = f"Failed to extract authors from article '{article.title}': {e}"
            logger.error(message)
            errors.append(message)

    logger.info(f"Extracted {len(authors)} unique authors from {len(articles)} articles")
    return list(authors.values()), errors
