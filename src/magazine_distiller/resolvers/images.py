"""Attach content images to their articles."""

import logging

from schemas.article import Article
from schemas.edition import ImageIndex
from schemas.records import ExtractedImage

logger = logging.getLogger(__name__)

EXCLUDED_KEYWORDS = ("logo", "icon", "advertentie")
EXCLUDED_PREFIXES = ("adv_", "data:")


def is_excluded_image(filename: str) -> bool:
    """Return True for decorative images and advertisements.

    Examples:
        >>> is_excluded_image("adv_bank.jpg")
        True
        >>> is_excluded_image("kerk.jpg")
        False
    """
    lower = filename.lower()
    return lower.startswith(EXCLUDED_PREFIXES) or any(k in lower for k in EXCLUDED_KEYWORDS)


def _images_for_article(
    position: int,
    article: Article,
    index: ImageIndex,
) -> list[ExtractedImage]:
    author_photos = set(article.author_photo_filenames) | set(index.author_photos)
    images: list[ExtractedImage] = []
    for filename in article.referenced_images:
        if is_excluded_image(filename) or filename in author_photos:
            continue
        source_path = index.path_for(filename)
        if source_path is None:
            logger.warning(
                f"Image file not found in index: {filename} for article '{article.title}'"
            )
            continue
        if filename not in index.article_images:
            logger.debug(f"Skipping non-content image {filename} for article '{article.title}'")
            continue
        images.append(
            ExtractedImage(
                filename=filename,
                source_path=source_path,
                caption=article.captions.get(filename),
                is_featured=not images,
                sort_order=len(images),
                article_title=article.title,
                article_index=position,
            )
        )
    return images


def map_images_to_articles(
    articles: list[Article],
    index: ImageIndex,
) -> tuple[list[ExtractedImage], list[str]]:
    """Build the image records of every article.

    Author portraits, decorative images, advertisements, files missing
    from the export and files outside the index's content bucket are skipped. The first remaining image of an article is
    its featured image.

    Args:
        articles: Extracted articles
        index: Image index of the export

    Returns:
        (images, error strings)
    """
    images: list[ExtractedImage] = []
    errors: list[str] = []
    for position, article in enumerate(articles):
        try:
            images.extend(_images_for_article(position, article, index))
        except Exception as e:
            message = f"Failed to map images for article '{article.title}': {e}"
            logger.error(message)
            errors.append(message)
    logger.info(f"Mapped {len(images)} images from {len(articles)} articles")
    return images, errors
