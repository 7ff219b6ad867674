"""Cross-article consolidation of authors and images."""

from .authors import author_key, extract_authors_from_articles, match_author_photo
from .images import is_excluded_image, map_images_to_articles

__all__ = [
    "author_key",
    "extract_authors_from_articles",
    "is_excluded_image",
    "map_images_to_articles",
    "match_author_photo",
]
