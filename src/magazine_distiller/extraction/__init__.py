"""Article extraction stages."""

from .article_builder import (
    associate_captions,
    build_article,
    deduplicate_author_names,
    find_author_photo_candidates,
    normalize_name,
    parse_author_names,
)
from .article_extractor import extract_articles
from .boundary import (
    ArticleBoundaryScanner,
    BoundaryState,
    ScanState,
    group_elements_into_articles,
)
from .element_extractor import extract_all_elements, extract_elements_from_spread
from .paragraphs import dominant_char_override, merge_paragraphs

__all__ = [
    "ArticleBoundaryScanner",
    "BoundaryState",
    "ScanState",
    "associate_captions",
    "build_article",
    "deduplicate_author_names",
    "dominant_char_override",
    "extract_all_elements",
    "extract_articles",
    "extract_elements_from_spread",
    "find_author_photo_candidates",
    "group_elements_into_articles",
    "merge_paragraphs",
    "normalize_name",
    "parse_author_names",
]
