"""Article extraction entry point.

Runs the per-edition extraction stages in order: element extraction per
page, boundary grouping over the whole edition, and article building per
group. Every stage reports problems as warning strings instead of raising.
"""

import logging

from magazine_distiller.config import ExtractorSettings
from magazine_distiller.exceptions import ArticleBuildError
from magazine_distiller.extraction.article_builder import build_article
from magazine_distiller.extraction.boundary import group_elements_into_articles
from magazine_distiller.extraction.element_extractor import extract_all_elements
from magazine_distiller.renderers.content_renderer import ContentRenderer
from schemas.article import ArticleExtractionResult
from schemas.edition import EditionExport
from schemas.style import StyleRole

logger = logging.getLogger(__name__)


def extract_articles(
    export: EditionExport,
    settings: ExtractorSettings | None = None,
    renderer: ContentRenderer | None = None,
) -> ArticleExtractionResult:
    """Extract every article of a loaded export.

    Args:
        export: Loaded XHTML export
        settings: Extractor settings
        renderer: Renderer for article content

    Returns:
        ArticleExtractionResult with the articles and collected warnings
    """
    settings = settings or ExtractorSettings()
    renderer = renderer or ContentRenderer()
    result = ArticleExtractionResult()

    pages = export.content_spreads
    logger.info(f"Processing {len(pages)} content pages")
    if not export.styles.classes_for(StyleRole.TITLE):
        result.errors.append("No title style classes found; no articles can be extracted")

    elements, errors = extract_all_elements(pages, export.styles, settings)
    result.errors.extend(errors)
    result.element_count = len(elements)

    groups, warnings = group_elements_into_articles(elements, settings)
    result.errors.extend(warnings)

    for group in groups:
        try:
            article = build_article(group, export.styles, settings, renderer)
            if article is None:
                pages = sorted({e.page_start for e in group})
                raise ArticleBuildError(
                    f"Article group without title on pages {pages}",
                    sorted({e.spread_index for e in group}),
                )
            result.articles.append(article)
        except ArticleBuildError as e:
            logger.warning(e.message)
            result.errors.append(e.message)
        except Exception as e:
            message = f"Failed to build article: {e}"
            logger.error(message)
            result.errors.append(message)

    logger.info(
        f"Extraction complete: {len(result.articles)} articles, {len(result.errors)} warnings"
    )
    return result
