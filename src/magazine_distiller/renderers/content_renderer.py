"""Render article body blocks and article pages with Jinja2."""

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from schemas.article import Article, BodyBlock
from schemas.edition import EditionMetadata

from .filters import FILTERS

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


class ContentRenderer:
    """Render extracted articles through Jinja2 templates.

    Attributes:
        templates_dir: Directory containing the templates
        content_template: Template for an article's body blocks
        page_template: Template for a standalone article page
    """

    def __init__(
        self,
        templates_dir: Path | None = None,
        content_template: str = "article_content.html.j2",
        page_template: str = "article.html.j2",
    ):
        self.templates_dir = templates_dir or TEMPLATES_DIR
        self.content_template = content_template
        self.page_template = page_template

        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        for name, func in FILTERS.items():
            self._env.filters[name] = func

    def render_content(self, blocks: list[BodyBlock]) -> str:
        """Render body blocks to the article's content HTML.

        Args:
            blocks: Ordered body blocks

        Returns:
            HTML string, empty when there are no blocks
        """
        if not blocks:
            return ""
        template = self._env.get_template(self.content_template)
        return template.render(blocks=blocks).strip()

    def render_page(
        self,
        article: Article,
        image_paths: dict[str, str] | None = None,
        metadata: EditionMetadata | None = None,
    ) -> str:
        """Render a standalone HTML page for one article.

        Args:
            article: The article to render
            image_paths: Image filename to path relative to the page
            metadata: Edition metadata shown in the page header

        Returns:
            Complete HTML document
        """
        template = self._env.get_template(self.page_template)
        html = template.render(
            article=article,
            image_paths=image_paths or {},
            metadata=metadata or EditionMetadata(),
        )
        logger.debug(f"Rendered page for article '{article.title}'")
        return html
