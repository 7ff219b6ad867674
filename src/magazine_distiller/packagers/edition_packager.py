"""File-based persistence for extracted editions.

Writes articles, authors and images of one edition into an output
directory (see :mod:`schemas.manifest` for the layout). Every save method
returns the persisted rows together with warning strings, isolates failures
per item and accepts an empty input list.
"""

import json
import logging
import shutil
from pathlib import Path

from jinja2 import TemplateError

from magazine_distiller.exceptions import PackagingError
from magazine_distiller.renderers.content_renderer import ContentRenderer
from magazine_distiller.resolvers.images import is_excluded_image
from schemas.article import Article
from schemas.edition import EditionMetadata
from schemas.manifest import (
    ArticleAuthorRelation,
    AuthorRecord,
    EditionManifest,
    ImageRecord,
    PackagedArticle,
)
from schemas.records import ExtractedAuthor, ExtractedImage

logger = logging.getLogger(__name__)

MANIFEST_NAME = "edition-manifest.json"
AUTHORS_NAME = "authors.json"


class EditionPackager:
    """Persist an extracted edition to a directory.

    Attributes:
        output_dir: Directory the edition is written to
        source_root: Root of the XHTML export, for copying images
        renderer: Renderer for the standalone article pages
    """

    def __init__(
        self,
        output_dir: Path,
        source_root: Path,
        renderer: ContentRenderer | None = None,
    ):
        self.output_dir = output_dir
        self.source_root = source_root
        self.renderer = renderer or ContentRenderer()

    @property
    def articles_dir(self) -> Path:
        return self.output_dir / "articles"

    @property
    def author_images_dir(self) -> Path:
        return self.output_dir / "images" / "authors"

    @property
    def article_images_dir(self) -> Path:
        return self.output_dir / "images" / "articles"

    @staticmethod
    def article_id(position: int) -> str:
        """Return the identifier of the article at a zero-based position."""
        return f"article-{position + 1:03d}"

    def save_articles(
        self,
        articles: list[Article],
        metadata: EditionMetadata | None = None,
    ) -> tuple[list[PackagedArticle], list[str]]:
        """Write one JSON record and one rendered page per article.

        Identifiers follow the article order: ``article-001``,
        ``article-002``, ...

        Args:
            articles: Extracted articles
            metadata: Edition metadata shown on the article pages

        Returns:
            (persisted rows, warning strings)
        """
        rows: list[PackagedArticle] = []
        errors: list[str] = []
        if not articles:
            return rows, errors

        logger.info(f"Saving {len(articles)} articles to {self.articles_dir}")
        for position, article in enumerate(articles):
            article_id = self.article_id(position)
            try:
                rows.append(self._save_article(article_id, article, metadata))
            except (OSError, PackagingError) as e:
                message = f"Failed to save article '{article.title}': {e}"
                logger.error(message)
                errors.append(message)
        return rows, errors

    def _save_article(
        self,
        article_id: str,
        article: Article,
        metadata: EditionMetadata | None,
    ) -> PackagedArticle:
        article_dir = self.articles_dir / article_id
        article_dir.mkdir(parents=True, exist_ok=True)

        json_path = article_dir / "article.json"
        json_path.write_text(article.model_dump_json(indent=2, exclude_none=True))

        image_paths = {
            filename: f"../../images/articles/{filename}"
            for filename in article.referenced_images
            if not is_excluded_image(filename) and filename not in article.author_photo_filenames
        }
        html_path = article_dir / "article.html"
        try:
            page = self.renderer.render_page(article, image_paths, metadata)
        except TemplateError as e:
            raise PackagingError(f"Could not render article page: {e}") from e
        html_path.write_text(page)
        logger.debug(f"Wrote article {article_id}: {article.title}")

        return PackagedArticle(
            id=article_id,
            title=article.title,
            category=article.category,
            page_start=article.page_start,
            page_end=article.page_end,
            json_path=f"articles/{article_id}/article.json",
            html_path=f"articles/{article_id}/article.html",
        )

    def load_authors(self) -> list[AuthorRecord]:
        """Read the persisted authors, or an empty list when there are none."""
        path = self.output_dir / AUTHORS_NAME
        if not path.exists():
            return []
        data = json.loads(path.read_text())
        return [AuthorRecord.model_validate(item) for item in data]

    def _write_authors(self, records: list[AuthorRecord]) -> None:
        path = self.output_dir / AUTHORS_NAME
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps([r.model_dump(mode="json") for r in records], indent=2, ensure_ascii=False)
        )

    def save_authors(
        self,
        authors: list[ExtractedAuthor],
        article_ids: list[str | None],
    ) -> tuple[list[AuthorRecord], list[ArticleAuthorRelation], list[str]]:
        """Upsert authors by normalised name and link them to their articles.

        Re-running with the same names updates the existing rows instead of
        adding new ones; a photo is only set on a row that has none.

        Args:
            authors: Consolidated authors
            article_ids: Persisted article id for each extracted article,
                by extraction position (None where the save failed)

        Returns:
            (saved author rows, article-author relations, warning strings)
        """
        errors: list[str] = []
        if not authors:
            return [], [], errors

        records = self.load_authors()
        by_name = {r.normalized_name: r for r in records}
        saved: list[AuthorRecord] = []
        relations: list[ArticleAuthorRelation] = []

        for author in authors:
            try:
                photo_path = self._copy_author_photo(author, errors)
                record = by_name.get(author.normalized_name)
                if record is None:
                    record = AuthorRecord(
                        id=f"author-{len(records) + 1:03d}",
                        name=author.name,
                        normalized_name=author.normalized_name,
                        photo_path=photo_path,
                    )
                    records.append(record)
                    by_name[record.normalized_name] = record
                elif record.photo_path is None and photo_path is not None:
                    record.photo_path = photo_path
                saved.append(record)

                for article_id in self._article_ids_for(author, article_ids):
                    relation = ArticleAuthorRelation(article_id=article_id, author_id=record.id)
                    if relation not in relations:
                        relations.append(relation)
            except OSError as e:
                message = f"Failed to save author {author.name}: {e}"
                logger.error(message)
                errors.append(message)

        self._write_authors(records)
        logger.info(f"Saved {len(saved)} authors, {len(relations)} relations")
        return saved, relations, errors

    def _article_ids_for(self, author: ExtractedAuthor, article_ids: list[str | None]) -> list[str]:
        ids = []
        for position in author.article_indexes:
            if 0 <= position < len(article_ids) and article_ids[position]:
                ids.append(article_ids[position])
            else:
                logger.warning(f"No article id for position {position} of {author.name}")
        return ids

    def _copy_author_photo(self, author: ExtractedAuthor, errors: list[str]) -> str | None:
        if not author.photo_path or not author.photo_filename:
            return None
        try:
            self.author_images_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(
                self.source_root / author.photo_path,
                self.author_images_dir / author.photo_filename,
            )
        except OSError as e:
            message = f"Could not copy photo for {author.name}: {e}"
            logger.warning(message)
            errors.append(message)
            return None
        return f"images/authors/{author.photo_filename}"

    def save_images(
        self,
        images: list[ExtractedImage],
        article_ids: list[str | None],
    ) -> tuple[list[ImageRecord], list[str]]:
        """Copy article images and record them.

        A failed copy skips that image only.

        Args:
            images: Image records from the image resolver
            article_ids: Persisted article id for each extracted article,
                by extraction position (None where the save failed)

        Returns:
            (persisted rows, warning strings)
        """
        rows: list[ImageRecord] = []
        errors: list[str] = []
        if not images:
            return rows, errors

        self.article_images_dir.mkdir(parents=True, exist_ok=True)
        for image in images:
            position = image.article_index
            if position is None or not 0 <= position < len(article_ids) or not article_ids[position]:
                logger.warning(f"No article id found for image {image.filename}")
                continue
            try:
                shutil.copy2(
                    self.source_root / image.source_path,
                    self.article_images_dir / image.filename,
                )
            except OSError as e:
                message = f"Could not copy image {image.filename}: {e}"
                logger.warning(message)
                errors.append(message)
                continue
            rows.append(
                ImageRecord(
                    id=f"image-{len(rows) + 1:03d}",
                    article_id=article_ids[position],
                    filename=image.filename,
                    path=f"images/articles/{image.filename}",
                    caption=image.caption,
                    is_featured=image.is_featured,
                    sort_order=image.sort_order,
                )
            )
        logger.info(f"Saved {len(rows)} images, {len(errors)} errors")
        return rows, errors

    def write_manifest(self, manifest: EditionManifest) -> Path:
        """Write the edition manifest and return its path."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        manifest_path = self.output_dir / MANIFEST_NAME
        manifest_path.write_text(manifest.model_dump_json(indent=2, exclude_none=True))
        logger.debug(f"Wrote edition manifest to {manifest_path}")
        return manifest_path
