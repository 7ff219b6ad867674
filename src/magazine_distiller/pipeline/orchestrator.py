"""Pipeline orchestrator for end-to-end export → packaged edition processing.

Runs one XHTML export through every stage (load, extract, authors, images,
package) and reports the outcome as a :class:`ProcessingResult`.
"""

import logging
import re
from pathlib import Path
from typing import Literal

from magazine_distiller.config import ExtractorSettings
from magazine_distiller.extraction.article_extractor import extract_articles
from magazine_distiller.loaders.xhtml_loader import load_xhtml_export
from magazine_distiller.packagers.edition_packager import EditionPackager
from magazine_distiller.renderers.content_renderer import ContentRenderer
from magazine_distiller.resolvers.authors import extract_authors_from_articles
from magazine_distiller.resolvers.images import map_images_to_articles
from schemas.edition import EditionExport
from schemas.manifest import EditionManifest
from schemas.records import LogEntry, ProcessingResult, ProcessingStats

logger = logging.getLogger(__name__)

STAGES = ["load", "extract", "authors", "images", "package"]
EDITION_ID_PATTERN = re.compile(r"[^A-Za-z0-9._-]+")


def edition_id_for(export: EditionExport) -> str:
    """Derive an edition identifier from the export's metadata.

    Uses the issue date when known, otherwise the export directory name.

    Examples:
        >>> export = EditionExport(root_dir=Path("/tmp/wv-03"))
        >>> edition_id_for(export)
        'wv-03'
    """
    if export.metadata.issue_date:
        return f"edition-{export.metadata.issue_date}"
    return EDITION_ID_PATTERN.sub("-", export.root_dir.name).strip("-") or "edition"


class Orchestrator:
    """End-to-end edition processor.

    Attributes:
        output_dir: Base directory editions are packaged into
        settings: Extractor settings shared by every stage
        allowed_root: When given, exports outside this directory are refused
        renderer: Renderer for article content and pages
    """

    def __init__(
        self,
        output_dir: Path,
        settings: ExtractorSettings | None = None,
        allowed_root: Path | None = None,
    ):
        self.output_dir = output_dir
        self.settings = settings or ExtractorSettings()
        self.allowed_root = allowed_root
        self.renderer = ContentRenderer()

    def run(self, xhtml_dir: Path, edition_id: str | None = None) -> ProcessingResult:
        """Process one export directory.

        A missing html directory stops the run with status ``failed``. Every
        other problem is recorded in the log and processing continues.

        Args:
            xhtml_dir: Root directory of the XHTML export
            edition_id: Identifier for the packaged edition (derived from the
                export when omitted)

        Returns:
            ProcessingResult with status, counters and log
        """
        log: list[LogEntry] = []
        stats = ProcessingStats()

        export = load_xhtml_export(xhtml_dir, self.allowed_root)
        stats.spreads_loaded = len(export.spreads)
        edition_id = edition_id or edition_id_for(export)

        if export.html_dir is None:
            self._record(log, "load", export.errors, level="error")
            logger.error(f"Edition {edition_id} failed: no page documents to process")
            return ProcessingResult(status="failed", edition_id=edition_id, stats=stats, log=log)
        self._record(log, "load", export.errors)

        extraction = extract_articles(export, self.settings, self.renderer)
        articles = extraction.articles
        stats.articles_extracted = len(articles)
        stats.elements_extracted = extraction.element_count
        self._record(log, "extract", extraction.errors)

        authors, author_errors = extract_authors_from_articles(articles, export.images)
        self._record(log, "authors", author_errors)

        images, image_errors = map_images_to_articles(articles, export.images)
        self._record(log, "images", image_errors)

        edition_dir = self.output_dir / edition_id
        packager = EditionPackager(edition_dir, export.root_dir, self.renderer)
        manifest = EditionManifest(
            id=edition_id,
            source_path=str(xhtml_dir),
            metadata=export.metadata,
            cover_headlines=export.cover_headlines,
        )

        try:
            manifest.articles, errors = packager.save_articles(articles, export.metadata)
            self._record(log, "package", errors)
            saved_ids = {row.id for row in manifest.articles}
            article_ids = [
                article_id if article_id in saved_ids else None
                for article_id in map(packager.article_id, range(len(articles)))
            ]

            manifest.authors, manifest.relations, errors = packager.save_authors(
                authors, article_ids
            )
            self._record(log, "authors", errors)

            manifest.images, errors = packager.save_images(images, article_ids)
            self._record(log, "images", errors)
        except OSError as e:
            self._record(log, "package", [f"Failed to package edition: {e}"], level="error")

        stats.articles_saved = len(manifest.articles)
        stats.authors_saved = len(manifest.authors)
        stats.images_saved = len(manifest.images)

        manifest.validation_errors = [entry.message for entry in log]
        manifest.status = "sealed"
        try:
            packager.write_manifest(manifest)
        except OSError as e:
            self._record(log, "package", [f"Failed to write manifest: {e}"], level="error")

        status = self._status(stats, log)
        logger.info(
            f"Edition {edition_id}: {status} "
            f"({stats.articles_saved} articles, {stats.authors_saved} authors, "
            f"{stats.images_saved} images, {len(log)} log entries)"
        )
        return ProcessingResult(
            status=status,
            edition_id=edition_id,
            output_path=str(edition_dir),
            stats=stats,
            log=log,
        )

    def _record(
        self,
        log: list[LogEntry],
        stage: str,
        messages: list[str],
        level: Literal["info", "warning", "error"] = "warning",
    ) -> None:
        for message in messages:
            log.append(LogEntry(level=level, stage=stage, message=message))

    def _status(
        self, stats: ProcessingStats, log: list[LogEntry]
    ) -> Literal["completed", "completed_with_warnings", "failed"]:
        if stats.articles_extracted == 0:
            return "failed"
        if log:
            return "completed_with_warnings"
        return "completed"
