"""Tests for EditionPackager."""

import json
from unittest.mock import MagicMock

import pytest
from jinja2 import TemplateSyntaxError

from magazine_distiller.packagers import EditionPackager
from magazine_distiller.packagers.edition_packager import AUTHORS_NAME, MANIFEST_NAME
from schemas.article import Article
from schemas.edition import EditionMetadata
from schemas.manifest import ArticleAuthorRelation, EditionManifest
from schemas.records import ExtractedAuthor, ExtractedImage


def _article(title, **kwargs):
    return Article(
        title=title,
        page_start=2,
        page_end=2,
        source_spread_indexes=[1],
        **kwargs,
    )


def _author(name, indexes=(0,), photo=None):
    return ExtractedAuthor(
        name=name,
        normalized_name=name.lower(),
        photo_filename=photo,
        photo_path=f"image/{photo}" if photo else None,
        article_indexes=list(indexes),
    )


def _image(filename, position=0, **kwargs):
    return ExtractedImage(
        filename=filename,
        source_path=f"image/{filename}",
        article_title="Kop",
        article_index=position,
        **kwargs,
    )


@pytest.fixture
def source_root(tmp_path):
    root = tmp_path / "export"
    (root / "image").mkdir(parents=True)
    for name in ("kerk.jpg", "orgel.jpg", "jansen.jpg"):
        (root / "image" / name).write_bytes(b"\xff\xd8" + name.encode())
    return root


@pytest.fixture
def packager(tmp_path, source_root):
    return EditionPackager(tmp_path / "editions" / "edition-2026-01-15", source_root)


class TestSaveArticles:
    """Tests for EditionPackager.save_articles."""

    def test_writes_records_and_pages(self, packager):
        """Each article gets a positional id, a JSON record and an HTML page."""
        articles = [
            _article("Een", category="Actueel", content="<p>Tekst</p>"),
            _article("Twee"),
        ]

        rows, errors = packager.save_articles(articles, EditionMetadata(issue_date="2026-01-15"))

        assert errors == []
        assert [r.id for r in rows] == ["article-001", "article-002"]
        assert rows[0].json_path == "articles/article-001/article.json"
        assert rows[0].category == "Actueel"

        record = json.loads((packager.articles_dir / "article-001" / "article.json").read_text())
        assert record["title"] == "Een"
        assert "subtitle" not in record

        page = (packager.articles_dir / "article-001" / "article.html").read_text()
        assert "<h1>Een</h1>" in page
        assert "15 januari 2026" in page

    def test_page_links_content_images_only(self, packager):
        """Logos and author photos are not linked from the page."""
        article = _article(
            "Kop",
            referenced_images=["kerk.jpg", "logo.png", "jansen.jpg"],
            author_photo_filenames=["jansen.jpg"],
        )

        packager.save_articles([article])

        page = (packager.articles_dir / "article-001" / "article.html").read_text()
        assert "../../images/articles/kerk.jpg" in page
        assert "logo.png" not in page
        assert "jansen.jpg" not in page

    def test_empty(self, packager):
        """An empty list writes nothing."""
        assert packager.save_articles([]) == ([], [])
        assert not packager.articles_dir.exists()

    def test_render_failure_isolated(self, packager):
        """A page that fails to render is reported and the rest are saved."""
        renderer = MagicMock()
        renderer.render_page.side_effect = [TemplateSyntaxError("bad", 1), "<html></html>"]
        packager.renderer = renderer

        rows, errors = packager.save_articles([_article("Een"), _article("Twee")])

        assert [r.id for r in rows] == ["article-002"]
        assert len(errors) == 1
        assert "Een" in errors[0]


class TestSaveAuthors:
    """Tests for EditionPackager.save_authors."""

    def test_creates_rows_and_relations(self, packager):
        """New authors get ids and link to their articles."""
        authors = [_author("Jan Jansen", (0, 1)), _author("Piet de Boer", (1,))]

        saved, relations, errors = packager.save_authors(
            authors, ["article-001", "article-002"]
        )

        assert errors == []
        assert [a.id for a in saved] == ["author-001", "author-002"]
        assert relations == [
            ArticleAuthorRelation(article_id="article-001", author_id="author-001"),
            ArticleAuthorRelation(article_id="article-002", author_id="author-001"),
            ArticleAuthorRelation(article_id="article-002", author_id="author-002"),
        ]
        assert (packager.output_dir / AUTHORS_NAME).exists()

    def test_upsert_is_idempotent(self, packager):
        """Saving the same authors again reuses the existing rows."""
        authors = [_author("Jan Jansen")]
        packager.save_authors(authors, ["article-001"])

        saved, _, _ = packager.save_authors(authors + [_author("Piet de Boer")], ["article-001"])

        assert [a.id for a in saved] == ["author-001", "author-002"]
        assert len(packager.load_authors()) == 2

    def test_copies_photo(self, packager):
        """A matched photo is copied into the authors image directory."""
        saved, _, errors = packager.save_authors(
            [_author("Jan Jansen", photo="jansen.jpg")], ["article-001"]
        )

        assert errors == []
        assert saved[0].photo_path == "images/authors/jansen.jpg"
        assert (packager.author_images_dir / "jansen.jpg").exists()

    def test_photo_only_set_when_missing(self, packager):
        """A later run fills in a photo but never replaces one."""
        packager.save_authors([_author("Jan Jansen")], ["article-001"])
        saved, _, _ = packager.save_authors(
            [_author("Jan Jansen", photo="jansen.jpg")], ["article-001"]
        )
        assert saved[0].photo_path == "images/authors/jansen.jpg"

        saved, _, _ = packager.save_authors(
            [_author("Jan Jansen", photo="kerk.jpg")], ["article-001"]
        )
        assert saved[0].photo_path == "images/authors/jansen.jpg"

    def test_missing_photo_warns(self, packager):
        """A photo that cannot be copied is a warning, not a failure."""
        saved, _, errors = packager.save_authors(
            [_author("Jan Jansen", photo="weg.jpg")], ["article-001"]
        )

        assert saved[0].photo_path is None
        assert len(errors) == 1
        assert "Jan Jansen" in errors[0]

    def test_skips_unsaved_articles(self, packager):
        """Positions without a saved article get no relation."""
        _, relations, _ = packager.save_authors(
            [_author("Jan Jansen", (0, 1, 5))], [None, "article-002"]
        )

        assert [r.article_id for r in relations] == ["article-002"]

    def test_empty(self, packager):
        """No authors writes nothing."""
        assert packager.save_authors([], []) == ([], [], [])
        assert packager.load_authors() == []


class TestSaveImages:
    """Tests for EditionPackager.save_images."""

    def test_copies_and_records(self, packager):
        """Images are copied and recorded against their article."""
        images = [
            _image("kerk.jpg", caption="De kerk", is_featured=True),
            _image("orgel.jpg", sort_order=1),
        ]

        rows, errors = packager.save_images(images, ["article-001"])

        assert errors == []
        assert [r.id for r in rows] == ["image-001", "image-002"]
        assert rows[0].article_id == "article-001"
        assert rows[0].path == "images/articles/kerk.jpg"
        assert rows[0].caption == "De kerk"
        assert rows[0].is_featured
        assert (packager.article_images_dir / "orgel.jpg").exists()

    def test_failed_copy_does_not_block_others(self, packager):
        """A missing file is skipped with a warning."""
        images = [_image("weg.jpg"), _image("kerk.jpg")]

        rows, errors = packager.save_images(images, ["article-001"])

        assert [r.filename for r in rows] == ["kerk.jpg"]
        assert len(errors) == 1
        assert "weg.jpg" in errors[0]

    def test_skips_images_without_article(self, packager):
        """Images whose article was not saved are skipped."""
        images = [_image("kerk.jpg", position=0), _image("orgel.jpg", position=1)]

        rows, _ = packager.save_images(images, [None, "article-002"])

        assert [(r.filename, r.article_id) for r in rows] == [("orgel.jpg", "article-002")]

    def test_empty(self, packager):
        """No images writes nothing."""
        assert packager.save_images([], []) == ([], [])


class TestWriteManifest:
    """Tests for EditionPackager.write_manifest."""

    def test_writes_manifest(self, packager):
        """The manifest is written as JSON at the edition root."""
        manifest = EditionManifest(id="edition-2026-01-15", source_path="/exports/wv")
        manifest.status = "sealed"

        path = packager.write_manifest(manifest)

        assert path == packager.output_dir / MANIFEST_NAME
        data = json.loads(path.read_text())
        assert data["id"] == "edition-2026-01-15"
        assert data["status"] == "sealed"
        assert EditionManifest.model_validate(data).status == "sealed"
