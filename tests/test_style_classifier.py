"""Tests for the style classifier."""

import pytest

from magazine_distiller.analysis.style_classifier import (
    analyze_css,
    analyze_html_classes,
    build_style_classification,
    classify_class_name,
    extract_category_from_class,
    parse_char_override_styles,
)
from schemas.style import OverrideStyle, StyleClassification, StyleRole


class TestClassifyClassName:
    """Tests for classify_class_name."""

    @pytest.mark.parametrize(
        "class_name, role",
        [
            ("Omslag_Kop", StyleRole.COVER_TITLE),
            ("Omslag_Ankeiler", StyleRole.COVER_CHAPEAU),
            ("Meditatie_kop-boven-vers", StyleRole.INTRO_VERSE),
            ("Meditatie_vers", StyleRole.VERSE_REFERENCE),
            ("Artikelen_Onderschrift-auteur", StyleRole.AUTHOR_BIO),
            ("Onderschrift-auteur_naam-auteur", StyleRole.AUTHOR),
            ("Artikelen_Tussenkop-vraag", StyleRole.QUESTION),
            ("Artikelen_Tussenkop", StyleRole.SUBHEADING),
            ("Artikelen_Streamer", StyleRole.STREAMER),
            ("Artikelen_Fotobijschrift", StyleRole.CAPTION),
            ("Artikelen_Kader", StyleRole.SIDEBAR),
            ("Artikelen_Kop", StyleRole.TITLE),
            ("Artikelen_Hoofdkop", StyleRole.TITLE),
            ("Artikelen_Chapeau", StyleRole.CHAPEAU),
            ("Artikelen_Intro", StyleRole.CHAPEAU),
            ("Artikelen_Auteur", StyleRole.AUTHOR),
            ("Artikelen_Rubriek", StyleRole.CATEGORY),
            ("Artikelen_Plattetekst", StyleRole.BODY),
            ("Kader_Basistekst", StyleRole.BODY),
        ],
    )
    def test_known_vocabulary(self, class_name, role):
        """Layout vocabulary maps to its semantic role."""
        assert classify_class_name(class_name) == role

    def test_case_insensitive(self):
        """Matching ignores case."""
        assert classify_class_name("ARTIKELEN_PLATTETEKST") == StyleRole.BODY

    def test_generator_overrides_unclassified(self):
        """Generator override classes never get a role."""
        assert classify_class_name("CharOverride-3") is None
        assert classify_class_name("ParaOverride-1") is None
        assert classify_class_name("_idGenObjectStyleOverride-1") is None

    def test_unknown_name(self):
        """Names without known keywords are unclassified."""
        assert classify_class_name("Basis_Paginanummer") is None

    def test_subheading_before_title(self):
        """A tussenkop is a subheading even though it contains 'kop'."""
        assert classify_class_name("Tussenkop") == StyleRole.SUBHEADING

    def test_introletter_is_not_chapeau(self):
        """Drop-cap classes are not lead-ins."""
        assert classify_class_name("Artikelen_Introletter") != StyleRole.CHAPEAU

    def test_kop_boven_vers_is_not_title(self):
        """The heading above a verse is an intro verse, not a title."""
        assert classify_class_name("kop-boven-vers") == StyleRole.INTRO_VERSE


class TestExtractCategoryFromClass:
    """Tests for extract_category_from_class."""

    def test_capitalised_prefix(self):
        """The capitalised prefix before the underscore is returned."""
        assert extract_category_from_class("Meditatie_kop-boven-vers") == "Meditatie"

    def test_no_prefix(self):
        """Names without a capitalised prefix yield None."""
        assert extract_category_from_class("plattetekst") is None
        assert extract_category_from_class("meditatie_vers") is None


class TestParseCharOverrideStyles:
    """Tests for parse_char_override_styles."""

    def test_italic_and_bold(self):
        """Italic and bold declarations are detected."""
        css = """
        span.CharOverride-2 { font-style: italic; }
        span.CharOverride-3 { font-weight: bold; }
        span.CharOverride-4 { font-weight: 700; font-style: oblique; }
        span.CharOverride-5 { font-weight: 400; }
        """

        styles = parse_char_override_styles(css)

        assert styles["CharOverride-2"] == OverrideStyle(italic=True, bold=False)
        assert styles["CharOverride-3"] == OverrideStyle(italic=False, bold=True)
        assert styles["CharOverride-4"] == OverrideStyle(italic=True, bold=True)
        assert styles["CharOverride-5"] == OverrideStyle()

    def test_no_overrides(self):
        """CSS without override rules yields an empty mapping."""
        assert parse_char_override_styles("p.Kop { color: red; }") == {}


class TestAnalyzeCss:
    """Tests for analyze_css."""

    def test_classifies_declared_classes(self):
        """Every declared class selector is classified."""
        css = "p.Artikelen_Kop { } p.Artikelen_Plattetekst { } p.Onbekend { }"

        styles = analyze_css([css])

        assert styles.role_of("Artikelen_Kop") == StyleRole.TITLE
        assert styles.role_of("Artikelen_Plattetekst") == StyleRole.BODY
        assert "Onbekend" not in styles

    def test_collects_char_overrides(self):
        """CharOverride emphasis is attached to the classification."""
        styles = analyze_css(["span.CharOverride-2 { font-style: italic; }"])

        assert styles.override_style("CharOverride-2") == OverrideStyle(italic=True)


class TestAnalyzeHtmlClasses:
    """Tests for analyze_html_classes."""

    def test_classifies_used_classes(self):
        """Classes used in page markup are classified."""
        html = '<html><body><p class="Artikelen_Kop extra">T</p><span class="Artikelen_Auteur">A</span></body></html>'

        styles = analyze_html_classes([html])

        assert styles.role_of("Artikelen_Kop") == StyleRole.TITLE
        assert styles.role_of("Artikelen_Auteur") == StyleRole.AUTHOR

    def test_skips_blank_documents(self):
        """Empty page contents are ignored."""
        assert len(analyze_html_classes(["", "   "])) == 0


class TestBuildStyleClassification:
    """Tests for build_style_classification."""

    def test_merges_css_and_html(self):
        """Classes from CSS and from HTML usage are combined."""
        css = "p.Artikelen_Kop { }"
        html = '<html><body><p class="Artikelen_Plattetekst">x</p></body></html>'

        styles = build_style_classification([css], [html])

        assert styles.classes_for(StyleRole.TITLE) == ["Artikelen_Kop"]
        assert styles.classes_for(StyleRole.BODY) == ["Artikelen_Plattetekst"]

    def test_css_entry_listed_first(self):
        """A class seen in both sources keeps its CSS position."""
        css = "p.Artikelen_Chapeau { } p.Artikelen_Intro { }"
        html = '<html><body><p class="Artikelen_Intro">x</p><p class="Artikelen_Lead-chapeau">y</p></body></html>'

        styles = build_style_classification([css], [html])

        assert styles.classes_for(StyleRole.CHAPEAU) == [
            "Artikelen_Chapeau",
            "Artikelen_Intro",
            "Artikelen_Lead-chapeau",
        ]

    def test_warns_without_title_classes(self, caplog):
        """A classification without titles is reported."""
        build_style_classification(["p.Artikelen_Plattetekst { }"], [])

        assert "No title classes found" in caplog.text


class TestStyleClassification:
    """Tests for the StyleClassification value."""

    def test_first_entry_wins(self):
        """A class name keeps the first role it was given."""
        styles = StyleClassification([("A", StyleRole.TITLE), ("A", StyleRole.BODY)])

        assert styles.role_of("A") == StyleRole.TITLE
        assert len(styles) == 1

    def test_merge_does_not_overwrite(self):
        """Merging keeps the receiver's role on conflicts."""
        left = StyleClassification({"A": StyleRole.TITLE})
        right = StyleClassification({"A": StyleRole.BODY, "B": StyleRole.AUTHOR})

        merged = left.merge(right)

        assert merged.role_of("A") == StyleRole.TITLE
        assert merged.role_of("B") == StyleRole.AUTHOR

    def test_merge_is_idempotent(self):
        """Merging the same classification twice changes nothing."""
        left = StyleClassification({"A": StyleRole.TITLE})
        right = StyleClassification(
            {"B": StyleRole.BODY}, {"CharOverride-2": OverrideStyle(italic=True)}
        )

        once = left.merge(right)

        assert once.merge(right) == once
        assert once.merge(once) == once

    def test_merge_returns_new_value(self):
        """Merging leaves both inputs unchanged."""
        left = StyleClassification({"A": StyleRole.TITLE})
        right = StyleClassification({"B": StyleRole.BODY})

        left.merge(right)

        assert "B" not in left
        assert "A" not in right

    def test_read_only(self):
        """The class role mapping cannot be modified."""
        styles = StyleClassification({"A": StyleRole.TITLE})

        with pytest.raises(TypeError):
            styles.class_roles["B"] = StyleRole.BODY
