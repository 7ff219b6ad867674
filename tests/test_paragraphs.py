"""Tests for paragraph merging."""

from magazine_distiller.config import ExtractorSettings
from magazine_distiller.extraction.paragraphs import (
    Fragment,
    continues_paragraph,
    dominant_char_override,
    is_verse_fragment,
    merge_paragraphs,
)
from schemas.style import OverrideStyle

BODY_CLASS = "Artikelen_Plattetekst"


def _body(make_element, text, y, page=2, override="CharOverride-1", class_name=BODY_CLASS):
    content = f'<p class="{class_name}"><span class="{override}">{text}</span></p>'
    return make_element(
        "body", text, page=page, y=y, content=content, class_name=class_name
    )


class TestMergeParagraphs:
    """Tests for merge_paragraphs."""

    def test_small_gap_merges(self, make_element):
        """Two same-style fragments 50 units apart form one paragraph."""
        elements = [
            _body(make_element, "Het begin van de zin", (100.0, 130.0)),
            _body(make_element, "en het einde.", (180.0, 210.0)),
        ]

        blocks = merge_paragraphs(elements, "CharOverride-1")

        assert len(blocks) == 1
        assert blocks[0].kind == "intro"
        assert blocks[0].content == "Het begin van de zin en het einde."

    def test_large_gap_splits(self, make_element):
        """The same fragments 800 units apart stay two paragraphs."""
        elements = [
            _body(make_element, "Het begin van de zin", (100.0, 130.0)),
            _body(make_element, "en het einde.", (930.0, 960.0)),
        ]

        blocks = merge_paragraphs(elements, "CharOverride-1")

        assert [b.kind for b in blocks] == ["intro", "paragraph"]

    def test_zero_gap_merges(self, make_element):
        """Touching fragments always merge."""
        elements = [
            _body(make_element, "Een", (100.0, 200.0)),
            _body(make_element, "twee.", (200.0, 260.0)),
        ]

        assert len(merge_paragraphs(elements, "CharOverride-1")) == 1

    def test_gap_threshold_from_settings(self, make_element):
        """The paragraph gap follows the configured line height."""
        elements = [
            _body(make_element, "Een", (100.0, 130.0)),
            _body(make_element, "twee.", (230.0, 260.0)),
        ]
        settings = ExtractorSettings(line_height=50.0)

        assert len(merge_paragraphs(elements, "CharOverride-1", settings=settings)) == 2

    def test_hyphen_join_across_fragments(self, make_element):
        """A word split over two fragments is rejoined."""
        elements = [
            _body(make_element, "Een lange ver-", (100.0, 130.0)),
            _body(make_element, "handeling.", (160.0, 190.0)),
        ]

        blocks = merge_paragraphs(elements, "CharOverride-1")

        assert blocks[0].content == "Een lange verhandeling."

    def test_page_turn_mid_sentence_continues(self, make_element):
        """A fragment ending mid-sentence continues on the next page."""
        elements = [
            _body(make_element, "Het licht schijnt", (800.0, 800.0), page=2),
            _body(make_element, "in de duisternis.", (100.0, 100.0), page=3),
        ]

        blocks = merge_paragraphs(elements, "CharOverride-1")

        assert len(blocks) == 1
        assert blocks[0].content == "Het licht schijnt in de duisternis."

    def test_page_turn_after_full_stop_splits(self, make_element):
        """A finished sentence does not continue across a page turn."""
        elements = [
            _body(make_element, "Het licht schijnt.", (800.0, 800.0), page=2),
            _body(make_element, "Een nieuwe alinea.", (100.0, 100.0), page=3),
        ]

        assert len(merge_paragraphs(elements, "CharOverride-1")) == 2

    def test_different_class_splits(self, make_element):
        """Fragments of different styles are separate paragraphs."""
        elements = [
            _body(make_element, "Een", (100.0, 130.0)),
            _body(make_element, "twee", (140.0, 170.0), class_name="Kader_Basistekst"),
        ]

        assert len(merge_paragraphs(elements, "CharOverride-1")) == 2

    def test_pass_through_blocks(self, make_element):
        """Subheadings, streamers and questions become their own blocks."""
        elements = [
            _body(make_element, "Intro.", (100.0, 130.0)),
            make_element("subheading", "Tussenkop", y=(200.0, 200.0)),
            _body(make_element, "Tekst.", (300.0, 330.0)),
            make_element("streamer", "Een citaat", y=(400.0, 400.0)),
            make_element("question", "Wat vindt u?", y=(500.0, 500.0)),
        ]

        blocks = merge_paragraphs(elements, "CharOverride-1")

        assert [b.kind for b in blocks] == [
            "intro",
            "subheading",
            "paragraph",
            "streamer",
            "question",
        ]

    def test_ignores_other_kinds(self, make_element):
        """Titles, authors and captions are not body flow."""
        elements = [
            make_element("title", "Kop"),
            make_element("author", "Jan"),
            make_element("author-bio", "Jan is predikant."),
            _body(make_element, "Tekst.", (100.0, 130.0)),
            make_element("caption", "Foto"),
        ]

        blocks = merge_paragraphs(elements, "CharOverride-1")

        assert [b.kind for b in blocks] == ["intro"]

    def test_sidebars_float_to_end(self, make_element):
        """Sidebars are grouped and moved after the body."""
        elements = [
            _body(make_element, "Intro.", (100.0, 130.0)),
            make_element("subheading", "Boekentip"),
            make_element("sidebar", "Titel van het boek"),
            make_element("sidebar", "Uitgeverij, 2025"),
            _body(make_element, "Slot.", (900.0, 930.0)),
        ]

        blocks = merge_paragraphs(elements, "CharOverride-1")

        assert [b.kind for b in blocks] == ["intro", "paragraph", "subheading", "sidebar"]
        assert blocks[-1].content == "<p>Titel van het boek</p><p>Uitgeverij, 2025</p>"

    def test_verse_kept_separate(self, make_element):
        """Italic verse fragments do not merge with prose."""
        overrides = {"CharOverride-2": OverrideStyle(italic=True)}
        elements = [
            _body(make_element, "Proza", (100.0, 130.0)),
            _body(make_element, "De HEERE is mijn Herder", (140.0, 170.0), override="CharOverride-2"),
            _body(make_element, "Proza", (180.0, 210.0)),
            _body(make_element, "Proza", (220.0, 250.0)),
        ]

        blocks = merge_paragraphs(elements, "CharOverride-1", overrides)

        assert len(blocks) == 3
        assert blocks[1].content == "<em>De HEERE is mijn Herder</em>"

    def test_strips_end_marker(self, make_element):
        """The end marker never reaches the body text."""
        elements = [_body(make_element, "Slot. ■", (100.0, 130.0))]

        blocks = merge_paragraphs(elements, "CharOverride-1")

        assert blocks[0].content == "Slot."

    def test_empty(self):
        """No body flow yields no blocks."""
        assert merge_paragraphs([]) == []


class TestContinuesParagraph:
    """Tests for continues_paragraph."""

    def test_missing_position_breaks(self, make_element):
        """Without positions fragments on one page are not merged."""
        first = Fragment(element=make_element("body", "Een", class_name=BODY_CLASS), html="Een")
        second = Fragment(element=make_element("body", "twee", class_name=BODY_CLASS), html="twee")

        assert not continues_paragraph(first, second, 375.0)

    def test_column_jump_merges(self, make_element):
        """A fragment higher up the page (next column) continues the paragraph."""
        first = Fragment(
            element=make_element("body", "Een", y=(900.0, 950.0), class_name=BODY_CLASS),
            html="Een",
        )
        second = Fragment(
            element=make_element("body", "twee", y=(100.0, 150.0), class_name=BODY_CLASS),
            html="twee",
        )

        assert continues_paragraph(first, second, 375.0)


class TestDominantOverride:
    """Tests for dominant_char_override and is_verse_fragment."""

    def test_dominant_over_body(self, make_element):
        """The most frequent override over body fragments is dominant."""
        elements = [
            _body(make_element, "a", (0.0, 0.0)),
            _body(make_element, "b", (0.0, 0.0)),
            _body(make_element, "c", (0.0, 0.0), override="CharOverride-2"),
            make_element("title", "Kop", content='<p><span class="CharOverride-9">Kop</span></p>'),
        ]

        assert dominant_char_override(elements) == "CharOverride-1"

    def test_verse_needs_italic_css(self, make_element):
        """A known non-italic override is not verse."""
        element = _body(make_element, "vet", (0.0, 0.0), override="CharOverride-3")
        overrides = {"CharOverride-3": OverrideStyle(bold=True)}

        assert not is_verse_fragment(element, "CharOverride-1", overrides)
        assert is_verse_fragment(element, "CharOverride-1", {})
