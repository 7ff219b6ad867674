"""Pytest fixtures for Magazine Distiller tests."""

import pytest

from schemas.element import ContentElement, ElementKind

SAMPLE_CSS = """
p.Artikelen_Kop { font-size: 30px; font-weight: bold; }
p.Artikelen_Chapeau { font-style: italic; }
p.Artikelen_Plattetekst { font-size: 10px; }
p.Artikelen_Rubriek { text-transform: uppercase; }
p.Omslag_Kop { font-size: 48px; }
span.CharOverride-1 { font-family: "Minion Pro"; }
span.CharOverride-2 { font-style: italic; }
span.CharOverride-3 { font-weight: bold; }
"""

COVER_HTML = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><meta charset="utf-8" /><title>publication</title></head>
<body>
<div id="_idContainer000">
<p class="Omslag_Kop">Hoop in de winter</p>
<p class="Omslag_Ankeiler">Over geloof in donkere dagen</p>
</div>
<p class="Basis_Voet">Jaargang 12 - 15 januari 2026</p>
</body>
</html>
"""

PAGE_TWO_HTML = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><meta charset="utf-8" /><title>publication-1</title></head>
<body>
<div id="_idContainer001">
<p class="Artikelen_Rubriek">Actueel</p>
<p class="Artikelen_Kop">Licht in de duisternis</p>
<p class="Artikelen_Chapeau">Een korte inleiding.</p>
<p class="Artikelen_Plattetekst"><span class="CharOverride-1" style="position:absolute;top:100px">Dit is de eerste alinea van het arti-</span><span class="CharOverride-1" style="position:absolute;top:130px">kel over licht.</span></p>
<p class="Artikelen_Plattetekst"><span class="CharOverride-1" style="position:absolute;top:800px">Het licht schijnt</span></p>
<img src="../image/kerk.jpg" alt="" />
<p class="Artikelen_Fotobijschrift">De kerk in de winter.</p>
<p class="Basis_Paginanummer">2</p>
</div>
</body>
</html>
"""

PAGE_THREE_HTML = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><meta charset="utf-8" /><title>publication-2</title></head>
<body>
<div id="_idContainer002">
<p class="Artikelen_Plattetekst"><span class="CharOverride-1" style="position:absolute;top:100px">in de duisternis. ■</span></p>
<p class="Artikelen_Auteur">Tekst: Jan Jansen</p>
<img src="../image/auteur-jan-jansen.jpg" alt="" />
<p class="Artikelen_Kop">Tweede artikel</p>
<p class="Artikelen_Plattetekst"><span class="CharOverride-1" style="position:absolute;top:300px">Korte tekst zonder eindteken.</span></p>
</div>
</body>
</html>
"""


def write_export(root, pages, css=SAMPLE_CSS, images=("kerk.jpg", "auteur-jan-jansen.jpg", "logo.png")):
    """Write an InDesign-style XHTML export below ``root``.

    Args:
        root: Export root directory
        pages: Mapping of page filename to HTML content
        css: Stylesheet content, or None to omit the css directory
        images: Image filenames to create

    Returns:
        The export root
    """
    resources = root / "publication-web-resources"
    html_dir = resources / "html"
    html_dir.mkdir(parents=True)
    for filename, content in pages.items():
        (html_dir / filename).write_text(content, encoding="utf-8")

    if css is not None:
        css_dir = resources / "css"
        css_dir.mkdir()
        (css_dir / "idGeneratedStyles.css").write_text(css, encoding="utf-8")

    image_dir = resources / "image"
    image_dir.mkdir()
    for filename in images:
        (image_dir / filename).write_bytes(b"\xff\xd8\xff\xe0fake-image")
    return root


@pytest.fixture
def sample_export(tmp_path):
    """Create a three-page export: cover, a two-page article and an unterminated one."""
    return write_export(
        tmp_path / "export",
        {
            "publication.html": COVER_HTML,
            "publication-1.html": PAGE_TWO_HTML,
            "publication-2.html": PAGE_THREE_HTML,
        },
    )


@pytest.fixture
def make_element():
    """Factory for content elements.

    The spread index defaults to the printed page minus one, matching the
    single-page export convention.
    """

    def _make(
        kind,
        text="",
        page=2,
        spread=None,
        y=None,
        content=None,
        class_name="",
    ):
        kind = ElementKind(kind)
        if content is None:
            content = text if kind == ElementKind.IMAGE else f"<p>{text}</p>"
        return ContentElement(
            kind=kind,
            content=content,
            class_name=class_name,
            spread_index=page - 1 if spread is None else spread,
            page_start=page,
            page_end=page,
            y_range=y,
            text=text,
        )

    return _make
