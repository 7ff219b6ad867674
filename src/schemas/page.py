"""Page document domain object."""

from dataclasses import dataclass

from lxml import html as lxml_html


def parse_html_document(text: str):
    """Parse a complete HTML document given as text."""
    # Encode first: lxml rejects str input carrying an XML declaration
    parser = lxml_html.HTMLParser(encoding="utf-8")
    return lxml_html.document_fromstring(text.encode("utf-8"), parser=parser)


@dataclass(frozen=True)
class PageDocument:
    """Represents one exported page of the magazine.

    The layout tool writes one XHTML document per printed page. The first
    document is the cover (spread index 0, printed page 1); every following
    document maps to printed page ``spread_index + 1``.

    Attributes:
        spread_index: Sequential page index, 0 for the cover
        page_start: First printed page number covered by this document
        page_end: Last printed page number (equal to page_start for single pages)
        html: Raw XHTML content of the page
        filename: Source filename inside the export's html directory
    """

    spread_index: int
    page_start: int
    page_end: int
    html: str
    filename: str

    @property
    def is_cover(self) -> bool:
        return self.spread_index == 0

    def parse(self):
        """Parse the page content into an lxml HTML tree.

        Returns:
            The root element of the parsed document
        """
        return parse_html_document(self.html)
