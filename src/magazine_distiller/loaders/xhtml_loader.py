"""Loader for InDesign "publication-web-resources" XHTML exports.

An export looks like::

    export/
    └── publication-web-resources/
        ├── html/
        │   ├── publication.html      # cover, printed page 1
        │   ├── publication-1.html    # printed page 2
        │   └── ...
        ├── css/
        │   └── idGeneratedStyles.css
        └── image/
            └── ...

Archives are often unpacked into one extra folder level, so the resources
directory is also searched one level down.
"""

import logging
import re
from datetime import date
from pathlib import Path

from lxml import etree

from magazine_distiller.analysis.style_classifier import build_style_classification
from magazine_distiller.exceptions import FilenamePatternError
from magazine_distiller.extraction.text import element_classes, extract_text
from schemas.edition import CoverHeadline, EditionExport, EditionMetadata, ImageIndex
from schemas.page import PageDocument
from schemas.style import StyleClassification, StyleRole

logger = logging.getLogger(__name__)

RESOURCES_DIR_NAME = "publication-web-resources"
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
SPREAD_FILENAME_PATTERN = re.compile(r"^publication-(\d+)$")

ISSUE_NUMBER_PATTERN = re.compile(r"(?:Jaargang|Nr\.?)\s*(\d+)", re.IGNORECASE)
DUTCH_MONTHS = {
    "januari": 1,
    "februari": 2,
    "maart": 3,
    "april": 4,
    "mei": 5,
    "juni": 6,
    "juli": 7,
    "augustus": 8,
    "september": 9,
    "oktober": 10,
    "november": 11,
    "december": 12,
}
DUTCH_DATE_PATTERN = re.compile(
    r"(\d{1,2})\s+(" + "|".join(DUTCH_MONTHS) + r")\s+(\d{4})", re.IGNORECASE
)


def parse_spread_filename(filename: str) -> tuple[int, int, int]:
    """Map a page filename to its spread index and printed pages.

    Args:
        filename: Filename such as "publication-3.html"

    Returns:
        (spread_index, page_start, page_end)

    Raises:
        FilenamePatternError: If the name does not follow the export convention

    Examples:
        >>> parse_spread_filename("publication.html")
        (0, 1, 1)
        >>> parse_spread_filename("publication-3.html")
        (3, 4, 4)
    """
    stem = Path(filename).name.removesuffix(".html")
    if stem == "publication":
        return 0, 1, 1
    match = SPREAD_FILENAME_PATTERN.match(stem)
    if not match:
        raise FilenamePatternError(filename)
    index = int(match.group(1))
    return index, index + 1, index + 1


def find_html_dir(xhtml_dir: Path) -> Path | None:
    """Locate the html directory of an export.

    Looks directly under ``xhtml_dir`` first, then one folder deeper,
    skipping ``__MACOSX`` and hidden directories.
    """
    direct = xhtml_dir / RESOURCES_DIR_NAME / "html"
    if direct.is_dir():
        return direct
    if not xhtml_dir.is_dir():
        return None
    for entry in sorted(xhtml_dir.iterdir()):
        if entry.name == "__MACOSX" or entry.name.startswith("."):
            continue
        candidate = entry / RESOURCES_DIR_NAME / "html"
        if candidate.is_dir():
            return candidate
    return None


def load_spreads(html_dir: Path, errors: list[str] | None = None) -> list[PageDocument]:
    """Read every page document of an export, sorted by spread index.

    Files with an unrecognised name are skipped with a warning.

    Args:
        html_dir: The export's html directory
        errors: List that receives warning strings

    Returns:
        Page documents sorted by spread index
    """
    errors = errors if errors is not None else []
    spreads = []
    for path in sorted(html_dir.glob("*.html")):
        try:
            spread_index, page_start, page_end = parse_spread_filename(path.name)
            html = path.read_text(encoding="utf-8")
        except FilenamePatternError as e:
            logger.warning(f"Skipping file {path.name}: {e.message}")
            errors.append(e.message)
            continue
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable file {path.name}: {e}")
            errors.append(f"Could not read {path.name}: {e}")
            continue
        spreads.append(
            PageDocument(
                spread_index=spread_index,
                page_start=page_start,
                page_end=page_end,
                html=html,
                filename=path.name,
            )
        )
    spreads.sort(key=lambda s: s.spread_index)
    logger.debug(f"Loaded {len(spreads)} spreads from {html_dir}")
    return spreads


def index_images(image_dir: Path, root_dir: Path | None = None) -> ImageIndex:
    """Index the image files of an export.

    Filenames containing "auteur"/"author" are author photos,
    "logo"/"icon" are decorative and the rest are content candidates.

    Args:
        image_dir: The export's image directory
        root_dir: Directory the recorded paths are relative to (defaults to
            the directory holding ``publication-web-resources``)

    Returns:
        ImageIndex keyed by filename
    """
    index = ImageIndex()
    root_dir = root_dir or image_dir.parent.parent
    for path in sorted(image_dir.iterdir()):
        if path.suffix.lower() not in IMAGE_EXTENSIONS:
            continue
        name = path.name
        index.images[name] = path.relative_to(root_dir).as_posix()
        lower = name.lower()
        if "auteur" in lower or "author" in lower:
            index.author_photos.append(name)
        elif "logo" in lower or "icon" in lower:
            index.decorative.append(name)
        else:
            index.article_images.append(name)
    return index


def _page_text(spread: PageDocument) -> str:
    try:
        root = spread.parse()
    except (etree.ParserError, ValueError):
        return ""
    body = root.find("body")
    return extract_text(body if body is not None else root)


def _parse_dutch_date(day: str, month: str, year: str) -> str | None:
    try:
        return date(int(year), DUTCH_MONTHS[month.lower()], int(day)).isoformat()
    except ValueError:
        return None


def extract_metadata(spreads: list[PageDocument]) -> EditionMetadata:
    """Scrape the issue number and date from page text.

    The first page mentioning either value supplies the metadata.

    Args:
        spreads: Page documents in spread order

    Returns:
        EditionMetadata, with None for values that were not found
    """
    for spread in spreads:
        text = _page_text(spread)
        number_match = ISSUE_NUMBER_PATTERN.search(text)
        date_match = DUTCH_DATE_PATTERN.search(text)
        if number_match or date_match:
            return EditionMetadata(
                issue_number=int(number_match.group(1)) if number_match else None,
                issue_date=_parse_dutch_date(*date_match.groups()) if date_match else None,
            )
    return EditionMetadata()


def extract_cover_metadata(
    cover: PageDocument,
    styles: StyleClassification,
) -> list[CoverHeadline]:
    """Extract the headlines announced on the cover page.

    A cover title's chapeau is its next sibling when that sibling carries a
    cover-chapeau class, otherwise the first cover-chapeau element under the
    same parent.

    Args:
        cover: The cover page document
        styles: Edition style classification

    Returns:
        Cover headlines in document order
    """
    title_classes = set(styles.classes_for(StyleRole.COVER_TITLE))
    chapeau_classes = set(styles.classes_for(StyleRole.COVER_CHAPEAU))
    if not title_classes:
        logger.debug("No cover title classes found, skipping cover extraction")
        return []

    try:
        root = cover.parse()
    except (etree.ParserError, ValueError) as e:
        logger.warning(f"Could not parse cover {cover.filename}: {e}")
        return []

    def has_class(element, classes: set[str]) -> bool:
        return isinstance(element.tag, str) and bool(classes.intersection(element_classes(element)))

    headlines = []
    for element in root.iter():
        if not has_class(element, title_classes):
            continue
        title = extract_text(element)
        if not title:
            continue
        chapeau = None
        sibling = element.getnext()
        if sibling is not None and has_class(sibling, chapeau_classes):
            chapeau = extract_text(sibling) or None
        else:
            parent = element.getparent()
            if parent is not None:
                for candidate in parent.iter():
                    if has_class(candidate, chapeau_classes):
                        chapeau = extract_text(candidate) or None
                        break
        headlines.append(CoverHeadline(title=title, chapeau=chapeau))

    logger.info(f"Extracted {len(headlines)} cover headlines")
    return headlines


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


def load_xhtml_export(xhtml_dir: Path, allowed_root: Path | None = None) -> EditionExport:
    """Load a complete XHTML export.

    Never raises: missing pieces are reported in ``errors`` and yield empty
    results. A missing html directory leaves ``spreads`` empty, which
    callers treat as fatal.

    Args:
        xhtml_dir: Root directory of the export
        allowed_root: When given, exports outside this directory are refused

    Returns:
        EditionExport with everything that could be loaded
    """
    export = EditionExport(root_dir=xhtml_dir)

    if allowed_root is not None and not _is_within(xhtml_dir, allowed_root):
        message = f"Path {xhtml_dir} is outside the allowed directory {allowed_root}"
        logger.error(message)
        export.errors.append(message)
        return export

    html_dir = find_html_dir(xhtml_dir)
    if html_dir is None:
        message = f"HTML directory not found in {xhtml_dir}"
        logger.error(message)
        export.errors.append(message)
        return export

    resources_dir = html_dir.parent
    export.html_dir = html_dir
    export.spreads = load_spreads(html_dir, export.errors)
    if not export.spreads:
        export.errors.append(f"No page documents found in {html_dir}")

    image_dir = resources_dir / "image"
    if image_dir.is_dir():
        export.image_dir = image_dir
        export.images = index_images(image_dir, xhtml_dir)
    else:
        logger.warning(f"Image directory not found: {image_dir}")
        export.errors.append(f"Image directory not found: {image_dir}")

    css_texts = []
    css_dir = resources_dir / "css"
    if css_dir.is_dir():
        for css_path in sorted(css_dir.glob("*.css")):
            try:
                css_texts.append(css_path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Could not read stylesheet {css_path.name}: {e}")
                export.errors.append(f"Could not read {css_path.name}: {e}")
    else:
        logger.warning(f"CSS directory not found: {css_dir}")
        export.errors.append(f"CSS directory not found: {css_dir}")

    export.styles = build_style_classification(
        css_texts, [spread.html for spread in export.spreads]
    )
    export.metadata = extract_metadata(export.spreads)
    if export.cover is not None:
        export.cover_headlines = extract_cover_metadata(export.cover, export.styles)

    logger.info(
        f"Loaded export {xhtml_dir}: {len(export.spreads)} spreads, "
        f"{len(export.images)} images"
    )
    return export
