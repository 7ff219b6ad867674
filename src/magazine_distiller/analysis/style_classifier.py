"""Classify InDesign style class names into semantic roles.

InDesign names paragraph and character styles after the layout designer's
vocabulary (mostly Dutch: ``kop``, ``tussenkop``, ``plattetekst``,
``kader``). Roles are assigned by an ordered table of keyword predicates;
the first matching row wins, so rows for specific vocabulary sit above the
generic rows they overlap with.
"""

import logging
import re
from collections.abc import Callable, Iterable

from lxml import etree

from schemas.page import parse_html_document
from schemas.style import OverrideStyle, StyleClassification, StyleRole

logger = logging.getLogger(__name__)

GENERATOR_PREFIXES = ("charoverride", "paraoverride", "objectstyle", "_idgen")

CSS_CLASS_PATTERN = re.compile(r"\.([A-Za-z_][\w-]*)\s*\{")
CHAR_OVERRIDE_PATTERN = re.compile(r"span\.(CharOverride-\d+)\s*\{([^}]+)\}")
CATEGORY_PREFIX_PATTERN = re.compile(r"^([A-Z][a-zA-Z]+)_")

Predicate = Callable[[str], bool]


def _has(*keywords: str) -> Predicate:
    return lambda name: any(k in name for k in keywords)


def _has_without(keyword: str, *excluded: str) -> Predicate:
    return lambda name: keyword in name and not any(x in name for x in excluded)


def _any(*predicates: Predicate) -> Predicate:
    return lambda name: any(p(name) for p in predicates)


def _is_author_bio(name: str) -> bool:
    # Artikelen_Onderschrift-auteur is the bio paragraph; the name span
    # inside it is Onderschrift-auteur_naam-auteur
    if name == "artikelen_onderschrift-auteur":
        return True
    return "onderschrift-auteur" in name and "naam" not in name and "info-auteur" not in name


# Evaluated top to bottom against the lowercased class name.
CLASSIFICATION_RULES: tuple[tuple[Predicate, StyleRole], ...] = (
    (_has("omslag_kop", "cover_title"), StyleRole.COVER_TITLE),
    (_has("omslag_ankeiler", "omslag_chapeau", "cover_chapeau"), StyleRole.COVER_CHAPEAU),
    (_has("meditatie_kop-boven-vers", "kop-boven-vers"), StyleRole.INTRO_VERSE),
    (_has_without("meditatie_vers", "boven-vers"), StyleRole.VERSE_REFERENCE),
    (_is_author_bio, StyleRole.AUTHOR_BIO),
    (_has("onderschrift-auteur_naam-auteur"), StyleRole.AUTHOR),
    (_has("tussenkop-vraag", "question"), StyleRole.QUESTION),
    (_has("tussenkop", "subheading", "subhead"), StyleRole.SUBHEADING),
    (_has("streamer", "quote", "citaat", "pullquote"), StyleRole.STREAMER),
    (
        _any(
            _has("fotobijschrift", "bijschrift", "caption"),
            _has_without("onderschrift", "auteur"),
        ),
        StyleRole.CAPTION,
    ),
    (
        _any(_has_without("kader", "basistekst"), _has("sidebar", "inzet", "box")),
        StyleRole.SIDEBAR,
    ),
    (_has("titel-boek", "title-book"), StyleRole.SIDEBAR),
    (
        _any(
            _has("hoofdkop", "titel", "title"),
            _has_without("kop", "tussenkop", "streamer", "omslag", "boven-vers"),
        ),
        StyleRole.TITLE,
    ),
    (
        _any(
            _has_without("chapeau", "omslag"),
            _has_without("intro", "boven-vers", "introletter", "intro-letter"),
            _has_without("ankeiler", "omslag"),
        ),
        StyleRole.CHAPEAU,
    ),
    (_has("auteur", "author", "geschreven"), StyleRole.AUTHOR),
    (_has("rubriek", "categor", "thema"), StyleRole.CATEGORY),
    (
        _has("platte-tekst", "plattetekst", "brood", "body", "basistekst"),
        StyleRole.BODY,
    ),
    (
        _any(_has_without("artikel", "introletter"), _has_without("article", "introletter")),
        StyleRole.ARTICLE_BOUNDARY,
    ),
)


def classify_class_name(class_name: str) -> StyleRole | None:
    """Return the semantic role of a style class name.

    Args:
        class_name: Class name as written in the CSS or HTML

    Returns:
        The first matching role, or None for generator overrides and
        unrecognised names

    Examples:
        >>> classify_class_name("Artikelen_Tussenkop-vraag")
        <StyleRole.QUESTION: 'question'>
        >>> classify_class_name("CharOverride-3") is None
        True
    """
    name = class_name.lower()
    if name.startswith(GENERATOR_PREFIXES):
        return None
    for predicate, role in CLASSIFICATION_RULES:
        if predicate(name):
            return role
    return None


def extract_category_from_class(class_name: str) -> str | None:
    """Return the capitalised prefix of a ``Category_element`` class name.

    Examples:
        >>> extract_category_from_class("Meditatie_kop-boven-vers")
        'Meditatie'
        >>> extract_category_from_class("plattetekst") is None
        True
    """
    match = CATEGORY_PREFIX_PATTERN.match(class_name)
    return match.group(1) if match else None


def _classify_all(names: Iterable[str]) -> StyleClassification:
    roles = []
    for name in names:
        role = classify_class_name(name)
        if role is not None:
            roles.append((name, role))
    return StyleClassification(roles)


def analyze_css(css_texts: Iterable[str]) -> StyleClassification:
    """Classify every class selector declared in the given stylesheets.

    Args:
        css_texts: Stylesheet contents

    Returns:
        Classification of the declared classes, with CharOverride emphasis
    """
    names: list[str] = []
    overrides: dict[str, OverrideStyle] = {}
    for css in css_texts:
        names.extend(CSS_CLASS_PATTERN.findall(css))
        for name, style in parse_char_override_styles(css).items():
            overrides.setdefault(name, style)
    classification = _classify_all(names)
    return StyleClassification(classification.class_roles, overrides)


def analyze_html_classes(html_texts: Iterable[str]) -> StyleClassification:
    """Classify every class name used in the given page documents.

    Many semantic styles only appear as class attributes, without a rule in
    the exported CSS, so page content must be scanned too.

    Args:
        html_texts: Page document contents

    Returns:
        Classification of the used classes
    """
    names: list[str] = []
    for text in html_texts:
        if not text.strip():
            continue
        try:
            root = parse_html_document(text)
        except (etree.ParserError, ValueError) as e:
            logger.warning(f"Could not parse page for class analysis: {e}")
            continue
        for attribute in root.xpath("//@class"):
            names.extend(str(attribute).split())
    return _classify_all(names)


def parse_char_override_styles(css_text: str) -> dict[str, OverrideStyle]:
    """Read italic/bold emphasis from ``span.CharOverride-N`` rules.

    Examples:
        >>> parse_char_override_styles("span.CharOverride-2 { font-style:italic; }")
        {'CharOverride-2': OverrideStyle(italic=True, bold=False)}
    """
    styles: dict[str, OverrideStyle] = {}
    for name, body in CHAR_OVERRIDE_PATTERN.findall(css_text):
        declarations = body.lower()
        styles[name] = OverrideStyle(
            italic=re.search(r"font-style\s*:\s*(italic|oblique)", declarations) is not None,
            bold=re.search(r"font-weight\s*:\s*(bold|[6-9]00)", declarations) is not None,
        )
    return styles


def build_style_classification(
    css_texts: Iterable[str],
    html_texts: Iterable[str],
) -> StyleClassification:
    """Build the edition's style classification.

    CSS declarations are classified first and HTML usage is merged in
    afterwards, so a class seen in both keeps its CSS-derived entry.

    Args:
        css_texts: Stylesheet contents
        html_texts: Page document contents

    Returns:
        The merged classification
    """
    classification = analyze_css(css_texts).merge(analyze_html_classes(html_texts))
    _log_classification(classification)
    return classification


def _log_classification(classification: StyleClassification) -> None:
    logger.info(f"Classified {len(classification)} style classes")
    for role in StyleRole:
        classes = classification.classes_for(role)
        logger.debug(f"  {role.value}: {', '.join(classes) or 'none'}")
    if not classification.classes_for(StyleRole.TITLE):
        logger.warning("No title classes found; no articles can be extracted")
