"""Style analysis for InDesign exports."""

from .style_classifier import (
    CLASSIFICATION_RULES,
    analyze_css,
    analyze_html_classes,
    build_style_classification,
    classify_class_name,
    extract_category_from_class,
    parse_char_override_styles,
)

__all__ = [
    "CLASSIFICATION_RULES",
    "analyze_css",
    "analyze_html_classes",
    "build_style_classification",
    "classify_class_name",
    "extract_category_from_class",
    "parse_char_override_styles",
]
