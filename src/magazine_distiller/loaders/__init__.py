"""Loaders for magazine exports."""

from .xhtml_loader import (
    extract_cover_metadata,
    extract_metadata,
    find_html_dir,
    index_images,
    load_spreads,
    load_xhtml_export,
    parse_spread_filename,
)

__all__ = [
    "extract_cover_metadata",
    "extract_metadata",
    "find_html_dir",
    "index_images",
    "load_spreads",
    "load_xhtml_export",
    "parse_spread_filename",
]
