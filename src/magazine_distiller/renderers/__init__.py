"""Jinja2 rendering of extracted articles."""

from .content_renderer import ContentRenderer
from .filters import FILTERS

__all__ = ["ContentRenderer", "FILTERS"]
