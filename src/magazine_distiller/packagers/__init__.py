"""Persistence of extracted editions."""

from .edition_packager import EditionPackager

__all__ = ["EditionPackager"]
