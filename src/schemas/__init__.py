"""Schema definitions for Magazine Distiller."""

from .article import Article, ArticleExtractionResult, BodyBlock
from .edition import CoverHeadline, EditionExport, EditionMetadata, ImageIndex
from .element import ContentElement, ElementKind
from .manifest import (
    ArticleAuthorRelation,
    AuthorRecord,
    EditionManifest,
    ImageRecord,
    PackagedArticle,
)
from .page import PageDocument
from .records import (
    ExtractedAuthor,
    ExtractedImage,
    LogEntry,
    ProcessingResult,
    ProcessingStats,
)
from .style import OverrideStyle, StyleClassification, StyleRole

__all__ = [
    "Article",
    "ArticleAuthorRelation",
    "ArticleExtractionResult",
    "AuthorRecord",
    "BodyBlock",
    "ContentElement",
    "CoverHeadline",
    "EditionExport",
    "EditionManifest",
    "EditionMetadata",
    "ElementKind",
    "ExtractedAuthor",
    "ExtractedImage",
    "ImageIndex",
    "ImageRecord",
    "LogEntry",
    "OverrideStyle",
    "PackagedArticle",
    "PageDocument",
    "ProcessingResult",
    "ProcessingStats",
    "StyleClassification",
    "StyleRole",
]
