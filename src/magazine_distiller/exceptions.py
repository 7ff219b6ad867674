"""Custom exceptions for magazine extraction."""


class DistillerError(Exception):
    """Base exception for all extraction errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class FilenamePatternError(DistillerError):
    """Raised when a page filename does not follow the export convention."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Unrecognised page filename: {filename}")


class ArticleBuildError(DistillerError):
    """Raised when an element group cannot be turned into an article."""

    def __init__(self, message: str, spread_indexes: list[int] | None = None):
        self.spread_indexes = spread_indexes or []
        super().__init__(message)


class PackagingError(DistillerError):
    """Raised when extracted content cannot be written to the output."""

    pass
