"""Exceptions raised while preparing documents."""


class DocumentProcessingError(Exception):
    """Base class for document preparation failures."""

    pass


class InputFormatError(DocumentProcessingError):
    """Raised when an input file has the wrong type or cannot be parsed."""

    pass


class MissingRequiredPartError(DocumentProcessingError):
    """Raised when a package has no main document part."""

    pass


class ConversionServiceError(DocumentProcessingError):
    """Raised when the remote PDF converter does not return a PDF.

    Attributes:
        status_code: HTTP status returned by the converter, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
