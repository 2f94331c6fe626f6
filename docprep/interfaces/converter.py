"""Abstract base class for document-to-PDF converters."""

from abc import ABC, abstractmethod


class BasePdfConverter(ABC):
    """Abstract base class for PDF conversion strategies."""

    @abstractmethod
    async def convert(self, document: bytes, file_name: str) -> bytes:
        """Convert a Word document to PDF.

        Args:
            document: The ``.docx`` contents.
            file_name: Name sent along with the upload.

        Returns:
            The PDF contents.

        Raises:
            ConversionServiceError: If the conversion did not succeed.
        """
        ...
