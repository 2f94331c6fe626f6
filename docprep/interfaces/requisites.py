"""Requisite loading and matching interfaces.

A requisites document (company card, bank details, passport data) is read
into an ordered list of text lines, which a matcher then assigns to
template placeholders.
"""

from abc import ABC, abstractmethod
from typing import Any


class BaseRequisiteLoader(ABC):
    """Abstract base class for requisite line extraction strategies.

    Example:
        ```python
        class DocxRequisiteLoader(BaseRequisiteLoader):
            async def aload_lines(self, data: bytes) -> list[RequisiteLine]:
                # Implementation here
                pass
        ```
    """

    @abstractmethod
    async def aload_lines(self, data: bytes) -> list[Any]:
        """Extract requisite lines from a document.

        Args:
            data: The source file contents.

        Returns:
            RequisiteLine objects in reading order, ids starting at 0.

        Raises:
            InputFormatError: If the document cannot be read.
        """
        ...

    @property
    @abstractmethod
    def supported_extensions(self) -> set[str]:
        """Return the set of file extensions supported by this loader."""
        ...

    def supports_file(self, file_name: str) -> bool:
        """Check if this loader supports the given file name.

        Args:
            file_name: Name or path of the file to check.

        Returns:
            True if the file extension is supported, False otherwise.
        """
        import os

        _, ext = os.path.splitext(file_name)
        return ext.lower() in self.supported_extensions


class BaseRequisiteMatcher(ABC):
    """Abstract base class for requisite-to-placeholder matching."""

    @abstractmethod
    def match(
        self,
        placeholders: list[Any],
        requisites: list[Any],
        used_values: set[str] | None = None,
    ) -> Any:
        """Assign requisite lines to placeholders.

        Args:
            placeholders: PlaceholderToken objects to fill.
            requisites: Ordered RequisiteLine objects.
            used_values: Accumulator of values already consumed.

        Returns:
            A MatchResult.
        """
