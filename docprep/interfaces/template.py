"""Template discovery and rendering interfaces.

Defines abstract base classes for finding placeholder tokens in a Word
template and for producing a filled copy of it.
"""

from abc import ABC, abstractmethod
from typing import Any


class BasePlaceholderScanner(ABC):
    """Abstract base class for placeholder discovery strategies."""

    @abstractmethod
    async def scan(self, template: bytes) -> list[Any]:
        """Find the placeholders used in a template.

        Args:
            template: The ``.docx`` file contents.

        Returns:
            List of PlaceholderToken objects ordered by first position.

        Raises:
            InputFormatError: If the template cannot be read.
            MissingRequiredPartError: If the main part is missing.
        """

    @property
    @abstractmethod
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""


class BaseTemplateRenderer(ABC):
    """Abstract base class for template filling strategies.

    Replaces placeholder tokens with values while keeping the document's
    formatting and embedded objects.
    """

    @abstractmethod
    async def render(self, template: bytes, placeholders: list[Any], options: Any) -> bytes:
        """Fill a template.

        Args:
            template: The ``.docx`` file contents.
            placeholders: PlaceholderToken objects with their values.
            options: DocumentOptions selecting the formatting policy.

        Returns:
            The filled ``.docx`` contents.

        Raises:
            InputFormatError: If the template cannot be read.
            MissingRequiredPartError: If the main part is missing.
        """

    @abstractmethod
    async def render_text(self, template: bytes, placeholders: list[Any]) -> str:
        """Return the template's text with placeholders substituted."""
