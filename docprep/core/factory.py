"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to instantiate
different strategy implementations at runtime based on
configuration or the type of the uploaded file.
"""

import logging
import os

from docprep.core.config import Settings, get_settings
from docprep.interfaces.converter import BasePdfConverter
from docprep.interfaces.requisites import BaseRequisiteLoader, BaseRequisiteMatcher
from docprep.interfaces.template import BasePlaceholderScanner, BaseTemplateRenderer
from docprep.strategies.converters import HttpPdfConverter
from docprep.strategies.parsers import DocxRequisiteLoader, PdfRequisiteLoader
from docprep.strategies.requisites import RequisiteMatcher
from docprep.strategies.template_engine import (
    DocumentBuilder,
    PlaceholderScanner,
    TemplateRenderer,
)

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        factory = ComponentFactory(get_settings())

        scanner = factory.get_placeholder_scanner()
        loader = factory.get_requisite_loader("requisites.pdf")
        builder = factory.get_document_builder()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._scanner_cache: BasePlaceholderScanner | None = None
        self._renderer_cache: BaseTemplateRenderer | None = None
        self._loader_cache: dict[str, BaseRequisiteLoader] = {}
        self._matcher_cache: BaseRequisiteMatcher | None = None
        self._converter_cache: BasePdfConverter | None = None
        self._builder_cache: DocumentBuilder | None = None

    def get_placeholder_scanner(self) -> BasePlaceholderScanner:
        """Get the placeholder scanner."""
        if self._scanner_cache is None:
            logger.info("Instantiating placeholder scanner")
            self._scanner_cache = PlaceholderScanner()
        return self._scanner_cache

    def get_template_renderer(self) -> BaseTemplateRenderer:
        """Get the template renderer."""
        if self._renderer_cache is None:
            logger.info("Instantiating template renderer")
            self._renderer_cache = TemplateRenderer()
        return self._renderer_cache

    def get_requisite_loader(self, file_name: str) -> BaseRequisiteLoader:
        """Get a requisite loader for the given file type.

        Args:
            file_name: Name of the uploaded requisites file.

        Returns:
            A BaseRequisiteLoader implementation instance.

        Raises:
            ValueError: If the file type is unsupported.
        """
        _, ext = os.path.splitext(file_name or "")
        ext = ext.lower()

        if ext not in self._loader_cache:
            logger.info(f"Instantiating requisite loader for: {ext or '<none>'}")

            match ext:
                case ".docx":
                    self._loader_cache[ext] = DocxRequisiteLoader()
                case ".pdf":
                    self._loader_cache[ext] = PdfRequisiteLoader()
                case _:
                    raise ValueError(
                        f"Unsupported requisites file type: {ext or '<none>'}. "
                        f"Valid options: '.docx', '.pdf'"
                    )

        return self._loader_cache[ext]

    def get_requisite_matcher(self) -> BaseRequisiteMatcher:
        """Get the requisite matcher."""
        if self._matcher_cache is None:
            logger.info("Instantiating requisite matcher")
            self._matcher_cache = RequisiteMatcher()
        return self._matcher_cache

    def get_pdf_converter(self) -> BasePdfConverter | None:
        """Get the remote PDF converter, or None if no endpoint is configured."""
        if not self._settings.pdf_converter_url:
            return None
        if self._converter_cache is None:
            logger.info(f"Instantiating PDF converter: {self._settings.pdf_converter_url}")
            self._converter_cache = HttpPdfConverter(
                url=self._settings.pdf_converter_url,
                timeout=self._settings.pdf_converter_timeout,
            )
        return self._converter_cache

    def get_document_builder(self) -> DocumentBuilder:
        """Get the document builder wired to the renderer and converter."""
        if self._builder_cache is None:
            logger.info("Instantiating document builder")
            self._builder_cache = DocumentBuilder(
                renderer=self.get_template_renderer(),
                converter=self.get_pdf_converter(),
                default_stem=self._settings.default_output_stem,
            )
        return self._builder_cache

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        Useful for testing or when settings change.
        """
        self._scanner_cache = None
        self._renderer_cache = None
        self._loader_cache = {}
        self._matcher_cache = None
        self._converter_cache = None
        self._builder_cache = None
        logger.debug("Component factory cache cleared")


# Global factory instance
_factory: ComponentFactory | None = None


def get_factory() -> ComponentFactory:
    """Get or create the global ComponentFactory instance.

    Returns:
        The singleton ComponentFactory instance.
    """
    global _factory
    if _factory is None:
        _factory = ComponentFactory()
    return _factory
