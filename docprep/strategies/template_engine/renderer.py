"""Template renderer strategy.

Fills ``#name`` placeholders in the main part of a Word package while
preserving run formatting and embedded objects.
"""

import logging

from docprep.interfaces.template import BaseTemplateRenderer
from docprep.strategies.template_engine.flattener import W_P, paragraph_text
from docprep.strategies.template_engine.models import DocumentOptions, PlaceholderToken
from docprep.strategies.template_engine.package import read_package
from docprep.strategies.template_engine.processor import process_document
from docprep.strategies.template_engine.substitution import build_value_map, substitute_text

logger = logging.getLogger(__name__)


class TemplateRenderer(BaseTemplateRenderer):
    """Renders Word templates with placeholder values.

    Each call works on its own copy of the package; nothing is shared
    between documents.
    """

    async def render(
        self,
        template: bytes,
        placeholders: list[PlaceholderToken],
        options: DocumentOptions,
    ) -> bytes:
        """Fill a template and return the new package.

        Args:
            template: The ``.docx`` file contents.
            placeholders: Tokens with values; tokens with blank values are
                removed from the text.
            options: Formatting policy. The preserve policy reuses each
                run's properties; otherwise font and size are applied.

        Returns:
            The filled ``.docx`` contents.

        Raises:
            InputFormatError: If the template cannot be read.
            MissingRequiredPartError: If the main part is missing.
        """
        logger.info(
            f"Rendering template: {len(placeholders)} placeholders, "
            f"preserve={options.is_preserve}"
        )
        package = read_package(template)
        values = build_value_map(placeholders)
        process_document(package.root, values, options)
        return package.write()

    async def render_text(self, template: bytes, placeholders: list[PlaceholderToken]) -> str:
        """Return a plain-text preview of the filled template.

        Args:
            template: The ``.docx`` file contents.
            placeholders: Tokens with values.

        Returns:
            Paragraph texts joined by newlines, placeholders substituted.
        """
        text = document_text(template)
        return substitute_text(text, build_value_map(placeholders))

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".docx"}


def document_text(template: bytes) -> str:
    """Render the main part of a package as plain text, one line per paragraph."""
    package = read_package(template)
    return "\n".join(paragraph_text(p) for p in package.root.iter(W_P))
