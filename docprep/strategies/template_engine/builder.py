"""Document builder.

Produces the final artifacts for one template: the filled ``.docx`` and,
on request, its PDF rendition. A failed conversion never costs the caller
the document itself.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePath

from docprep.interfaces.converter import BasePdfConverter
from docprep.interfaces.errors import ConversionServiceError
from docprep.interfaces.template import BaseTemplateRenderer
from docprep.strategies.template_engine.models import DocumentOptions, PlaceholderToken

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')
_DOCX_SUFFIX = ".docx"


@dataclass
class BuildResult:
    """Artifacts of one document build.

    Attributes:
        document: Filled ``.docx`` contents.
        file_name: Name for the ``.docx``.
        pdf: PDF contents, if a PDF was requested and produced.
        pdf_file_name: Name for the PDF, if one was produced.
        pdf_error: Why the requested PDF is missing, if it is.
    """

    document: bytes
    file_name: str
    pdf: bytes | None = None
    pdf_file_name: str | None = None
    pdf_error: str | None = None


def resolve_file_name(requested: str | None, default_stem: str, now: datetime | None = None) -> str:
    """Pick the output ``.docx`` name.

    An explicit name is sanitized and always ends in a lower-case ``.docx``;
    otherwise ``<default_stem>_<timestamp>.docx`` is used.
    """
    if requested and requested.strip():
        name = _UNSAFE_NAME_CHARS.sub("_", PurePath(requested.strip()).name)
        if name.lower().endswith(_DOCX_SUFFIX):
            name = name[: -len(_DOCX_SUFFIX)]
        if name:
            return f"{name}{_DOCX_SUFFIX}"
    stamp = (now or datetime.now()).strftime("%Y-%m-%dT%H-%M-%S")
    return f"{default_stem}_{stamp}.docx"


class DocumentBuilder:
    """Renders a template and optionally converts the result to PDF."""

    def __init__(
        self,
        renderer: BaseTemplateRenderer,
        converter: BasePdfConverter | None = None,
        default_stem: str = "Документ",
    ) -> None:
        self._renderer = renderer
        self._converter = converter
        self._default_stem = default_stem

    async def build(
        self,
        template: bytes,
        placeholders: list[PlaceholderToken],
        options: DocumentOptions,
    ) -> BuildResult:
        """Build the document artifacts.

        Args:
            template: The ``.docx`` template contents.
            placeholders: Tokens with their values.
            options: Formatting policy, PDF flag and output name.

        Returns:
            BuildResult with the document and, when requested and
            successful, the PDF.

        Raises:
            InputFormatError: If the template cannot be read.
            MissingRequiredPartError: If the main part is missing.
        """
        document = await self._renderer.render(template, placeholders, options)
        file_name = resolve_file_name(options.output_file_name, self._default_stem)
        result = BuildResult(document=document, file_name=file_name)
        logger.info(f"Built document {file_name} ({len(document)} bytes)")

        if not options.export_pdf:
            return result

        if self._converter is None:
            result.pdf_error = "PDF conversion is not configured"
            logger.warning(result.pdf_error)
            return result

        try:
            result.pdf = await self._converter.convert(document, file_name)
            result.pdf_file_name = f"{PurePath(file_name).stem}.pdf"
        except ConversionServiceError as e:
            result.pdf_error = str(e)
            logger.error(f"PDF conversion failed for {file_name}: {e}", exc_info=True)

        return result
