"""Requisite loader for Word documents.

Reads a ``.docx`` requisites card into one RequisiteLine per visible
text line, in reading order.
"""

import io
import logging
import zipfile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table

from docprep.interfaces.errors import InputFormatError
from docprep.interfaces.requisites import BaseRequisiteLoader
from docprep.strategies.template_engine.models import RequisiteLine

logger = logging.getLogger(__name__)


def remove_markers(text: str) -> str:
    """Drop ``{{`` and ``}}`` markers left over from older templates."""
    return text.replace("{{", "").replace("}}", "")


def _table_texts(table: Table) -> list[str]:
    texts: list[str] = []
    for row in table.rows:
        seen = set()
        for cell in row.cells:
            # Merged cells are reported once per grid column.
            if id(cell._tc) in seen:
                continue
            seen.add(id(cell._tc))
            texts.extend(p.text for p in cell.paragraphs)
    return texts


class DocxRequisiteLoader(BaseRequisiteLoader):
    """Extracts requisite lines from paragraphs and tables of a Word file."""

    async def aload_lines(self, data: bytes) -> list[RequisiteLine]:
        """Read requisite lines from a ``.docx`` file.

        Args:
            data: The ``.docx`` file contents.

        Returns:
            Non-empty, trimmed lines with sequential ids.

        Raises:
            InputFormatError: If the file is not a readable Word document.
        """
        try:
            document = Document(io.BytesIO(data))
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
            raise InputFormatError(f"Cannot read requisites document: {e}") from e

        texts: list[str] = []
        for block in document.iter_inner_content():
            if isinstance(block, Table):
                texts.extend(_table_texts(block))
            else:
                texts.append(block.text)

        lines: list[RequisiteLine] = []
        for text in texts:
            for raw in text.split("\n"):
                value = remove_markers(raw.strip()).strip()
                if value:
                    lines.append(RequisiteLine(id=len(lines), value=value))

        logger.info(f"Loaded {len(lines)} requisite lines from Word document")
        return lines

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".docx"}
