"""Requisite loader for PDF documents.

Uses pdfplumber word positions to rebuild visual lines: words sharing a
(rounded) vertical coordinate form one line, lines are read top to bottom,
and repeated lines are dropped.
"""

import io
import logging
import re
from collections import defaultdict

import pdfplumber

from docprep.interfaces.errors import InputFormatError
from docprep.interfaces.requisites import BaseRequisiteLoader
from docprep.strategies.template_engine.models import RequisiteLine

logger = logging.getLogger(__name__)

_HAS_ALNUM = re.compile(r"[a-zA-Zа-яА-ЯёЁ0-9]")
_WHITESPACE = re.compile(r"\s+")


def group_words_into_lines(words: list[dict]) -> list[str]:
    """Join pdfplumber words into lines by rounded ``top`` coordinate.

    Args:
        words: Word dicts with at least ``text``, ``top`` and ``x0``.

    Returns:
        Lines ordered top to bottom, words left to right.
    """
    rows: dict[int, list[dict]] = defaultdict(list)
    for word in words:
        if word["text"].strip():
            rows[round(word["top"])].append(word)

    lines = []
    for top in sorted(rows):
        ordered = sorted(rows[top], key=lambda w: w["x0"])
        line = _WHITESPACE.sub(" ", " ".join(w["text"] for w in ordered)).strip()
        if line and _HAS_ALNUM.search(line):
            lines.append(line)
    return lines


class PdfRequisiteLoader(BaseRequisiteLoader):
    """Extracts requisite lines from the text layer of a PDF."""

    async def aload_lines(self, data: bytes) -> list[RequisiteLine]:
        """Read requisite lines from a PDF.

        Args:
            data: The PDF file contents.

        Returns:
            Distinct lines in page order with sequential ids.

        Raises:
            InputFormatError: If the PDF cannot be opened.
        """
        all_lines: list[str] = []
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                for page in pdf.pages:
                    all_lines.extend(group_words_into_lines(page.extract_words()))
        except Exception as e:
            logger.error(f"PDF text extraction failed: {e}", exc_info=True)
            raise InputFormatError(f"Cannot read requisites PDF: {e}") from e

        unique = list(dict.fromkeys(all_lines))
        logger.info(f"Loaded {len(unique)} requisite lines from PDF ({len(all_lines)} before dedup)")
        return [RequisiteLine(id=i, value=value) for i, value in enumerate(unique)]

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".pdf"}
