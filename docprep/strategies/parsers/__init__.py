"""Concrete requisite loader implementations."""

from docprep.strategies.parsers.docx_lines import DocxRequisiteLoader
from docprep.strategies.parsers.pdf_lines import PdfRequisiteLoader

__all__ = [
    "DocxRequisiteLoader",
    "PdfRequisiteLoader",
]
