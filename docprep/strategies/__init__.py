"""Concrete strategy implementations."""

from docprep.strategies.converters import (
    HttpPdfConverter,
)
from docprep.strategies.parsers import (
    DocxRequisiteLoader,
    PdfRequisiteLoader,
)
from docprep.strategies.requisites import (
    RequisiteMatcher,
)
from docprep.strategies.template_engine import (
    DocumentBuilder,
    PlaceholderScanner,
    TemplateRenderer,
)

__all__ = [
    "HttpPdfConverter",
    "DocxRequisiteLoader",
    "PdfRequisiteLoader",
    "RequisiteMatcher",
    "DocumentBuilder",
    "PlaceholderScanner",
    "TemplateRenderer",
]
