"""Abstract base classes for document preparation strategies."""

from docprep.interfaces.converter import BasePdfConverter
from docprep.interfaces.errors import (
    ConversionServiceError,
    DocumentProcessingError,
    InputFormatError,
    MissingRequiredPartError,
)
from docprep.interfaces.requisites import BaseRequisiteLoader, BaseRequisiteMatcher
from docprep.interfaces.template import BasePlaceholderScanner, BaseTemplateRenderer

__all__ = [
    "BasePdfConverter",
    "BasePlaceholderScanner",
    "BaseRequisiteLoader",
    "BaseRequisiteMatcher",
    "BaseTemplateRenderer",
    "ConversionServiceError",
    "DocumentProcessingError",
    "InputFormatError",
    "MissingRequiredPartError",
]
