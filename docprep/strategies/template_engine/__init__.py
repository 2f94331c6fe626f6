"""Template engine strategies.

Implements placeholder discovery, in-place substitution that keeps run
formatting, and document building for Word templates.
"""

from docprep.strategies.template_engine.builder import BuildResult, DocumentBuilder
from docprep.strategies.template_engine.models import (
    DocumentOptions,
    PlaceholderToken,
    RequisiteLine,
)
from docprep.strategies.template_engine.renderer import TemplateRenderer
from docprep.strategies.template_engine.scanner import PlaceholderScanner

__all__ = [
    "BuildResult",
    "DocumentBuilder",
    "DocumentOptions",
    "PlaceholderScanner",
    "PlaceholderToken",
    "RequisiteLine",
    "TemplateRenderer",
]
