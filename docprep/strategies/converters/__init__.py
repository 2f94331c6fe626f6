"""Concrete PDF converter implementations."""

from docprep.strategies.converters.http import HttpPdfConverter

__all__ = [
    "HttpPdfConverter",
]
