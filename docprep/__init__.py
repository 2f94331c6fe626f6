"""Placeholder-based preparation of business documents from Word templates."""

__version__ = "0.1.0"
