"""Placeholder discovery."""

import logging

from docprep.interfaces.template import BasePlaceholderScanner
from docprep.strategies.template_engine.models import PlaceholderToken
from docprep.strategies.template_engine.renderer import document_text
from docprep.strategies.template_engine.substitution import TOKEN_PATTERN

logger = logging.getLogger(__name__)


def scan_text(text: str) -> list[PlaceholderToken]:
    """Find distinct placeholder names and the offset of their first occurrence.

    Args:
        text: Rendered template text.

    Returns:
        One PlaceholderToken per distinct name with an empty value, sorted
        by first position.
    """
    first_seen: dict[str, int] = {}
    for match in TOKEN_PATTERN.finditer(text):
        first_seen.setdefault(match.group(1), match.start())

    tokens = [PlaceholderToken(name=name, value="", position=pos) for name, pos in first_seen.items()]
    return sorted(tokens, key=lambda t: t.position)


class PlaceholderScanner(BasePlaceholderScanner):
    """Scans the main part of a Word template for ``#name`` tokens."""

    async def scan(self, template: bytes) -> list[PlaceholderToken]:
        text = document_text(template)
        tokens = scan_text(text)
        logger.info(f"Found {len(tokens)} placeholders in {len(text)} characters")
        return tokens

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".docx"}
