"""Placeholder substitution over a flattened paragraph."""

import logging
import re
from collections.abc import Iterable, Mapping

from docprep.strategies.requisites.normalizers import prepare_value
from docprep.strategies.template_engine.models import (
    DEFAULT_FORMAT,
    CharacterFormat,
    FlatParagraph,
    PlaceholderToken,
)

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"#([a-zA-Zа-яА-ЯёЁ0-9]+)")


def build_value_map(placeholders: Iterable[PlaceholderToken]) -> dict[str, str]:
    """Map token names to the text inserted for them.

    Names are matched case-sensitively. When a name occurs twice, the last
    entry wins.
    """
    return {p.name: prepare_value(p.name, p.value) for p in placeholders}


def substitute(flat: FlatParagraph, values: Mapping[str, str]) -> FlatParagraph:
    """Replace known placeholder tokens in a flattened paragraph.

    Every character inserted for a token takes the format of the token's
    ``#`` marker. Tokens with an empty value are removed. Text that looks
    like a token but names no known placeholder is copied unchanged,
    character by character, with its original formats.

    Args:
        flat: The paragraph stream to rewrite.
        values: Prepared values keyed by token name (see build_value_map).

    Returns:
        A new FlatParagraph; ``flat`` is left untouched.
    """
    text = flat.text
    out_text: list[str] = []
    out_formats: list[CharacterFormat] = []

    pos = 0
    while pos < len(text):
        match = TOKEN_PATTERN.match(text, pos)
        if match is not None and match.group(1) in values:
            replacement = values[match.group(1)]
            marker_format = flat.formats[pos] if pos < len(flat.formats) else DEFAULT_FORMAT
            out_text.append(replacement)
            out_formats.extend([marker_format] * len(replacement))
            logger.debug(f"Substituted #{match.group(1)} ({len(replacement)} chars)")
            pos = match.end()
            continue

        out_text.append(text[pos])
        out_formats.append(flat.formats[pos])
        pos += 1

    return FlatParagraph(text="".join(out_text), formats=tuple(out_formats))


def substitute_text(text: str, values: Mapping[str, str]) -> str:
    """Plain-text variant of substitute(), used for previews."""

    def _replace(match: re.Match) -> str:
        return values.get(match.group(1), match.group(0))

    return TOKEN_PATTERN.sub(_replace, text)


def has_known_tokens(text: str, values: Mapping[str, str]) -> bool:
    """True if ``text`` contains a token that ``values`` can fill."""
    return any(match.group(1) in values for match in TOKEN_PATTERN.finditer(text))
