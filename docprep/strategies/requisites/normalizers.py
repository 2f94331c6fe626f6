"""Text normalization shared by substitution and requisite matching."""

import re

# Latin letters drawn identically to Cyrillic ones on Russian plates.
HOMOGLYPHS = {
    "A": "А", "B": "В", "E": "Е", "K": "К", "M": "М", "H": "Н",
    "O": "О", "P": "Р", "C": "С", "T": "Т", "Y": "У", "X": "Х",
}

PLATE_PATTERN = re.compile(r"^[А-Я]\d{3}[А-Я]{2}\d{2,3}$")

PLATE_KEYS = frozenset({"госномер"})

_WHITESPACE = re.compile(r"\s+")

# Characters outside the XML 1.0 Char production.
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def is_plate_key(key: str) -> bool:
    return any(plate_key in key for plate_key in PLATE_KEYS)


def normalize_plate(value: str) -> str:
    """Map Latin homoglyphs to Cyrillic letters and upper-case the result."""
    mapped = "".join(HOMOGLYPHS.get(ch.upper(), ch) if ch.isascii() else ch for ch in value)
    return mapped.upper()


def looks_like_plate(value: str) -> bool:
    return PLATE_PATTERN.match(normalize_plate(value.strip())) is not None


def cleanup_whitespace(text: str) -> str:
    """Collapse whitespace (including NBSP and line breaks) to single spaces."""
    return _WHITESPACE.sub(" ", text).strip()


def strip_xml_illegal(text: str) -> str:
    return _XML_ILLEGAL.sub("", text)


def prepare_value(name: str, value: str) -> str:
    """Turn a user-supplied placeholder value into the text to insert.

    Returns an empty string when nothing but whitespace was supplied.
    """
    cleaned = cleanup_whitespace(strip_xml_illegal(value or ""))
    if cleaned and is_plate_key(name.strip().lower()) and looks_like_plate(cleaned):
        return normalize_plate(cleaned)
    return cleaned
