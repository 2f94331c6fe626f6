"""Run flattener.

Reduces a ``w:p`` element to a single character stream with one
CharacterFormat per character, so that placeholder tokens split across
several runs can be found and replaced as a whole.
"""

import itertools
import logging

from docx.oxml.ns import qn
from lxml import etree

from docprep.strategies.template_engine.models import (
    CharacterFormat,
    FlatParagraph,
    PreservedBlock,
)

logger = logging.getLogger(__name__)

W_P = qn("w:p")
W_R = qn("w:r")
W_RPR = qn("w:rPr")
W_T = qn("w:t")
W_TAB = qn("w:tab")
W_BR = qn("w:br")
W_CR = qn("w:cr")
W_B = qn("w:b")
W_I = qn("w:i")
W_U = qn("w:u")
W_COLOR = qn("w:color")
W_VAL = qn("w:val")
W_TYPE = qn("w:type")

MC_ALTERNATE_CONTENT = "{http://schemas.openxmlformats.org/markup-compatibility/2006}AlternateContent"

# Runs holding any of these are left in place untouched.
OBJECT_TAGS = frozenset({
    qn("w:drawing"),
    qn("w:pict"),
    qn("w:object"),
    MC_ALTERNATE_CONTENT,
    qn("w:fldChar"),
    qn("w:instrText"),
    qn("w:footnoteReference"),
    qn("w:endnoteReference"),
    qn("w:commentReference"),
})

TAB = "\t"
LINE_BREAK = "\n"
PAGE_BREAK = "\f"

_FALSE_VALUES = frozenset({"0", "false", "off"})

# Block identities only need to be unique within one process.
_block_ids = itertools.count(1)


def paragraph_runs(paragraph: etree._Element) -> list[etree._Element]:
    """Return the runs owned by ``paragraph`` in document order.

    Runs nested in hyperlinks, insertions or smart tags belong to the
    paragraph; runs of paragraphs nested inside text boxes do not.
    """
    runs = []
    for run in paragraph.iter(W_R):
        owner = next(run.iterancestors(W_P), None)
        if owner is paragraph:
            runs.append(run)
    return runs


def is_object_run(run: etree._Element) -> bool:
    """True when the run carries an embedded drawing or object."""
    return any(child.tag in OBJECT_TAGS for child in run)


def _toggle(rpr: etree._Element | None, tag: str) -> bool:
    if rpr is None:
        return False
    element = rpr.find(tag)
    if element is None:
        return False
    return element.get(W_VAL, "true").lower() not in _FALSE_VALUES


def _underline(rpr: etree._Element | None) -> bool:
    if rpr is None:
        return False
    element = rpr.find(W_U)
    if element is None:
        return False
    return element.get(W_VAL, "single").lower() != "none"


def _color(rpr: etree._Element | None) -> str | None:
    if rpr is None:
        return None
    element = rpr.find(W_COLOR)
    if element is None:
        return None
    return element.get(W_VAL) or None


def run_format(run: etree._Element, preserve: bool) -> CharacterFormat:
    """Derive the format of ``run``.

    Args:
        run: A ``w:r`` element.
        preserve: Keep a serialized copy of the run properties so they can
            be written back, with any font and size override applied on top.
    """
    rpr = run.find(W_RPR)
    flags = {
        "bold": _toggle(rpr, W_B),
        "italic": _toggle(rpr, W_I),
        "underline": _underline(rpr),
        "color": _color(rpr),
    }
    if preserve and rpr is not None:
        block = PreservedBlock(ident=next(_block_ids), xml=etree.tostring(rpr))
        return CharacterFormat.preserved(block, **flags)
    return CharacterFormat.scalar(**flags)


def run_text(run: etree._Element) -> str:
    """Visible characters of a run, with tabs and breaks as control characters."""
    parts = []
    for child in run:
        if child.tag == W_T:
            parts.append(child.text or "")
        elif child.tag == W_TAB:
            parts.append(TAB)
        elif child.tag == W_CR:
            parts.append(LINE_BREAK)
        elif child.tag == W_BR:
            parts.append(PAGE_BREAK if child.get(W_TYPE) == "page" else LINE_BREAK)
    return "".join(parts)


def flatten_paragraph(paragraph: etree._Element, preserve: bool = False) -> FlatParagraph:
    """Flatten a paragraph's runs into one character stream.

    Args:
        paragraph: The ``w:p`` element to read. It is not modified.
        preserve: Record each run's properties block.

    Returns:
        FlatParagraph whose ``formats[i]`` is the format of the run that
        produced ``text[i]``.
    """
    text_parts: list[str] = []
    formats: list[CharacterFormat] = []

    for run in paragraph_runs(paragraph):
        if is_object_run(run):
            continue
        chars = run_text(run)
        if not chars:
            continue
        fmt = run_format(run, preserve)
        text_parts.append(chars)
        formats.extend([fmt] * len(chars))

    return FlatParagraph(text="".join(text_parts), formats=tuple(formats))


def paragraph_text(paragraph: etree._Element) -> str:
    return flatten_paragraph(paragraph).text
