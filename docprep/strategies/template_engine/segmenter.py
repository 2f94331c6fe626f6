"""Run re-segmenter.

Groups a character stream back into the smallest number of runs and
builds the ``w:r`` elements for them.
"""

import logging

from docx.oxml import OxmlElement, parse_xml
from docx.oxml.ns import qn
from lxml import etree

from docprep.strategies.template_engine.flattener import (
    LINE_BREAK,
    PAGE_BREAK,
    TAB,
    W_B,
    W_BR,
    W_COLOR,
    W_I,
    W_RPR,
    W_T,
    W_TAB,
    W_TYPE,
    W_U,
    W_VAL,
)
from docprep.strategies.template_engine.models import (
    CharacterFormat,
    DocumentOptions,
    FlatParagraph,
    FormatKind,
    RunGroup,
)

logger = logging.getLogger(__name__)

W_RFONTS = qn("w:rFonts")
W_SZ = qn("w:sz")
W_ASCII = qn("w:ascii")
W_HANSI = qn("w:hAnsi")
W_CS = qn("w:cs")
W_SZCS = qn("w:szCs")

# Theme fonts take precedence over explicit ones and are dropped on override.
_THEME_FONT_ATTRS = (qn("w:asciiTheme"), qn("w:hAnsiTheme"), qn("w:cstheme"))
XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"

_CONTROL_CHARS = (TAB, LINE_BREAK, PAGE_BREAK)


def group_runs(flat: FlatParagraph) -> list[RunGroup]:
    """Split the stream into maximal groups of equal merge keys."""
    groups: list[RunGroup] = []
    if not flat.text:
        return groups

    start = 0
    current = flat.formats[0]
    for i in range(1, len(flat.text) + 1):
        if i < len(flat.text) and flat.formats[i].merge_key() == current.merge_key():
            continue
        groups.append(RunGroup(text=flat.text[start:i], format=current))
        if i < len(flat.text):
            start = i
            current = flat.formats[i]
    return groups


def apply_overrides(rpr: etree._Element, options: DocumentOptions) -> None:
    """Replace the font and size declarations of a ``CT_RPr`` in place.

    Only the declarations ``options`` sets are touched; every other child
    (highlight, strike, vertAlign, ...) stays as it was.
    """
    if options.applies_font:
        fonts = rpr.get_or_add_rFonts()
        for attr in _THEME_FONT_ATTRS:
            fonts.attrib.pop(attr, None)
        fonts.set(W_ASCII, options.font_family)
        fonts.set(W_HANSI, options.font_family)
        fonts.set(W_CS, options.font_family)
    if options.applies_size:
        half_points = str(round(options.font_size * 2))
        rpr.get_or_add_sz().set(W_VAL, half_points)
        complex_size = rpr.find(W_SZCS)
        if complex_size is not None:
            complex_size.set(W_VAL, half_points)


def restyle_run(run: etree._Element, options: DocumentOptions) -> None:
    """Apply font and size overrides to an existing run without moving it."""
    current = run.find(W_RPR)
    rpr = parse_xml(etree.tostring(current)) if current is not None else OxmlElement("w:rPr")
    apply_overrides(rpr, options)
    if current is not None:
        run.replace(current, rpr)
    else:
        run.insert(0, rpr)


def build_run_properties(fmt: CharacterFormat, options: DocumentOptions) -> etree._Element | None:
    """Build the ``w:rPr`` of a new run.

    Preserved formats get a fresh copy of their original block with the
    requested font and size applied on top. Scalar formats (source runs
    without properties) get a synthesized block; child order follows the
    schema sequence (rFonts, b, i, color, sz, u).
    """
    if fmt.kind is FormatKind.PRESERVED:
        rpr = parse_xml(fmt.block.xml)
        apply_overrides(rpr, options)
        return rpr

    rpr = OxmlElement("w:rPr")
    if options.applies_font:
        fonts = etree.SubElement(rpr, W_RFONTS)
        fonts.set(W_ASCII, options.font_family)
        fonts.set(W_HANSI, options.font_family)
        fonts.set(W_CS, options.font_family)
    if fmt.bold:
        etree.SubElement(rpr, W_B)
    if fmt.italic:
        etree.SubElement(rpr, W_I)
    if fmt.color:
        etree.SubElement(rpr, W_COLOR).set(W_VAL, fmt.color)
    if options.applies_size:
        etree.SubElement(rpr, W_SZ).set(W_VAL, str(round(options.font_size * 2)))
    if fmt.underline:
        etree.SubElement(rpr, W_U).set(W_VAL, "single")

    return rpr if len(rpr) else None


def _append_text(run: etree._Element, text: str) -> None:
    node = etree.SubElement(run, W_T)
    node.set(XML_SPACE, "preserve")
    node.text = text


def build_run(group: RunGroup, options: DocumentOptions) -> etree._Element:
    """Create the ``w:r`` element for one group."""
    run = OxmlElement("w:r")
    rpr = build_run_properties(group.format, options)
    if rpr is not None:
        run.append(rpr)

    pending: list[str] = []
    for char in group.text:
        if char not in _CONTROL_CHARS:
            pending.append(char)
            continue
        if pending:
            _append_text(run, "".join(pending))
            pending = []
        if char == TAB:
            etree.SubElement(run, W_TAB)
        elif char == PAGE_BREAK:
            etree.SubElement(run, W_BR).set(W_TYPE, "page")
        else:
            etree.SubElement(run, W_BR)
    if pending:
        _append_text(run, "".join(pending))

    return run


def build_runs(flat: FlatParagraph, options: DocumentOptions) -> list[etree._Element]:
    """Re-segment a stream into new run elements, one per group."""
    return [build_run(group, options) for group in group_runs(flat)]
