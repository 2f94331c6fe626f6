"""Paragraph processing: flatten, substitute, re-segment, write back."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from lxml import etree

from docprep.strategies.template_engine.flattener import (
    W_P,
    flatten_paragraph,
    is_object_run,
    paragraph_runs,
)
from docprep.strategies.template_engine.models import DocumentOptions
from docprep.strategies.template_engine.segmenter import build_runs, restyle_run
from docprep.strategies.template_engine.substitution import has_known_tokens, substitute

logger = logging.getLogger(__name__)


@dataclass
class ProcessingStats:
    """Counters collected while processing a document part."""

    paragraphs: int = 0
    rewritten: int = 0
    failed: int = 0


def process_paragraph(
    paragraph: etree._Element,
    values: Mapping[str, str],
    options: DocumentOptions,
) -> bool:
    """Rewrite one paragraph in place.

    A paragraph without a fillable token keeps its runs; under a font or
    size override they are restyled where they stand. Otherwise text-only
    runs are removed and replaced by freshly built runs appended at the end
    of the paragraph; runs carrying embedded objects stay where
    they are, so they end up ahead of the new text runs.

    Args:
        paragraph: The ``w:p`` element.
        values: Prepared placeholder values keyed by token name.
        options: Formatting policy for synthesized runs.

    Returns:
        True if the paragraph's runs were rebuilt.
    """
    runs = paragraph_runs(paragraph)
    if not runs:
        return False

    flat = flatten_paragraph(paragraph, preserve=True)
    if not has_known_tokens(flat.text, values):
        if options.applies_font or options.applies_size:
            for run in runs:
                if not is_object_run(run):
                    restyle_run(run, options)
        return False

    new_runs = build_runs(substitute(flat, values), options)

    # Nothing above touched the tree; from here on only detach and append.
    for run in runs:
        if not is_object_run(run):
            run.getparent().remove(run)
    for run in new_runs:
        paragraph.append(run)
    return True


def process_document(
    root: etree._Element,
    values: Mapping[str, str],
    options: DocumentOptions,
) -> ProcessingStats:
    """Process every paragraph of a document part, including table cells.

    A paragraph that fails is logged and left as it was; its siblings are
    still processed.
    """
    stats = ProcessingStats()
    for index, paragraph in enumerate(list(root.iter(W_P))):
        stats.paragraphs += 1
        try:
            if process_paragraph(paragraph, values, options):
                stats.rewritten += 1
        except Exception as e:
            stats.failed += 1
            logger.error(f"Paragraph {index} left unchanged: {e}", exc_info=True)

    logger.info(
        f"Processed {stats.paragraphs} paragraphs: "
        f"{stats.rewritten} rewritten, {stats.failed} failed"
    )
    return stats
