"""Fill a Word template from the command line.

Placeholder values come from a requisites file (.docx or .pdf), from
explicit NAME=VALUE pairs, or both; explicit pairs win.

Usage:
    python scripts/fill_template.py contract.docx --requisites card.pdf
    python scripts/fill_template.py invoice.docx --set номер=17 --preserve --pdf
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from docprep.core.config import get_settings
from docprep.core.factory import get_factory
from docprep.strategies.template_engine import DocumentOptions, PlaceholderToken


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fill #placeholders in a .docx template.")
    parser.add_argument("template", type=Path, help="Template .docx file")
    parser.add_argument("--requisites", type=Path, help="Company card (.docx or .pdf)")
    parser.add_argument(
        "--set",
        dest="values",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Explicit placeholder value; may be repeated",
    )
    parser.add_argument("--preserve", action="store_true", help="Keep the template's fonts")
    parser.add_argument("--font", help="Font family applied to all text")
    parser.add_argument("--size", type=float, help="Font size in points")
    parser.add_argument("--pdf", action="store_true", help="Also request a PDF rendition")
    parser.add_argument("--output", help="Output file name")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    factory = get_factory()

    template = args.template.read_bytes()
    placeholders = await factory.get_placeholder_scanner().scan(template)
    print(f"Found {len(placeholders)} placeholders")

    if args.requisites:
        loader = factory.get_requisite_loader(args.requisites.name)
        lines = await loader.aload_lines(args.requisites.read_bytes())
        result = factory.get_requisite_matcher().match(placeholders, lines)
        placeholders = result.placeholders
        if result.unmatched:
            print(f"Unmatched: {', '.join(result.unmatched)}")

    explicit = dict(pair.split("=", 1) for pair in args.values if "=" in pair)
    placeholders = [
        p.model_copy(update={"value": explicit[p.name]}) if p.name in explicit else p
        for p in placeholders
    ]
    placeholders += [
        PlaceholderToken(name=name, value=value)
        for name, value in explicit.items()
        if name not in {p.name for p in placeholders}
    ]

    if args.preserve:
        options = DocumentOptions(export_pdf=args.pdf, output_file_name=args.output)
    else:
        options = DocumentOptions(
            font_family=args.font or settings.default_font_family,
            font_size=args.size or settings.default_font_size,
            export_pdf=args.pdf,
            output_file_name=args.output,
        )

    build = await factory.get_document_builder().build(template, placeholders, options)
    Path(build.file_name).write_bytes(build.document)
    print(f"Saved {build.file_name}")

    if build.pdf is not None and build.pdf_file_name:
        Path(build.pdf_file_name).write_bytes(build.pdf)
        print(f"Saved {build.pdf_file_name}")
    elif build.pdf_error:
        print(f"PDF not produced: {build.pdf_error}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
