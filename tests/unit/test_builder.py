"""Unit tests for the document builder."""

import asyncio
from datetime import datetime

import pytest

from docprep.interfaces.converter import BasePdfConverter
from docprep.interfaces.errors import ConversionServiceError
from docprep.interfaces.template import BaseTemplateRenderer
from docprep.strategies.template_engine.builder import DocumentBuilder, resolve_file_name
from docprep.strategies.template_engine.models import DocumentOptions, PlaceholderToken


class FakeRenderer(BaseTemplateRenderer):
    def __init__(self):
        self.calls = []

    async def render(self, template, placeholders, options):
        self.calls.append((template, placeholders, options))
        return b"RENDERED:" + template

    async def render_text(self, template, placeholders):
        return ""

    @property
    def supported_extensions(self):
        return {".docx"}


class FakeConverter(BasePdfConverter):
    def __init__(self, error: ConversionServiceError | None = None):
        self.error = error
        self.file_names = []

    async def convert(self, document, file_name):
        self.file_names.append(file_name)
        if self.error is not None:
            raise self.error
        return b"%PDF" + document


class TestResolveFileName:
    """Test suite for resolve_file_name."""

    @pytest.mark.parametrize(
        "requested, expected",
        [
            ("Договор", "Договор.docx"),
            ("Акт.docx", "Акт.docx"),
            ("Счёт.DOCX", "Счёт.docx"),
            ("Акт.Docx.docx", "Акт.Docx.docx"),
            ("  Договор 17  ", "Договор 17.docx"),
            ("../../etc/passwd", "passwd.docx"),
            ('a:b*c?"d"', "a_b_c__d_.docx"),
        ],
    )
    def test_explicit_name(self, requested, expected):
        assert resolve_file_name(requested, "Документ") == expected

    @pytest.mark.parametrize("requested", [None, "", "   ", ".DOCX"])
    def test_default_name_with_timestamp(self, requested):
        now = datetime(2024, 3, 5, 14, 7, 9)
        assert resolve_file_name(requested, "Документ", now) == "Документ_2024-03-05T14-07-09.docx"


class TestDocumentBuilder:
    """Test suite for DocumentBuilder."""

    @pytest.fixture
    def renderer(self):
        return FakeRenderer()

    @pytest.fixture
    def placeholders(self):
        return [PlaceholderToken(name="номер", value="17")]

    def test_docx_only(self, renderer, placeholders):
        converter = FakeConverter()
        builder = DocumentBuilder(renderer, converter)
        options = DocumentOptions(output_file_name="Счёт")

        result = asyncio.run(builder.build(b"T", placeholders, options))

        assert result.document == b"RENDERED:T"
        assert result.file_name == "Счёт.docx"
        assert result.pdf is None and result.pdf_error is None
        assert converter.file_names == []
        assert renderer.calls == [(b"T", placeholders, options)]

    def test_docx_and_pdf(self, renderer, placeholders):
        builder = DocumentBuilder(renderer, FakeConverter())
        options = DocumentOptions(export_pdf=True, output_file_name="Акт")

        result = asyncio.run(builder.build(b"T", placeholders, options))

        assert result.pdf == b"%PDFRENDERED:T"
        assert result.pdf_file_name == "Акт.pdf"
        assert result.pdf_error is None

    def test_conversion_failure_keeps_document(self, renderer, placeholders):
        converter = FakeConverter(ConversionServiceError("PDF converter answered 500", 500))
        builder = DocumentBuilder(renderer, converter)

        result = asyncio.run(builder.build(b"T", placeholders, DocumentOptions(export_pdf=True)))

        assert result.document == b"RENDERED:T"
        assert result.pdf is None
        assert result.pdf_file_name is None
        assert result.pdf_error == "PDF converter answered 500"

    def test_no_converter(self, renderer, placeholders):
        builder = DocumentBuilder(renderer, converter=None, default_stem="Договор")

        result = asyncio.run(builder.build(b"T", placeholders, DocumentOptions(export_pdf=True)))

        assert result.file_name.startswith("Договор_")
        assert result.pdf_error == "PDF conversion is not configured"
