"""Unit tests for the HTTP API."""

import io
import json
import zipfile

import httpx
import pytest
from fastapi.testclient import TestClient

from docprep.api.deps import get_component_factory
from docprep.core.config import Settings, get_settings
from docprep.core.factory import ComponentFactory
from docprep.main import create_app
from docprep.strategies.converters import HttpPdfConverter
from docprep.strategies.template_engine import DocumentBuilder, TemplateRenderer

DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

TEMPLATE_BODY = (
    "<w:p><w:r><w:t>Договор №#номер</w:t></w:r></w:p>"
    "<w:p><w:r><w:t>Заказчик: #имя, ИНН #инн</w:t></w:r></w:p>"
)


class ConvertingFactory(ComponentFactory):
    """Factory whose builder talks to a stubbed conversion service."""

    def get_document_builder(self) -> DocumentBuilder:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"%PDF-1.7"))
        return DocumentBuilder(
            renderer=TemplateRenderer(),
            converter=HttpPdfConverter("http://converter.test/convert", transport=transport),
        )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        pdf_converter_url="",
        upload_dir=tmp_path / "uploads",
        output_dir=tmp_path / "output",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_component_factory] = lambda: ComponentFactory(settings)
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def template(make_docx) -> bytes:
    return make_docx(TEMPLATE_BODY)


# =============================================================================
# Health / Templates
# =============================================================================


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestTemplateRoutes:
    """Test suite for /templates routes."""

    def test_placeholders(self, client, template):
        response = client.post(
            "/templates/placeholders",
            files={"file": ("contract.docx", template, DOCX)},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["filename"] == "contract.docx"
        assert [p["name"] for p in body["placeholders"]] == ["номер", "имя", "инн"]
        assert body["placeholders"][0]["position"] == len("Договор №")

    def test_wrong_extension(self, client, template):
        response = client.post(
            "/templates/placeholders",
            files={"file": ("contract.doc", template, "application/msword")},
        )
        assert response.status_code == 415

    def test_too_large(self, client, settings, template):
        settings.max_template_size = 16
        response = client.post(
            "/templates/placeholders",
            files={"file": ("contract.docx", template, DOCX)},
        )
        assert response.status_code == 413

    def test_corrupt_template(self, client):
        response = client.post(
            "/templates/placeholders",
            files={"file": ("contract.docx", b"not a zip", DOCX)},
        )
        assert response.status_code == 422

    def test_preview(self, client, template):
        payload = {"placeholders": [{"name": "номер", "value": "17"}, {"name": "имя", "value": ""}]}
        response = client.post(
            "/templates/preview",
            files={"file": ("contract.docx", template, DOCX)},
            data={"placeholders": json.dumps(payload, ensure_ascii=False)},
        )

        assert response.status_code == 200
        assert response.json()["text"] == "Договор №17\nЗаказчик: , ИНН #инн"

    def test_preview_invalid_payload(self, client, template):
        response = client.post(
            "/templates/preview",
            files={"file": ("contract.docx", template, DOCX)},
            data={"placeholders": "{not json"},
        )
        assert response.status_code == 422


# =============================================================================
# Requisites
# =============================================================================


class TestRequisiteRoutes:
    """Test suite for /requisites routes."""

    def test_extract_from_docx(self, client):
        from docx import Document

        document = Document()
        document.add_paragraph("ИНН 123456789012")
        document.add_paragraph("Иванов Иван Иванович")
        buffer = io.BytesIO()
        document.save(buffer)

        response = client.post(
            "/requisites",
            files={"file": ("card.docx", buffer.getvalue(), DOCX)},
        )

        assert response.status_code == 200
        assert response.json()["requisites"] == [
            {"id": 0, "value": "ИНН 123456789012"},
            {"id": 1, "value": "Иванов Иван Иванович"},
        ]

    def test_unsupported_type(self, client):
        response = client.post(
            "/requisites",
            files={"file": ("card.txt", "ИНН 123456789012".encode("utf-8"), "text/plain")},
        )
        assert response.status_code == 415

    def test_unreadable_pdf(self, client):
        response = client.post(
            "/requisites",
            files={"file": ("card.pdf", b"garbage", "application/pdf")},
        )
        assert response.status_code == 422

    def test_match(self, client):
        response = client.post(
            "/requisites/match",
            json={
                "placeholders": [{"name": "инн"}, {"name": "госномер"}, {"name": "номер", "value": "5"}],
                "requisites": [{"id": 0, "value": "ИНН 123456789012"}, {"id": 1, "value": "A123BC77"}],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["matched"] == {"инн": "123456789012", "госномер": "А123ВС77"}
        assert body["unmatched"] == ["номер"]
        assert [p["value"] for p in body["placeholders"]] == ["123456789012", "А123ВС77", "5"]


# =============================================================================
# Documents
# =============================================================================


class TestDocumentRoutes:
    """Test suite for /documents routes."""

    PAYLOAD = {
        "placeholders": [
            {"name": "номер", "value": "17"},
            {"name": "имя", "value": "Иванов Иван Иванович"},
            {"name": "инн", "value": "123456789012"},
        ],
        "options": {"font_family": "Arial", "font_size": 12, "output_file_name": "Договор 17"},
    }

    def generate(self, client, template, payload) -> httpx.Response:
        return client.post(
            "/documents",
            files={"file": ("contract.docx", template, DOCX)},
            data={"payload": json.dumps(payload, ensure_ascii=False)},
        )

    def test_generate_and_download(self, client, template, paragraph_texts):
        response = self.generate(client, template, self.PAYLOAD)

        assert response.status_code == 201
        body = response.json()
        assert body["file_name"] == "Договор 17.docx"
        assert body["pdf_download_url"] is None

        download = client.get(body["download_url"])
        assert download.status_code == 200
        assert zipfile.is_zipfile(io.BytesIO(download.content))
        assert paragraph_texts(download.content) == [
            "Договор №17",
            "Заказчик: Иванов Иван Иванович, ИНН 123456789012",
        ]

    def test_upper_case_suffix_can_be_downloaded(self, client, template):
        payload = {**self.PAYLOAD, "options": {"output_file_name": "Contract.DOCX"}}
        body = self.generate(client, template, payload).json()

        assert body["file_name"] == "Contract.docx"
        download = client.get(body["download_url"])
        assert download.status_code == 200
        assert zipfile.is_zipfile(io.BytesIO(download.content))

    def test_pdf_without_converter(self, client, template):
        payload = {**self.PAYLOAD, "options": {"export_pdf": True}}
        body = self.generate(client, template, payload).json()

        assert body["pdf_error"] == "PDF conversion is not configured"
        assert client.get(f"/documents/{body['document_id']}/pdf").status_code == 404
        assert client.get(body["download_url"]).status_code == 200

    def test_pdf_with_converter(self, app, client, settings, template):
        app.dependency_overrides[get_component_factory] = lambda: ConvertingFactory(settings)
        payload = {**self.PAYLOAD, "options": {"export_pdf": True, "output_file_name": "Акт"}}
        body = self.generate(client, template, payload).json()

        assert body["pdf_error"] is None
        assert body["pdf_file_name"] == "Акт.pdf"
        download = client.get(body["pdf_download_url"])
        assert download.status_code == 200
        assert download.content == b"%PDF-1.7"
        assert download.headers["content-type"] == "application/pdf"

    def test_unknown_document(self, client):
        response = client.get("/documents/00000000-0000-0000-0000-000000000000/docx")
        assert response.status_code == 404

    def test_unknown_kind(self, client):
        response = client.get("/documents/00000000-0000-0000-0000-000000000000/txt")
        assert response.status_code == 422

    def test_missing_payload(self, client, template):
        response = client.post("/documents", files={"file": ("contract.docx", template, DOCX)})
        assert response.status_code == 422
