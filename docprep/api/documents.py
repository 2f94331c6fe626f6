"""Document generation API routes.

Fills an uploaded template, stores the result (and its PDF rendition when
requested) and serves the stored files for download.
"""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

import structlog
from fastapi import APIRouter, Depends, Form, HTTPException, UploadFile, status
from fastapi.responses import FileResponse

from docprep.api.deps import get_component_factory, parse_form_json, read_docx_upload, to_http_error
from docprep.api.schemas import GenerateRequest, GenerateResponse
from docprep.core.config import Settings, get_settings
from docprep.core.factory import ComponentFactory
from docprep.interfaces.errors import DocumentProcessingError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])

MEDIA_TYPES = {
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "pdf": "application/pdf",
}


def _document_dir(settings: Settings, document_id: uuid.UUID) -> Path:
    return Path(settings.output_dir) / str(document_id)


@router.post(
    "",
    response_model=GenerateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def generate_document(
    file: UploadFile,
    payload: str = Form(
        ...,
        description='JSON object: {"placeholders": [...], "options": {...}}',
    ),
    content: bytes = Depends(read_docx_upload),
    factory: ComponentFactory = Depends(get_component_factory),
    settings: Settings = Depends(get_settings),
) -> GenerateResponse:
    """Generate a filled document from a template.

    Args:
        file: The Word template (.docx).
        payload: GenerateRequest as JSON.
        content: Validated upload contents.
        factory: Component factory.
        settings: Application settings.

    Returns:
        GenerateResponse with download URLs. A failed PDF conversion is
        reported in ``pdf_error``; the ``.docx`` is still available.

    Raises:
        HTTPException: If the template cannot be read or generation fails.
    """
    request = parse_form_json(GenerateRequest, payload)
    document_id = uuid.uuid4()
    log = structlog.get_logger(__name__).bind(
        document_id=str(document_id), template=file.filename
    )

    try:
        log.info("generating document", placeholders=len(request.placeholders))
        result = await factory.get_document_builder().build(
            content, request.placeholders, request.options
        )

        target_dir = _document_dir(settings, document_id)
        target_dir.mkdir(parents=True, exist_ok=True)
        (target_dir / result.file_name).write_bytes(result.document)

        response = GenerateResponse(
            document_id=document_id,
            file_name=result.file_name,
            download_url=f"{router.prefix}/{document_id}/docx",
            pdf_error=result.pdf_error,
            created_at=datetime.now(timezone.utc),
        )

        if result.pdf is not None and result.pdf_file_name:
            (target_dir / result.pdf_file_name).write_bytes(result.pdf)
            response.pdf_file_name = result.pdf_file_name
            response.pdf_download_url = f"{router.prefix}/{document_id}/pdf"

        log.info("document stored", file_name=result.file_name, pdf=result.pdf is not None)
        return response

    except DocumentProcessingError as e:
        log.warning("document generation rejected", error=str(e))
        raise to_http_error(e) from e
    except Exception as e:
        logger.error(f"Document generation failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Document generation failed: {str(e)}",
        ) from e


@router.get("/{document_id}/{kind}")
async def download_document(
    document_id: uuid.UUID,
    kind: Literal["docx", "pdf"],
    settings: Settings = Depends(get_settings),
) -> FileResponse:
    """Download a generated document.

    Args:
        document_id: ID returned by ``POST /documents``.
        kind: ``docx`` or ``pdf``.
        settings: Application settings.

    Returns:
        The stored file.

    Raises:
        HTTPException: 404 if the document or the requested rendition
            does not exist.
    """
    target_dir = _document_dir(settings, document_id)
    matches = sorted(target_dir.glob(f"*.{kind}")) if target_dir.is_dir() else []
    if not matches:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {kind} file for document {document_id}",
        )

    path = matches[0]
    logger.info(f"Serving {path.name} for document {document_id}")
    return FileResponse(path=str(path), filename=path.name, media_type=MEDIA_TYPES[kind])
