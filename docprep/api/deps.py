"""FastAPI dependencies for dependency injection.

Provides reusable dependencies for routes including:
- The component factory
- Upload validation
- JSON payloads sent alongside multipart uploads
"""

import logging
import os

from fastapi import Depends, HTTPException, UploadFile, status
from pydantic import BaseModel, ValidationError

from docprep.core.config import Settings, get_settings
from docprep.core.factory import ComponentFactory, get_factory
from docprep.interfaces.errors import (
    DocumentProcessingError,
    InputFormatError,
    MissingRequiredPartError,
)

logger = logging.getLogger(__name__)


def get_component_factory() -> ComponentFactory:
    """Dependency returning the process-wide component factory."""
    return get_factory()


async def read_upload(
    file: UploadFile,
    allowed_extensions: set[str],
    settings: Settings,
) -> bytes:
    """Read an uploaded file after checking its type and size.

    Args:
        file: The uploaded file.
        allowed_extensions: Accepted lower-case extensions.
        settings: Application settings (size limit).

    Returns:
        The file contents.

    Raises:
        HTTPException: 415 for a wrong extension, 413 for an oversized file.
    """
    _, ext = os.path.splitext(file.filename or "")
    if ext.lower() not in allowed_extensions:
        logger.warning(f"Rejected upload with unsupported type: {file.filename}")
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Only {', '.join(sorted(allowed_extensions))} files are supported",
        )

    content = await file.read()
    if len(content) > settings.max_template_size:
        logger.warning(f"Rejected upload {file.filename}: {len(content)} bytes")
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.max_template_size} bytes",
        )
    return content


async def read_docx_upload(
    file: UploadFile,
    settings: Settings = Depends(get_settings),
) -> bytes:
    """Dependency reading an uploaded ``.docx`` template."""
    return await read_upload(file, {".docx"}, settings)


def parse_form_json(model: type[BaseModel], raw: str | None) -> BaseModel:
    """Validate a JSON string sent as a multipart form field.

    Raises:
        HTTPException: 422 when the payload does not match ``model``.
    """
    try:
        return model.model_validate_json(raw or "{}")
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False),
        ) from e


def to_http_error(exc: DocumentProcessingError) -> HTTPException:
    """Map a document processing failure to an HTTP error."""
    if isinstance(exc, (InputFormatError, MissingRequiredPartError)):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(exc),
    )
