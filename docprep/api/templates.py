"""Template API routes.

Handles placeholder discovery and plain-text previews of filled templates.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Form, HTTPException, UploadFile, status

from docprep.api.deps import get_component_factory, parse_form_json, read_docx_upload, to_http_error
from docprep.api.schemas import PlaceholderListResponse, PreviewRequest, PreviewResponse
from docprep.core.factory import ComponentFactory
from docprep.interfaces.errors import DocumentProcessingError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/placeholders",
    response_model=PlaceholderListResponse,
    status_code=status.HTTP_200_OK,
)
async def list_placeholders(
    file: UploadFile,
    content: bytes = Depends(read_docx_upload),
    factory: ComponentFactory = Depends(get_component_factory),
) -> PlaceholderListResponse:
    """Discover ``#name`` placeholders in a Word template.

    Args:
        file: The Word document (.docx) to scan.
        content: Validated upload contents.
        factory: Component factory.

    Returns:
        PlaceholderListResponse with one entry per distinct name, in order
        of first appearance.

    Raises:
        HTTPException: If the file is not a readable template.
    """
    try:
        logger.info(f"Scanning template for placeholders: {file.filename}")
        placeholders = await factory.get_placeholder_scanner().scan(content)

        return PlaceholderListResponse(
            filename=file.filename or "",
            placeholders=placeholders,
            analyzed_at=datetime.now(timezone.utc),
        )

    except DocumentProcessingError as e:
        logger.warning(f"Cannot scan {file.filename}: {e}")
        raise to_http_error(e) from e
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Placeholder scan failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Placeholder scan failed: {str(e)}",
        ) from e


@router.post(
    "/preview",
    response_model=PreviewResponse,
    status_code=status.HTTP_200_OK,
)
async def preview_template(
    file: UploadFile,
    placeholders: str | None = Form(
        default=None,
        description='JSON object: {"placeholders": [{"name": ..., "value": ...}]}',
    ),
    content: bytes = Depends(read_docx_upload),
    factory: ComponentFactory = Depends(get_component_factory),
) -> PreviewResponse:
    """Render a plain-text preview of the template with values substituted.

    Placeholders without a value are removed from the preview, exactly as
    they would be in the generated document.
    """
    request = parse_form_json(PreviewRequest, placeholders)
    try:
        text = await factory.get_template_renderer().render_text(content, request.placeholders)
        return PreviewResponse(filename=file.filename or "", text=text)

    except DocumentProcessingError as e:
        logger.warning(f"Cannot preview {file.filename}: {e}")
        raise to_http_error(e) from e
    except Exception as e:
        logger.error(f"Template preview failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Template preview failed: {str(e)}",
        ) from e
