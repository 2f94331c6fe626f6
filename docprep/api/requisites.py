"""Requisite API routes.

Extracts requisite lines from company cards and matches them to
template placeholders.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from docprep.api.deps import get_component_factory, read_upload, to_http_error
from docprep.api.schemas import MatchRequest, MatchResponse, RequisiteListResponse
from docprep.core.config import Settings, get_settings
from docprep.core.factory import ComponentFactory
from docprep.interfaces.errors import DocumentProcessingError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/requisites", tags=["requisites"])


@router.post(
    "",
    response_model=RequisiteListResponse,
    status_code=status.HTTP_200_OK,
)
async def extract_requisites(
    file: UploadFile,
    factory: ComponentFactory = Depends(get_component_factory),
    settings: Settings = Depends(get_settings),
) -> RequisiteListResponse:
    """Extract requisite lines from a ``.docx`` or ``.pdf`` document.

    Args:
        file: The requisites document.
        factory: Component factory.
        settings: Application settings.

    Returns:
        RequisiteListResponse with lines numbered from 0.

    Raises:
        HTTPException: 415 for unsupported types, 422 for unreadable files.
    """
    file_name = file.filename or ""
    try:
        loader = factory.get_requisite_loader(file_name)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=str(e),
        ) from e

    content = await read_upload(file, loader.supported_extensions, settings)
    try:
        lines = await loader.aload_lines(content)
        logger.info(f"Extracted {len(lines)} requisite lines from {file_name}")
        return RequisiteListResponse(filename=file_name, requisites=lines)

    except DocumentProcessingError as e:
        logger.warning(f"Cannot read requisites from {file_name}: {e}")
        raise to_http_error(e) from e
    except Exception as e:
        logger.error(f"Requisite extraction failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Requisite extraction failed: {str(e)}",
        ) from e


@router.post(
    "/match",
    response_model=MatchResponse,
    status_code=status.HTTP_200_OK,
)
async def match_requisites(
    request: MatchRequest,
    factory: ComponentFactory = Depends(get_component_factory),
) -> MatchResponse:
    """Fill placeholders from requisite lines.

    Placeholders without a matching line keep their current value and are
    listed in ``unmatched``.
    """
    result = factory.get_requisite_matcher().match(request.placeholders, request.requisites)
    return MatchResponse(
        placeholders=result.placeholders,
        matched=result.matched,
        unmatched=result.unmatched,
    )
