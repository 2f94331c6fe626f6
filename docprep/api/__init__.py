"""FastAPI routers and dependencies."""

from docprep.api.deps import get_component_factory, read_docx_upload
from docprep.api.documents import router as documents_router
from docprep.api.requisites import router as requisites_router
from docprep.api.templates import router as templates_router

__all__ = [
    "documents_router",
    "get_component_factory",
    "read_docx_upload",
    "requisites_router",
    "templates_router",
]
