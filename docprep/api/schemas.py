"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from docprep.strategies.template_engine import DocumentOptions, PlaceholderToken, RequisiteLine


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")


# =============================================================================
# Template Schemas
# =============================================================================


class PlaceholderListResponse(BaseModel):
    """Placeholders discovered in an uploaded template."""

    filename: str
    placeholders: list[PlaceholderToken]
    analyzed_at: datetime


class PreviewRequest(BaseModel):
    """Values to substitute when previewing a template."""

    placeholders: list[PlaceholderToken] = Field(default_factory=list)


class PreviewResponse(BaseModel):
    """Plain-text preview of a filled template."""

    filename: str
    text: str


# =============================================================================
# Requisite Schemas
# =============================================================================


class RequisiteListResponse(BaseModel):
    """Requisite lines extracted from an uploaded document."""

    filename: str
    requisites: list[RequisiteLine]


class MatchRequest(BaseModel):
    """Request to fill placeholders from requisite lines."""

    placeholders: list[PlaceholderToken]
    requisites: list[RequisiteLine]


class MatchResponse(BaseModel):
    """Placeholders after matching."""

    placeholders: list[PlaceholderToken]
    matched: dict[str, str] = Field(description="Assigned values by placeholder name")
    unmatched: list[str] = Field(description="Placeholders left unchanged")


# =============================================================================
# Document Schemas
# =============================================================================


class GenerateRequest(BaseModel):
    """Placeholder values and output options for document generation."""

    placeholders: list[PlaceholderToken]
    options: DocumentOptions = Field(default_factory=DocumentOptions)


class GenerateResponse(BaseModel):
    """Result of document generation."""

    document_id: uuid.UUID
    file_name: str
    download_url: str
    pdf_file_name: str | None = None
    pdf_download_url: str | None = None
    pdf_error: str | None = Field(
        default=None, description="Why the requested PDF was not produced"
    )
    created_at: datetime
