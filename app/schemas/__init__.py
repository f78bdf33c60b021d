"""
Pydantic schemas for request/response validation
"""

from app.schemas.imports import (
    ImportRowData,
    ValidatedImportRow,
    ImportPreviewResponse,
    GenerationRow,
    GenerationRequest,
    GenerationResult
)

__all__ = [
    "ImportRowData",
    "ValidatedImportRow",
    "ImportPreviewResponse",
    "GenerationRow",
    "GenerationRequest",
    "GenerationResult",
]
