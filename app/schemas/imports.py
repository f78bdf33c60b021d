"""
Bulk Import Request/Response Models
Field names travel in camelCase on the wire (participantName, isValid, ...)
"""

from pydantic import BaseModel, Field
from typing import Optional, List


class ImportRowData(BaseModel):
    """Normalized cell values of one imported row"""
    participant_name: str = Field(default="", alias="participantName")
    participant_email: Optional[str] = Field(default=None, alias="participantEmail")
    event_name: str = Field(default="", alias="eventName")
    event_start_date: str = Field(default="", alias="eventStartDate")
    event_end_date: str = Field(default="", alias="eventEndDate")
    certificate_number: Optional[str] = Field(default=None, alias="certificateNumber")

    class Config:
        populate_by_name = True


class ValidatedImportRow(BaseModel):
    """Validation outcome for one data row (index 2 is the first row after the header)"""
    index: int
    data: ImportRowData
    is_valid: bool = Field(..., alias="isValid")
    errors: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class ImportPreviewResponse(BaseModel):
    """Response from the import (preview) endpoint"""
    success: bool = True
    rows: List[ValidatedImportRow] = Field(default_factory=list)
    total: int = 0
    valid: int = 0
    invalid: int = 0


class GenerationRow(BaseModel):
    """A row selected by the operator for generation"""
    data: ImportRowData
    is_valid: bool = Field(default=False, alias="isValid")

    class Config:
        populate_by_name = True


class GenerationRequest(BaseModel):
    """One chunk of rows to generate certificates for"""
    event_id: str = Field(..., min_length=1, alias="eventId")
    rows: List[GenerationRow]

    class Config:
        populate_by_name = True
        example = {
            "eventId": "uuid-here",
            "rows": [
                {
                    "data": {
                        "participantName": "Jane Doe",
                        "eventName": "Bootcamp",
                        "eventStartDate": "2026-04-10",
                        "eventEndDate": "2026-04-12"
                    },
                    "isValid": True
                }
            ]
        }


class GenerationResult(BaseModel):
    """Outcome of one generation call"""
    success: bool = True
    generated: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)
