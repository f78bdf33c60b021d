"""
Certificate Request/Response Models
"""

from pydantic import BaseModel, Field, EmailStr
from typing import Optional, List, Literal
from datetime import date, datetime


class CreateCertificateRequest(BaseModel):
    """Issue a single certificate"""
    event_id: str = Field(..., min_length=1, alias="eventId")
    participant_name: str = Field(..., min_length=1, max_length=200, alias="participantName")
    participant_email: Optional[EmailStr] = Field(default=None, alias="participantEmail")

    class Config:
        populate_by_name = True


class CertificateEvent(BaseModel):
    """Event summary embedded in certificate responses"""
    id: Optional[str] = None
    title: str
    start_date: date = Field(..., serialization_alias="startDate")
    end_date: date = Field(..., serialization_alias="endDate")
    organizer: str


class CertificateResponse(BaseModel):
    """Certificate details"""
    id: str
    certificate_number: str = Field(..., serialization_alias="certificateNumber")
    participant_name: str = Field(..., serialization_alias="participantName")
    participant_email: Optional[str] = Field(default=None, serialization_alias="participantEmail")
    certificate_url: str = Field(..., serialization_alias="certificateUrl")
    verification_hash: str = Field(..., serialization_alias="verificationHash")
    issued_at: datetime = Field(..., serialization_alias="issuedAt")
    event: Optional[CertificateEvent] = None


class CertificateEnvelope(BaseModel):
    success: bool = True
    certificate: CertificateResponse


class CertificateListResponse(BaseModel):
    success: bool = True
    certificates: List[CertificateResponse]


class EventCertificatesResponse(BaseModel):
    success: bool = True
    event: CertificateEvent
    certificates: List[CertificateResponse]


class BulkDeleteRequest(BaseModel):
    certificate_ids: List[str] = Field(..., min_length=1, alias="certificateIds")

    class Config:
        populate_by_name = True


class BulkDeleteResponse(BaseModel):
    success: bool = True
    deleted: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)


class ExportRequest(BaseModel):
    """Export selected certificates, or every certificate of one event"""
    certificate_ids: Optional[List[str]] = Field(default=None, alias="certificateIds")
    event_id: Optional[str] = Field(default=None, alias="eventId")
    format: Literal["csv", "xlsx"] = "xlsx"

    class Config:
        populate_by_name = True


class VerifiedCertificate(BaseModel):
    """Public view of a verified certificate"""
    certificate_number: str = Field(..., serialization_alias="certificateNumber")
    participant_name: str = Field(..., serialization_alias="participantName")
    certificate_url: str = Field(..., serialization_alias="certificateUrl")
    event: CertificateEvent
    issued_at: datetime = Field(..., serialization_alias="issuedAt")
    verification_hash: str = Field(..., serialization_alias="verificationHash")


class VerifyResponse(BaseModel):
    """Verification result"""
    valid: bool
    certificate: Optional[VerifiedCertificate] = None
    message: Optional[str] = None
