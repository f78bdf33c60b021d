"""
Admin Routes
Endpoints for managing events, issuing certificates, and bulk import
"""

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from app.auth import get_current_admin
from app.config import settings
from app.logging_config import get_logger
from app.schemas.certificate import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    CertificateEnvelope,
    CertificateListResponse,
    CreateCertificateRequest,
    EventCertificatesResponse,
    ExportRequest,
)
from app.schemas.event import (
    EventEnvelope,
    EventListResponse,
    EventRequest,
    TemplateListResponse,
)
from app.schemas.imports import GenerationRequest, GenerationResult, ImportPreviewResponse
from app.services.batch_generator import certificate_generator
from app.services.certificate_service import certificate_service
from app.services.event_service import event_service
from app.services.exceptions import TableParseError
from app.services.import_validator import validate_import
from app.services.table_parser import parse_table
from app.services.template_registry import get_available_templates

router = APIRouter()
logger = get_logger("ADMIN")


# Events

@router.post("/events", response_model=EventEnvelope, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: EventRequest,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Create an event

    - **title**, **startDate**, **organizer**: required
    - **endDate**: defaults to startDate for single-day events
    - **template**: one of the registered certificate templates
    """
    event = await event_service.create_event(request)
    return {"success": True, "event": event}


@router.get("/events", response_model=EventListResponse)
async def list_events(current_admin: dict = Depends(get_current_admin)):
    """List events, newest first"""
    return {"success": True, "events": await event_service.list_events()}


@router.get("/events/{event_id}", response_model=EventEnvelope)
async def get_event(event_id: str, current_admin: dict = Depends(get_current_admin)):
    return {"success": True, "event": await event_service.get_event(event_id)}


@router.put("/events/{event_id}", response_model=EventEnvelope)
async def update_event(
    event_id: str,
    request: EventRequest,
    current_admin: dict = Depends(get_current_admin)
):
    """Update event details (issued certificates are not re-rendered)"""
    return {"success": True, "event": await event_service.update_event(event_id, request)}


@router.delete("/events/{event_id}")
async def delete_event(event_id: str, current_admin: dict = Depends(get_current_admin)):
    """Delete an event; refused while it still has certificates"""
    await event_service.delete_event(event_id)
    return {"success": True, "message": "Event deleted successfully"}


@router.get("/events/{event_id}/certificates", response_model=EventCertificatesResponse)
async def list_event_certificates(event_id: str, current_admin: dict = Depends(get_current_admin)):
    event = await event_service.get_event(event_id)
    certificates = await certificate_service.list_event_certificates(event_id)
    return {"success": True, "event": event, "certificates": certificates}


@router.get("/templates", response_model=TemplateListResponse)
async def list_templates(current_admin: dict = Depends(get_current_admin)):
    return {"success": True, "templates": get_available_templates()}


# Certificates

@router.post("/certificates", response_model=CertificateEnvelope, status_code=status.HTTP_201_CREATED)
async def create_certificate(
    request: CreateCertificateRequest,
    current_admin: dict = Depends(get_current_admin)
):
    """Issue a single certificate for an event"""
    certificate = await certificate_generator.create_single_certificate(
        request.event_id,
        request.participant_name,
        str(request.participant_email) if request.participant_email else None,
    )
    return {"success": True, "certificate": certificate}


@router.get("/certificates", response_model=CertificateListResponse)
async def list_certificates(current_admin: dict = Depends(get_current_admin)):
    return {"success": True, "certificates": await certificate_service.list_certificates()}


@router.delete("/certificates/{certificate_id}")
async def delete_certificate(certificate_id: str, current_admin: dict = Depends(get_current_admin)):
    """Delete a certificate record and its stored PDF"""
    await certificate_service.delete_certificate(certificate_id)
    return {"success": True, "message": "Certificate deleted successfully"}


@router.post("/certificates/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_certificates(
    request: BulkDeleteRequest,
    current_admin: dict = Depends(get_current_admin)
):
    result = await certificate_service.bulk_delete(request.certificate_ids)
    return {"success": result["deleted"] > 0 or result["failed"] == 0, **result}


@router.post("/certificates/export")
async def export_certificates(
    request: ExportRequest,
    current_admin: dict = Depends(get_current_admin)
):
    """Download selected certificates (or one event's) as CSV or XLSX"""
    content, filename, media_type = await certificate_service.export_certificates(
        request.certificate_ids, request.event_id, request.format
    )
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


@router.post(
    "/certificates/import",
    response_model=ImportPreviewResponse,
    response_model_exclude_none=True,
)
async def import_certificates(
    file: UploadFile = File(...),
    current_admin: dict = Depends(get_current_admin)
):
    """
    Validate a CSV / XLSX / XLS file for bulk generation

    Nothing is generated here; the response lists every data row with its
    errors so the operator can pick the rows to generate.
    """
    content = await file.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Missing or invalid file. Send a file in FormData under key "file".'
        )
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB."
        )

    try:
        rows = parse_table(file.filename, content)
    except TableParseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    existing_numbers = await certificate_service.get_existing_numbers()
    results = validate_import(rows, existing_numbers)
    valid = sum(1 for r in results if r.is_valid)

    logger.info("Import validated", extra={"data": {
        "filename": file.filename,
        "total": len(results),
        "valid": valid,
    }})

    return {
        "success": True,
        "rows": results,
        "total": len(results),
        "valid": valid,
        "invalid": len(results) - valid,
    }


@router.post(
    "/certificates/generate",
    response_model=GenerationResult,
    response_model_exclude_unset=True,
)
async def generate_certificates(
    request: GenerationRequest,
    current_admin: dict = Depends(get_current_admin)
):
    """
    Generate certificates for one chunk of selected rows

    At most MAX_ROWS_PER_REQUEST rows per call; failed rows are reported in
    **errors** and the rest of the chunk still runs.
    """
    result = await certificate_generator.generate_batch(request.event_id, request.rows)

    body = {"success": result.success, "generated": result.generated, "failed": result.failed}
    if result.errors:
        body["errors"] = result.errors
    return body
