"""
Public Endpoints
Certificate verification (JSON and HTML page) and health check
"""

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.config import settings
from app.logging_config import get_logger
from app.schemas.certificate import VerifyResponse
from app.services.certificate_service import certificate_service
from app.utils.certificates import is_valid_certificate_number, normalize_certificate_number
from app.utils.dates import format_date_range, format_single_date

router = APIRouter()
logger = get_logger("VERIFY")

templates = Jinja2Templates(directory=settings.TEMPLATES_DIR)


async def _lookup(certificate_number: str):
    number = normalize_certificate_number(certificate_number)
    if not is_valid_certificate_number(number):
        return number, None, False
    return number, await certificate_service.find_for_verification(number), True


@router.get("/api/verify/{certificate_number}", response_model=VerifyResponse, response_model_exclude_none=True)
async def verify_certificate(certificate_number: str):
    """
    Verify a certificate by number

    Returns the issued record with its event when found, otherwise
    valid=false with a message.
    """
    number, certificate, well_formed = await _lookup(certificate_number)
    if not well_formed:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid certificate number format"
        )

    if not certificate:
        logger.info("Certificate not found", extra={"data": {"certificateNumber": number}})
        return {"valid": False, "message": "Certificate not found"}

    logger.info("Certificate verified", extra={"data": {"certificateNumber": number}})
    return {"valid": True, "certificate": certificate}


@router.get("/verify/{certificate_number}", response_class=HTMLResponse)
async def verify_page(request: Request, certificate_number: str):
    """Human-readable verification page (target of the certificate QR code)"""
    number, certificate, well_formed = await _lookup(certificate_number)

    context = {
        "app_name": settings.APP_NAME,
        "certificate_number": number,
        "well_formed": well_formed,
        "certificate": certificate,
    }
    if certificate:
        event = certificate["event"]
        context["event_dates"] = format_date_range(event["start_date"], event["end_date"])
        context["issued_on"] = format_single_date(certificate["issued_at"])

    return templates.TemplateResponse(request, "verify.html", context, status_code=200 if certificate else 404)


@router.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": "1.0.0"
    }
