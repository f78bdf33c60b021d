"""
Batch Certificate Generator
Turns selected import rows into issued certificates, one row at a time.
A failing row is recorded and skipped; call-level problems (too many rows,
storage not configured, unknown event) reject the whole call up front.
"""

from datetime import date
from typing import List, Optional, Sequence

from fastapi import HTTPException, status

from app.config import settings
from app.logging_config import get_logger
from app.schemas.imports import GenerationResult, GenerationRow, ImportRowData
from app.services.certificate_service import CertificateService
from app.services.event_service import EventService
from app.services.pdf_service import pdf_service
from app.services.qr_service import generate_qr_data_url
from app.services.storage_service import StorageService
from app.utils.certificates import (
    compute_verification_hash,
    generate_certificate_number,
    normalize_certificate_number,
)
from app.utils.dates import format_date_range, format_single_date

logger = get_logger("GENERATE")


class RowSkipped(Exception):
    """Row cannot be generated; the message is reported as-is"""


def _error_text(exc: Exception) -> str:
    if isinstance(exc, HTTPException):
        return str(exc.detail)
    return str(exc) or exc.__class__.__name__


class CertificateGenerator:
    """
    Sequential certificate pipeline

    Collaborators default to the application services and can be swapped
    for fakes in tests.
    """

    def __init__(
        self,
        events=EventService,
        certificates=CertificateService,
        renderer=None,
        storage=StorageService,
        qr_encoder=generate_qr_data_url,
        max_rows: Optional[int] = None,
        max_attempts: Optional[int] = None,
    ):
        self.events = events
        self.certificates = certificates
        self.renderer = renderer or pdf_service
        self.storage = storage
        self.qr_encoder = qr_encoder
        self.max_rows = max_rows or settings.MAX_ROWS_PER_REQUEST
        self.max_attempts = max_attempts or settings.MAX_NUMBER_ATTEMPTS

    @staticmethod
    def select_rows(rows: Sequence[GenerationRow]) -> List[ImportRowData]:
        """Keep rows marked valid that still carry a name and an event name"""
        return [
            row.data for row in rows
            if row.is_valid and row.data.participant_name.strip() and row.data.event_name.strip()
        ]

    def _ensure_storage(self):
        if not self.storage.is_configured():
            logger.error("Cloud storage credentials missing")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Cloud storage not configured. Please contact administrator."
            )

    async def allocate_number(self, name: str, requested: Optional[str]) -> str:
        """Use the requested number if still free, else draw random candidates"""
        if requested:
            number = normalize_certificate_number(requested)
            if await self.certificates.certificate_exists(number):
                raise RowSkipped(f'Row "{name}": certificate {number} already exists; skipped.')
            return number

        for _ in range(self.max_attempts):
            candidate = generate_certificate_number()
            if not await self.certificates.certificate_exists(candidate):
                return candidate
        raise RowSkipped(f'Row "{name}": could not generate unique certificate number.')

    async def generate_row(self, event: dict, data: ImportRowData) -> dict:
        """
        Issue one certificate for an already resolved event

        Args:
            event: Event record (title, start_date, end_date, organizer, template)
            data: Row values; certificate_number and participant_email are optional

        Returns:
            The inserted certificate record
        """
        name = data.participant_name.strip()
        certificate_number = await self.allocate_number(name, data.certificate_number)

        qr_code_data_url = self.qr_encoder(certificate_number)

        fields = {
            "participant_name": name,
            "event_name": event["title"],
            "event_start_date": format_single_date(event["start_date"]),
            "event_end_date": format_single_date(event["end_date"]),
            "event_date_range": format_date_range(event["start_date"], event["end_date"]),
            "certificate_number": certificate_number,
            "issue_date": format_single_date(date.today()),
            "organizer_name": event["organizer"],
            "qr_code_data_url": qr_code_data_url,
        }
        pdf_bytes = await self.renderer.render(event["template"], fields)

        upload = await self.storage.upload_certificate_pdf(pdf_bytes, certificate_number)

        record = await self.certificates.insert_certificate({
            "certificate_number": certificate_number,
            "participant_name": name,
            "participant_email": data.participant_email,
            "event_id": event["id"],
            "certificate_url": upload.url,
            "storage_public_id": upload.public_id,
            "verification_hash": compute_verification_hash(certificate_number, event["id"]),
        })
        logger.info("Certificate generated", extra={"data": {
            "certificateNumber": certificate_number,
            "eventId": event["id"],
        }})
        return record

    async def generate_batch(self, event_id: str, rows: Sequence[GenerationRow]) -> GenerationResult:
        """
        Generate certificates for one chunk of rows

        Raises:
            HTTPException: 400 over the row cap, 500 storage not configured,
                404 event not found. Nothing is generated in these cases.
        """
        selected = self.select_rows(rows)

        if len(selected) > self.max_rows:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Maximum {self.max_rows} rows per request."
            )
        if not selected:
            return GenerationResult(success=True, generated=0, failed=0)

        self._ensure_storage()

        event = await self.events.get_event_or_none(event_id)
        if not event:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Event not found"
            )

        logger.info("Batch generation started", extra={"data": {"eventId": event_id, "rows": len(selected)}})

        result = GenerationResult(success=True)
        for data in selected:
            try:
                await self.generate_row(event, data)
                result.generated += 1
            except RowSkipped as e:
                result.failed += 1
                result.errors.append(str(e))
            except Exception as e:
                result.failed += 1
                message = f'Row "{data.participant_name.strip()}": {_error_text(e)}'
                result.errors.append(message)
                logger.error("Row generation failed", extra={"data": {"eventId": event_id, "error": message}})

        logger.info("Batch generation finished", extra={"data": {
            "eventId": event_id,
            "generated": result.generated,
            "failed": result.failed,
        }})
        return result

    async def create_single_certificate(self, event_id: str, participant_name: str,
                                        participant_email: Optional[str] = None) -> dict:
        """Issue one certificate; every failure is reported for the whole call"""
        self._ensure_storage()
        event = await self.events.get_event(event_id)

        data = ImportRowData(
            participant_name=participant_name,
            participant_email=participant_email,
            event_name=event["title"],
        )
        try:
            return await self.generate_row(event, data)
        except Exception as e:
            logger.error("Certificate creation failed", extra={"data": {"eventId": event_id, "error": _error_text(e)}})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to create certificate: {_error_text(e)}"
            ) from e


certificate_generator = CertificateGenerator()
