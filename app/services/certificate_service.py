"""
Certificate Service
Persistence, lookup, deletion, and export of issued certificates
"""

import csv
import io
import time
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Set, Tuple

from fastapi import HTTPException, status
from openpyxl import Workbook
from openpyxl.styles import Font

from app.database import database, is_unique_violation
from app.logging_config import get_logger
from app.services.exceptions import DuplicateCertificateError, StorageError
from app.services.qr_service import build_verification_url
from app.services.storage_service import StorageService

logger = get_logger("CERT")

EXPORT_COLUMNS = [
    "Participant Name",
    "Certificate Number",
    "Event Name",
    "Issued Date",
    "Verification URL",
    "Certificate URL",
]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_SELECT_WITH_EVENT = """
    SELECT c.*,
           e.title AS event_title,
           e.start_date AS event_start_date,
           e.end_date AS event_end_date,
           e.organizer AS event_organizer
    FROM certificates c
    JOIN events e ON e.id = c.event_id
"""


def _certificate_to_dict(row) -> dict:
    record = dict(row)
    certificate = {
        "id": str(record["id"]),
        "certificate_number": record["certificate_number"],
        "participant_name": record["participant_name"],
        "participant_email": record.get("participant_email"),
        "certificate_url": record["certificate_url"],
        "storage_public_id": record.get("storage_public_id"),
        "verification_hash": record["verification_hash"],
        "issued_at": record["issued_at"],
        "event_id": str(record["event_id"]),
    }
    if "event_title" in record:
        certificate["event"] = {
            "id": str(record["event_id"]),
            "title": record["event_title"],
            "start_date": record["event_start_date"],
            "end_date": record["event_end_date"],
            "organizer": record["event_organizer"],
        }
    return certificate


class CertificateService:
    """Service for certificate records"""

    @staticmethod
    async def certificate_exists(certificate_number: str) -> bool:
        row = await database.fetch_one(
            "SELECT id FROM certificates WHERE certificate_number = :number",
            {"number": certificate_number.upper()}
        )
        return row is not None

    @staticmethod
    async def get_existing_numbers() -> Set[str]:
        """All issued numbers, upper-cased, for import validation"""
        rows = await database.fetch_all("SELECT certificate_number FROM certificates")
        return {str(r["certificate_number"]).upper() for r in rows}

    @staticmethod
    async def insert_certificate(record: dict) -> dict:
        """
        Persist a certificate record

        Raises:
            DuplicateCertificateError: The number is already taken
        """
        values = {
            "id": str(uuid.uuid4()),
            "certificate_number": record["certificate_number"].strip().upper(),
            "participant_name": record["participant_name"].strip(),
            "participant_email": (record.get("participant_email") or "").strip().lower() or None,
            "event_id": str(record["event_id"]),
            "certificate_url": record["certificate_url"],
            "storage_public_id": record["storage_public_id"],
            "verification_hash": record["verification_hash"],
            "issued_at": record.get("issued_at") or datetime.now(timezone.utc),
        }
        try:
            await database.execute(
                """
                INSERT INTO certificates
                (id, certificate_number, participant_name, participant_email, event_id,
                 certificate_url, storage_public_id, verification_hash, issued_at)
                VALUES (:id, :certificate_number, :participant_name, :participant_email, :event_id,
                        :certificate_url, :storage_public_id, :verification_hash, :issued_at)
                """,
                values
            )
        except Exception as e:
            if is_unique_violation(e):
                raise DuplicateCertificateError(values["certificate_number"]) from e
            raise
        return values

    @staticmethod
    async def list_certificates() -> List[dict]:
        rows = await database.fetch_all(_SELECT_WITH_EVENT + " ORDER BY c.issued_at DESC")
        return [_certificate_to_dict(r) for r in rows]

    @staticmethod
    async def list_event_certificates(event_id: str) -> List[dict]:
        rows = await database.fetch_all(
            _SELECT_WITH_EVENT + " WHERE c.event_id = :event_id ORDER BY c.issued_at DESC",
            {"event_id": str(event_id)}
        )
        return [_certificate_to_dict(r) for r in rows]

    @staticmethod
    async def get_certificate(certificate_id: str) -> dict:
        row = await database.fetch_one(
            _SELECT_WITH_EVENT + " WHERE c.id = :certificate_id",
            {"certificate_id": str(certificate_id)}
        )
        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Certificate not found"
            )
        return _certificate_to_dict(row)

    @staticmethod
    async def find_for_verification(certificate_number: str) -> Optional[dict]:
        row = await database.fetch_one(
            _SELECT_WITH_EVENT + " WHERE c.certificate_number = :number",
            {"number": certificate_number.upper()}
        )
        return _certificate_to_dict(row) if row else None

    @staticmethod
    async def delete_certificate(certificate_id: str) -> dict:
        """Delete the stored PDF (best effort) and then the record"""
        certificate = await CertificateService.get_certificate(certificate_id)
        public_id = certificate.get("storage_public_id")

        if public_id and StorageService.is_configured():
            try:
                await StorageService.delete_certificate_pdf(public_id)
            except (StorageError, HTTPException) as e:
                logger.warning(f"Storage deletion warning: {getattr(e, 'detail', e)}")
        else:
            logger.warning("No stored artifact to delete, skipping storage deletion", extra={"data": {
                "certificateNumber": certificate["certificate_number"],
            }})

        await database.execute(
            "DELETE FROM certificates WHERE id = :certificate_id",
            {"certificate_id": str(certificate_id)}
        )
        logger.info("Certificate deleted", extra={"data": {
            "certificateId": str(certificate_id),
            "certificateNumber": certificate["certificate_number"],
        }})
        return certificate

    @staticmethod
    async def bulk_delete(certificate_ids: List[str]) -> dict:
        """Delete several certificates; one failure does not stop the rest"""
        deleted = 0
        errors = []
        for certificate_id in certificate_ids:
            try:
                await CertificateService.delete_certificate(certificate_id)
                deleted += 1
            except HTTPException as e:
                errors.append(f"{certificate_id}: {e.detail}")
            except Exception as e:
                logger.error("Bulk delete item failed", extra={"data": {"certificateId": certificate_id, "error": str(e)}})
                errors.append(f"{certificate_id}: {e}")
        return {"deleted": deleted, "failed": len(errors), "errors": errors}

    @staticmethod
    async def fetch_for_export(certificate_ids: Optional[List[str]], event_id: Optional[str]) -> List[dict]:
        if certificate_ids:
            placeholders = ", ".join(f":id_{i}" for i in range(len(certificate_ids)))
            params = {f"id_{i}": str(cid) for i, cid in enumerate(certificate_ids)}
            rows = await database.fetch_all(
                _SELECT_WITH_EVENT + f" WHERE c.id IN ({placeholders}) ORDER BY c.issued_at DESC",
                params
            )
            return [_certificate_to_dict(r) for r in rows]
        if event_id:
            return await CertificateService.list_event_certificates(event_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide certificateIds (array) or eventId."
        )

    @staticmethod
    def export_rows(certificates: List[dict]) -> List[List[str]]:
        rows = []
        for cert in certificates:
            issued_at = cert.get("issued_at")
            if isinstance(issued_at, datetime):
                issued = issued_at.date().isoformat()
            else:
                issued = str(issued_at or "")[:10]
            rows.append([
                cert["participant_name"],
                cert["certificate_number"],
                (cert.get("event") or {}).get("title", ""),
                issued,
                build_verification_url(cert["certificate_number"]),
                cert["certificate_url"],
            ])
        return rows

    @staticmethod
    def build_export(certificates: List[dict], fmt: str) -> Tuple[bytes, str, str]:
        """
        Serialize certificates for download

        Returns:
            (content, filename, media type)
        """
        rows = CertificateService.export_rows(certificates)
        stamp = int(time.time() * 1000)

        if fmt == "csv":
            buffer = io.StringIO()
            writer = csv.writer(buffer, quoting=csv.QUOTE_ALL)
            writer.writerow(EXPORT_COLUMNS)
            writer.writerows(rows)
            return buffer.getvalue().encode("utf-8"), f"certificates-export-{stamp}.csv", "text/csv; charset=utf-8"

        wb = Workbook()
        ws = wb.active
        ws.title = "Certificates"
        ws.append(EXPORT_COLUMNS)
        for cell in ws[1]:
            cell.font = Font(bold=True)
        for row in rows:
            ws.append(row)

        output = io.BytesIO()
        wb.save(output)
        return output.getvalue(), f"certificates-export-{stamp}.xlsx", XLSX_MEDIA_TYPE

    @staticmethod
    async def export_certificates(
        certificate_ids: Optional[List[str]] = None,
        event_id: Optional[str] = None,
        fmt: str = "xlsx",
    ) -> Tuple[bytes, str, str]:
        certificates = await CertificateService.fetch_for_export(certificate_ids, event_id)
        logger.info("Exporting certificates", extra={"data": {"count": len(certificates), "format": fmt}})
        return CertificateService.build_export(certificates, fmt)


certificate_service = CertificateService()
