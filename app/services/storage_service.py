"""
Storage Service
Supabase Storage integration for rendered certificate PDFs
"""

from dataclasses import dataclass
from typing import Optional

import httpx
from fastapi import HTTPException, status

from app.config import settings
from app.logging_config import get_logger
from app.services.exceptions import StorageError

logger = get_logger("STORAGE")

NOT_CONFIGURED_DETAIL = "Cloud storage not configured. Please contact administrator."


@dataclass
class UploadResult:
    url: str
    public_id: str


class StorageService:
    """Supabase Storage helper"""

    # Overridden in tests with httpx.MockTransport
    transport: Optional[httpx.AsyncBaseTransport] = None

    @staticmethod
    def is_configured() -> bool:
        return bool(settings.SUPABASE_URL and settings.SUPABASE_KEY)

    @staticmethod
    def _ensure_config():
        if not StorageService.is_configured():
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=NOT_CONFIGURED_DETAIL
            )

    @classmethod
    def _client(cls) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=settings.STORAGE_TIMEOUT_SECONDS, transport=cls.transport)

    @staticmethod
    def _object_url(path: str) -> str:
        base = settings.SUPABASE_URL.rstrip("/")
        return f"{base}/storage/v1/object/{settings.STORAGE_BUCKET}/{path}"

    @staticmethod
    def public_url(path: str) -> str:
        base = settings.SUPABASE_URL.rstrip("/")
        return f"{base}/storage/v1/object/public/{settings.STORAGE_BUCKET}/{path}"

    @staticmethod
    def _headers(content_type: Optional[str] = None) -> dict:
        headers = {
            "Authorization": f"Bearer {settings.SUPABASE_KEY}",
            "apikey": settings.SUPABASE_KEY,
        }
        if content_type:
            headers["Content-Type"] = content_type
            # Never replace an existing certificate artifact
            headers["x-upsert"] = "false"
        return headers

    @classmethod
    async def upload_certificate_pdf(cls, pdf_bytes: bytes, certificate_number: str) -> UploadResult:
        """
        Upload a rendered certificate

        Args:
            pdf_bytes: PDF content
            certificate_number: Used as the object name

        Returns:
            Public URL and the object path used later for deletion
        """
        cls._ensure_config()
        path = f"{settings.STORAGE_FOLDER}/{certificate_number}.pdf"

        async with cls._client() as client:
            resp = await client.post(cls._object_url(path), headers=cls._headers("application/pdf"), content=pdf_bytes)

        if resp.status_code not in (200, 201):
            logger.error("Upload failed", extra={"data": {"path": path, "status": resp.status_code, "body": resp.text}})
            raise StorageError("Failed to upload certificate to cloud storage")

        logger.info("Upload successful", extra={"data": {"publicId": path}})
        return UploadResult(url=cls.public_url(path), public_id=path)

    @classmethod
    async def delete_certificate_pdf(cls, public_id: str) -> str:
        """
        Delete a stored certificate

        Returns:
            "ok" when deleted, "not_found" when the object did not exist
        """
        cls._ensure_config()
        logger.info(f"Deleting certificate: {public_id}")

        async with cls._client() as client:
            resp = await client.delete(cls._object_url(public_id), headers=cls._headers())

        if resp.status_code in (200, 204):
            logger.info(f"Certificate deleted: {public_id}")
            return "ok"
        if resp.status_code == 404:
            logger.warning(f"Certificate not found: {public_id}")
            return "not_found"

        logger.error("Certificate deletion error", extra={"data": {"publicId": public_id, "status": resp.status_code}})
        raise StorageError(f"Failed to delete certificate from storage: {resp.text}")


storage_service = StorageService()
