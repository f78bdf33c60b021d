"""
Tests for certificate persistence, deletion and export with the database
connection replaced by a mock.
"""

import asyncio
import csv
import io
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException
from openpyxl import load_workbook

from app.services.certificate_service import EXPORT_COLUMNS, CertificateService
from app.services.exceptions import DuplicateCertificateError, StorageError

ROW = {
    "id": "cert-1",
    "certificate_number": "ECELL-2026-AAAAA",
    "participant_name": "Jane Doe",
    "participant_email": None,
    "event_id": "event-1",
    "certificate_url": "https://cdn.example.org/certificates/ECELL-2026-AAAAA.pdf",
    "storage_public_id": "certificates/ECELL-2026-AAAAA.pdf",
    "verification_hash": "ab" * 32,
    "issued_at": datetime(2026, 4, 12, 10, 0, tzinfo=timezone.utc),
    "event_title": "Startup Bootcamp",
    "event_start_date": date(2026, 4, 10),
    "event_end_date": date(2026, 4, 12),
    "event_organizer": "E-Cell",
}


@pytest.fixture
def db():
    with patch("app.services.certificate_service.database") as mock_db:
        mock_db.fetch_one = AsyncMock(return_value=None)
        mock_db.fetch_all = AsyncMock(return_value=[])
        mock_db.execute = AsyncMock(return_value=None)
        yield mock_db


class TestInsert:
    RECORD = {
        "certificate_number": " ecell-2026-aaaaa ",
        "participant_name": " Jane Doe ",
        "participant_email": " Jane@Example.com ",
        "event_id": "event-1",
        "certificate_url": "https://cdn.example.org/x.pdf",
        "storage_public_id": "certificates/x.pdf",
        "verification_hash": "ab" * 32,
    }

    def test_values_are_normalized(self, db):
        record = asyncio.run(CertificateService.insert_certificate(self.RECORD))
        assert record["certificate_number"] == "ECELL-2026-AAAAA"
        assert record["participant_name"] == "Jane Doe"
        assert record["participant_email"] == "jane@example.com"
        assert record["issued_at"].tzinfo is not None
        db.execute.assert_awaited_once()

    def test_unique_violation_becomes_duplicate_error(self, db):
        db.execute.side_effect = Exception("UNIQUE constraint failed: certificates.certificate_number")
        with pytest.raises(DuplicateCertificateError) as exc:
            asyncio.run(CertificateService.insert_certificate(self.RECORD))
        assert exc.value.certificate_number == "ECELL-2026-AAAAA"

    def test_other_errors_propagate(self, db):
        db.execute.side_effect = RuntimeError("connection lost")
        with pytest.raises(RuntimeError):
            asyncio.run(CertificateService.insert_certificate(self.RECORD))


class TestLookups:
    def test_exists_upper_cases(self, db):
        db.fetch_one.return_value = {"id": "cert-1"}
        assert asyncio.run(CertificateService.certificate_exists("ecell-2026-aaaaa"))
        assert db.fetch_one.await_args.args[1] == {"number": "ECELL-2026-AAAAA"}

    def test_existing_numbers(self, db):
        db.fetch_all.return_value = [{"certificate_number": "ECELL-2026-AAAAA"}, {"certificate_number": "ecell-2026-bbbbb"}]
        assert asyncio.run(CertificateService.get_existing_numbers()) == {"ECELL-2026-AAAAA", "ECELL-2026-BBBBB"}

    def test_verification_lookup_includes_event(self, db):
        db.fetch_one.return_value = ROW
        certificate = asyncio.run(CertificateService.find_for_verification("ECELL-2026-AAAAA"))
        assert certificate["event"] == {
            "id": "event-1",
            "title": "Startup Bootcamp",
            "start_date": date(2026, 4, 10),
            "end_date": date(2026, 4, 12),
            "organizer": "E-Cell",
        }

    def test_missing_certificate(self, db):
        with pytest.raises(HTTPException) as exc:
            asyncio.run(CertificateService.get_certificate("nope"))
        assert exc.value.status_code == 404


class TestDelete:
    def test_storage_then_record(self, db, storage_configured):
        db.fetch_one.return_value = ROW
        with patch("app.services.certificate_service.StorageService.delete_certificate_pdf", new=AsyncMock(return_value="ok")) as delete_pdf:
            asyncio.run(CertificateService.delete_certificate("cert-1"))
        delete_pdf.assert_awaited_once_with("certificates/ECELL-2026-AAAAA.pdf")
        assert "DELETE FROM certificates" in db.execute.await_args.args[0]

    def test_storage_failure_does_not_block_record_delete(self, db, storage_configured):
        db.fetch_one.return_value = ROW
        with patch("app.services.certificate_service.StorageService.delete_certificate_pdf",
                   new=AsyncMock(side_effect=StorageError("boom"))):
            asyncio.run(CertificateService.delete_certificate("cert-1"))
        db.execute.assert_awaited_once()

    def test_bulk_delete_accumulates(self, db):
        db.fetch_one.side_effect = [ROW, None, ROW]
        result = asyncio.run(CertificateService.bulk_delete(["cert-1", "missing", "cert-3"]))
        assert result["deleted"] == 2
        assert result["failed"] == 1
        assert result["errors"] == ["missing: Certificate not found"]


class TestExport:
    def test_requires_a_selection(self, db):
        with pytest.raises(HTTPException) as exc:
            asyncio.run(CertificateService.export_certificates(None, None, "csv"))
        assert exc.value.status_code == 400

    def test_csv(self, db):
        db.fetch_all.return_value = [ROW]
        content, filename, media_type = asyncio.run(
            CertificateService.export_certificates(["cert-1"], None, "csv")
        )
        rows = list(csv.reader(io.StringIO(content.decode("utf-8"))))
        assert rows[0] == EXPORT_COLUMNS
        assert rows[1] == [
            "Jane Doe",
            "ECELL-2026-AAAAA",
            "Startup Bootcamp",
            "2026-04-12",
            "https://certs.example.org/verify/ECELL-2026-AAAAA",
            "https://cdn.example.org/certificates/ECELL-2026-AAAAA.pdf",
        ]
        assert filename.endswith(".csv")
        assert media_type.startswith("text/csv")

    def test_xlsx_for_event(self, db):
        db.fetch_all.return_value = [ROW, dict(ROW, participant_name="John Roe")]
        content, filename, _ = asyncio.run(CertificateService.export_certificates(None, "event-1", "xlsx"))
        ws = load_workbook(io.BytesIO(content)).active
        values = list(ws.iter_rows(values_only=True))
        assert list(values[0]) == EXPORT_COLUMNS
        assert [v[0] for v in values[1:]] == ["Jane Doe", "John Roe"]
        assert filename.endswith(".xlsx")
        assert db.fetch_all.await_args.args[1] == {"event_id": "event-1"}
