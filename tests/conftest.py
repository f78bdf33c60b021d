import os
import pathlib
import sys
from datetime import date
from types import SimpleNamespace

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Settings are read at import time; pin everything the tests depend on
os.environ["APP_URL"] = "https://certs.example.org"
os.environ["DATABASE_URL"] = "sqlite:///./eventcert-test.db"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""
os.environ["CERTIFICATE_PREFIX"] = "ECELL"
os.environ["TEMPLATES_DIR"] = str(PROJECT_ROOT / "templates")
os.environ["CERTIFICATE_TEMPLATE_DIR"] = str(PROJECT_ROOT / "templates" / "certificates")

from app.config import settings  # noqa: E402


@pytest.fixture
def storage_configured(monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setattr(settings, "SUPABASE_KEY", "service-role-key")


@pytest.fixture
def sample_event():
    return {
        "id": "0f8b5c2e-7a51-4a4b-9d3e-2b6f1c9e8a10",
        "title": "Startup Bootcamp",
        "start_date": date(2026, 4, 10),
        "end_date": date(2026, 4, 12),
        "organizer": "E-Cell",
        "template": "certificate-bootcamp.html",
    }


class FakeEvents:
    def __init__(self, event=None):
        self.event = event
        self.lookups = []

    async def get_event_or_none(self, event_id):
        self.lookups.append(event_id)
        return self.event

    async def get_event(self, event_id):
        from fastapi import HTTPException
        self.lookups.append(event_id)
        if not self.event:
            raise HTTPException(status_code=404, detail="Event not found")
        return self.event


class FakeCertificates:
    def __init__(self, existing=None, duplicate_on_insert=None):
        self.existing = set(existing or ())
        self.duplicate_on_insert = set(duplicate_on_insert or ())
        self.inserted = []
        self.checked = []

    async def certificate_exists(self, number):
        self.checked.append(number)
        return number in self.existing

    async def insert_certificate(self, record):
        from app.services.exceptions import DuplicateCertificateError
        if record["certificate_number"] in self.duplicate_on_insert:
            raise DuplicateCertificateError(record["certificate_number"])
        self.inserted.append(record)
        self.existing.add(record["certificate_number"])
        return dict(record, id=f"cert-{len(self.inserted)}")


class FakeRenderer:
    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.calls = []

    async def render(self, template_name, fields):
        from app.services.exceptions import RenderError
        self.calls.append((template_name, fields))
        if fields["participant_name"] in self.fail_for:
            raise RenderError("Failed to generate certificate PDF")
        return b"%PDF-1.4 " + fields["certificate_number"].encode()


class FakeStorage:
    def __init__(self, configured=True):
        self.configured = configured
        self.uploads = []

    def is_configured(self):
        return self.configured

    async def upload_certificate_pdf(self, pdf_bytes, certificate_number):
        self.uploads.append(certificate_number)
        path = f"certificates/{certificate_number}.pdf"
        return SimpleNamespace(url=f"https://cdn.example.org/{path}", public_id=path)


@pytest.fixture
def fakes(sample_event):
    return SimpleNamespace(
        events=FakeEvents(sample_event),
        certificates=FakeCertificates(),
        renderer=FakeRenderer(),
        storage=FakeStorage(),
    )


@pytest.fixture
def generator(fakes):
    from app.services.batch_generator import CertificateGenerator
    return CertificateGenerator(
        events=fakes.events,
        certificates=fakes.certificates,
        renderer=fakes.renderer,
        storage=fakes.storage,
        qr_encoder=lambda number: f"data:image/png;base64,{number}",
    )
