"""
Tests for event management with the database connection mocked.
"""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException

from app.schemas.event import EventRequest
from app.services.event_service import EventService

EVENT_ROW = {
    "id": "event-1",
    "title": "Startup Bootcamp",
    "start_date": date(2026, 4, 10),
    "end_date": date(2026, 4, 10),
    "organizer": "E-Cell",
    "template": "certificate-default.html",
    "created_at": None,
    "updated_at": None,
}


@pytest.fixture
def db():
    with patch("app.services.event_service.database") as mock_db:
        mock_db.fetch_one = AsyncMock(return_value=EVENT_ROW)
        mock_db.fetch_all = AsyncMock(return_value=[EVENT_ROW])
        mock_db.fetch_val = AsyncMock(return_value=0)
        mock_db.execute = AsyncMock(return_value=None)
        yield mock_db


def make_request(**overrides):
    payload = {"title": " Startup Bootcamp ", "startDate": "2026-04-10", "organizer": "E-Cell"}
    payload.update(overrides)
    return EventRequest(**payload)


class TestCreateEvent:
    def test_single_day_defaults_end_date_and_template(self, db):
        asyncio.run(EventService.create_event(make_request()))
        params = db.execute.await_args.args[1]
        assert params["title"] == "Startup Bootcamp"
        assert params["end_date"] == date(2026, 4, 10)
        assert params["template"] == "certificate-default.html"

    def test_explicit_template(self, db):
        asyncio.run(EventService.create_event(make_request(template="certificate-hackathon.html", endDate="2026-04-12")))
        params = db.execute.await_args.args[1]
        assert params["template"] == "certificate-hackathon.html"
        assert params["end_date"] == date(2026, 4, 12)

    def test_unknown_template(self, db):
        with pytest.raises(HTTPException) as exc:
            asyncio.run(EventService.create_event(make_request(template="certificate-gala.html")))
        assert exc.value.status_code == 400
        assert exc.value.detail == "Invalid template selected"
        db.execute.assert_not_awaited()


class TestReadDelete:
    def test_get_missing(self, db):
        db.fetch_one.return_value = None
        with pytest.raises(HTTPException) as exc:
            asyncio.run(EventService.get_event("missing"))
        assert exc.value.status_code == 404

    def test_list(self, db):
        events = asyncio.run(EventService.list_events())
        assert events[0]["title"] == "Startup Bootcamp"

    def test_delete_refused_with_certificates(self, db):
        db.fetch_val.return_value = 3
        with pytest.raises(HTTPException) as exc:
            asyncio.run(EventService.delete_event("event-1"))
        assert exc.value.status_code == 400
        assert "existing certificates" in exc.value.detail
        db.execute.assert_not_awaited()

    def test_delete(self, db):
        asyncio.run(EventService.delete_event("event-1"))
        assert "DELETE FROM events" in db.execute.await_args.args[0]

    def test_update_keeps_template_when_not_given(self, db):
        asyncio.run(EventService.update_event("event-1", make_request(title="Renamed")))
        params = db.execute.await_args.args[1]
        assert params["title"] == "Renamed"
        assert params["template"] == "certificate-default.html"
