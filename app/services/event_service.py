"""
Event Service
Business logic for event management
"""

import uuid
from typing import List, Optional

from fastapi import HTTPException, status

from app.database import database
from app.logging_config import get_logger
from app.models.event import DEFAULT_TEMPLATE
from app.schemas.event import EventRequest
from app.services.template_registry import is_valid_template_filename, validate_template

logger = get_logger("EVENT")


def _event_to_dict(row) -> dict:
    event = dict(row)
    event["id"] = str(event["id"])
    return event


class EventService:
    """Service for event CRUD operations"""

    @staticmethod
    def _check_template(template: str):
        if not is_valid_template_filename(template):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid template selected"
            )
        if not validate_template(template):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Template file not found"
            )

    @staticmethod
    async def create_event(request: EventRequest) -> dict:
        """Create an event; single-day events may omit end_date"""
        template = request.template or DEFAULT_TEMPLATE
        EventService._check_template(template)

        event_id = str(uuid.uuid4())
        await database.execute(
            """
            INSERT INTO events (id, title, start_date, end_date, organizer, template)
            VALUES (:id, :title, :start_date, :end_date, :organizer, :template)
            """,
            {
                "id": event_id,
                "title": request.title.strip(),
                "start_date": request.start_date,
                "end_date": request.end_date or request.start_date,
                "organizer": request.organizer.strip(),
                "template": template,
            }
        )
        logger.info("Event created", extra={"data": {"eventId": event_id, "template": template}})
        return await EventService.get_event(event_id)

    @staticmethod
    async def list_events() -> List[dict]:
        rows = await database.fetch_all("SELECT * FROM events ORDER BY created_at DESC")
        return [_event_to_dict(r) for r in rows]

    @staticmethod
    async def get_event_or_none(event_id: str) -> Optional[dict]:
        row = await database.fetch_one(
            "SELECT * FROM events WHERE id = :event_id",
            {"event_id": str(event_id)}
        )
        return _event_to_dict(row) if row else None

    @staticmethod
    async def get_event(event_id: str) -> dict:
        event = await EventService.get_event_or_none(event_id)
        if not event:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Event not found"
            )
        return event

    @staticmethod
    async def update_event(event_id: str, request: EventRequest) -> dict:
        """Update event details; the template is kept when not supplied"""
        event = await EventService.get_event(event_id)

        template = request.template or event["template"]
        if request.template:
            EventService._check_template(request.template)

        await database.execute(
            """
            UPDATE events
            SET title = :title,
                start_date = :start_date,
                end_date = :end_date,
                organizer = :organizer,
                template = :template,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = :event_id
            """,
            {
                "event_id": str(event_id),
                "title": request.title.strip(),
                "start_date": request.start_date,
                "end_date": request.end_date or request.start_date,
                "organizer": request.organizer.strip(),
                "template": template,
            }
        )
        return await EventService.get_event(event_id)

    @staticmethod
    async def delete_event(event_id: str) -> dict:
        """Delete an event that has no certificates"""
        event = await EventService.get_event(event_id)

        certificate_count = await database.fetch_val(
            "SELECT COUNT(*) FROM certificates WHERE event_id = :event_id",
            {"event_id": str(event_id)}
        )
        if certificate_count:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Cannot delete event with existing certificates ({certificate_count})"
            )

        await database.execute("DELETE FROM events WHERE id = :event_id", {"event_id": str(event_id)})
        logger.info("Event deleted", extra={"data": {"eventId": str(event_id), "title": event["title"]}})
        return event


event_service = EventService()
