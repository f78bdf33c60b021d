"""
Event Request/Response Models
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime


class EventRequest(BaseModel):
    """Create or update an event; end_date defaults to start_date"""
    title: str = Field(..., min_length=1, max_length=200)
    start_date: date = Field(..., alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
    organizer: str = Field(..., min_length=1, max_length=200)
    template: Optional[str] = Field(default=None, max_length=100)

    class Config:
        populate_by_name = True
        example = {
            "title": "Startup Bootcamp",
            "startDate": "2026-04-10",
            "endDate": "2026-04-12",
            "organizer": "E-Cell",
            "template": "certificate-bootcamp.html"
        }


class EventResponse(BaseModel):
    """Event details"""
    id: str
    title: str
    start_date: date = Field(..., serialization_alias="startDate")
    end_date: date = Field(..., serialization_alias="endDate")
    organizer: str
    template: str
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, serialization_alias="updatedAt")

    class Config:
        from_attributes = True


class EventEnvelope(BaseModel):
    success: bool = True
    event: EventResponse


class EventListResponse(BaseModel):
    success: bool = True
    events: List[EventResponse]


class TemplateOption(BaseModel):
    """Selectable certificate template"""
    name: str
    filename: str
    description: str
    color: str


class TemplateListResponse(BaseModel):
    success: bool = True
    templates: List[TemplateOption]
