"""
Event Model
Events that certificates are issued for
"""

from sqlalchemy import Column, String, Date, DateTime, func
from sqlalchemy.dialects.postgresql import UUID
import uuid
from app.database import Base

DEFAULT_TEMPLATE = "certificate-default.html"


class Event(Base):
    __tablename__ = "events"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    organizer = Column(String(200), nullable=False)

    # HTML template filename under CERTIFICATE_TEMPLATE_DIR
    template = Column(String(100), nullable=False, default=DEFAULT_TEMPLATE)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
