"""
Database Models
Import all models here for Alembic migrations
"""

from app.models.event import Event
from app.models.certificate import Certificate

__all__ = [
    "Event",
    "Certificate",
]
