"""
Certificate Model
Issued certificates; number, artifact and event link never change after insert
"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from app.database import Base


class Certificate(Base):
    __tablename__ = "certificates"
    __table_args__ = (
        UniqueConstraint("certificate_number", name="uq_certificates_certificate_number"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    certificate_number = Column(String(32), nullable=False, index=True)
    participant_name = Column(String(200), nullable=False)
    participant_email = Column(String(255), nullable=True)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.id", ondelete="RESTRICT"), nullable=False, index=True)

    # Stored artifact
    certificate_url = Column(Text, nullable=False)
    storage_public_id = Column(String(255), nullable=False)

    verification_hash = Column(String(64), nullable=False)
    issued_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    event = relationship("Event", backref="certificates")
