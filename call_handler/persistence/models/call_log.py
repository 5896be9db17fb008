"""Call log model - the persisted outcome of a completed call."""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from call_handler.persistence.database import Base, utc_now

if TYPE_CHECKING:
    from call_handler.persistence.models.partner import Partner


class CallLog(Base):
    """Normalized call outcome, one row per call SID."""

    __tablename__ = "call_logs"

    id = Column(Integer, primary_key=True, index=True)
    call_sid = Column(String(255), unique=True, nullable=False, index=True)
    partner_id = Column(Integer, ForeignKey("partners.id"), nullable=True, index=True)
    customer_number = Column(String(32), nullable=False)
    call_direction = Column(String(20), nullable=False)
    duration = Column(Integer, nullable=False, default=0)  # Duration in seconds
    recording_url = Column(Text, nullable=True)
    transcription = Column(Text, nullable=True)
    chargeable = Column(Boolean, nullable=False, default=False)
    call_status = Column(String(20), nullable=False)  # answered, missed, voicemail
    provider_status = Column(String(50), nullable=True)  # raw JustCall call_info.type
    voicemail = Column(Boolean, nullable=False, default=False)
    voicemail_transcription = Column(Text, nullable=True)
    missed_by = Column(String(20), nullable=True)  # partner, customer

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    partner = relationship("Partner", back_populates="call_logs")

    def __repr__(self) -> str:
        return f"<CallLog(id={self.id}, call_sid={self.call_sid}, call_status={self.call_status})>"
