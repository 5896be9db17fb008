"""Partner model - a business that owns a JustCall line."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from call_handler.persistence.database import Base, utc_now


class Partner(Base):
    """Partner owning a JustCall phone line."""

    __tablename__ = "partners"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=True)
    phone = Column(String(32), unique=True, nullable=False, index=True)  # normalized JustCall line number
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    call_logs = relationship("CallLog", back_populates="partner")

    def __repr__(self) -> str:
        return f"<Partner(id={self.id}, phone={self.phone})>"
