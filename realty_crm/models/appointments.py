"""
Realty CRM Appointment Models
"""

from sqlalchemy import Column, String, Text, DateTime, Integer, Uuid
from sqlalchemy.sql import func
import uuid
from enum import Enum

from ..core.database import Base


class AppointmentStatus(str, Enum):
    """Appointment status enumeration"""
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    NO_SHOW = "No Show"


class Appointment(Base):
    """Site visit, call or meeting booked with a contact"""
    __tablename__ = "appointments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, nullable=False, index=True)
    contact_id = Column(Uuid, nullable=False, index=True)
    title = Column(String(200), nullable=False)
    appointment_time = Column(DateTime(timezone=True), nullable=False)
    duration_minutes = Column(Integer, nullable=False, default=30)
    notes = Column(Text)
    status = Column(String(20), nullable=False, default=AppointmentStatus.SCHEDULED.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Appointment(title='{self.title}', status='{self.status}')>"
