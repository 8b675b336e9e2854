"""
Realty CRM Task Models
"""

from sqlalchemy import Column, Text, DateTime, Boolean, Uuid
from sqlalchemy.sql import func
import uuid

from ..core.database import Base


class Task(Base):
    """Follow-up item for a contact"""
    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, nullable=False, index=True)
    contact_id = Column(Uuid, nullable=False, index=True)
    content = Column(Text, nullable=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    due_date = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Task(contact_id='{self.contact_id}', completed={self.is_completed})>"
