"""
Realty CRM Activity Models
"""

from sqlalchemy import Column, String, DateTime, JSON, Uuid
from sqlalchemy.sql import func
import uuid

from ..core.database import Base


class Activity(Base):
    """Append-only audit entry for a mutating action"""
    __tablename__ = "activities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    action_type = Column(String(100), nullable=False, index=True)
    related_model = Column(String(50))
    related_id = Column(Uuid)
    details = Column(JSON, nullable=False, default=dict)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<Activity(action='{self.action_type}', user_id='{self.user_id}')>"
