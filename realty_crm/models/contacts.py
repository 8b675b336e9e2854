"""
Realty CRM Contact Models
"""

from sqlalchemy import Column, String, DateTime, Text, Uuid
from sqlalchemy.sql import func
import uuid
from enum import Enum

from ..core.database import Base


class LeadStage(str, Enum):
    """Contact lead stage enumeration"""
    NEW = "New"
    CONTACTED = "Contacted"
    VISIT_SCHEDULED = "Visit Scheduled"
    NEGOTIATION = "Negotiation"
    WON = "Won"
    LOST = "Lost"


class UnitType(str, Enum):
    """Property unit type enumeration"""
    ONE_BHK = "1BHK"
    TWO_BHK = "2BHK"
    THREE_BHK = "3BHK"
    VILLA = "Villa"
    PLOT = "Plot"
    COMMERCIAL = "Commercial"
    OTHER = "Other"


class LeadSource(str, Enum):
    """Channel a contact came in through"""
    WEBSITE = "Website"
    REFERRAL = "Referral"
    ADVERTISEMENT = "Advertisement"
    SOCIAL_MEDIA = "Social Media"
    WALK_IN = "Walk-in"
    PHONE_INQUIRY = "Phone Inquiry"
    OTHER = "Other"


class Contact(Base):
    """Lead / prospective buyer. Root of the deletion cascade."""
    __tablename__ = "contacts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), default="")
    phone = Column(String(50), default="")
    company = Column(String(200), default="")
    lead_stage = Column(String(30), nullable=False, default=LeadStage.NEW.value)
    unit_type = Column(String(20), nullable=False, default=UnitType.OTHER.value)
    project_suggestion = Column(Text, default="")
    remark = Column(Text, default="")
    team_lead_id = Column(Uuid)
    lead_source = Column(String(30), nullable=False, default=LeadSource.OTHER.value, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Contact(name='{self.name}', source='{self.lead_source}')>"
