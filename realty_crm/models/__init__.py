"""
Realty CRM Models
"""

from .users import User, UserRole
from .teams import Team
from .contacts import Contact, LeadStage, UnitType, LeadSource
from .deals import Deal, DealStage, coerce_deal_value
from .tasks import Task
from .appointments import Appointment, AppointmentStatus
from .activities import Activity

__all__ = [
    "User",
    "UserRole",
    "Team",
    "Contact",
    "LeadStage",
    "UnitType",
    "LeadSource",
    "Deal",
    "DealStage",
    "coerce_deal_value",
    "Task",
    "Appointment",
    "AppointmentStatus",
    "Activity",
]
