"""
Realty CRM Deal Models
"""

import math
from sqlalchemy import Column, String, Numeric, DateTime, Date, Uuid
from sqlalchemy.sql import func
import uuid
from enum import Enum

from ..core.database import Base


class DealStage(str, Enum):
    """Deal pipeline stage enumeration"""
    LEAD = "Lead"
    PROSPECTING = "Prospecting"
    PROPOSAL = "Proposal"
    NEGOTIATION = "Negotiation"
    WON = "Won"
    LOST = "Lost"


def coerce_deal_value(raw) -> float:
    """Coerce a stored or submitted deal value to a number.

    Anything that does not parse as a finite number counts as 0.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return value


class Deal(Base):
    """Sales opportunity attached to a contact"""
    __tablename__ = "deals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid, nullable=False, index=True)
    contact_id = Column(Uuid, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    value = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    stage = Column(String(30), nullable=False, default=DealStage.LEAD.value)
    close_date = Column(Date)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_won(self) -> bool:
        """Check if deal is won"""
        return self.stage == DealStage.WON.value

    @property
    def is_lost(self) -> bool:
        """Check if deal is lost"""
        return self.stage == DealStage.LOST.value

    @property
    def is_open(self) -> bool:
        """Any stage other than Won or Lost is open"""
        return not (self.is_won or self.is_lost)

    @property
    def numeric_value(self) -> float:
        return coerce_deal_value(self.value)

    def __repr__(self):
        return f"<Deal(name='{self.name}', stage='{self.stage}', value={self.value})>"
