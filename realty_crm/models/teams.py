"""
Realty CRM Team Models
"""

from sqlalchemy import Column, String, DateTime, JSON, Uuid
from sqlalchemy.sql import func
import uuid

from ..core.database import Base


class Team(Base):
    """Sales team.

    ``member_ids`` is the team's side of the membership relation; each member
    also carries ``User.team_id``. The membership operations keep both sides
    in step, the store does not.
    """
    __tablename__ = "teams"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False, unique=True)
    member_ids = Column(JSON, nullable=False, default=list)
    leader_id = Column(Uuid)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def has_member(self, user_id) -> bool:
        return str(user_id) in (self.member_ids or [])

    @property
    def member_uuids(self) -> list:
        return [uuid.UUID(m) for m in (self.member_ids or [])]

    def __repr__(self):
        return f"<Team(name='{self.name}', members={len(self.member_ids or [])})>"
