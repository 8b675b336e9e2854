"""
Realty CRM Response Models
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class ResponseStatus(str, Enum):
    """Standard response statuses"""
    SUCCESS = "success"
    ERROR = "error"


class ResponseModel(BaseModel):
    """Base for all response bodies"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class TokenResponse(ResponseModel):
    token: str
    token_type: str = "bearer"


class UserResponse(ResponseModel):
    id: UUID
    name: str
    email: str
    role: str
    team_id: Optional[UUID] = None
    created_at: Optional[datetime] = None


class UserSummary(ResponseModel):
    id: UUID
    name: str
    email: str


class TeamResponse(ResponseModel):
    id: UUID
    name: str
    member_ids: List[UUID] = Field(default_factory=list)
    leader_id: Optional[UUID] = None
    created_at: Optional[datetime] = None


class TeamDetailResponse(TeamResponse):
    members: List[UserSummary] = Field(default_factory=list)
    leader: Optional[UserSummary] = None


class ContactResponse(ResponseModel):
    id: UUID
    owner_id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    lead_stage: str
    unit_type: str
    project_suggestion: Optional[str] = None
    remark: Optional[str] = None
    team_lead_id: Optional[UUID] = None
    team_lead_name: Optional[str] = None
    lead_source: str
    created_at: Optional[datetime] = None


class DealResponse(ResponseModel):
    id: UUID
    owner_id: UUID
    contact_id: UUID
    name: str
    value: float
    stage: str
    close_date: Optional[date] = None
    is_won: bool
    is_lost: bool
    is_open: bool
    contact_name: Optional[str] = None
    owner_name: Optional[str] = None
    created_at: Optional[datetime] = None


class TaskResponse(ResponseModel):
    id: UUID
    owner_id: UUID
    contact_id: UUID
    content: str
    is_completed: bool
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


class AppointmentResponse(ResponseModel):
    id: UUID
    owner_id: UUID
    contact_id: UUID
    title: str
    appointment_time: datetime
    duration_minutes: int
    notes: Optional[str] = None
    status: str
    contact_name: Optional[str] = None
    owner_name: Optional[str] = None
    created_at: Optional[datetime] = None


class ActivityResponse(ResponseModel):
    id: UUID
    user_id: UUID
    user_name: Optional[str] = None
    action_type: str
    related_model: Optional[str] = None
    related_id: Optional[UUID] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: Optional[datetime] = None


class DealStats(ResponseModel):
    total_deals: int = 0
    won_deals: int = 0
    lost_deals: int = 0
    open_deals: int = 0
    total_value: float = 0
    won_value: float = 0
    open_value: float = 0


class UserPerformanceResponse(ResponseModel):
    user: UserResponse
    stats: DealStats


class TeamPerformanceResponse(ResponseModel):
    team_id: UUID
    team_name: str
    member_count: int
    members: Optional[List[UserSummary]] = None
    stats: DealStats


class LeadSourceCount(ResponseModel):
    source: str
    count: int


class DeletionResponse(ResponseModel):
    status: ResponseStatus = ResponseStatus.SUCCESS
    message: str
    data: Optional[Dict[str, Any]] = None


def with_extras(model_cls, record, **extras):
    """Validate an ORM record and attach joined display fields"""
    return model_cls.model_validate(record).model_copy(update=extras)
