"""
Realty CRM Request Models

JSON bodies use camelCase keys (``contactId``, ``leadSource``); Python code
sees snake_case attributes.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Tuple
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from .contacts import LeadStage, UnitType, LeadSource
from .deals import DealStage, coerce_deal_value
from .appointments import AppointmentStatus
from .users import UserRole


class RequestModel(BaseModel):
    """Base for all request bodies"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    # Non-nullable columns; an explicit null in a partial update is ignored
    REQUIRED: ClassVar[Tuple[str, ...]] = ()

    def to_fields(self) -> Dict[str, Any]:
        """Every field, enums flattened to their stored string"""
        return {
            name: value.value if isinstance(value, Enum) else value
            for name, value in self.model_dump().items()
        }

    def to_patch(self) -> Dict[str, Any]:
        """Only the fields the client actually sent"""
        patch = {}
        for name, value in self.model_dump(exclude_unset=True).items():
            if value is None and name in self.REQUIRED:
                continue
            patch[name] = value.value if isinstance(value, Enum) else value
        return patch


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ---------- Auth ----------

class RegisterRequest(RequestModel):
    """Self-service registration"""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=8, description="User password")


class LoginRequest(RequestModel):
    """Authentication request"""
    email: EmailStr
    password: str = Field(..., min_length=1)


# ---------- Contacts ----------

class ContactCreateRequest(RequestModel):
    """New contact; enum fields fall back to their declared defaults"""
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = ""
    phone: Optional[str] = ""
    company: Optional[str] = ""
    lead_stage: LeadStage = LeadStage.NEW
    unit_type: UnitType = UnitType.OTHER
    project_suggestion: Optional[str] = ""
    remark: Optional[str] = ""
    team_lead_id: Optional[UUID] = None
    lead_source: LeadSource = LeadSource.OTHER

    @field_validator("lead_stage", mode="before")
    @classmethod
    def default_lead_stage(cls, v):
        return _blank_to_none(v) or LeadStage.NEW

    @field_validator("unit_type", mode="before")
    @classmethod
    def default_unit_type(cls, v):
        return _blank_to_none(v) or UnitType.OTHER

    @field_validator("lead_source", mode="before")
    @classmethod
    def default_lead_source(cls, v):
        return _blank_to_none(v) or LeadSource.OTHER

    @field_validator("team_lead_id", mode="before")
    @classmethod
    def blank_team_lead(cls, v):
        return _blank_to_none(v)

    @field_validator("email", "phone", "company", "project_suggestion", "remark")
    @classmethod
    def none_to_empty(cls, v):
        return v or ""


class ContactUpdateRequest(RequestModel):
    """Partial contact update"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    lead_stage: Optional[LeadStage] = None
    unit_type: Optional[UnitType] = None
    project_suggestion: Optional[str] = None
    remark: Optional[str] = None
    team_lead_id: Optional[UUID] = None
    lead_source: Optional[LeadSource] = None

    @field_validator("lead_stage", "unit_type", "lead_source", "team_lead_id", mode="before")
    @classmethod
    def blank_enum(cls, v):
        return _blank_to_none(v)

    REQUIRED: ClassVar[Tuple[str, ...]] = ("name", "lead_stage", "unit_type", "lead_source")


# ---------- Deals ----------

class DealCreateRequest(RequestModel):
    """New deal against an existing contact"""
    contact_id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    value: float = Field(0, ge=0)
    stage: DealStage = DealStage.LEAD
    close_date: Optional[date] = None

    @field_validator("value", mode="before")
    @classmethod
    def numeric_value(cls, v):
        return coerce_deal_value(v)

    @field_validator("stage", mode="before")
    @classmethod
    def default_stage(cls, v):
        return _blank_to_none(v) or DealStage.LEAD

    @field_validator("close_date", mode="before")
    @classmethod
    def blank_close_date(cls, v):
        return _blank_to_none(v)


class DealUpdateRequest(RequestModel):
    """Partial deal update"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    value: Optional[float] = Field(None, ge=0)
    stage: Optional[DealStage] = None
    close_date: Optional[date] = None

    @field_validator("value", mode="before")
    @classmethod
    def numeric_value(cls, v):
        # null leaves the stored value alone
        if v is None:
            return None
        return coerce_deal_value(v)

    @field_validator("stage", "close_date", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)

    REQUIRED: ClassVar[Tuple[str, ...]] = ("name", "value", "stage")


# ---------- Tasks ----------

class TaskCreateRequest(RequestModel):
    """New task for a contact"""
    content: str = Field(..., min_length=1)
    due_date: Optional[datetime] = None


class TaskUpdateRequest(RequestModel):
    """Partial task update"""
    content: Optional[str] = Field(None, min_length=1)
    is_completed: Optional[bool] = None
    due_date: Optional[datetime] = None

    REQUIRED: ClassVar[Tuple[str, ...]] = ("content", "is_completed")


# ---------- Appointments ----------

class AppointmentCreateRequest(RequestModel):
    """New appointment with a contact"""
    contact_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    appointment_time: datetime
    duration_minutes: int = Field(30, ge=1)
    notes: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def default_duration(cls, v):
        return 30 if v is None else v

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        return _blank_to_none(v) or AppointmentStatus.SCHEDULED


class AppointmentUpdateRequest(RequestModel):
    """Partial appointment update"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    appointment_time: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None
    status: Optional[AppointmentStatus] = None

    REQUIRED: ClassVar[Tuple[str, ...]] = ("title", "appointment_time", "duration_minutes", "status")


# ---------- Teams & users ----------

class TeamCreateRequest(RequestModel):
    """New team"""
    name: str = Field(..., min_length=1, max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class RoleUpdateRequest(RequestModel):
    """Admin role change"""
    role: UserRole
