"""
Realty CRM Appointment Endpoints
"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import Actor, get_current_actor
from ..models.requests import AppointmentCreateRequest, AppointmentUpdateRequest
from ..models.responses import AppointmentResponse, DeletionResponse, with_extras
from ..services.appointment_service import AppointmentService

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.post("/", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    request: AppointmentCreateRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Create a new appointment"""
    return await AppointmentService(db).create_appointment(actor, request.to_fields())


@router.get("/", response_model=List[AppointmentResponse])
async def list_appointments(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Appointments for the caller (all of them for admins)"""
    rows = await AppointmentService(db).list_appointments(actor)
    return [
        with_extras(AppointmentResponse, appointment, contact_name=contact_name, owner_name=owner_name)
        for appointment, contact_name, owner_name in rows
    ]


@router.get("/contact/{contact_id}", response_model=List[AppointmentResponse])
async def list_contact_appointments(
    contact_id: UUID,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Appointment history of a contact"""
    rows = await AppointmentService(db).list_for_contact(actor, contact_id)
    return [
        with_extras(AppointmentResponse, appointment, contact_name=contact_name, owner_name=owner_name)
        for appointment, contact_name, owner_name in rows
    ]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: UUID,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    return await AppointmentService(db).get_appointment(actor, appointment_id)


@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: UUID,
    request: AppointmentUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Update an appointment (time, status, notes)"""
    return await AppointmentService(db).update_appointment(actor, appointment_id, request.to_patch())


@router.delete("/{appointment_id}", response_model=DeletionResponse)
async def delete_appointment(
    appointment_id: UUID,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    result = await AppointmentService(db).delete_appointment(actor, appointment_id)
    return DeletionResponse(message="Appointment deleted successfully", data=result)
