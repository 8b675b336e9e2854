"""
Realty CRM Contact Endpoints
"""

from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..core.database import get_db
from ..core.security import Actor, get_current_actor
from ..models.requests import ContactCreateRequest, ContactUpdateRequest
from ..models.responses import ContactResponse, DeletionResponse, with_extras
from ..services.contact_service import ContactService

logger = structlog.get_logger()
router = APIRouter(prefix="/contacts", tags=["contacts"])


@router.post("/", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    request: ContactCreateRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Create a new contact owned by the caller"""
    return await ContactService(db).create_contact(actor, request.to_fields())


@router.get("/", response_model=List[ContactResponse])
async def list_contacts(
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """List contacts (own contacts only for non-admins)"""
    rows = await ContactService(db).list_contacts(actor)
    return [with_extras(ContactResponse, contact, team_lead_name=lead) for contact, lead in rows]


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: UUID,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    return await ContactService(db).get_contact(actor, contact_id)


@router.put("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: UUID,
    request: ContactUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Update an existing contact"""
    return await ContactService(db).update_contact(actor, contact_id, request.to_patch())


@router.delete("/{contact_id}", response_model=DeletionResponse)
async def delete_contact(
    contact_id: UUID,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Delete a contact with its deals, tasks and appointments"""
    summary = await ContactService(db).delete_contact(actor, contact_id)
    return DeletionResponse(
        message="Contact and all associated records removed successfully",
        data=summary.to_dict()
    )
