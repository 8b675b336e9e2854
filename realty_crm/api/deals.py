"""
Realty CRM Deal Endpoints
Deal pipeline management
"""

from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..core.database import get_db
from ..core.security import Actor, get_current_actor
from ..models.deals import DealStage
from ..models.requests import DealCreateRequest, DealUpdateRequest
from ..models.responses import DealResponse, DeletionResponse, with_extras
from ..services.deal_service import DealService

logger = structlog.get_logger()
router = APIRouter(prefix="/deals", tags=["deals"])


@router.post("/", response_model=DealResponse, status_code=status.HTTP_201_CREATED)
async def create_deal(
    request: DealCreateRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Create a new deal for a contact"""
    return await DealService(db).create_deal(actor, request.to_fields())


@router.get("/", response_model=List[DealResponse])
async def list_deals(
    stage: Optional[DealStage] = Query(None, description="Filter by deal stage"),
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """List deals (own deals only for non-admins)"""
    rows = await DealService(db).list_deals(actor, stage=stage.value if stage else None)
    return [
        with_extras(DealResponse, deal, contact_name=contact_name, owner_name=owner_name)
        for deal, contact_name, owner_name in rows
    ]


@router.get("/{deal_id}", response_model=DealResponse)
async def get_deal(
    deal_id: UUID,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Get a specific deal by ID"""
    return await DealService(db).get_deal(actor, deal_id)


@router.put("/{deal_id}", response_model=DealResponse)
async def update_deal(
    deal_id: UUID,
    request: DealUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    """Update a deal (e.g. move its stage)"""
    return await DealService(db).update_deal(actor, deal_id, request.to_patch())


@router.delete("/{deal_id}", response_model=DeletionResponse)
async def delete_deal(
    deal_id: UUID,
    actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db)
):
    result = await DealService(db).delete_deal(actor, deal_id)
    return DeletionResponse(message="Deal removed successfully", data=result)
